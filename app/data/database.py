# app/data/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.utils.settings import DATABASE_URL
from app.utils.logging import get_logger

logger = get_logger(__name__)


def make_engine(url: str = DATABASE_URL, **kwargs):
    #sqlite na urzadzeniu, dostep z wielu watkow serwera
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_engine(url, **kwargs)


engine = make_engine()
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()


def init_db(bind=None) -> None:
    #import modeli zeby zarejestrowac tabele w Base.metadata
    import app.data.models  # noqa: F401

    bind = bind or engine
    logger.info(f"Tworzenie tabel: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=bind)
    except Exception as e:
        logger.error(f"Nie udalo sie utworzyc tabel: {e}")
        raise
