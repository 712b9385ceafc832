from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime

from app.data.database import Base


class KeyValueEntryModel(Base):
    """Cala kolekcja (katalog, koszyk, rejestr, podatki) zapisana pod jednym kluczem."""

    __tablename__ = "kv_entries"

    key = Column(String(128), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
