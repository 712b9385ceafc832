# app/repos/kv_repo.py
import json
from typing import Any, Callable, Dict

from sqlalchemy import select, text
from sqlalchemy.orm import Session

from app.data.models.kv_entry import KeyValueEntryModel


class KeyValueRepo:
    """
    Magazyn klucz-wartosc na tabeli kv_entries.
    Kazda kolekcja zapisywana w calosci jako json, bez zapisow przyrostowych.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def load(self, key: str) -> Any | None:
        with self.session_factory() as db:
            entry = db.execute(
                select(KeyValueEntryModel).where(KeyValueEntryModel.key == key)
            ).scalar_one_or_none()

        if entry is None:
            return None
        return json.loads(entry.value)

    def save(self, key: str, value: Any) -> None:
        self.save_many({key: value})

    def save_many(self, values: Dict[str, Any]) -> None:
        #wszystkie klucze w jednej transakcji, albo wszystko albo nic
        with self.session_factory() as db:
            try:
                for key, value in values.items():
                    db.merge(KeyValueEntryModel(key=key, value=json.dumps(value)))
                db.commit()
            except Exception:
                db.rollback()
                raise

    def ping(self) -> bool:
        with self.session_factory() as db:
            db.execute(text("SELECT 1"))
        return True
