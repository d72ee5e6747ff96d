# backend/utils/storage.py
import json
from typing import Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.storage import StoredState


class MemoryStorage:
    """Key/value storage with the browser ``localStorage`` interface, kept in a dict."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class DbStorage:
    """Same interface, persisted in the ``stored_state`` table for one user.

    Values are JSON strings; they are stored parsed so the column stays queryable.
    """

    def __init__(self, db: Session, user_id: int):
        self.db = db
        self.user_id = user_id

    def _row(self, key: str) -> Optional[StoredState]:
        return self.db.query(StoredState).filter(
            StoredState.user_id == self.user_id, StoredState.key == key
        ).first()

    def get_item(self, key: str) -> Optional[str]:
        row = self._row(key)
        if row is None:
            return None
        return json.dumps(row.value)

    def set_item(self, key: str, value: str) -> None:
        doc = json.loads(value)
        row = self._row(key)
        if row:
            row.value = doc
            self.db.commit()
            return

        self.db.add(StoredState(user_id=self.user_id, key=key, value=doc))
        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent request created the row first; overwrite it
            self.db.rollback()
            self._row(key).value = doc
            self.db.commit()

    def remove_item(self, key: str) -> None:
        row = self._row(key)
        if row:
            self.db.delete(row)
            self.db.commit()
