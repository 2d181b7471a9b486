# Overview: Service-layer access to the durable key-value snapshot table.

from __future__ import annotations

import json
from typing import Any

from ..extensions import db
from ..models import KeyValueEntry


class KeyValueStore:
    """
    Named JSON values persisted in the kv_entries table.

    put() upserts the whole value for a key. With commit=False the write is
    only staged in the session so several keys can be committed together.
    """

    def get(self, key: str) -> Any | None:
        # Fresh read from the table, not the identity map
        entry = db.session.get(KeyValueEntry, key, populate_existing=True)
        if entry is None:
            return None
        return json.loads(entry.value)

    def put(self, key: str, value: Any, *, commit: bool = True) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        entry = db.session.get(KeyValueEntry, key)
        if entry is None:
            entry = KeyValueEntry(key=key, value=payload)
            db.session.add(entry)
        else:
            entry.value = payload
        if commit:
            db.session.commit()
        else:
            db.session.flush()

    def delete(self, key: str) -> None:
        db.session.query(KeyValueEntry).filter_by(key=key).delete()
        db.session.commit()

    def keys(self) -> list[str]:
        return [row[0] for row in db.session.query(KeyValueEntry.key).order_by(KeyValueEntry.key).all()]

    def commit(self) -> None:
        db.session.commit()

    def rollback(self) -> None:
        db.session.rollback()
