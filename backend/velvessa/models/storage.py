from __future__ import annotations

from ..extensions import db
from velvessa.time_utils import to_utc_z


class KeyValueEntry(db.Model):
    """
    Durable key-value snapshot store.

    One row per persisted collection. `value` holds the full JSON snapshot of
    that collection; every write replaces it wholesale (no deltas, no schema
    version).
    """
    __tablename__ = "kv_entries"

    key = db.Column(db.String(64), primary_key=True)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def __repr__(self) -> str:
        return f"<KeyValueEntry key={self.key!r}>"

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "size_bytes": len(self.value or ""),
            "updated_at": to_utc_z(self.updated_at),
        }
