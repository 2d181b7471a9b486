# Overview: Domain state container; owns every collection and the session user.

"""
Domain State Container

Every collection (users, stock, customers, orders, payments, audit logs,
SMS logs) plus the current session user lives here and nowhere else. Other
services receive a DomainState explicitly and mutate it through replace().

PERSISTENCE:
- On construction each collection is loaded from its snapshot key, falling
  back to the seeded default when the key was never written.
- Every replace() immediately writes the whole collection back.
- Writes are best-effort: a database failure is logged and rolled back, the
  in-memory value stays updated.

TRANSACTIONS:
- Inside `with state.transaction():` writes are deferred and committed
  together on exit. If the block raises, the in-memory collections revert to
  their values at entry and nothing is written.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator

from flask import current_app, g
from sqlalchemy.exc import SQLAlchemyError

from .. import seed
from ..models import (
    AuditLog,
    Customer,
    Order,
    PaymentRecord,
    SMSLog,
    StockItem,
    User,
)
from .kv_store import KeyValueStore


@dataclass(frozen=True)
class CollectionSpec:
    key: str
    decode: Callable[[Any], Any]
    encode: Callable[[Any], Any]
    default: Callable[[], Any]
    is_list: bool = True


def _list_spec(key: str, record_cls, default: Callable[[], list]) -> CollectionSpec:
    return CollectionSpec(
        key=key,
        decode=lambda raw: [record_cls.from_dict(item) for item in raw],
        encode=lambda items: [item.to_dict() for item in items],
        default=default,
    )


COLLECTIONS: dict[str, CollectionSpec] = {
    "current_user": CollectionSpec(
        key="v_user",
        decode=lambda raw: User.from_dict(raw) if raw else None,
        encode=lambda user: user.to_dict() if user else None,
        default=lambda: None,
        is_list=False,
    ),
    "users": _list_spec("v_all_users", User, seed.default_users),
    "stock": _list_spec("v_stock", StockItem, seed.default_stock),
    "customers": _list_spec("v_customers", Customer, seed.default_customers),
    "orders": _list_spec("v_orders", Order, seed.default_orders),
    "payments": _list_spec("v_payments", PaymentRecord, list),
    "audit_logs": _list_spec("v_logs", AuditLog, list),
    "sms_logs": _list_spec("v_sms_logs", SMSLog, list),
}


class UnknownCollectionError(KeyError):
    """Raised when a collection name is not registered."""


class DomainState:
    def __init__(self, store: KeyValueStore | None = None):
        self._store = store or KeyValueStore()
        self._values: dict[str, Any] = {}
        self._tx_depth = 0
        self._dirty: set[str] = set()
        for name in COLLECTIONS:
            self._values[name] = self._load(name)

    # ------------------------------------------------------------------
    # Read / replace
    # ------------------------------------------------------------------

    def get(self, name: str) -> Any:
        spec = self._spec(name)
        value = self._values[name]
        return list(value) if spec.is_list else value

    def replace(self, name: str, value: Any) -> Any:
        """
        Replace a collection with `value`, or with `value(previous)` when a
        callable is given, then persist it.
        """
        spec = self._spec(name)
        new_value = value(self.get(name)) if callable(value) else value
        if spec.is_list:
            new_value = list(new_value)
        self._values[name] = new_value

        if self._tx_depth:
            self._dirty.add(name)
        else:
            self._persist([name])
        return self.get(name)

    @property
    def current_user(self) -> User | None:
        return self._values["current_user"]

    @property
    def users(self) -> list[User]:
        return self.get("users")

    @property
    def stock(self) -> list[StockItem]:
        return self.get("stock")

    @property
    def customers(self) -> list[Customer]:
        return self.get("customers")

    @property
    def orders(self) -> list[Order]:
        return self.get("orders")

    @property
    def payments(self) -> list[PaymentRecord]:
        return self.get("payments")

    @property
    def audit_logs(self) -> list[AuditLog]:
        return self.get("audit_logs")

    @property
    def sms_logs(self) -> list[SMSLog]:
        return self.get("sms_logs")

    # ------------------------------------------------------------------
    # Units of work
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator["DomainState"]:
        """Group several replace() calls into one all-or-nothing write."""
        if self._tx_depth:
            self._tx_depth += 1
            try:
                yield self
            finally:
                self._tx_depth -= 1
            return

        snapshot = dict(self._values)
        self._tx_depth = 1
        try:
            yield self
        except BaseException:
            self._values = snapshot
            self._dirty.clear()
            raise
        finally:
            self._tx_depth = 0

        dirty = [name for name in COLLECTIONS if name in self._dirty]
        self._dirty.clear()
        if dirty:
            self._persist(dirty)

    def persist_all(self) -> None:
        """Write every collection, including untouched seeded defaults."""
        self._persist(list(COLLECTIONS))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _spec(self, name: str) -> CollectionSpec:
        try:
            return COLLECTIONS[name]
        except KeyError:
            raise UnknownCollectionError(name) from None

    def _load(self, name: str) -> Any:
        spec = COLLECTIONS[name]
        try:
            raw = self._store.get(spec.key)
        except SQLAlchemyError:
            self._store.rollback()
            current_app.logger.warning("Snapshot store unavailable; using defaults for %s", spec.key)
            return spec.default()
        except ValueError:
            current_app.logger.warning("Discarding unreadable snapshot %s", spec.key)
            return spec.default()

        if raw is None:
            return spec.default()
        try:
            return spec.decode(raw)
        except (KeyError, TypeError, ValueError):
            current_app.logger.warning("Discarding unreadable snapshot %s", spec.key)
            return spec.default()

    def _persist(self, names: list[str]) -> None:
        try:
            for name in names:
                spec = COLLECTIONS[name]
                self._store.put(spec.key, spec.encode(self._values[name]), commit=False)
            self._store.commit()
        except SQLAlchemyError:
            self._store.rollback()
            current_app.logger.warning(
                "Failed to persist %s; keeping in-memory state only",
                ", ".join(COLLECTIONS[n].key for n in names),
            )


def current_state() -> DomainState:
    """The request's DomainState, loaded once per app context."""
    if "domain_state" not in g:
        g.domain_state = DomainState()
    return g.domain_state
