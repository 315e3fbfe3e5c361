"""SQLAlchemy-backed machine store.

All reads and writes of the ``machines`` table go through ``MachineStore``.
SQLAlchemy failures are re-raised as ``StoreError`` so callers deal with a
single error taxonomy.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from machines.errors import MachineExistsError, MachineNotFoundError, StoreError, ValidationError
from machines.models import IDENTITY_ATTRS, JSON_FIELDS, Machine, split_machine_id
from machines.privacy import REDACTED_FIELDS, is_masked_value

if TYPE_CHECKING:
    from sqlalchemy.orm import Query, Session

logger = logging.getLogger(__name__)

# Columns clients may filter or sort on, by JSON name. Secrets are excluded.
QUERYABLE_FIELDS: dict[str, str] = {
    key: attr for key, attr in JSON_FIELDS.items() if attr not in REDACTED_FIELDS
}

SORT_ORDERS = {"ascend": "asc", "descend": "desc"}


def utc_now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


@contextmanager
def _store_errors() -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Machine store operation failed")
        raise StoreError(str(exc)) from exc


class MachineStore:
    """Machine persistence bound to one session (one request)."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_machines(self, owner: str) -> list[Machine]:
        """All machines of ``owner`` (every owner when empty), newest first."""
        with _store_errors():
            q = self._scope(owner)
            return q.order_by(Machine.created_time.desc(), Machine.name).all()

    def list_machines_page(
        self,
        owner: str,
        offset: int,
        limit: int,
        field: str | None = None,
        value: str | None = None,
        sort_field: str | None = None,
        sort_order: str | None = None,
    ) -> list[Machine]:
        q = self._filtered(owner, field, value)
        q = self._ordered(q, sort_field, sort_order)
        with _store_errors():
            return q.offset(offset).limit(limit).all()

    def count_machines(self, owner: str, field: str | None = None, value: str | None = None) -> int:
        q = self._filtered(owner, field, value)
        with _store_errors():
            return q.count()

    def find_machine(self, owner: str, name: str) -> Machine | None:
        with _store_errors():
            return self.session.get(Machine, (owner, name))

    def get_machine(self, machine_id: str) -> Machine:
        """Fetch by ``owner/name``; raises ``MachineNotFoundError`` if absent."""
        owner, name = split_machine_id(machine_id)
        machine = self.find_machine(owner, name)
        if machine is None:
            raise MachineNotFoundError(machine_id)
        return machine

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add_machine(self, machine: Machine) -> bool:
        if not machine.owner or not machine.name:
            raise ValidationError("owner and name are required")
        if self.find_machine(machine.owner, machine.name) is not None:
            raise MachineExistsError(machine.machine_id)
        if not machine.created_time:
            machine.created_time = utc_now_iso()
        with _store_errors():
            self.session.add(machine)
            self.session.flush()
        return True

    def update_machine(self, machine_id: str, machine: Machine) -> bool:
        """Replace every non-identity field of the stored record.

        Returns False when the record does not exist. A redacted field that
        still holds the mask placeholder keeps its stored value.
        """
        owner, name = split_machine_id(machine_id)
        existing = self.find_machine(owner, name)
        if existing is None:
            return False

        for attr in JSON_FIELDS.values():
            if attr in IDENTITY_ATTRS or attr == "created_time":
                continue
            new_value = getattr(machine, attr)
            if attr in REDACTED_FIELDS and is_masked_value(new_value):
                continue
            setattr(existing, attr, new_value)
        existing.updated_time = utc_now_iso()

        with _store_errors():
            self.session.flush()
        return True

    def delete_machine(self, machine: Machine) -> bool:
        existing = self.find_machine(machine.owner, machine.name)
        if existing is None:
            return False
        with _store_errors():
            self.session.delete(existing)
            self.session.flush()
        return True

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    def _scope(self, owner: str) -> Query:
        q = self.session.query(Machine)
        if owner:
            q = q.filter(Machine.owner == owner)
        return q

    def _filtered(self, owner: str, field: str | None, value: str | None) -> Query:
        q = self._scope(owner)
        if field and value:
            q = q.filter(_column(field) == value)
        return q

    @staticmethod
    def _ordered(q: Query, sort_field: str | None, sort_order: str | None) -> Query:
        if not sort_field or not sort_order:
            return q.order_by(Machine.created_time.desc(), Machine.name)
        direction = SORT_ORDERS.get(sort_order)
        if direction is None:
            raise ValidationError(f"sortOrder must be one of {sorted(SORT_ORDERS)}, got {sort_order!r}")
        column = _column(sort_field)
        return q.order_by(getattr(column, direction)(), Machine.owner, Machine.name)


def _column(field: str):
    attr = QUERYABLE_FIELDS.get(field)
    if attr is None:
        raise ValidationError(f"Unsupported field: {field!r}")
    return getattr(Machine, attr)


def validate_query(field: str | None, sort_field: str | None, sort_order: str | None) -> None:
    """Reject unknown filter/sort parameters before any work is done."""
    if field:
        _column(field)
    if sort_field and sort_order:
        if sort_order not in SORT_ORDERS:
            raise ValidationError(f"sortOrder must be one of {sorted(SORT_ORDERS)}, got {sort_order!r}")
        _column(sort_field)
