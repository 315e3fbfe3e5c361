"""Mutation gateway: the write path for single machine records.

Writes work on raw records: nothing here classifies, syncs or masks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from machines.audit import log_audit
from machines.errors import ValidationError
from machines.models import machine_from_dict, split_machine_id

if TYPE_CHECKING:
    from machines.store import MachineStore

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    affected: bool


class MutationGateway:
    """Decodes machine payloads, applies them to the store and audits the result."""

    def __init__(
        self,
        store: MachineStore,
        *,
        actor_user_id: str = "anonymous",
        ip_address: str | None = None,
    ) -> None:
        self.store = store
        self.actor_user_id = actor_user_id
        self.ip_address = ip_address

    def add(self, payload: Any) -> ActionResult:
        machine = machine_from_dict(payload)
        affected = self.store.add_machine(machine)
        self._audit("add_machine", machine.machine_id, affected, payload)
        return ActionResult(affected)

    def update(self, machine_id: str, payload: Any) -> ActionResult:
        split_machine_id(machine_id)
        machine = machine_from_dict(payload)
        affected = self.store.update_machine(machine_id, machine)
        self._audit("update_machine", machine_id, affected, payload)
        return ActionResult(affected)

    def delete(self, payload: Any) -> ActionResult:
        machine = machine_from_dict(payload)
        if not machine.owner or not machine.name:
            raise ValidationError("owner and name are required")
        affected = self.store.delete_machine(machine)
        self._audit("delete_machine", machine.machine_id, affected, payload)
        return ActionResult(affected)

    def _audit(self, action: str, machine_id: str, affected: bool, payload: dict[str, Any]) -> None:
        if not affected:
            logger.info("%s on %s affected no rows", action, machine_id)
            return
        log_audit(
            self.store.session,
            actor_user_id=self.actor_user_id,
            action=action,
            entity_id=machine_id,
            ip_address=self.ip_address,
            metadata={"fields": sorted(payload)},
        )
