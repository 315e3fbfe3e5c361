"""Sync coordinator: decides when an owner's scope needs cloud reconciliation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from machines.classifier import has_non_default
from machines.errors import InventoryError, SyncError

if TYPE_CHECKING:
    from machines.store import MachineStore

logger = logging.getLogger(__name__)


class CloudSyncer(Protocol):
    def sync_cloud(self, owner: str) -> int: ...


class SyncCoordinator:
    """Gates cloud sync on the presence of at least one real machine."""

    def __init__(self, store: MachineStore, cloud: CloudSyncer) -> None:
        self.store = store
        self.cloud = cloud

    def sync_if_needed(self, owner: str) -> bool:
        """Sync ``owner`` once if any machine in the scope is non-default.

        Returns True when a sync ran. An empty or all-placeholder scope is a
        no-op.
        """
        machines = self.store.list_machines(owner)
        if not has_non_default(machines):
            logger.debug("Skipping cloud sync for %r: no real machines in scope", owner)
            return False
        self.sync(owner)
        return True

    def sync(self, owner: str) -> int:
        """Run the cloud sync for ``owner`` unconditionally."""
        try:
            count = self.cloud.sync_cloud(owner)
        except InventoryError:
            raise
        except Exception as exc:
            raise SyncError(str(exc)) from exc
        logger.debug("Cloud sync for %r refreshed %d machine(s)", owner, count)
        return count
