"""Cloud sync: reconciles provider-reported machines into the store.

Responsibilities:
1. Ask each of an owner's provider adapters that can list machines for them.
2. Create store records for machines the store does not know yet.
3. Refresh cloud-reported fields on existing real machines.
4. Leave placeholder machines alone and never delete anything.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from machines.adapters.export_file import discover_export_adapters
from machines.classifier import is_default
from machines.errors import SyncError
from machines.models import Machine
from machines.store import utc_now_iso

if TYPE_CHECKING:
    from machines.adapters.base import BaseCloudAdapter, NormalisedMachine
    from machines.config import MachinesConfig
    from machines.store import MachineStore

logger = logging.getLogger(__name__)

AdapterFactory = Callable[[str], "list[BaseCloudAdapter]"]

# Fields a provider is authoritative for
CLOUD_FIELDS = (
    "provider_machine_id",
    "region",
    "zone",
    "category",
    "machine_type",
    "size",
    "state",
    "image",
    "os",
    "public_ip",
    "private_ip",
    "cpu_size",
    "mem_size",
)


class CloudSync:
    """Pulls provider state for an owner and upserts it into the store."""

    def __init__(
        self,
        store: MachineStore,
        config: MachinesConfig,
        adapter_factory: AdapterFactory | None = None,
    ) -> None:
        self.store = store
        self.config = config
        self.adapter_factory = adapter_factory or self._export_adapters

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def sync_cloud(self, owner: str) -> int:
        """Reconcile ``owner``'s machines (every owner in the store when empty).

        Returns the number of records created or refreshed. Raises
        ``SyncError`` when any provider cannot be read.
        """
        owners = [owner] if owner else self._known_owners()
        total = 0
        for scope in owners:
            stats = self._sync_owner(scope)
            logger.info(
                "Cloud sync for %s: created=%d updated=%d skipped_default=%d",
                scope,
                stats["created"],
                stats["updated"],
                stats["skipped_default"],
            )
            total += stats["created"] + stats["updated"]
        return total

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _sync_owner(self, owner: str) -> dict[str, int]:
        stats = {"created": 0, "updated": 0, "skipped_default": 0}
        for adapter in self.adapter_factory(owner):
            if not adapter.capabilities().supports_list_machines:
                logger.debug("Provider %s cannot list machines, skipping", adapter.provider)
                continue
            result = adapter.list_machines(owner)
            if not result.success:
                raise SyncError(f"Failed to sync machines from provider {adapter.provider}: {result.error}")

            now = utc_now_iso()
            for reported in result.machines:
                existing = self.store.find_machine(owner, reported.name)
                if existing is None:
                    self.store.add_machine(self._new_machine(owner, adapter.provider, reported, now))
                    stats["created"] += 1
                elif is_default(existing):
                    stats["skipped_default"] += 1
                else:
                    self._refresh(existing, adapter.provider, reported, now)
                    stats["updated"] += 1
        return stats

    @staticmethod
    def _new_machine(owner: str, provider: str, reported: NormalisedMachine, now: str) -> Machine:
        machine = Machine(
            owner=owner,
            name=reported.name,
            created_time=now,
            updated_time=now,
            display_name=reported.display_name or reported.name,
            provider=provider,
        )
        for attr in CLOUD_FIELDS:
            setattr(machine, attr, getattr(reported, attr))
        return machine

    @staticmethod
    def _refresh(machine: Machine, provider: str, reported: NormalisedMachine, now: str) -> None:
        for attr in CLOUD_FIELDS:
            setattr(machine, attr, getattr(reported, attr))
        if reported.display_name:
            machine.display_name = reported.display_name
        machine.provider = provider
        machine.updated_time = now

    def _known_owners(self) -> list[str]:
        return sorted({m.owner for m in self.store.list_machines("")})

    def _export_adapters(self, owner: str) -> list[BaseCloudAdapter]:
        return discover_export_adapters(self.config.provider_export_dir, owner)
