"""Inventory query engine: the read path.

Every read follows the same order: load the scope, let the sync coordinator
refresh it when it holds real machines, read again, then mask. Masking always
happens last so classification and sync see the unredacted records.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from machines.classifier import is_default
from machines.models import Machine, split_machine_id
from machines.pagination import Paginator, parse_page_params
from machines.privacy import mask_machine, mask_machines
from machines.store import validate_query

if TYPE_CHECKING:
    from machines.store import MachineStore
    from machines.sync import SyncCoordinator

logger = logging.getLogger(__name__)


@dataclass
class MachineList:
    """Masked machines plus the total match count (``None`` when unpaginated)."""

    machines: list[Machine]
    total: int | None = None

    @property
    def paginated(self) -> bool:
        return self.total is not None


class InventoryQueryEngine:
    def __init__(
        self,
        store: MachineStore,
        sync: SyncCoordinator,
        *,
        max_page_size: int | None = None,
    ) -> None:
        self.store = store
        self.sync = sync
        self.max_page_size = max_page_size

    def list_machines(
        self,
        owner: str = "",
        *,
        page: str | None = None,
        page_size: str | None = None,
        field: str | None = None,
        value: str | None = None,
        sort_field: str | None = None,
        sort_order: str | None = None,
    ) -> MachineList:
        """List an owner's machines, whole or one page at a time.

        Pagination applies only when both ``page`` and ``page_size`` are
        given; they arrive as strings and must parse as integers.
        """
        page_request = parse_page_params(page, page_size, max_page_size=self.max_page_size)
        if page_request is not None:
            validate_query(field, sort_field, sort_order)

        self.sync.sync_if_needed(owner)

        if page_request is None:
            return MachineList(mask_machines(self.store.list_machines(owner)))

        count = self.store.count_machines(owner, field, value)
        paginator = Paginator(page_request.page, page_request.page_size, count)
        machines = self.store.list_machines_page(
            owner,
            paginator.offset(),
            paginator.per_page,
            field,
            value,
            sort_field,
            sort_order,
        )
        return MachineList(mask_machines(machines), total=count)

    def get_machine(self, machine_id: str) -> Machine:
        """Fetch one machine by ``owner/name``.

        Placeholders are returned as stored; real machines are refreshed
        from the cloud first and a sync failure fails the lookup.
        """
        owner, _ = split_machine_id(machine_id)
        machine = self.store.get_machine(machine_id)
        if is_default(machine):
            return mask_machine(machine)

        self.sync.sync(owner)
        return mask_machine(self.store.get_machine(machine_id))
