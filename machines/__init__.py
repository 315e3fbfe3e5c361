"""Machine inventory: reconciliation and disclosure layer.

Tracks compute hosts (local placeholders and cloud-provisioned machines) and
serves them through a paginated API.

CONTRACT:
- Placeholder ("default") machines are never sent to cloud reconciliation
- A single real machine in an owner's scope refreshes the whole scope
- Credentials are redacted on every read; writes handle raw records
"""

from __future__ import annotations

from machines.api import machines_bp
from machines.classifier import has_non_default, is_default
from machines.cloud_sync import CloudSync
from machines.config import MachinesConfig
from machines.gateway import MutationGateway
from machines.models import Machine, MachineAuditLog
from machines.privacy import mask_machine, mask_machines
from machines.query import InventoryQueryEngine, MachineList
from machines.store import MachineStore
from machines.sync import SyncCoordinator

__all__ = [
    "CloudSync",
    "InventoryQueryEngine",
    "Machine",
    "MachineAuditLog",
    "MachineList",
    "MachineStore",
    "MachinesConfig",
    "MutationGateway",
    "SyncCoordinator",
    "has_non_default",
    "is_default",
    "machines_bp",
    "mask_machine",
    "mask_machines",
]
