"""Error taxonomy for the machine inventory.

Each error carries a machine-readable ``code`` that the HTTP layer copies into
the error envelope next to the human-readable message.
"""

from __future__ import annotations


class InventoryError(Exception):
    """Base class for every error raised by the inventory core."""

    code = "inventory_error"
    http_status = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(InventoryError):
    """Malformed request input: pagination integers, ids, bodies, fields."""

    code = "validation_error"
    http_status = 400


class MachineNotFoundError(InventoryError):
    code = "not_found"
    http_status = 404

    def __init__(self, machine_id: str) -> None:
        super().__init__(f"The machine: {machine_id} is not found")
        self.machine_id = machine_id


class SyncError(InventoryError):
    """Cloud reconciliation failed; fatal to the enclosing read."""

    code = "sync_error"
    http_status = 502


class StoreError(InventoryError):
    """Persistence-layer failure."""

    code = "store_error"
    http_status = 500


class MachineExistsError(StoreError):
    code = "conflict"
    http_status = 409

    def __init__(self, machine_id: str) -> None:
        super().__init__(f"The machine: {machine_id} already exists")
        self.machine_id = machine_id


class PermissionDeniedError(InventoryError):
    code = "forbidden"
    http_status = 403
