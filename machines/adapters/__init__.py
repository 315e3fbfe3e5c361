"""Cloud provider adapters for machine reconciliation.

Adapters only READ provider state; reconciling it into the store is the job
of ``machines.cloud_sync.CloudSync``. ``ExportFileAdapter`` reads provider
inventory exports dropped on disk and is always available.
"""

from __future__ import annotations

from machines.adapters.base import AdapterCapabilities, AdapterResult, BaseCloudAdapter, NormalisedMachine
from machines.adapters.export_file import ExportFileAdapter, discover_export_adapters

__all__ = [
    "AdapterCapabilities",
    "AdapterResult",
    "BaseCloudAdapter",
    "ExportFileAdapter",
    "NormalisedMachine",
    "discover_export_adapters",
]
