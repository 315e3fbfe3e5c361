"""ExportFileAdapter: read provider machine exports from CSV/JSON files.

Supported formats:
- CSV with columns: name, displayName, publicIp, privateIp, state, ... (any subset)
- JSON array of objects with the same keys
- Wrapped JSON exports (``machines``, ``instances`` or ``data`` key containing the list)

Exports live in ``<export_dir>/<owner>/<provider>.<csv|json>``; the file stem
names the provider the machines belong to.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from pathlib import Path
from typing import Any

from machines.adapters.base import (
    AdapterCapabilities,
    AdapterResult,
    BaseCloudAdapter,
    NormalisedMachine,
)

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".csv", ".json")

# Column aliases we recognise, keyed by NormalisedMachine attribute.
# Aliases are compared lower-cased with separators stripped, first match wins.
_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("name", "instancename", "hostname", "machinename"),
    "display_name": ("displayname", "label", "title"),
    "provider_machine_id": ("id", "instanceid", "machineid", "resourceid"),
    "region": ("region", "location"),
    "zone": ("zone", "availabilityzone", "az"),
    "category": ("category",),
    "machine_type": ("type", "machinetype", "kind"),
    "size": ("size", "instancetype", "flavor", "sku"),
    "state": ("state", "status", "powerstate"),
    "image": ("image", "imageid", "ami"),
    "os": ("os", "ostype", "platform", "operatingsystem"),
    "public_ip": ("publicip", "publicipaddress", "externalip", "ip"),
    "private_ip": ("privateip", "privateipaddress", "internalip"),
    "cpu_size": ("cpusize", "cpu", "vcpus", "cpus"),
    "mem_size": ("memsize", "memory", "mem", "ram"),
}

_WRAPPER_KEYS = ("machines", "instances", "data")


def _normalise_key(key: str) -> str:
    return "".join(ch for ch in key.strip().lower() if ch.isalnum())


class ExportFileAdapter(BaseCloudAdapter):
    """Adapter over a single provider export file."""

    def __init__(self, provider: str, path: str | Path) -> None:
        super().__init__(provider)
        self.path = Path(path)

    def capabilities(self) -> AdapterCapabilities:
        return AdapterCapabilities(supports_list_machines=True)

    def list_machines(self, owner: str) -> AdapterResult:
        try:
            data = self.path.read_bytes()
        except OSError as exc:
            logger.exception("Failed to read provider export %s for %s", self.path, owner)
            return AdapterResult(success=False, error=f"Cannot read {self.path.name}: {exc}")
        return self.parse_file(data, self.path.name)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse_file(self, data: bytes, filename: str) -> AdapterResult:
        """Parse a CSV or JSON export and return normalised machines."""
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        try:
            if ext == "csv":
                return self._parse_csv(data)
            if ext == "json":
                return self._parse_json(data)
            return AdapterResult(success=False, error=f"Unsupported file type: .{ext}")
        except Exception as exc:
            logger.exception("Failed to parse provider export %s", filename)
            return AdapterResult(success=False, error=str(exc))

    # ------------------------------------------------------------------
    # CSV parser
    # ------------------------------------------------------------------

    def _parse_csv(self, data: bytes) -> AdapterResult:
        text = data.decode("utf-8-sig").strip()
        if not text:
            return AdapterResult(success=True, machines=[], raw_count=0)

        reader = csv.DictReader(io.StringIO(text))
        if not reader.fieldnames:
            return AdapterResult(success=False, error="CSV has no header row")

        normalised = {_normalise_key(f) for f in reader.fieldnames}
        if not normalised.intersection(_ALIASES["name"]):
            return AdapterResult(
                success=False,
                error=f"CSV must contain a machine name column. Found: {list(reader.fieldnames)}",
            )

        rows = list(reader)
        machines = [m for m in (self._dict_to_machine(row) for row in rows) if m]
        return AdapterResult(success=True, machines=machines, raw_count=len(rows))

    # ------------------------------------------------------------------
    # JSON parser
    # ------------------------------------------------------------------

    def _parse_json(self, data: bytes) -> AdapterResult:
        text = data.decode("utf-8-sig").strip()
        if not text:
            return AdapterResult(success=True, machines=[], raw_count=0)

        parsed = json.loads(text)

        if isinstance(parsed, dict):
            for key in _WRAPPER_KEYS:
                if isinstance(parsed.get(key), list):
                    parsed = parsed[key]
                    break

        if not isinstance(parsed, list):
            return AdapterResult(success=False, error="JSON must be an array of objects")

        machines: list[NormalisedMachine] = []
        for item in parsed:
            if not isinstance(item, dict):
                continue
            machine = self._dict_to_machine(item)
            if machine:
                machines.append(machine)

        return AdapterResult(success=True, machines=machines, raw_count=len(parsed))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _dict_to_machine(d: dict[str, Any]) -> NormalisedMachine | None:
        lower = {_normalise_key(k): v for k, v in d.items() if k is not None}
        values: dict[str, str] = {}
        for attr, aliases in _ALIASES.items():
            for alias in aliases:
                if lower.get(alias) not in (None, ""):
                    values[attr] = str(lower[alias]).strip()
                    break

        if not values.get("name"):
            return None
        return NormalisedMachine(**values)


def discover_export_adapters(export_dir: str | Path, owner: str) -> list[ExportFileAdapter]:
    """Return one adapter per provider export found for ``owner``."""
    if not export_dir or not owner:
        return []
    owner_dir = Path(export_dir) / owner
    if not owner_dir.is_dir():
        return []
    return [
        ExportFileAdapter(provider=path.stem, path=path)
        for path in sorted(owner_dir.iterdir())
        if path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS
    ]
