"""Base adapter interface for cloud provider machine listings."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class AdapterCapabilities:
    """Declares what this adapter can do."""

    supports_list_machines: bool = False


@dataclass
class NormalisedMachine:
    """A single machine record normalised from any provider source."""

    name: str
    display_name: str = ""
    provider_machine_id: str = ""
    region: str = ""
    zone: str = ""
    category: str = ""
    machine_type: str = ""
    size: str = ""
    state: str = ""
    image: str = ""
    os: str = ""
    public_ip: str = ""
    private_ip: str = ""
    cpu_size: str = ""
    mem_size: str = ""


@dataclass
class AdapterResult:
    """Return value from any adapter list operation."""

    success: bool
    machines: list[NormalisedMachine] = field(default_factory=list)
    error: str = ""
    raw_count: int = 0


class BaseCloudAdapter:
    """Abstract adapter.  Subclasses must implement at least ``capabilities`` and
    ``list_machines``.
    """

    def __init__(self, provider: str) -> None:
        self.provider = provider

    def capabilities(self) -> AdapterCapabilities:
        """Return what this adapter supports."""
        return AdapterCapabilities()

    def list_machines(self, owner: str) -> AdapterResult:
        """Fetch the machines the provider reports for ``owner``."""
        return AdapterResult(success=False, error="Not implemented")
