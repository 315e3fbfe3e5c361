"""Placeholder ("default") machine detection.

New workspaces are seeded with a placeholder machine that has never been
backed by real infrastructure. Such records are kept out of cloud
reconciliation; a single real machine in an owner's scope is enough to
refresh the whole scope.
"""

from __future__ import annotations

from collections.abc import Iterable

from machines.models import Machine

DEFAULT_NAME_PREFIX = "machine_"
DEFAULT_DISPLAY_NAME_PREFIX = "New Machine - "
DEFAULT_PROVIDER = "provider_1"
DEFAULT_STATE = "Active"


def is_default(machine: Machine) -> bool:
    """Return True only when every placeholder condition holds."""
    if machine.public_ip or machine.private_ip:
        return False
    if not (machine.name or "").startswith(DEFAULT_NAME_PREFIX):
        return False
    if not (machine.display_name or "").startswith(DEFAULT_DISPLAY_NAME_PREFIX):
        return False
    return (
        machine.provider == DEFAULT_PROVIDER
        and machine.state == DEFAULT_STATE
        and not machine.tag
        and not machine.expire_time
    )


def has_non_default(machines: Iterable[Machine]) -> bool:
    return any(not is_default(m) for m in machines)
