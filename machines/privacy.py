"""Disclosure filter: redacts sensitive machine fields before they leave the service."""

from __future__ import annotations

from collections.abc import Iterable

from machines.models import Machine, copy_machine

MASK_PLACEHOLDER = "***"

# Attributes never returned verbatim by the read API
REDACTED_FIELDS: tuple[str, ...] = ("remote_password",)


def mask_value(value: str) -> str:
    """``"hunter2"`` → ``"***"``; empty stays empty."""
    return MASK_PLACEHOLDER if value else ""


def mask_machine(machine: Machine) -> Machine:
    """Return a masked copy of ``machine``; the original is left untouched."""
    masked = copy_machine(machine)
    for attr in REDACTED_FIELDS:
        setattr(masked, attr, mask_value(getattr(masked, attr)))
    return masked


def mask_machines(machines: Iterable[Machine]) -> list[Machine]:
    return [mask_machine(m) for m in machines]


def is_masked_value(value: str | None) -> bool:
    return value == MASK_PLACEHOLDER
