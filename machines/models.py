"""SQLAlchemy models for the machine inventory."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from database.models import Base
from machines.errors import ValidationError

# JSON field name -> model attribute, in wire order
JSON_FIELDS: dict[str, str] = {
    "owner": "owner",
    "name": "name",
    "createdTime": "created_time",
    "updatedTime": "updated_time",
    "expireTime": "expire_time",
    "displayName": "display_name",
    "provider": "provider",
    "id": "provider_machine_id",
    "region": "region",
    "zone": "zone",
    "category": "category",
    "type": "machine_type",
    "size": "size",
    "tag": "tag",
    "state": "state",
    "image": "image",
    "os": "os",
    "publicIp": "public_ip",
    "privateIp": "private_ip",
    "cpuSize": "cpu_size",
    "memSize": "mem_size",
    "remoteProtocol": "remote_protocol",
    "remotePort": "remote_port",
    "remoteUsername": "remote_username",
    "remotePassword": "remote_password",
}

IDENTITY_ATTRS = ("owner", "name")
INT_ATTRS = {"remote_port"}


class Machine(Base):
    """A compute host, either a local placeholder or backed by a cloud provider."""

    __tablename__ = "machines"

    owner: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), primary_key=True)
    created_time: Mapped[str] = mapped_column(String(100), default="")
    updated_time: Mapped[str] = mapped_column(String(100), default="")
    expire_time: Mapped[str] = mapped_column(String(100), default="")
    display_name: Mapped[str] = mapped_column(String(100), default="")
    provider: Mapped[str] = mapped_column(String(100), default="", index=True)
    provider_machine_id: Mapped[str] = mapped_column(String(100), default="")
    region: Mapped[str] = mapped_column(String(100), default="")
    zone: Mapped[str] = mapped_column(String(100), default="")
    category: Mapped[str] = mapped_column(String(100), default="")
    machine_type: Mapped[str] = mapped_column(String(100), default="")
    size: Mapped[str] = mapped_column(String(100), default="")
    tag: Mapped[str] = mapped_column(String(100), default="")
    state: Mapped[str] = mapped_column(String(100), default="")
    image: Mapped[str] = mapped_column(String(100), default="")
    os: Mapped[str] = mapped_column(String(100), default="")
    public_ip: Mapped[str] = mapped_column(String(100), default="")
    private_ip: Mapped[str] = mapped_column(String(100), default="")
    cpu_size: Mapped[str] = mapped_column(String(100), default="")
    mem_size: Mapped[str] = mapped_column(String(100), default="")
    remote_protocol: Mapped[str] = mapped_column(String(100), default="")
    remote_port: Mapped[int] = mapped_column(Integer, default=0)
    remote_username: Mapped[str] = mapped_column(String(100), default="")
    remote_password: Mapped[str] = mapped_column(String(150), default="")

    def __init__(self, **kwargs: Any) -> None:
        # column defaults only apply at INSERT; fill them so transient copies compare equal
        for attr in JSON_FIELDS.values():
            kwargs.setdefault(attr, 0 if attr in INT_ATTRS else "")
        super().__init__(**kwargs)

    @property
    def machine_id(self) -> str:
        return f"{self.owner}/{self.name}"

    def __repr__(self) -> str:
        return f"<Machine {self.machine_id} provider={self.provider!r} state={self.state!r}>"


class MachineAuditLog(Base):
    """One row per applied mutation."""

    __tablename__ = "machine_audit_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    actor_user_id: Mapped[str] = mapped_column(String(100))
    action: Mapped[str] = mapped_column(String(50))
    entity_id: Mapped[str | None] = mapped_column(String(201), nullable=True, index=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(tz=timezone.utc))
    metadata_json: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def split_machine_id(machine_id: str) -> tuple[str, str]:
    """Split ``owner/name`` into its parts."""
    owner, sep, name = (machine_id or "").partition("/")
    if not sep or not owner or not name:
        raise ValidationError(f"Invalid machine id: {machine_id!r}, expected 'owner/name'")
    return owner, name


def copy_machine(machine: Machine) -> Machine:
    """Return a detached copy carrying the same column values."""
    return Machine(**{attr: getattr(machine, attr) for attr in JSON_FIELDS.values()})


def machine_to_dict(machine: Machine) -> dict[str, Any]:
    return {key: getattr(machine, attr) for key, attr in JSON_FIELDS.items()}


def machine_from_dict(data: Any) -> Machine:
    """Build a transient ``Machine`` from a camelCase JSON payload.

    Unknown keys are ignored; ``None`` is treated as empty.
    """
    if not isinstance(data, dict):
        raise ValidationError("Machine payload must be a JSON object")

    values: dict[str, Any] = {}
    for key, attr in JSON_FIELDS.items():
        if key not in data or data[key] is None:
            continue
        raw = data[key]
        if attr in INT_ATTRS:
            if isinstance(raw, bool):
                raise ValidationError(f"Field {key!r} must be an integer")
            try:
                values[attr] = int(raw)
            except (TypeError, ValueError):
                raise ValidationError(f"Field {key!r} must be an integer") from None
        elif isinstance(raw, str):
            values[attr] = raw
        else:
            raise ValidationError(f"Field {key!r} must be a string")
    return Machine(**values)
