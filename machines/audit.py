"""Machine audit logger: writes to machine_audit_logs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from machines.models import MachineAuditLog

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def log_audit(
    session: Session,
    *,
    actor_user_id: str,
    action: str,
    entity_id: str | None = None,
    ip_address: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> None:
    """Append an audit record."""
    entry = MachineAuditLog(
        actor_user_id=actor_user_id,
        action=action,
        entity_id=entity_id,
        ip_address=ip_address,
        metadata_json=metadata or {},
    )
    session.add(entry)
    logger.info(
        "AUDIT | user=%s action=%s machine=%s",
        actor_user_id,
        action,
        entity_id,
    )
