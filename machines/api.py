"""Flask REST API for the machine inventory.

Blueprint prefix: ``/api``

- Reads sync real machines with their cloud provider before answering and
  never return credentials in clear.
- Writes require the Admin role (``X-User-Role``) unless disabled in config,
  and are audit logged under ``X-User-ID``.
- Every response uses the ``{status, msg, data, data2}`` envelope.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from flask import Blueprint, Response, jsonify, request

from machines.cloud_sync import CloudSync
from machines.config import MachinesConfig
from machines.envelope import Envelope, Err, Ok, OkPaged, wrap_action
from machines.errors import InventoryError, PermissionDeniedError
from machines.gateway import MutationGateway
from machines.models import machine_to_dict
from machines.query import InventoryQueryEngine
from machines.store import MachineStore
from machines.sync import SyncCoordinator

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from machines.cloud_sync import AdapterFactory

logger = logging.getLogger(__name__)

machines_bp = Blueprint("machines", __name__, url_prefix="/api")

# ---------------------------------------------------------------------------
# Module-level singletons (lazy init)
# ---------------------------------------------------------------------------
_config: MachinesConfig | None = None
_adapter_factory: AdapterFactory | None = None


def _get_config() -> MachinesConfig:
    global _config
    if _config is None:
        _config = MachinesConfig.from_env()
    return _config


def _get_user_id() -> str:
    return request.headers.get("X-User-ID", "anonymous")


def _get_user_role() -> str:
    return request.headers.get("X-User-Role", "viewer")


def _require_writer() -> None:
    if _get_config().enforce_admin_writes and _get_user_role().lower() != "admin":
        raise PermissionDeniedError("Admin role required")


def _get_db_session():
    """Get a DB session from the database manager."""
    from database import get_db_manager

    return get_db_manager().get_session()


def _query_engine(session: Session) -> InventoryQueryEngine:
    cfg = _get_config()
    store = MachineStore(session)
    cloud = CloudSync(store, cfg, adapter_factory=_adapter_factory)
    return InventoryQueryEngine(store, SyncCoordinator(store, cloud), max_page_size=cfg.max_page_size)


def _gateway(session: Session) -> MutationGateway:
    return MutationGateway(MachineStore(session), actor_user_id=_get_user_id(), ip_address=request.remote_addr)


def _respond(envelope: Envelope) -> tuple[Response, int]:
    status = envelope.http_status if isinstance(envelope, Err) else 200
    return jsonify(envelope.to_dict()), status


@machines_bp.errorhandler(InventoryError)
def handle_inventory_error(exc: InventoryError):
    logger.warning("%s %s failed: %s (%s)", request.method, request.path, exc.message, exc.code)
    return _respond(Err.from_exception(exc))


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@machines_bp.route("/health", methods=["GET"])
def health():
    cfg = _get_config()
    return jsonify(
        {
            "status": "ok",
            "module": "machines",
            "features": {
                "cloud_sync": bool(cfg.provider_export_dir),
                "admin_writes": cfg.enforce_admin_writes,
            },
        }
    )


# ===================================================================
# READS
# ===================================================================
@machines_bp.route("/get-machines", methods=["GET"])
def get_machines():
    args = request.args
    with _get_db_session() as s:
        result = _query_engine(s).list_machines(
            args.get("owner", ""),
            page=args.get("p"),
            page_size=args.get("pageSize"),
            field=args.get("field"),
            value=args.get("value"),
            sort_field=args.get("sortField"),
            sort_order=args.get("sortOrder"),
        )
        data = [machine_to_dict(m) for m in result.machines]

    if result.paginated:
        return _respond(OkPaged(data, result.total))
    return _respond(Ok(data))


@machines_bp.route("/get-machine", methods=["GET"])
def get_machine():
    machine_id = request.args.get("id", "")
    with _get_db_session() as s:
        machine = _query_engine(s).get_machine(machine_id)
        return _respond(Ok(machine_to_dict(machine)))


# ===================================================================
# WRITES
# ===================================================================
@machines_bp.route("/add-machine", methods=["POST"])
def add_machine():
    _require_writer()
    payload = request.get_json(silent=True)
    with _get_db_session() as s:
        result = _gateway(s).add(payload)
    return _respond(wrap_action(result.affected))


@machines_bp.route("/update-machine", methods=["POST"])
def update_machine():
    _require_writer()
    machine_id = request.args.get("id", "")
    payload = request.get_json(silent=True)
    with _get_db_session() as s:
        result = _gateway(s).update(machine_id, payload)
    return _respond(wrap_action(result.affected))


@machines_bp.route("/delete-machine", methods=["POST"])
def delete_machine():
    _require_writer()
    payload = request.get_json(silent=True)
    with _get_db_session() as s:
        result = _gateway(s).delete(payload)
    return _respond(wrap_action(result.affected))
