"""Response envelopes shared by every endpoint.

The core returns plain values or raises; only the HTTP boundary turns those
into one of three shapes:

- ``Ok(data)``            → ``{"status": "ok", "msg": "", "data": ...}``
- ``OkPaged(data, total)`` → same plus ``"data2": total``
- ``Err(message, code)``   → ``{"status": "error", "msg": ..., "code": ...}``
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from machines.errors import InventoryError


@dataclass(frozen=True)
class Ok:
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"status": "ok", "msg": "", "data": self.data}


@dataclass(frozen=True)
class OkPaged:
    data: Any
    total: int

    def to_dict(self) -> dict[str, Any]:
        return {"status": "ok", "msg": "", "data": self.data, "data2": self.total}


@dataclass(frozen=True)
class Err:
    message: str
    code: str = "error"
    http_status: int = 500

    def to_dict(self) -> dict[str, Any]:
        return {"status": "error", "msg": self.message, "code": self.code}

    @classmethod
    def from_exception(cls, exc: InventoryError) -> Err:
        return cls(message=exc.message, code=exc.code, http_status=exc.http_status)


Envelope = Union[Ok, OkPaged, Err]


def wrap_action(affected: bool) -> Ok:
    return Ok("Affected" if affected else "Unaffected")
