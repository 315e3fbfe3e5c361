"""Page/offset arithmetic for list endpoints."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from machines.errors import ValidationError

_INT_RE = re.compile(r"^[+-]?[0-9]+\Z")


@dataclass
class PageRequest:
    page: int
    page_size: int


class Paginator:
    """Translates a 1-indexed page into an offset over ``nums`` records.

    Out-of-range pages are clamped to the nearest valid page.
    """

    def __init__(self, page: int, per_page: int, nums: int) -> None:
        if per_page < 1:
            raise ValueError("per_page must be positive")
        self.per_page = per_page
        self.nums = nums
        self.page = min(max(page, 1), max(self.page_nums(), 1))

    def page_nums(self) -> int:
        return math.ceil(self.nums / self.per_page)

    def offset(self) -> int:
        return (self.page - 1) * self.per_page


def _parse_int(raw: str, name: str) -> int:
    value = raw.strip()
    if not _INT_RE.match(value):
        raise ValidationError(f"{name} must be an integer, got {raw!r}")
    return int(value)


def parse_page_params(
    page: str | None,
    page_size: str | None,
    *,
    max_page_size: int | None = None,
) -> PageRequest | None:
    """Parse string pagination params.

    Returns ``None`` when either is missing or empty (no pagination requested).
    """
    if not page or not page_size:
        return None

    size = _parse_int(page_size, "pageSize")
    number = _parse_int(page, "p")
    if size < 1:
        raise ValidationError(f"pageSize must be positive, got {size}")
    if max_page_size is not None and size > max_page_size:
        raise ValidationError(f"pageSize must not exceed {max_page_size}")
    return PageRequest(page=number, page_size=size)
