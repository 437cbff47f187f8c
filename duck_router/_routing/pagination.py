"""Offset pagination helpers."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Sequence

from .definitions import PaginationPolicy
from .errors import PaginationError

__all__ = [
    "PaginationRequest",
    "PaginationResult",
    "build_result",
    "parse_request_params",
    "validate",
]


@dataclass(frozen=True)
class PaginationRequest:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class PaginationResult:
    page: int
    limit: int
    total: int
    pages: int
    has_next: bool
    has_prev: bool
    rows: tuple[Any, ...] = ()

    def to_meta(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "pages": self.pages,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }


_LEADING_INTEGER = re.compile(r"\s*([+-]?[0-9]+)")

# Largest OFFSET DuckDB accepts (BIGINT).
MAX_OFFSET = 2**63 - 1


def _parse_int(raw: Any) -> int | None:
    """Read the leading integer of ``raw``; ``"10abc"`` and ``"2.5"`` keep their digits."""

    if raw is None:
        return None
    match = _LEADING_INTEGER.match(str(raw))
    if match is None:
        return None
    try:
        return int(match.group(1))
    except ValueError:  # beyond the interpreter digit limit
        return None


def parse_request_params(
    policy: PaginationPolicy, raw_page: Any = None, raw_limit: Any = None
) -> PaginationRequest:
    """Parse ``page``/``limit`` query values, falling back to policy defaults."""

    page = _parse_int(raw_page)
    if page is None or page < 1:
        page = 1

    limit = _parse_int(raw_limit)
    if limit is None or limit < 1:
        limit = policy.default_limit
    limit = min(limit, policy.max_limit)
    return PaginationRequest(page=page, limit=limit)


def validate(policy: PaginationPolicy, page: int, limit: int) -> None:
    if page < 1:
        raise PaginationError("Page number must be greater than 0")
    if limit < 1:
        raise PaginationError("Limit must be greater than 0")
    if limit > policy.max_limit:
        raise PaginationError(f"Limit cannot exceed {policy.max_limit}")
    if (page - 1) * limit > MAX_OFFSET:
        raise PaginationError("Page number is too large")


def build_result(
    rows: Sequence[Any], total: int, page: int, limit: int
) -> PaginationResult:
    pages = math.ceil(total / limit)
    return PaginationResult(
        page=page,
        limit=limit,
        total=total,
        pages=pages,
        has_next=page < pages,
        has_prev=page > 1,
        rows=tuple(rows),
    )
