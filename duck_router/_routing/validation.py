"""Load-time checks for configured SQL statements.

The statement guard is lexical: it does not parse SQL, so a forbidden keyword
inside a string literal or a comment is still rejected.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable, Sequence

from .definitions import RouteDefinition
from .errors import ConfigValidationError

__all__ = [
    "find_placeholders",
    "is_valid_sql_query",
    "parameter_binding_errors",
    "validate_parameter_bindings",
    "validate_route",
    "validate_routes",
]

_ALLOWED_PREFIXES = ("select", "with")

_FORBIDDEN_PATTERNS = tuple(
    re.compile(pattern)
    for pattern in (
        *(
            rf"\b{keyword}\b"
            for keyword in (
                "insert",
                "update",
                "delete",
                "drop",
                "create",
                "alter",
                "truncate",
                "grant",
                "revoke",
                "exec",
                "execute",
            )
        ),
        r"\bxp_[a-z0-9_]+",
        r"\bsp_[a-z0-9_]+",
    )
)

_PLACEHOLDER = re.compile(r"\$(\d+)")


def is_valid_sql_query(query: str) -> bool:
    """Return ``True`` for read statements free of forbidden keywords."""

    normalized = query.strip().lower()
    if not normalized.startswith(_ALLOWED_PREFIXES):
        return False
    return not any(pattern.search(normalized) for pattern in _FORBIDDEN_PATTERNS)


def find_placeholders(query: str) -> tuple[int, ...]:
    """Return every ``$n`` index in ``query`` in order of appearance."""

    return tuple(int(match.group(1)) for match in _PLACEHOLDER.finditer(query))


def parameter_binding_errors(query: str, params: Sequence[str]) -> list[str]:
    placeholders = find_placeholders(query)
    if not placeholders and not params:
        return []
    if not placeholders:
        return [
            f"Route defines {len(params)} parameters but query contains no "
            "parameter placeholders ($1, $2, etc.)"
        ]
    if not params:
        return [
            "Query contains parameter placeholders but no parameters are "
            "defined in route config"
        ]

    highest = max(placeholders)
    present = set(placeholders)
    missing = [index for index in range(1, highest + 1) if index not in present]
    if missing:
        return [f"Query parameter ${missing[0]} is missing from the query"]
    if len(params) != highest:
        return [
            f"Mismatch between query parameters ($1-${highest}) and defined "
            f"params ({len(params)} items)"
        ]
    duplicates = sorted(name for name, count in Counter(params).items() if count > 1)
    if duplicates:
        return [f"Duplicate parameter names found: {', '.join(duplicates)}"]
    return []


def validate_parameter_bindings(query: str, params: Sequence[str]) -> None:
    errors = parameter_binding_errors(query, params)
    if errors:
        raise ConfigValidationError("; ".join(errors))


def _route_errors(route: RouteDefinition) -> Iterable[str]:
    if not is_valid_sql_query(route.sql):
        yield (
            f"Invalid or potentially unsafe SQL query in route {route.label}: "
            f"{route.sql.strip()}"
        )
    for message in parameter_binding_errors(route.sql, route.param_names):
        yield f"Route {route.label}: {message}"


def validate_route(route: RouteDefinition) -> None:
    errors = list(_route_errors(route))
    if errors:
        raise ConfigValidationError("; ".join(errors))


def validate_routes(routes: Iterable[RouteDefinition]) -> None:
    """Validate every route and report all failures at once."""

    errors = [message for route in routes for message in _route_errors(route)]
    if errors:
        raise ConfigValidationError("; ".join(errors))
