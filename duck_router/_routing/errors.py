"""Error types raised by the routing engine."""

from __future__ import annotations

from typing import Any, Mapping

__all__ = [
    "RouterError",
    "ConfigValidationError",
    "RouteNotFoundError",
    "MissingParameterError",
    "PaginationError",
    "AuthenticationError",
    "QueryExecutionError",
    "CountDerivationError",
    "HealthCheckError",
]


class RouterError(RuntimeError):
    """Base class for errors surfaced as an API error payload."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = dict(details) if details else None


class ConfigValidationError(RouterError, ValueError):
    """Raised when the route configuration cannot be served."""

    code = "CONFIG_INVALID"


class RouteNotFoundError(RouterError):
    code = "ROUTE_NOT_FOUND"
    status_code = 404


class MissingParameterError(RouterError):
    code = "MISSING_PARAMETER"
    status_code = 400


class PaginationError(RouterError):
    code = "INVALID_PAGINATION"
    status_code = 400


class AuthenticationError(RouterError):
    code = "AUTHENTICATION_FAILED"
    status_code = 401


class QueryExecutionError(RouterError):
    code = "QUERY_EXECUTION_FAILED"


class CountDerivationError(RouterError):
    """Raised when a count statement cannot be sliced out of a query."""

    code = "COUNT_DERIVATION_FAILED"


class HealthCheckError(RouterError):
    code = "HEALTH_CHECK_ERROR"
    status_code = 503
