"""Internal routing helpers used by :mod:`duck_router.server`."""

from .definitions import (
    AuthPolicy,
    CachePolicy,
    CorsPolicy,
    PaginationPolicy,
    ResponsePolicy,
    RouteDefinition,
    WrapperKeys,
)
from .errors import (
    AuthenticationError,
    ConfigValidationError,
    CountDerivationError,
    HealthCheckError,
    MissingParameterError,
    PaginationError,
    QueryExecutionError,
    RouteNotFoundError,
    RouterError,
)
from .pagination import PaginationRequest, PaginationResult
from .table import RouteTable
from .validation import is_valid_sql_query, validate_routes

__all__ = [
    "AuthPolicy",
    "AuthenticationError",
    "CachePolicy",
    "ConfigValidationError",
    "CorsPolicy",
    "CountDerivationError",
    "HealthCheckError",
    "MissingParameterError",
    "PaginationError",
    "PaginationPolicy",
    "PaginationRequest",
    "PaginationResult",
    "QueryExecutionError",
    "ResponsePolicy",
    "RouteDefinition",
    "RouteNotFoundError",
    "RouteTable",
    "RouterError",
    "WrapperKeys",
    "is_valid_sql_query",
    "validate_routes",
]
