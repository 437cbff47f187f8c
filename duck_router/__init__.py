"""Serve declaratively configured, read-only SQL routes from DuckDB."""

from ._routing import (
    AuthPolicy,
    CachePolicy,
    ConfigValidationError,
    PaginationPolicy,
    ResponsePolicy,
    RouteDefinition,
    RouterError,
    RouteTable,
    is_valid_sql_query,
)
from .server import RouterConfig, TTLCache, load_config, parse_config
from .server.http import create_route_app

__all__ = [
    "AuthPolicy",
    "CachePolicy",
    "ConfigValidationError",
    "PaginationPolicy",
    "ResponsePolicy",
    "RouteDefinition",
    "RouteTable",
    "RouterConfig",
    "RouterError",
    "TTLCache",
    "create_route_app",
    "is_valid_sql_query",
    "load_config",
    "parse_config",
]
