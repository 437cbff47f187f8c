"""Server utilities for DuckDB-backed SQL routes."""

from .cache import CacheEntry, CachedResponse, TTLCache, build_cache_key
from .executor import DuckDBExecutor, QueryExecutor, QueryResult, derive_count_query
from .manifest import (
    ConfigManifest,
    RouteManifest,
    RouterConfig,
    build_route_table,
    load_config,
    parse_config,
)

__all__ = [
    "CacheEntry",
    "CachedResponse",
    "ConfigManifest",
    "DuckDBExecutor",
    "QueryExecutor",
    "QueryResult",
    "RouteManifest",
    "RouterConfig",
    "TTLCache",
    "build_cache_key",
    "build_route_table",
    "derive_count_query",
    "load_config",
    "parse_config",
]
