"""Command line entry point: ``python -m duck_router``."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from ._routing.errors import ConfigValidationError
from ._routing.table import RouteTable
from .logging_config import setup_logging
from .server import DuckDBExecutor, load_config
from .server.http import create_route_app
from .settings import RouterSettings

logger = logging.getLogger("duck_router.main")


def _parse_args(argv: Sequence[str] | None, settings: RouterSettings) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="duck_router", description="Serve configured SQL routes over HTTP."
    )
    parser.add_argument("--config", default=settings.ROUTES_CONFIG_PATH, help="route file (JSON or YAML)")
    parser.add_argument("--database", default=settings.DUCKDB_DATABASE, help="DuckDB database file")
    parser.add_argument("--host", default=settings.HOST)
    parser.add_argument("--port", type=int, default=settings.PORT)
    return parser.parse_args(argv)


def log_routes(routes: RouteTable) -> None:
    logger.info("Available routes:")
    for route in routes:
        flags = []
        if route.auth.required:
            flags.append("auth")
        if route.pagination.enabled:
            flags.append("paginated")
        if route.cache.enabled:
            flags.append(f"cache={route.cache.ttl_seconds}s")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        logger.info("  %s%s", route.label, suffix)
        if route.description:
            logger.info("     %s", route.description)


def main(argv: Sequence[str] | None = None) -> int:
    settings = RouterSettings()
    args = _parse_args(argv, settings)
    setup_logging(settings.LOG_LEVEL)

    try:
        config = load_config(args.config)
    except ConfigValidationError as exc:
        logger.error("Initialization failed: %s", exc)
        return 2
    database = DuckDBExecutor(args.database)
    if not database.ping():
        logger.error("Database health check failed for %s", args.database)
        return 1

    log_routes(config.routes)
    app = create_route_app(config=config, database=database, api_keys=settings.api_keys)

    import uvicorn

    uvicorn.run(app, host=args.host, port=args.port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
