"""HTTP application wiring for configured SQL routes."""

from __future__ import annotations

import asyncio
import json
import logging
import math
import time
import traceback
from dataclasses import dataclass
from datetime import date, datetime, time as dt_time, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from ..._routing.definitions import CorsPolicy, RouteDefinition
from ..._routing.errors import HealthCheckError, RouteNotFoundError, RouterError
from ..._routing.pagination import build_result, parse_request_params, validate
from ..._routing.response import compose_response, error_payload, transform_rows, utc_timestamp
from ..cache import CachedResponse, TTLCache, build_cache_key
from ..executor import DuckDBExecutor, QueryExecutor
from ..manifest import RouterConfig
from .auth import ApiKeyAuthenticator
from .models import HealthResponse

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json"}
_ALLOWED_HEADERS = ["Content-Type", "Authorization", "x-api-key"]
_DISPATCH_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"]


@dataclass(frozen=True)
class RouteRuntimeState:
    """Objects shared across HTTP handlers."""

    config: RouterConfig
    executor: QueryExecutor
    database: DuckDBExecutor
    authenticator: ApiKeyAuthenticator
    cache: TTLCache[CachedResponse]
    clock: Callable[[], datetime]
    started_at: float


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def create_route_app(
    *,
    config: RouterConfig,
    duckdb_database: str | Path = ":memory:",
    api_keys: Iterable[str] = (),
    database: DuckDBExecutor | None = None,
    cache: TTLCache[CachedResponse] | None = None,
    clock: Callable[[], datetime] | None = None,
) -> FastAPI:
    """Create a FastAPI app serving every route in ``config``."""

    database = database or DuckDBExecutor(duckdb_database)
    clock = clock or _utc_now
    state = RouteRuntimeState(
        config=config,
        executor=QueryExecutor(database),
        database=database,
        authenticator=ApiKeyAuthenticator(api_keys),
        cache=cache if cache is not None else TTLCache(clock=clock),
        clock=clock,
        started_at=time.monotonic(),
    )

    app = FastAPI()
    app.state.route_state = state
    _install_cors(app, config.cors or CorsPolicy())
    app.add_exception_handler(RouterError, _router_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
    app.include_router(_ROUTE_ROUTER)
    return app


def _install_cors(app: FastAPI, cors: CorsPolicy) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cors.origins),
        allow_credentials=cors.credentials,
        allow_methods=list(cors.methods),
        allow_headers=_ALLOWED_HEADERS,
        max_age=86400,
    )


_ROUTE_ROUTER = APIRouter()


def _get_route_state(request: Request) -> RouteRuntimeState:
    state = getattr(request.app.state, "route_state", None)
    if state is None:
        raise RuntimeError("Route runtime state is not configured")
    return state


@_ROUTE_ROUTER.get("/health", name="health", response_model=HealthResponse)
async def health_check(state: RouteRuntimeState = Depends(_get_route_state)) -> JSONResponse:
    try:
        connected = await run_in_threadpool(state.database.ping)
    except Exception as exc:
        raise HealthCheckError(f"Health check failed: {exc}") from exc
    report = HealthResponse.from_check(
        connected=connected,
        timestamp=utc_timestamp(state.clock()),
        uptime=time.monotonic() - state.started_at,
    )
    return JSONResponse(report.model_dump(), status_code=200 if connected else 503)


@_ROUTE_ROUTER.api_route(
    "/{path:path}", methods=_DISPATCH_METHODS, name="route-dispatch", include_in_schema=False
)
async def dispatch_route(
    request: Request, state: RouteRuntimeState = Depends(_get_route_state)
) -> Response:
    method = request.method
    path = request.url.path
    route = state.config.routes.match(method, path)
    if route is None:
        raise RouteNotFoundError(f"Route not found: {method} {path}")

    state.authenticator.authenticate(route.auth, request.headers)

    cache_key = None
    if route.cache.enabled:
        cache_key = build_cache_key(method, path, request.query_params.multi_items())
        if (cached := state.cache.get(cache_key)) is not None:
            return Response(
                cached.body, status_code=cached.status_code, headers=dict(cached.headers)
            )

    params = state.config.routes.extract_params(route, path)
    payload = await _execute_route(state, route, params, request.query_params)
    body = json.dumps(_replace_non_finite(payload), default=_json_default).encode("utf-8")

    if cache_key is not None:
        state.cache.set(
            cache_key,
            CachedResponse(body=body, status_code=200, headers=_JSON_HEADERS),
            route.cache.ttl_seconds,
        )
    return Response(body, status_code=200, headers=_JSON_HEADERS)


async def _execute_route(
    state: RouteRuntimeState,
    route: RouteDefinition,
    params: Mapping[str, str],
    query: Mapping[str, str],
) -> dict[str, Any]:
    if not route.pagination.enabled:
        result = await run_in_threadpool(state.executor.execute, route, params)
        return compose_response(
            transform_rows(result.rows, route.response),
            route.response,
            meta={"query": route.description, "rowCount": result.row_count},
            timestamp=state.clock(),
        )

    pagination = parse_request_params(route.pagination, query.get("page"), query.get("limit"))
    validate(route.pagination, pagination.page, pagination.limit)
    result, total = await asyncio.gather(
        run_in_threadpool(state.executor.execute, route, params, pagination),
        run_in_threadpool(state.executor.execute_count, route, params),
    )
    page = build_result(result.rows, total, pagination.page, pagination.limit)
    return compose_response(
        transform_rows(page.rows, route.response),
        route.response,
        meta={"pagination": page.to_meta(), "query": route.description},
        timestamp=state.clock(),
    )


def _error_response(
    request: Request,
    message: str,
    code: str,
    status_code: int,
    details: Mapping[str, Any] | None = None,
) -> JSONResponse:
    state = getattr(request.app.state, "route_state", None)
    moment = state.clock() if state is not None else None
    payload = compose_response(
        error=error_payload(message, code, details), timestamp=moment
    )
    return JSONResponse(payload, status_code=status_code)


async def _router_error_handler(request: Request, exc: RouterError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error_response(request, exc.message, exc.code, exc.status_code, exc.details)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Request handling error for %s %s", request.method, request.url.path, exc_info=exc
    )
    state = getattr(request.app.state, "route_state", None)
    details = None
    if state is not None and state.config.include_error_stack:
        details = {"stack": "".join(traceback.format_exception(exc))}
    return _error_response(
        request, str(exc) or "Internal server error", "INTERNAL_ERROR", 500, details
    )


def _replace_non_finite(value: Any) -> Any:
    """Swap NaN and infinities for ``None``; JSON has no spelling for them."""

    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, dict):
        return {key: _replace_non_finite(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_replace_non_finite(item) for item in value]
    return value


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date, dt_time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value) if value.is_finite() else None
    if isinstance(value, (bytes, bytearray)):
        return value.hex()
    return str(value)


__all__ = ["RouteRuntimeState", "create_route_app"]
