"""Schema and loader for the route configuration document."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, PositiveInt, ValidationError, model_validator

from .._routing.definitions import (
    AuthPolicy,
    CachePolicy,
    CorsPolicy,
    PaginationPolicy,
    ResponsePolicy,
    RouteDefinition,
    WrapperKeys,
)
from .._routing.errors import ConfigValidationError
from .._routing.table import RouteTable
from .._routing.validation import validate_routes

__all__ = [
    "ConfigManifest",
    "RouteManifest",
    "RouterConfig",
    "build_route_table",
    "load_config",
    "parse_config",
]

logger = logging.getLogger(__name__)


class _Manifest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class AuthManifest(_Manifest):
    required: bool
    type: Literal["apikey"] = "apikey"
    header: str | None = None


class PaginationManifest(_Manifest):
    enabled: bool
    default_limit: PositiveInt = Field(alias="defaultLimit")
    max_limit: PositiveInt = Field(alias="maxLimit")
    type: Literal["offset"] = "offset"

    @model_validator(mode="after")
    def _check_limits(self) -> "PaginationManifest":
        if self.default_limit > self.max_limit:
            raise ValueError("defaultLimit must be less than or equal to maxLimit")
        return self


class WrapperManifest(_Manifest):
    success: str | None = None
    data: str | None = None
    meta: str | None = None


class ResponseManifest(_Manifest):
    transform: Literal["camelCase", "snake_case", "none"] = "none"
    include: list[str] | None = None
    exclude: list[str] | None = None
    wrapper: WrapperManifest | None = None

    @model_validator(mode="after")
    def _check_field_sets(self) -> "ResponseManifest":
        if self.include and self.exclude:
            raise ValueError("include and exclude are mutually exclusive")
        return self


class CacheManifest(_Manifest):
    type: Literal["memory"]
    ttl: PositiveInt


class RouteManifest(_Manifest):
    path: str = Field(min_length=1)
    method: Literal["GET"]
    query: str = Field(min_length=1)
    params: list[str] = Field(default_factory=list)
    auth: AuthManifest | None = None
    pagination: PaginationManifest | None = None
    response: ResponseManifest | None = None
    cache: CacheManifest | None = None
    description: str | None = None

    def to_definition(self) -> RouteDefinition:
        return RouteDefinition(
            path=self.path,
            method=self.method,
            sql=self.query,
            param_names=tuple(self.params),
            auth=_auth_policy(self.auth),
            pagination=_pagination_policy(self.pagination),
            response=_response_policy(self.response),
            cache=_cache_policy(self.cache),
            description=self.description,
        )


class CorsManifest(_Manifest):
    origins: list[str]
    credentials: bool = False
    methods: list[str] | None = None


class ErrorHandlerManifest(_Manifest):
    include_stack: bool = Field(default=False, alias="includeStack")
    include_query: bool = Field(default=False, alias="includeQuery")


class GlobalManifest(_Manifest):
    cors: CorsManifest | None = None
    error_handler: ErrorHandlerManifest | None = Field(default=None, alias="errorHandler")


class ConfigManifest(_Manifest):
    routes: list[RouteManifest] = Field(min_length=1)
    global_: GlobalManifest | None = Field(default=None, alias="global")


def _auth_policy(manifest: AuthManifest | None) -> AuthPolicy:
    if manifest is None:
        return AuthPolicy()
    if manifest.header:
        return AuthPolicy(required=manifest.required, header=manifest.header)
    return AuthPolicy(required=manifest.required)


def _pagination_policy(manifest: PaginationManifest | None) -> PaginationPolicy:
    if manifest is None:
        return PaginationPolicy()
    return PaginationPolicy(
        enabled=manifest.enabled,
        default_limit=manifest.default_limit,
        max_limit=manifest.max_limit,
    )


def _response_policy(manifest: ResponseManifest | None) -> ResponsePolicy:
    if manifest is None:
        return ResponsePolicy()
    wrapper = (
        WrapperKeys(**manifest.wrapper.model_dump())
        if manifest.wrapper is not None
        else None
    )
    return ResponsePolicy(
        transform=manifest.transform,
        include=tuple(manifest.include) if manifest.include else None,
        exclude=tuple(manifest.exclude) if manifest.exclude else None,
        wrapper=wrapper,
    )


def _cache_policy(manifest: CacheManifest | None) -> CachePolicy:
    if manifest is None:
        return CachePolicy()
    return CachePolicy(backend=manifest.type, ttl_seconds=manifest.ttl)


@dataclass(frozen=True)
class RouterConfig:
    """Validated configuration ready to be served."""

    routes: RouteTable
    cors: CorsPolicy | None = None
    include_error_stack: bool = False


def build_route_table(manifest: ConfigManifest) -> RouteTable:
    """Resolve route manifests into a validated :class:`RouteTable`."""

    definitions = [route.to_definition() for route in manifest.routes]
    table = RouteTable(definitions)
    validate_routes(table)
    return table


def parse_config(raw: Mapping[str, Any]) -> RouterConfig:
    try:
        manifest = ConfigManifest.model_validate(raw)
    except ValidationError as exc:
        raise ConfigValidationError(f"Invalid route configuration: {exc}") from exc

    table = build_route_table(manifest)
    global_config = manifest.global_ or GlobalManifest()
    cors = None
    if global_config.cors is not None:
        cors = CorsPolicy(
            origins=tuple(global_config.cors.origins),
            credentials=global_config.cors.credentials,
            methods=tuple(global_config.cors.methods or CorsPolicy.methods),
        )
    include_stack = bool(
        global_config.error_handler and global_config.error_handler.include_stack
    )
    return RouterConfig(routes=table, cors=cors, include_error_stack=include_stack)


def load_config(path: str | Path) -> RouterConfig:
    """Read a JSON or YAML route document and validate it."""

    config_path = Path(path)
    try:
        text = config_path.read_text(encoding="utf-8")
        if config_path.suffix.lower() in (".yml", ".yaml"):
            raw = yaml.safe_load(text) or {}
        else:
            raw = json.loads(text)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise ConfigValidationError(
            f"Failed to load config from {config_path}: {exc}"
        ) from exc
    if not isinstance(raw, Mapping):
        raise ConfigValidationError(
            f"Failed to load config from {config_path}: document must be a mapping"
        )

    config = parse_config(raw)
    logger.info("Loaded %d routes from %s", len(config.routes), config_path)
    return config
