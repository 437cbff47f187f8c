"""Immutable route definitions and their resolved policies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

__all__ = [
    "AuthPolicy",
    "CachePolicy",
    "CorsPolicy",
    "PaginationPolicy",
    "ResponsePolicy",
    "RouteDefinition",
    "WrapperKeys",
    "split_path",
]

KeyTransform = Literal["camelCase", "snake_case", "none"]

DEFAULT_API_KEY_HEADER = "x-api-key"
MEMORY_BACKEND = "memory"


def split_path(path: str) -> tuple[str, ...]:
    """Return the non-empty ``/`` separated segments of ``path``."""

    return tuple(segment for segment in path.split("/") if segment)


@dataclass(frozen=True)
class AuthPolicy:
    required: bool = False
    header: str = DEFAULT_API_KEY_HEADER


@dataclass(frozen=True)
class PaginationPolicy:
    enabled: bool = False
    default_limit: int = 20
    max_limit: int = 100

    def __post_init__(self) -> None:
        if self.default_limit <= 0 or self.max_limit <= 0:
            raise ValueError("pagination limits must be positive integers")
        if self.default_limit > self.max_limit:
            raise ValueError("default_limit must be less than or equal to max_limit")


@dataclass(frozen=True)
class WrapperKeys:
    """Alternate object keys for the ``success``/``data``/``meta`` slots."""

    success: str | None = None
    data: str | None = None
    meta: str | None = None


@dataclass(frozen=True)
class ResponsePolicy:
    transform: KeyTransform = "none"
    include: tuple[str, ...] | None = None
    exclude: tuple[str, ...] | None = None
    wrapper: WrapperKeys | None = None

    def __post_init__(self) -> None:
        if self.transform not in ("camelCase", "snake_case", "none"):
            raise ValueError(f"Unsupported key transform '{self.transform}'")
        if self.include and self.exclude:
            raise ValueError("include and exclude are mutually exclusive")
        if self.include is not None:
            object.__setattr__(self, "include", tuple(self.include))
        if self.exclude is not None:
            object.__setattr__(self, "exclude", tuple(self.exclude))


@dataclass(frozen=True)
class CachePolicy:
    backend: str | None = None
    ttl_seconds: int = 0

    def __post_init__(self) -> None:
        if self.backend is not None and (
            not isinstance(self.ttl_seconds, int) or self.ttl_seconds <= 0
        ):
            raise ValueError("cache ttl must be a positive integer")

    @property
    def enabled(self) -> bool:
        return self.backend == MEMORY_BACKEND


@dataclass(frozen=True)
class CorsPolicy:
    origins: tuple[str, ...] = ("*",)
    credentials: bool = False
    methods: tuple[str, ...] = ("GET", "OPTIONS")


@dataclass(frozen=True)
class RouteDefinition:
    """A configured endpoint: path template, statement and policies.

    Policies are always present; a policy block missing from configuration
    resolves to its disabled default so request handling never has to check
    for presence.
    """

    path: str
    sql: str
    param_names: tuple[str, ...] = ()
    method: str = "GET"
    auth: AuthPolicy = field(default_factory=AuthPolicy)
    pagination: PaginationPolicy = field(default_factory=PaginationPolicy)
    response: ResponsePolicy = field(default_factory=ResponsePolicy)
    cache: CachePolicy = field(default_factory=CachePolicy)
    description: str | None = None
    segments: tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "param_names", tuple(self.param_names))
        object.__setattr__(self, "segments", split_path(self.path))

    @property
    def label(self) -> str:
        return f"{self.method} {self.path}"
