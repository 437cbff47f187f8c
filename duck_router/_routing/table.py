"""Ordered route lookup with ``:name`` path parameters."""

from __future__ import annotations

from typing import Iterable, Iterator

from .definitions import RouteDefinition, split_path
from .errors import ConfigValidationError

__all__ = ["RouteTable"]

_PARAMETER_PREFIX = ":"


class RouteTable:
    """Immutable collection of routes matched in declaration order."""

    __slots__ = ("_routes",)

    def __init__(self, routes: Iterable[RouteDefinition]) -> None:
        self._routes: tuple[RouteDefinition, ...] = tuple(routes)
        seen: set[tuple[str, str]] = set()
        for route in self._routes:
            key = (route.method, route.path)
            if key in seen:
                raise ConfigValidationError(
                    f"Duplicate route configuration found: {route.label}"
                )
            seen.add(key)

    def __iter__(self) -> Iterator[RouteDefinition]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def match(self, method: str, path: str) -> RouteDefinition | None:
        """Return the first route whose method and path template match."""

        method = method.upper()
        request_segments = split_path(path)
        for route in self._routes:
            if route.method == method and _segments_match(
                route.segments, request_segments
            ):
                return route
        return None

    @staticmethod
    def extract_params(route: RouteDefinition, path: str) -> dict[str, str]:
        """Bind every ``:name`` segment of ``route`` to the request segment."""

        request_segments = split_path(path)
        return {
            template[len(_PARAMETER_PREFIX):]: value
            for template, value in zip(route.segments, request_segments)
            if template.startswith(_PARAMETER_PREFIX)
        }


def _segments_match(template: tuple[str, ...], request: tuple[str, ...]) -> bool:
    if len(template) != len(request):
        return False
    return all(
        expected.startswith(_PARAMETER_PREFIX) or expected == actual
        for expected, actual in zip(template, request)
    )
