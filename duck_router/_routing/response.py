"""Row shaping and API envelope composition."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping

from .definitions import ResponsePolicy

__all__ = ["compose_response", "error_payload", "transform_keys", "transform_rows", "utc_timestamp"]

_CAMEL_SOURCE = re.compile(r"_([a-z])")
_SNAKE_SOURCE = re.compile(r"[A-Z]")


def _to_camel_case(name: str) -> str:
    return _CAMEL_SOURCE.sub(lambda match: match.group(1).upper(), name)


def _to_snake_case(name: str) -> str:
    return _SNAKE_SOURCE.sub(lambda match: "_" + match.group(0).lower(), name)


_KEY_TRANSFORMS: Mapping[str, Callable[[str], str]] = {
    "camelCase": _to_camel_case,
    "snake_case": _to_snake_case,
}


def transform_keys(value: Any, transform: str) -> Any:
    """Rename mapping keys recursively; scalars and dates pass through."""

    rename = _KEY_TRANSFORMS.get(transform)
    if rename is None:
        return value
    return _rename_keys(value, rename)


def _rename_keys(value: Any, rename: Callable[[str], str]) -> Any:
    if isinstance(value, Mapping):
        return {rename(str(key)): _rename_keys(item, rename) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_rename_keys(item, rename) for item in value]
    return value


def _filter_fields(row: Mapping[str, Any], policy: ResponsePolicy) -> dict[str, Any]:
    if policy.exclude:
        excluded = set(policy.exclude)
        return {key: value for key, value in row.items() if key not in excluded}
    if policy.include:
        included = set(policy.include)
        return {key: value for key, value in row.items() if key in included}
    return dict(row)


def transform_rows(
    rows: Iterable[Mapping[str, Any]], policy: ResponsePolicy
) -> list[dict[str, Any]]:
    """Apply field filtering then the key-case transform to every row."""

    return [transform_keys(_filter_fields(row, policy), policy.transform) for row in rows]


def utc_timestamp(moment: datetime | None = None) -> str:
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def error_payload(
    message: str, code: str | None = None, details: Mapping[str, Any] | None = None
) -> dict[str, Any]:
    payload: dict[str, Any] = {"message": message}
    if code is not None:
        payload["code"] = code
    if details:
        payload["details"] = dict(details)
    return payload


def compose_response(
    data: Any = None,
    policy: ResponsePolicy | None = None,
    *,
    error: Mapping[str, Any] | None = None,
    meta: Mapping[str, Any] | None = None,
    timestamp: datetime | None = None,
) -> dict[str, Any]:
    """Build the ``success``/``data``/``error``/``meta`` envelope.

    With a wrapper policy the ``success``, ``data`` and ``meta`` slots move to
    the configured keys; a slot without a configured key or without a value is
    dropped. ``error`` always stays under ``error``.
    """

    response: dict[str, Any] = {"success": error is None}
    if error is not None:
        response["error"] = dict(error)
    elif data is not None:
        response["data"] = data
    response["meta"] = {
        "timestamp": utc_timestamp(timestamp),
        **{key: value for key, value in (meta or {}).items() if value is not None},
    }

    wrapper = policy.wrapper if policy is not None else None
    if wrapper is None:
        return response

    wrapped: dict[str, Any] = {}
    for slot, target in (
        ("success", wrapper.success),
        ("data", wrapper.data),
        ("meta", wrapper.meta),
    ):
        if target is not None and slot in response:
            wrapped[target] = response[slot]
    if "error" in response:
        wrapped["error"] = response["error"]
    return wrapped
