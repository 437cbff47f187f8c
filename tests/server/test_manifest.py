from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import yaml

from duck_router._routing.definitions import AuthPolicy, CachePolicy, PaginationPolicy, ResponsePolicy
from duck_router._routing.errors import ConfigValidationError
from duck_router.examples import build_sample_config
from duck_router.server.manifest import load_config, parse_config


def _route(**overrides: Any) -> dict[str, Any]:
    route = {"path": "/users", "method": "GET", "query": "SELECT * FROM users"}
    route.update(overrides)
    return route


def test_sample_config_resolves_every_policy() -> None:
    config = parse_config(build_sample_config())
    routes = {route.path: route for route in config.routes}

    assert len(config.routes) == 4
    assert routes["/users"].pagination == PaginationPolicy(enabled=True, default_limit=1, max_limit=10)
    assert routes["/users"].response.exclude == ("internal_id",)
    assert routes["/users/:id"].param_names == ("id",)
    assert routes["/users/:id"].cache == CachePolicy(backend="memory", ttl_seconds=60)
    assert routes["/users/:id/posts"].response.wrapper.data == "posts"
    assert routes["/admin/users"].auth == AuthPolicy(required=True, header="x-api-key")
    assert config.cors is None
    assert config.include_error_stack is False


def test_absent_policy_blocks_resolve_to_defaults() -> None:
    config = parse_config({"routes": [_route()]})
    (route,) = list(config.routes)

    assert route.auth == AuthPolicy()
    assert route.pagination.enabled is False
    assert route.response == ResponsePolicy()
    assert route.cache.enabled is False
    assert route.param_names == ()


def test_custom_auth_header_and_global_settings() -> None:
    raw = {
        "routes": [_route(auth={"required": True, "type": "apikey", "header": "x-token"})],
        "global": {
            "cors": {"origins": ["https://app.example.com"], "credentials": True},
            "errorHandler": {"includeStack": True},
        },
    }
    config = parse_config(raw)

    (route,) = list(config.routes)
    assert route.auth.header == "x-token"
    assert config.cors.origins == ("https://app.example.com",)
    assert config.cors.credentials is True
    assert config.cors.methods == ("GET", "OPTIONS")
    assert config.include_error_stack is True


def test_unknown_keys_are_ignored() -> None:
    config = parse_config({"routes": [_route(notes="ignored")], "version": 2})
    assert len(config.routes) == 1


@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"routes": []},
        {"routes": [_route(method="POST")]},
        {"routes": [_route(path="")]},
        {"routes": [_route(query="")]},
        {"routes": [_route(pagination={"enabled": True, "defaultLimit": 50, "maxLimit": 10})]},
        {"routes": [_route(pagination={"enabled": True, "defaultLimit": 0, "maxLimit": 10})]},
        {"routes": [_route(response={"include": ["id"], "exclude": ["name"]})]},
        {"routes": [_route(response={"transform": "kebab-case"})]},
        {"routes": [_route(cache={"type": "redis", "ttl": 10})]},
        {"routes": [_route(cache={"type": "memory", "ttl": 0})]},
        {"routes": [_route(auth={"required": True, "type": "jwt"})]},
    ],
)
def test_schema_violations_are_rejected(raw: dict[str, Any]) -> None:
    with pytest.raises(ConfigValidationError, match="Invalid route configuration"):
        parse_config(raw)


def test_unsafe_sql_is_rejected_at_load() -> None:
    with pytest.raises(ConfigValidationError, match="potentially unsafe SQL"):
        parse_config({"routes": [_route(query="DELETE FROM users")]})


def test_parameter_mismatch_is_rejected_at_load() -> None:
    raw = {"routes": [_route(path="/users/:id", query="SELECT * FROM users WHERE id = $1 AND x = $2", params=["id"])]}
    with pytest.raises(ConfigValidationError, match="Mismatch between query parameters"):
        parse_config(raw)


def test_duplicate_routes_are_rejected_at_load() -> None:
    with pytest.raises(ConfigValidationError, match="Duplicate route configuration found: GET /users"):
        parse_config({"routes": [_route(), _route()]})


def test_load_json_config(tmp_path: Path) -> None:
    path = tmp_path / "routes.json"
    path.write_text(json.dumps(build_sample_config()), encoding="utf-8")

    config = load_config(path)

    assert [route.path for route in config.routes] == [
        "/users",
        "/users/:id",
        "/users/:id/posts",
        "/admin/users",
    ]


def test_load_yaml_config(tmp_path: Path) -> None:
    path = tmp_path / "routes.yaml"
    path.write_text(yaml.safe_dump(build_sample_config()), encoding="utf-8")

    config = load_config(path)

    assert len(config.routes) == 4


def test_load_reports_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigValidationError, match="Failed to load config"):
        load_config(tmp_path / "absent.json")


def test_load_reports_malformed_json(tmp_path: Path) -> None:
    path = tmp_path / "routes.json"
    path.write_text("{ not json", encoding="utf-8")

    with pytest.raises(ConfigValidationError, match="Failed to load config"):
        load_config(path)


def test_load_rejects_non_mapping_document(tmp_path: Path) -> None:
    path = tmp_path / "routes.yml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigValidationError, match="document must be a mapping"):
        load_config(path)
