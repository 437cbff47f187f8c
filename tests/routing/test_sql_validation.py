import pytest

from duck_router._routing.definitions import RouteDefinition
from duck_router._routing.errors import ConfigValidationError
from duck_router._routing.validation import (
    find_placeholders,
    is_valid_sql_query,
    validate_parameter_bindings,
    validate_route,
    validate_routes,
)


@pytest.mark.parametrize(
    "query",
    [
        "SELECT id, created_at FROM users",
        "  select * from users where updated_at > now()",
        "WITH recent AS (SELECT * FROM posts) SELECT * FROM recent",
    ],
)
def test_read_statements_are_accepted(query: str) -> None:
    assert is_valid_sql_query(query) is True


@pytest.mark.parametrize(
    "query",
    [
        "DROP TABLE users",
        "SELECT * FROM xp_cmdshell",
        "SELECT * FROM users; DELETE FROM users",
        "select sp_helptext('users')",
        "EXPLAIN SELECT 1",
        "SELECT * FROM users WHERE name = 'update'",
        "SELECT * FROM users; EXECUTE stmt",
    ],
)
def test_unsafe_statements_are_rejected(query: str) -> None:
    assert is_valid_sql_query(query) is False


def test_find_placeholders_in_order() -> None:
    assert find_placeholders("SELECT $2, $1, $10") == (2, 1, 10)
    assert find_placeholders("SELECT 1") == ()


def test_placeholders_must_match_declared_parameters() -> None:
    query = "SELECT * FROM t WHERE a=$1 AND b=$2"

    validate_parameter_bindings(query, ["a", "b"])

    with pytest.raises(ConfigValidationError, match=r"\(1 items\)"):
        validate_parameter_bindings(query, ["a"])

    with pytest.raises(ConfigValidationError, match="Duplicate parameter names found: a"):
        validate_parameter_bindings(query, ["a", "a"])


def test_zero_parameter_route_is_valid() -> None:
    validate_parameter_bindings("SELECT * FROM t", [])


def test_declared_parameters_without_placeholders_fail() -> None:
    with pytest.raises(ConfigValidationError, match="no parameter placeholders"):
        validate_parameter_bindings("SELECT * FROM t", ["a"])


def test_placeholders_without_parameters_fail() -> None:
    with pytest.raises(ConfigValidationError, match="no parameters are defined"):
        validate_parameter_bindings("SELECT * FROM t WHERE a = $1", [])


def test_gaps_in_placeholders_name_the_missing_index() -> None:
    with pytest.raises(ConfigValidationError, match=r"\$2 is missing"):
        validate_parameter_bindings("SELECT * FROM t WHERE a = $1 AND c = $3", ["a", "b", "c"])


def test_repeated_placeholder_counts_once() -> None:
    validate_parameter_bindings("SELECT * FROM t WHERE a = $1 OR b = $1", ["a"])


def test_validate_route_reports_unsafe_sql() -> None:
    route = RouteDefinition(path="/drop", sql="DROP TABLE users")
    with pytest.raises(ConfigValidationError, match="unsafe SQL query in route GET /drop"):
        validate_route(route)


def test_validate_routes_collects_every_failure() -> None:
    routes = [
        RouteDefinition(path="/ok", sql="SELECT 1"),
        RouteDefinition(path="/bad", sql="DELETE FROM users"),
        RouteDefinition(path="/arity", sql="SELECT * FROM t WHERE a = $1", param_names=("a", "b")),
    ]
    with pytest.raises(ConfigValidationError) as excinfo:
        validate_routes(routes)

    message = str(excinfo.value)
    assert "GET /bad" in message
    assert "GET /arity" in message
    assert "GET /ok" not in message
