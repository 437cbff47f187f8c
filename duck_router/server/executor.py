"""Parameter binding and statement execution against DuckDB."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence

import pyarrow as pa

from .._routing.definitions import RouteDefinition
from .._routing.errors import (
    CountDerivationError,
    MissingParameterError,
    QueryExecutionError,
)
from .._routing.pagination import PaginationRequest

__all__ = [
    "DuckDBExecutor",
    "QueryExecutor",
    "QueryResult",
    "StatementRunner",
    "derive_count_query",
]

logger = logging.getLogger(__name__)

StatementRunner = Callable[[str, Sequence[Any]], Any]


def _ensure_arrow_table(result: Any) -> pa.Table:
    if isinstance(result, pa.Table):
        return result
    if isinstance(result, pa.RecordBatchReader):
        return result.read_all()
    if hasattr(result, "fetch_arrow_table"):
        return result.fetch_arrow_table()
    raise TypeError("Statement runner must return a pyarrow.Table or RecordBatchReader")


class DuckDBExecutor:
    """Run one parameterized statement per connection against a DuckDB file."""

    def __init__(self, database: str | Path = ":memory:") -> None:
        import duckdb  # local import to avoid mandatory dependency during docs builds

        self._duckdb = duckdb
        self._database = str(database)

    def __call__(self, sql: str, parameters: Sequence[Any] = ()) -> pa.Table:
        connection = self._duckdb.connect(database=self._database)
        try:
            cursor = connection.execute(sql, list(parameters))
            return _ensure_arrow_table(cursor.arrow())
        finally:
            connection.close()

    def ping(self) -> bool:
        try:
            self("SELECT 1")
        except self._duckdb.Error as exc:
            logger.error("Database ping failed: %s", exc)
            return False
        return True


@dataclass(frozen=True)
class QueryResult:
    rows: list[dict[str, Any]] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)


def derive_count_query(sql: str) -> str:
    """Slice ``SELECT COUNT(*) AS total FROM ...`` out of a select statement.

    The text from the first ``from`` is kept, truncated before ``order by``
    when present, otherwise before ``limit``.
    """

    lowered = sql.lower()
    if "select" not in lowered or (from_index := lowered.find("from")) == -1:
        raise CountDerivationError("Cannot generate count query from this SQL statement")

    clause = sql[from_index:]
    lowered_clause = clause.lower()
    for marker in ("order by", "limit"):
        if (cut := lowered_clause.find(marker)) != -1:
            clause = clause[:cut]
            break
    return f"SELECT COUNT(*) AS total {clause.rstrip()}"


def _paginate_statement(
    sql: str, values: list[Any], pagination: PaginationRequest
) -> tuple[str, list[Any]]:
    lowered = sql.lower()
    if "limit" in lowered or "offset" in lowered:
        return sql, values
    next_slot = len(values) + 1
    statement = f"{sql.rstrip()} LIMIT ${next_slot} OFFSET ${next_slot + 1}"
    return statement, [*values, pagination.limit, pagination.offset]


def _parse_total(rows: Sequence[Mapping[str, Any]]) -> int:
    if not rows:
        return 0
    try:
        return int(str(rows[0].get("total")))
    except (TypeError, ValueError):
        return 0


class QueryExecutor:
    """Bind route parameters positionally and run the route statements."""

    def __init__(self, runner: StatementRunner) -> None:
        self._runner = runner

    @staticmethod
    def bind_parameters(
        route: RouteDefinition, params: Mapping[str, Any]
    ) -> list[Any]:
        values: list[Any] = []
        for name in route.param_names:
            value = params.get(name)
            if value is None:
                raise MissingParameterError(f"Missing required parameter: {name}")
            values.append(value)
        return values

    def execute(
        self,
        route: RouteDefinition,
        params: Mapping[str, Any],
        pagination: PaginationRequest | None = None,
    ) -> QueryResult:
        values = self.bind_parameters(route, params)
        statement = route.sql
        if route.pagination.enabled and pagination is not None:
            statement, values = _paginate_statement(statement, values, pagination)
        return QueryResult(rows=self._run(statement, values))

    def execute_count(self, route: RouteDefinition, params: Mapping[str, Any]) -> int:
        """Return the total row count, or 0 when it cannot be determined."""

        try:
            statement = derive_count_query(route.sql)
            values = self.bind_parameters(route, params)
            return _parse_total(self._run(statement, values))
        except (CountDerivationError, MissingParameterError, QueryExecutionError) as exc:
            logger.warning("Count query for %s degraded to 0: %s", route.label, exc)
            return 0

    def _run(self, statement: str, values: Sequence[Any]) -> list[dict[str, Any]]:
        logger.debug("Executing query: %s", statement)
        logger.debug("With parameters: %s", list(values))
        try:
            result = self._runner(statement, values)
        except Exception as exc:
            raise QueryExecutionError(f"Query execution failed: {exc}") from exc
        return _ensure_arrow_table(result).to_pylist()
