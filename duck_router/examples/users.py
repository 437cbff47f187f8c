"""Sample users/posts schema and route configuration."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Mapping

SEED_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY,
        internal_id VARCHAR NOT NULL,
        name VARCHAR NOT NULL,
        email VARCHAR NOT NULL UNIQUE,
        active BOOLEAN NOT NULL DEFAULT TRUE,
        created_at TIMESTAMP NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS posts (
        id INTEGER PRIMARY KEY,
        user_id INTEGER NOT NULL,
        title VARCHAR NOT NULL,
        content VARCHAR NOT NULL,
        published BOOLEAN NOT NULL DEFAULT FALSE,
        created_at TIMESTAMP NOT NULL
    )
    """,
    """
    INSERT INTO users VALUES
        (1, 'u-0001', 'Alice Johnson', 'alice@example.com', TRUE, TIMESTAMP '2024-01-01 09:00:00'),
        (2, 'u-0002', 'Bob Smith', 'bob@example.com', TRUE, TIMESTAMP '2024-01-11 09:00:00'),
        (3, 'u-0003', 'Carol Williams', 'carol@example.com', FALSE, TIMESTAMP '2024-01-21 09:00:00')
    """,
    """
    INSERT INTO posts VALUES
        (1, 1, 'Getting started with duck-router', 'Serving read-only SQL over HTTP.', TRUE, TIMESTAMP '2024-02-01 10:00:00'),
        (2, 1, 'Understanding Route Configuration', 'Exposing safe read-only queries.', TRUE, TIMESTAMP '2024-02-05 10:00:00'),
        (3, 2, 'DuckDB Tips', 'Practical guidance for DuckDB files.', TRUE, TIMESTAMP '2024-02-03 10:00:00'),
        (4, 3, 'Draft: Advanced Analytics', 'Still a draft.', FALSE, TIMESTAMP '2024-02-09 10:00:00')
    """,
)

SAMPLE_CONFIG: Mapping[str, Any] = {
    "routes": [
        {
            "path": "/users",
            "method": "GET",
            "query": (
                "SELECT id, internal_id, name, email, created_at FROM users "
                "WHERE active = TRUE ORDER BY id"
            ),
            "pagination": {"enabled": True, "defaultLimit": 1, "maxLimit": 10},
            "response": {"transform": "camelCase", "exclude": ["internal_id"]},
            "description": "Active users",
        },
        {
            "path": "/users/:id",
            "method": "GET",
            "query": "SELECT id, name, email, created_at FROM users WHERE id = $1::INTEGER",
            "params": ["id"],
            "cache": {"type": "memory", "ttl": 60},
            "description": "Single user by id",
        },
        {
            "path": "/users/:id/posts",
            "method": "GET",
            "query": (
                "SELECT id, title, created_at FROM posts "
                "WHERE user_id = $1::INTEGER AND published = TRUE ORDER BY id"
            ),
            "params": ["id"],
            "pagination": {"enabled": True, "defaultLimit": 20, "maxLimit": 100},
            "response": {
                "transform": "camelCase",
                "wrapper": {"success": "ok", "data": "posts", "meta": "info"},
            },
            "description": "Published posts for a user",
        },
        {
            "path": "/admin/users",
            "method": "GET",
            "query": "SELECT id, internal_id, name, active FROM users ORDER BY id",
            "auth": {"required": True, "type": "apikey"},
            "response": {"include": ["id", "name"]},
        },
    ],
    "global": {"errorHandler": {"includeStack": False}},
}


def build_sample_config() -> dict[str, Any]:
    """Return a deep copy of :data:`SAMPLE_CONFIG` safe to mutate."""

    return copy.deepcopy(dict(SAMPLE_CONFIG))


def seed_database(database: str | Path) -> None:
    """Create and populate the sample tables in a DuckDB file."""

    import duckdb

    connection = duckdb.connect(str(database))
    try:
        for statement in SEED_STATEMENTS:
            connection.execute(statement)
    finally:
        connection.close()
