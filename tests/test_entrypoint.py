from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from duck_router import __main__ as entrypoint
from duck_router.examples import build_sample_config, seed_database
from duck_router.logging_config import build_logging_config, setup_logging
from duck_router.settings import RouterSettings


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    for name in ("DUCKDB_DATABASE", "ROUTES_CONFIG_PATH", "API_KEY", "HOST", "PORT", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _restore_logging():
    logger = logging.getLogger("duck_router")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def test_settings_defaults() -> None:
    settings = RouterSettings()

    assert settings.DUCKDB_DATABASE == ":memory:"
    assert settings.ROUTES_CONFIG_PATH == "routes.json"
    assert settings.PORT == 3000
    assert settings.LOG_LEVEL == "INFO"
    assert settings.api_keys == frozenset()


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_KEY", "alpha, beta,,")
    monkeypatch.setenv("PORT", "8080")

    settings = RouterSettings()

    assert settings.api_keys == frozenset({"alpha", "beta"})
    assert settings.PORT == 8080


def test_settings_from_dotenv(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("ROUTES_CONFIG_PATH=config/routes.yaml\n", encoding="utf-8")

    assert RouterSettings().ROUTES_CONFIG_PATH == "config/routes.yaml"


def test_logging_config_applies_level() -> None:
    config = build_logging_config("debug")

    assert config["loggers"]["duck_router"]["level"] == "DEBUG"
    assert config["root"]["level"] == "WARNING"


def test_setup_logging_rejects_unknown_level() -> None:
    with pytest.raises(ValueError, match="Unknown log level"):
        setup_logging("chatty")


def test_main_rejects_invalid_config(tmp_path: Path) -> None:
    path = tmp_path / "routes.json"
    path.write_text(json.dumps({"routes": [{"path": "/x", "method": "GET", "query": "DROP TABLE x"}]}))

    assert entrypoint.main(["--config", str(path)]) == 2


def test_main_serves_loaded_routes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    uvicorn = pytest.importorskip("uvicorn")
    pytest.importorskip("duckdb")
    database = tmp_path / "app.duckdb"
    seed_database(database)
    config_path = tmp_path / "routes.json"
    config_path.write_text(json.dumps(build_sample_config()), encoding="utf-8")
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append({"app": app, **kwargs}))

    exit_code = entrypoint.main(
        ["--config", str(config_path), "--database", str(database), "--port", "4000"]
    )

    assert exit_code == 0
    (call,) = calls
    assert call["port"] == 4000
    assert call["host"] == "0.0.0.0"
    assert len(call["app"].state.route_state.config.routes) == 4
