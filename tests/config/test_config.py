from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from contentsync.config import (
    ConfigurationError,
    ImporterConfig,
    MissingConfigurationError,
    StorageConfig,
    env_flag,
    env_list,
    get_database_config,
    get_importer_config,
    get_storage_config,
    require_env_vars,
)

if TYPE_CHECKING:
    from pathlib import Path


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    assert require_env_vars(["EXAMPLE_VAR"]) == {"EXAMPLE_VAR": "value"}


def test_require_env_vars_raises_when_any_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_VAR", raising=False)
    monkeypatch.setenv("BLANK_VAR", "  ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_VAR", "BLANK_VAR"])

    assert "BLANK_VAR, MISSING_VAR" in str(exc.value)
    assert isinstance(exc.value, ConfigurationError)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, True), ("", True), ("0", False), ("no", False), (" TRUE ", True), ("on", True)],
)
def test_env_flag(monkeypatch: pytest.MonkeyPatch, raw: str | None, expected: bool) -> None:
    if raw is None:
        monkeypatch.delenv("EXAMPLE_FLAG", raising=False)
    else:
        monkeypatch.setenv("EXAMPLE_FLAG", raw)

    assert env_flag("EXAMPLE_FLAG", default=True) is expected


def test_env_flag_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_FLAG", "maybe")

    with pytest.raises(ConfigurationError, match="EXAMPLE_FLAG"):
        env_flag("EXAMPLE_FLAG", default=False)


def test_env_list_splits_and_strips(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_LIST", " A, ,B ,")

    assert env_list("EXAMPLE_LIST") == ("A", "B")


def test_importer_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CONTENTSYNC_UPDATE_ENTITIES",
        "CONTENTSYNC_ENTITY_TYPE",
        "CONTENTSYNC_SKIPPED_CONSTRAINTS",
    ):
        monkeypatch.delenv(name, raising=False)

    assert get_importer_config() == ImporterConfig()


def test_importer_config_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONTENTSYNC_UPDATE_ENTITIES", "false")
    monkeypatch.setenv("CONTENTSYNC_ENTITY_TYPE", " node ")
    monkeypatch.setenv("CONTENTSYNC_SKIPPED_CONSTRAINTS", "UserMailUnique,UserNameUnique")

    config = get_importer_config()

    assert config.update_entities is False
    assert config.entity_type == "node"
    assert config.skipped_constraints == frozenset({"UserMailUnique", "UserNameUnique"})
    assert config.format == "yaml"


def test_storage_config_uses_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("CONTENTSYNC_DATA_DIR", str(tmp_path / "data"))

    config = get_storage_config()

    assert config.resolve_data_dir() == (tmp_path / "data").resolve()
    assert config.database_uri().endswith("/data/contentsync.db")
    assert (tmp_path / "data").is_dir()


def test_database_uri_prefers_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")
    assert get_database_config().uri == "sqlite+pysqlite:///:memory:"

    monkeypatch.delenv("DATABASE_URI")
    storage = StorageConfig(data_dir=tmp_path)
    expected = f"sqlite+pysqlite:///{tmp_path.resolve() / 'contentsync.db'}"
    assert get_database_config(storage=storage).uri == expected
