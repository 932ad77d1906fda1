from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from contentsync.app import ImportResult
from contentsync.config import ImporterConfig
from contentsync.ui import cli as cli_module

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def export_file(tmp_path: Path) -> Path:
    path = tmp_path / "export.yml"
    path.write_text("_content_sync: {entity_type: node}\nuuid: n-1\ntitle: One\n", encoding="utf-8")
    return path


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> dict[str, object]:
    calls: dict[str, object] = {}

    def fake_import_files(paths: list[Path], **kwargs: object) -> ImportResult:
        calls["paths"] = paths
        calls.update(kwargs)
        return ImportResult(imported=len(paths))

    monkeypatch.setattr(cli_module, "import_files", fake_import_files)
    monkeypatch.delenv("CONTENTSYNC_UPDATE_ENTITIES", raising=False)
    monkeypatch.delenv("CONTENTSYNC_ENTITY_TYPE", raising=False)
    monkeypatch.delenv("CONTENTSYNC_SKIPPED_CONSTRAINTS", raising=False)
    return calls


def test_import_command_defaults(captured: dict[str, object], export_file: Path) -> None:
    cli_module.main(["import", str(export_file)])

    assert captured["paths"] == [export_file]
    context = captured["context"]
    assert isinstance(context, cli_module.ImportContext)
    assert context.entity_type is None
    assert context.skipped_constraints == frozenset()
    config = captured["config"]
    assert isinstance(config, ImporterConfig)
    assert config.update_entities is True


def test_import_command_with_flags(captured: dict[str, object], export_file: Path) -> None:
    cli_module.main(
        [
            "import",
            str(export_file),
            "--entity-type",
            "user",
            "--skip-constraint",
            "UserMailUnique",
            "--skip-constraint",
            "UserNameUnique",
            "--no-update",
        ]
    )

    context = captured["context"]
    assert isinstance(context, cli_module.ImportContext)
    assert context.entity_type == "user"
    assert context.skipped_constraints == frozenset({"UserMailUnique", "UserNameUnique"})
    config = captured["config"]
    assert isinstance(config, ImporterConfig)
    assert config.update_entities is False


def test_blank_entity_type_is_a_usage_error(
    captured: dict[str, object], export_file: Path
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["import", str(export_file), "--entity-type", " "])

    assert excinfo.value.code == 2
    assert captured == {}


def test_invalid_environment_is_a_usage_error(
    captured: dict[str, object], export_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("CONTENTSYNC_UPDATE_ENTITIES", "maybe")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["import", str(export_file)])

    assert excinfo.value.code == 2


def test_missing_file_fails(captured: dict[str, object], tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["import", str(tmp_path / "missing.yml")])

    assert excinfo.value.code == 1
    assert captured == {}


def test_rejected_records_fail_the_run(
    monkeypatch: pytest.MonkeyPatch, export_file: Path
) -> None:
    monkeypatch.setattr(
        cli_module, "import_files", lambda *_args, **_kwargs: ImportResult(rejected=1)
    )

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["import", str(export_file)])

    assert excinfo.value.code == 1


def test_command_is_required() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main([])

    assert excinfo.value.code == 2
