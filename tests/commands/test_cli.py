"""Tests for the workspace-bundler command line."""

import json
import zipfile

import pytest
from click.testing import CliRunner

from workspace_bundler.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep user-level settings out of the tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("WORKSPACE_BUNDLER_LOG_PATH", raising=False)
    return home


def test_deps_json_lists_closure(runner, workspace_root):
    result = runner.invoke(cli, ["deps", "api", "--root", str(workspace_root), "--json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert sorted(d["specifier"] for d in payload["dependencies"]) == ["ansi-styles", "chalk", "left-pad"]
    assert payload["warnings"] == []


def test_deps_table_output(runner, workspace_root):
    result = runner.invoke(cli, ["deps", "api", "--root", str(workspace_root)])

    assert result.exit_code == 0, result.output
    assert "left-pad" in result.output
    assert "chalk" in result.output


def test_deps_strict_fails_on_warnings(runner, workspace_root, write_package):
    write_package(workspace_root / "packages" / "api", "api", dependencies={"@scope/util": "^1"})

    result = runner.invoke(cli, ["deps", "api", "--root", str(workspace_root), "--strict"])

    assert result.exit_code == 1
    assert "strict mode" in result.output


def test_bundle_creates_archive(runner, workspace_root):
    result = runner.invoke(cli, ["bundle", "api", "--root", str(workspace_root), "-o", "out/api.zip"])

    assert result.exit_code == 0, result.output
    archive = workspace_root / "out" / "api.zip"
    with zipfile.ZipFile(archive) as zf:
        assert "node_modules/left-pad/index.js" in zf.namelist()


def test_bundle_unknown_folder(runner, workspace_root):
    result = runner.invoke(cli, ["bundle", "nope", "--root", str(workspace_root)])

    assert result.exit_code == 1
    assert "Folder `nope` was not found." in result.output


def test_bundle_missing_workspaces_field(runner, tmp_path):
    (tmp_path / "package.json").write_text(json.dumps({"name": "solo"}))

    result = runner.invoke(cli, ["bundle", "solo", "--root", str(tmp_path)])

    assert result.exit_code == 1
    assert "workspaces" in result.output


def test_bundle_no_archive_keeps_directory(runner, workspace_root):
    result = runner.invoke(
        cli,
        ["bundle", "api", "--root", str(workspace_root), "--no-archive", "--layout", "layered", "--build-dir", "tmp"],
    )

    assert result.exit_code == 0, result.output
    assert (workspace_root / "tmp" / "api" / "node_modules" / "chalk").is_dir()
    assert not (workspace_root / "api.zip").exists()


def test_project_settings_are_used(runner, workspace_root):
    result = runner.invoke(cli, ["config", "set", "archive", "false", "--root", str(workspace_root)])
    assert result.exit_code == 0, result.output

    result = runner.invoke(cli, ["bundle", "api", "--root", str(workspace_root)])

    assert result.exit_code == 0, result.output
    assert (workspace_root / "_build" / "node_modules" / "left-pad").is_dir()
    assert not (workspace_root / "api.zip").exists()


def test_config_show(runner, workspace_root):
    result = runner.invoke(cli, ["config", "show", "--root", str(workspace_root)])

    assert result.exit_code == 0, result.output
    assert "build_dir" in result.output
    assert "_build" in result.output


def test_config_set_rejects_unknown_key(runner, workspace_root):
    result = runner.invoke(cli, ["config", "set", "colour", "blue", "--root", str(workspace_root)])

    assert result.exit_code == 1
    assert "Unknown setting" in result.output


def test_log_file_receives_jsonl(runner, workspace_root, tmp_path):
    log_file = tmp_path / "logs" / "run.jsonl"

    result = runner.invoke(cli, ["--log-file", str(log_file), "deps", "api", "--root", str(workspace_root)])

    assert result.exit_code == 0, result.output
    records = [json.loads(line) for line in log_file.read_text().splitlines()]
    assert any("Resolved 3 external modules" in record["message"] for record in records)
