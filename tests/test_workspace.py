"""Tests for workspace discovery."""

import json
from pathlib import Path

import pytest

from workspace_bundler.errors import ConfigurationError
from workspace_bundler.workspace import Workspace
from workspace_bundler.workspace import expand_patterns
from workspace_bundler.workspace import workspace_patterns


def test_discover_lists_package_directories(workspace_root):
    workspace = Workspace.discover(workspace_root)

    assert workspace.package_directories == [
        Path("packages/api"),
        Path("packages/scratch"),
        Path("packages/shared"),
    ]


def test_find_package_directory_by_folder_name(workspace_root):
    workspace = Workspace.discover(workspace_root)

    assert workspace.find_package_directory("api") == workspace_root.resolve() / "packages" / "api"
    assert workspace.find_package_directory("packages/shared") == workspace_root.resolve() / "packages" / "shared"


def test_unknown_folder_is_configuration_error(workspace_root):
    workspace = Workspace.discover(workspace_root)

    with pytest.raises(ConfigurationError, match="Folder `nope` was not found"):
        workspace.find_package_directory("nope")


def test_load_registry_skips_non_packages(workspace_root):
    registry = Workspace.discover(workspace_root).load_registry()

    assert sorted(registry) == ["api", "shared"]


def test_object_form_of_workspaces():
    assert workspace_patterns({"workspaces": {"packages": ["apps/*"], "nohoist": ["**/x"]}}) == ["apps/*"]


@pytest.mark.parametrize(
    "manifest",
    [
        {"name": "root"},
        {"workspaces": []},
        {"workspaces": "packages/*"},
        {"workspaces": {"nohoist": ["x"]}},
        {"workspaces": [1, 2]},
    ],
)
def test_invalid_workspaces_field(manifest):
    with pytest.raises(ConfigurationError):
        workspace_patterns(manifest)


def test_missing_root_manifest(tmp_path):
    with pytest.raises(ConfigurationError, match="No package.json"):
        Workspace.discover(tmp_path)


def test_unparseable_root_manifest(tmp_path):
    (tmp_path / "package.json").write_text("{")

    with pytest.raises(ConfigurationError, match="Cannot read workspace manifest"):
        Workspace.discover(tmp_path)


def test_expand_patterns_handles_negation_and_files(tmp_path):
    for name in ("a", "b", "legacy"):
        (tmp_path / "packages" / name).mkdir(parents=True)
    (tmp_path / "packages" / "README.md").write_text("docs")
    (tmp_path / "tools" / "cli").mkdir(parents=True)

    result = expand_patterns(tmp_path, ["./packages/*", "tools/cli/", "!packages/legacy"])

    assert result == [Path("packages/a"), Path("packages/b"), Path("tools/cli")]


def test_expand_patterns_ignores_node_modules(tmp_path):
    (tmp_path / "packages" / "a" / "node_modules" / "dep").mkdir(parents=True)
    (tmp_path / "package.json").write_text(json.dumps({"workspaces": ["packages/**"]}))

    result = expand_patterns(tmp_path, ["packages/**"])

    assert Path("packages/a") in result
    assert not any("node_modules" in p.parts for p in result)
