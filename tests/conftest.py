"""Shared fixtures for workspace-bundler tests."""

import json
from pathlib import Path

import pytest

from workspace_bundler.errors import ManifestReadError
from workspace_bundler.models import WorkspaceManifest


class InMemoryProvider:
    """ModuleProvider backed by a dict of directory -> manifest data.

    A value of None marks a module directory whose manifest is unreadable.
    """

    def __init__(self, modules: dict[Path, dict | None] | None = None):
        self.modules: dict[Path, dict | None] = dict(modules or {})

    def add(self, directory: Path, name: str, version: str | None = None, dependencies: dict | None = None, **extra):
        data = {"name": name, "dependencies": dependencies or {}, **extra}
        if version is not None:
            data["version"] = version
        self.modules[Path(directory)] = data
        return Path(directory)

    def is_module(self, directory: Path) -> bool:
        return Path(directory) in self.modules

    def read_manifest(self, directory: Path, default_name: str | None = None) -> WorkspaceManifest:
        directory = Path(directory)
        data = self.modules.get(directory)
        if data is None:
            raise ManifestReadError(directory / "package.json", "no manifest file")
        data = dict(data)
        if default_name and not data.get("name"):
            data["name"] = default_name
        return WorkspaceManifest.model_validate({**data, "directory": directory})


@pytest.fixture
def provider():
    return InMemoryProvider()


def _write_manifest(directory: Path, data: dict) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "package.json").write_text(json.dumps(data, indent=2))
    return directory


@pytest.fixture
def write_package():
    """Write a package.json into a directory (created if needed)."""

    def _write(directory: Path, name: str | None, version: str | None = "1.0.0", dependencies=None, **extra):
        data = dict(extra)
        if name is not None:
            data["name"] = name
        if version is not None:
            data["version"] = version
        if dependencies:
            data["dependencies"] = dependencies
        return _write_manifest(directory, data)

    return _write


@pytest.fixture
def workspace_root(tmp_path: Path, write_package):
    """A small yarn-style workspace on disk.

    Layout:
    - package.json (workspaces: packages/*)
    - packages/api       -> depends on left-pad, shared
    - packages/shared    -> workspace package, depends on chalk
    - packages/scratch   -> no manifest (not a package)
    - node_modules/left-pad, node_modules/chalk, node_modules/ansi-styles
    """
    root = tmp_path / "repo"
    _write_manifest(root, {"name": "monorepo", "private": True, "workspaces": ["packages/*"]})

    write_package(
        root / "packages" / "api",
        "api",
        dependencies={"left-pad": "^1.0.0", "shared": "*"},
        main="index.js",
    )
    (root / "packages" / "api" / "index.js").write_text("module.exports = require('left-pad');\n")
    write_package(root / "packages" / "shared", "shared", dependencies={"chalk": "^4.0.0"})
    (root / "packages" / "scratch").mkdir(parents=True)

    modules = root / "node_modules"
    write_package(modules / "left-pad", "left-pad", version="1.3.0")
    (modules / "left-pad" / "index.js").write_text("module.exports = () => {};\n")
    write_package(modules / "chalk", "chalk", version="4.1.2", dependencies={"ansi-styles": "^4.1.0"})
    write_package(modules / "ansi-styles", "ansi-styles", version="4.3.0")
    return root
