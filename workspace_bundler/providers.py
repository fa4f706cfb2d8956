"""Filesystem access seam for the resolver.

The resolver and registry never touch the filesystem directly; they ask a
ModuleProvider. FilesystemProvider is the real implementation, tests inject
an in-memory one.
"""

import json
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from .errors import ManifestReadError
from .models import WorkspaceManifest

MANIFEST_FILENAME = "package.json"


class ModuleProvider(Protocol):
    """Answers the two questions resolution needs about a directory."""

    def is_module(self, directory: Path) -> bool:
        """Return True if `directory` holds an installed module."""
        ...

    def read_manifest(self, directory: Path, default_name: str | None = None) -> WorkspaceManifest:
        """Read the manifest in `directory`.

        Raises:
            ManifestReadError: Manifest missing or unparseable
        """
        ...


class FilesystemProvider:
    """ModuleProvider over real directories containing package.json files."""

    def __init__(self, manifest_filename: str = MANIFEST_FILENAME):
        self.manifest_filename = manifest_filename

    def is_module(self, directory: Path) -> bool:
        return directory.is_dir()

    def read_manifest(self, directory: Path, default_name: str | None = None) -> WorkspaceManifest:
        """Parse `<directory>/package.json` into a WorkspaceManifest.

        Args:
            directory: Package or module directory
            default_name: Name to use when the manifest has no "name" field
                (installed modules occasionally ship without one)

        Returns:
            Parsed manifest with `directory` set

        Raises:
            ManifestReadError: File missing, not JSON, not an object, or
                failing validation
        """
        path = directory / self.manifest_filename
        if not path.is_file():
            raise ManifestReadError(path, "no manifest file")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ManifestReadError(path, str(e)) from e

        if not isinstance(data, dict):
            raise ManifestReadError(path, "manifest is not a JSON object")

        if default_name and not data.get("name"):
            data["name"] = default_name

        try:
            return WorkspaceManifest.model_validate({**data, "directory": directory})
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or "manifest"
            raise ManifestReadError(path, f"{location}: {first['msg']}") from e

    def __repr__(self) -> str:
        return f"FilesystemProvider({self.manifest_filename!r})"
