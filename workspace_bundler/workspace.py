"""Workspace discovery - find the packages a workspace root declares.

The root package.json must carry a `workspaces` field: either a list of glob
patterns, or an object with a `packages` list. Patterns starting with "!"
exclude directories matched by earlier patterns.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import Any

from .errors import ConfigurationError
from .manifest import ManifestRegistry
from .providers import MANIFEST_FILENAME
from .providers import ModuleProvider

logger = logging.getLogger(__name__)

IGNORED_DIRECTORIES = {"node_modules", ".git"}


def read_root_manifest(root: Path, manifest_filename: str = MANIFEST_FILENAME) -> dict[str, Any]:
    """Read the workspace root manifest as raw JSON.

    Raises:
        ConfigurationError: Missing, unreadable, or not a JSON object
    """
    path = root / manifest_filename
    if not path.is_file():
        raise ConfigurationError(f"No {manifest_filename} found in workspace root {root}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read workspace manifest {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Workspace manifest {path} is not a JSON object")
    return data


def workspace_patterns(root_manifest: dict[str, Any]) -> list[str]:
    """Extract the workspace glob patterns from a root manifest.

    Raises:
        ConfigurationError: `workspaces` missing or of the wrong shape
    """
    workspaces = root_manifest.get("workspaces")
    if not workspaces:
        raise ConfigurationError("You must specify a `workspaces` field in your workspace's package.json.")

    if isinstance(workspaces, dict):
        workspaces = workspaces.get("packages")

    if not isinstance(workspaces, list) or not all(isinstance(p, str) for p in workspaces):
        raise ConfigurationError(
            "The `workspaces` field in your package.json must either be an array "
            "or an object containing an array with the key `packages`."
        )
    return workspaces


def expand_patterns(root: Path, patterns: list[str]) -> list[Path]:
    """Expand workspace globs into directories relative to `root`.

    Returns:
        Sorted, deduplicated directories (relative paths)
    """
    matched: set[Path] = set()
    for pattern in patterns:
        negate = pattern.startswith("!")
        pattern = pattern[1:] if negate else pattern
        pattern = pattern.strip().rstrip("/")
        if pattern.startswith("./"):
            pattern = pattern[2:]
        if not pattern:
            continue

        try:
            candidates = list(root.glob(pattern))
        except (ValueError, NotImplementedError) as e:
            raise ConfigurationError(f"Invalid workspace pattern '{pattern}': {e}") from e

        directories = {
            candidate.relative_to(root)
            for candidate in candidates
            if candidate.is_dir() and not IGNORED_DIRECTORIES.intersection(candidate.relative_to(root).parts)
        }
        if negate:
            matched -= directories
        else:
            matched |= directories

    return sorted(matched)


@dataclass
class Workspace:
    """A discovered workspace root and its package directories."""

    root: Path
    manifest: dict[str, Any]
    package_directories: list[Path] = field(default_factory=list)

    @classmethod
    def discover(cls, root: Path, manifest_filename: str = MANIFEST_FILENAME) -> Workspace:
        """Read the root manifest and expand its workspace patterns.

        Args:
            root: Workspace root directory
            manifest_filename: Manifest file name

        Returns:
            Workspace with package directories relative to `root`

        Raises:
            ConfigurationError: Root manifest missing or `workspaces` invalid
        """
        root = Path(root).resolve()
        manifest = read_root_manifest(root, manifest_filename)
        directories = expand_patterns(root, workspace_patterns(manifest))
        logger.debug(f"Discovered {len(directories)} workspace directories under {root}")
        return cls(root=root, manifest=manifest, package_directories=directories)

    def find_package_directory(self, folder: str) -> Path:
        """Locate the target package directory by its folder name.

        `folder` matches a directory's last path segment, or its full path
        relative to the root.

        Returns:
            Absolute package directory

        Raises:
            ConfigurationError: No workspace directory matches
        """
        wanted = folder.strip().rstrip("/")
        for directory in self.package_directories:
            if directory.name == wanted or directory.as_posix() == wanted:
                return self.root / directory
        raise ConfigurationError(f"Folder `{folder}` was not found.")

    def absolute_directories(self) -> list[Path]:
        return [self.root / directory for directory in self.package_directories]

    def load_registry(self, provider: ModuleProvider | None = None) -> ManifestRegistry:
        return ManifestRegistry.load(self.absolute_directories(), provider=provider)
