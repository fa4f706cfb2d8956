"""Settings management for workspace-bundler.

Simple, scope-aware YAML settings. Project settings live in the workspace
root, global settings in the user's home; project wins.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from dataclasses import dataclass
from dataclasses import fields
from pathlib import Path
from typing import Any
from typing import Literal

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

Scope = Literal["project", "global"]
Layout = Literal["flat", "layered"]

SETTINGS_DIRNAME = ".workspace-bundler"
LAYOUTS = ("flat", "layered")


@dataclass
class BundleOptions:
    """Effective options for one bundling run.

    Attributes:
        build_dir: Scratch directory (relative to the workspace root)
        build: Run the package's build script before resolving
        build_command: Command used when the package has a build script
        layout: "flat" puts modules at <build>/node_modules, "layered" at
            <build>/<package>/node_modules
        modules_dir: Name of module directories
        output: Archive path (default: <package-name>.zip in the root)
        archive: Write a zip archive
        keep_build_dir: Leave the build directory in place afterwards
        strict: Treat resolution warnings as failures
    """

    build_dir: str = "_build"
    build: bool = True
    build_command: str = "yarn build"
    layout: Layout = "flat"
    modules_dir: str = "node_modules"
    output: str | None = None
    archive: bool = True
    keep_build_dir: bool = False
    strict: bool = False

    def __post_init__(self) -> None:
        if self.layout not in LAYOUTS:
            raise ConfigurationError(f"Unknown layout '{self.layout}' (expected one of: {', '.join(LAYOUTS)})")
        if not self.build_dir:
            raise ConfigurationError("build_dir must not be empty")

    def with_overrides(self, **overrides: Any) -> BundleOptions:
        """Return a copy with every non-None override applied."""
        values = asdict(self)
        values.update({key: value for key, value in overrides.items() if value is not None})
        return BundleOptions(**values)


@dataclass
class SettingsPaths:
    """Standard paths for settings files."""

    global_settings: Path
    project_settings: Path

    @classmethod
    def default(cls, root: Path | None = None) -> SettingsPaths:
        """Create default paths for a workspace root (default: cwd)."""
        root = root or Path.cwd()
        return cls(
            global_settings=Path.home() / SETTINGS_DIRNAME / "settings.yaml",
            project_settings=root / SETTINGS_DIRNAME / "settings.yaml",
        )


class BundlerSettings:
    """Scope-aware settings manager.

    Scope priority (most specific wins):
    1. project (<root>/.workspace-bundler/settings.yaml)
    2. global (~/.workspace-bundler/settings.yaml)

    Usage:
        settings = BundlerSettings(SettingsPaths.default(root))
        options = settings.get_bundle_options()
        settings.set_setting("layout", "layered", scope="project")
    """

    def __init__(self, paths: SettingsPaths | None = None) -> None:
        self.paths = paths or SettingsPaths.default()

    def get_merged_settings(self) -> dict[str, Any]:
        """Load and merge settings from all scopes."""
        result: dict[str, Any] = {}
        for path in [self.paths.global_settings, self.paths.project_settings]:
            result = self._deep_merge(result, self._read_file(path))
        return result

    def get_bundle_options(self) -> BundleOptions:
        """Build BundleOptions from merged settings; unknown keys are ignored."""
        settings = self.get_merged_settings()
        known = {f.name for f in fields(BundleOptions)}
        unknown = sorted(set(settings) - known)
        if unknown:
            logger.debug(f"Ignoring unknown settings: {', '.join(unknown)}")
        return BundleOptions(**{key: value for key, value in settings.items() if key in known})

    def set_setting(self, key: str, value: Any, scope: Scope = "project") -> None:
        """Persist a single setting at the given scope."""
        known = {f.name for f in fields(BundleOptions)}
        if key not in known:
            raise ConfigurationError(f"Unknown setting '{key}'")
        path = self._get_scope_path(scope)
        settings = self._read_file(path)
        settings[key] = value
        # Validate before writing
        merged = {k: v for k, v in self.get_merged_settings().items() if k in known}
        BundleOptions(**{**merged, key: value})
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(settings, f, default_flow_style=False)

    def _get_scope_path(self, scope: Scope) -> Path:
        if scope == "global":
            return self.paths.global_settings
        return self.paths.project_settings

    def _read_file(self, path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                content = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Skipping malformed settings file {path}: {e}")
            return {}
        if not isinstance(content, dict):
            logger.warning(f"Skipping settings file {path}: expected a mapping")
            return {}
        return content

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dicts, overlay wins."""
        result = base.copy()
        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result


def load_bundle_options(root: Path, **overrides: Any) -> BundleOptions:
    """Settings for `root` with command-line overrides applied (None = not given)."""
    settings = BundlerSettings(SettingsPaths.default(root))
    return settings.get_bundle_options().with_overrides(**overrides)
