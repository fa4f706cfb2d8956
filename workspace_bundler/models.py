"""Data models for workspace bundling.

Types:
- WorkspaceManifest: parsed package.json (validated with pydantic)
- ResolvedDependency: one external module the bundle must contain
- UnresolvedDependencyWarning / ManifestWarning: non-fatal resolution findings
- PlacementWarning: a module the bundle layout could not place
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class WorkspaceManifest(BaseModel):
    """Declared metadata of a package.

    Attributes:
        name: Package name, possibly scoped (e.g. "@scope/util")
        version: Exact installed/declared version, if any
        dependencies: Dependency name -> version range
        optional_dependencies: Optional dependency name -> version range
        scripts: Script name -> command (only "build" is consulted)
        directory: Directory the manifest was read from
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str = Field(min_length=1)
    version: str | None = None
    dependencies: dict[str, str] = Field(default_factory=dict)
    optional_dependencies: dict[str, str] = Field(default_factory=dict, alias="optionalDependencies")
    scripts: dict[str, str] = Field(default_factory=dict)
    directory: Path | None = None

    def has_script(self, script: str) -> bool:
        return bool(self.scripts.get(script))


@dataclass(frozen=True)
class ResolvedDependency:
    """An external module to copy into the bundle.

    `specifier` is the dedup key and the bundle identity: the bare name, or
    `name@version` when several versions of the same name are needed.
    `dependents` lists the installed modules that require it.
    """

    specifier: str
    source_directory: Path
    name: str
    version: str | None = None
    dependents: tuple[Path, ...] = ()


@dataclass(frozen=True)
class UnresolvedDependencyWarning:
    """A declared dependency was not found in any search directory."""

    name: str
    required_by: str

    @property
    def message(self) -> str:
        return f"Dependency '{self.name}' (required by '{self.required_by}') was not found in any module directory"


@dataclass(frozen=True)
class ManifestWarning:
    """A resolved module's manifest could not be read; its dependencies were not followed."""

    path: Path
    reason: str

    @property
    def message(self) -> str:
        return f"Manifest {self.path} could not be read ({self.reason}); its dependencies were skipped"


ResolutionWarning = UnresolvedDependencyWarning | ManifestWarning


@dataclass(frozen=True)
class PlacementWarning:
    """A resolved module has no location in the bundle where its dependents can load it."""

    specifier: str
    source_directory: Path
    reason: str

    @property
    def message(self) -> str:
        return f"Module {self.specifier} from {self.source_directory} was not bundled: {self.reason}"
