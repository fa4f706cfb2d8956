"""Closure resolver - which external modules does a workspace package need?

Walks the dependency graph from a package's declared dependencies:
- Names found in the manifest registry are local workspace packages. They
  are never bundled themselves, but their dependencies are followed.
- Every other name is external and is looked up in the search path stack,
  nearest directory first. Found modules go into the closure.
- Dependencies of a module, local or external, are looked up from the
  module's own location, the way a host loader does it: its nested modules
  directory, then enclosing modules directories, then the base directories
  above it. What the requirer could see plays no part.

Traversal uses an explicit worklist. Each local name is expanded once per
run and each external (name, directory) pair once per run, so dependency
cycles terminate.
"""

import logging
from collections.abc import Iterable
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

from .closure import Closure
from .errors import ManifestReadError
from .models import ManifestWarning
from .models import ResolutionWarning
from .models import ResolvedDependency
from .models import UnresolvedDependencyWarning
from .models import WorkspaceManifest
from .providers import FilesystemProvider
from .providers import ModuleProvider
from .search_path import SearchPath
from .specifier import is_valid_name

logger = logging.getLogger(__name__)

DEFAULT_MODULES_DIR = "node_modules"
ROOT_REQUIRER = "<root>"


@dataclass(frozen=True)
class Local:
    """A name that belongs to a workspace package."""

    manifest: WorkspaceManifest


@dataclass(frozen=True)
class External:
    """A name resolved to an installed module directory."""

    directory: Path


@dataclass(frozen=True)
class _WorkItem:
    name: str
    search_path: SearchPath
    required_by: str
    optional: bool = False
    dependent: Path | None = None


@dataclass
class ResolutionResult:
    """Outcome of one resolution run.

    Attributes:
        closure: Every external module that was resolved
        warnings: Non-fatal findings (unresolved names, unreadable manifests)
    """

    closure: Closure
    warnings: list[ResolutionWarning] = field(default_factory=list)

    @property
    def dependencies(self) -> list[ResolvedDependency]:
        return self.closure.entries()

    @property
    def unresolved(self) -> list[str]:
        names = []
        for warning in self.warnings:
            if isinstance(warning, UnresolvedDependencyWarning) and warning.name not in names:
                names.append(warning.name)
        return names

    @property
    def ok(self) -> bool:
        return not self.warnings


class ClosureResolver:
    """Computes dependency closures against one registry and search path.

    The resolver holds no per-run state; every `resolve` call builds its own
    visited set and closure, so one instance can serve several targets.
    """

    def __init__(
        self,
        registry: Mapping[str, WorkspaceManifest],
        search_path: SearchPath,
        provider: ModuleProvider | None = None,
        modules_dir: str = DEFAULT_MODULES_DIR,
    ):
        self.registry = registry
        self.search_path = search_path
        self.provider = provider or FilesystemProvider()
        self.modules_dir = modules_dir

    def classify(self, name: str, search_path: SearchPath | None = None) -> Local | External | None:
        """Classify a dependency name.

        Returns:
            Local for workspace packages, External with the winning module
            directory, or None if the name cannot be located
        """
        if name in self.registry:
            return Local(self.registry[name])
        if not is_valid_name(name):
            return None
        directory = (search_path or self.search_path).find(name, self.provider)
        if directory is None:
            return None
        return External(directory)

    def resolve(
        self,
        dependencies: Iterable[str],
        optional_dependencies: Iterable[str] = (),
        required_by: str = ROOT_REQUIRER,
    ) -> ResolutionResult:
        """Resolve the closure of a package's direct dependencies.

        Args:
            dependencies: Direct dependency names (a name -> range mapping
                works too)
            optional_dependencies: Direct optional dependency names; these
                are followed the same way but are not reported when missing
            required_by: Name of the package being resolved, used in
                warnings. If it is a workspace package it is treated as
                already expanded.

        Returns:
            ResolutionResult with the closure and any warnings
        """
        closure = Closure()
        warnings: list[ResolutionWarning] = []
        reported: set[tuple[str, str]] = set()
        # name -> source directories already expanded (None for local packages)
        visited: dict[str, set[Path | None]] = {}
        if required_by in self.registry:
            visited[required_by] = {None}

        worklist: list[_WorkItem] = []
        self._push(worklist, dependencies, optional_dependencies, self.search_path, required_by)

        while worklist:
            item = worklist.pop()
            name = item.name

            if name in self.registry:
                if name in visited:
                    continue
                visited[name] = {None}
                manifest = self.registry[name]
                logger.debug(f"[deps:resolve] {name} -> local workspace package")
                local_path = (
                    self.search_path.for_module(manifest.directory, self.modules_dir)
                    if manifest.directory is not None
                    else self.search_path
                )
                self._push(worklist, manifest.dependencies, manifest.optional_dependencies, local_path, name)
                continue

            classification = self.classify(name, item.search_path)
            if not isinstance(classification, External):
                if item.optional:
                    logger.debug(f"[deps:resolve] optional {name} (from {item.required_by}) not installed, skipping")
                elif (name, item.required_by) not in reported:
                    reported.add((name, item.required_by))
                    logger.info(f"Could not resolve '{name}' required by '{item.required_by}'")
                    warnings.append(UnresolvedDependencyWarning(name=name, required_by=item.required_by))
                continue

            directory = classification.directory
            seen = visited.setdefault(name, set())
            if directory in seen:
                closure.add_dependent(directory, item.dependent)
                continue
            seen.add(directory)
            rank = self.search_path.rank(directory, self.modules_dir)

            try:
                module_manifest = self.provider.read_manifest(directory, default_name=name)
            except ManifestReadError as e:
                logger.info(f"Not following dependencies of {name}: {e}")
                warnings.append(ManifestWarning(path=e.path, reason=e.reason))
                closure.add(name, None, directory, rank, item.dependent)
                continue

            closure.add(name, module_manifest.version, directory, rank, item.dependent)
            logger.debug(f"[deps:resolve] {name}@{module_manifest.version} -> {directory}")
            self._push(
                worklist,
                module_manifest.dependencies,
                module_manifest.optional_dependencies,
                self.search_path.for_module(directory, self.modules_dir),
                name,
                dependent=directory,
            )

        logger.info(f"Resolved {len(closure)} external modules for {required_by} ({len(warnings)} warnings)")
        return ResolutionResult(closure=closure, warnings=warnings)

    @staticmethod
    def _push(
        worklist: list[_WorkItem],
        dependencies: Iterable[str],
        optional_dependencies: Iterable[str],
        search_path: SearchPath,
        required_by: str,
        dependent: Path | None = None,
    ) -> None:
        # Reversed so popping from the end visits names in declaration order
        optional = list(optional_dependencies)
        items = [
            _WorkItem(name, search_path, required_by, dependent=dependent) for name in dependencies if name not in optional
        ]
        items += [_WorkItem(name, search_path, required_by, optional=True, dependent=dependent) for name in optional]
        worklist.extend(reversed(items))


def resolve(
    dependencies: Iterable[str],
    registry: Mapping[str, WorkspaceManifest],
    search_path: SearchPath | Iterable[Path],
    provider: ModuleProvider | None = None,
    *,
    optional_dependencies: Iterable[str] = (),
    required_by: str = ROOT_REQUIRER,
    modules_dir: str = DEFAULT_MODULES_DIR,
) -> ResolutionResult:
    """Resolve a dependency closure in one call.

    Args:
        dependencies: Direct dependency names of the target package
        registry: Workspace manifests by name
        search_path: Module directories, highest precedence first
        provider: Filesystem seam (default: real filesystem)
        optional_dependencies: Direct optional dependency names
        required_by: Name of the target package
        modules_dir: Name of nested module directories

    Returns:
        ResolutionResult with the closure and warnings

    Example:
        >>> result = resolve({"left-pad": "^1.0.0"}, registry, [root / "node_modules"])
        >>> [d.specifier for d in result.dependencies]
        ['left-pad']
    """
    if not isinstance(search_path, SearchPath):
        search_path = SearchPath(search_path)
    resolver = ClosureResolver(registry, search_path, provider=provider, modules_dir=modules_dir)
    return resolver.resolve(dependencies, optional_dependencies, required_by=required_by)
