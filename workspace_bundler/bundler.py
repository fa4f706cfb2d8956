"""Packaging orchestrator - turn one workspace package into a standalone bundle.

Sequence:
1. Discover the workspace and the target package
2. Copy the package tree into a fresh build directory
3. Run the package's build script (optional)
4. Resolve the external dependency closure
5. Copy every resolved module into the bundle's modules directory
6. Zip the build directory and remove it
"""

import logging
import os
import shlex
import shutil
import subprocess
import zipfile
from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

from .errors import BuildError
from .errors import ConfigurationError
from .errors import ManifestReadError
from .manifest import ManifestRegistry
from .models import PlacementWarning
from .models import ResolutionWarning
from .models import ResolvedDependency
from .models import WorkspaceManifest
from .providers import FilesystemProvider
from .providers import ModuleProvider
from .resolver import ResolutionResult
from .resolver import resolve
from .search_path import SearchPath
from .search_path import module_directory
from .settings import BundleOptions
from .specifier import directory_name
from .workspace import Workspace

logger = logging.getLogger(__name__)

CommandRunner = Callable[..., subprocess.CompletedProcess]


def safe_package_name(name: str) -> str:
    """Package name usable as a single path segment ("@scope/x" -> "@scope-x")."""
    return name.replace("/", "-")


@dataclass
class PackagePlan:
    """Everything known about the target before anything is copied."""

    workspace: Workspace
    package_directory: Path
    manifest: WorkspaceManifest
    registry: ManifestRegistry
    search_path: SearchPath


@dataclass
class BundleReport:
    """Result of a bundling run."""

    package_name: str
    build_dir: Path
    resolution: ResolutionResult
    copied: list[tuple[ResolvedDependency, Path]] = field(default_factory=list)
    placement_warnings: list[PlacementWarning] = field(default_factory=list)
    archive: Path | None = None

    @property
    def warnings(self) -> list[ResolutionWarning | PlacementWarning]:
        return [*self.resolution.warnings, *self.placement_warnings]


class Bundler:
    """Bundles workspace packages according to BundleOptions."""

    def __init__(
        self,
        root: Path,
        options: BundleOptions | None = None,
        provider: ModuleProvider | None = None,
        run_command: CommandRunner | None = None,
    ):
        self.root = Path(root).resolve()
        self.options = options or BundleOptions()
        self.provider = provider or FilesystemProvider()
        self.run_command = run_command or subprocess.run

    def plan(self, folder: str) -> PackagePlan:
        """Locate the target package and load the workspace manifests.

        Raises:
            ConfigurationError: Workspace invalid, folder unknown, or the
                target has no readable manifest
        """
        workspace = Workspace.discover(self.root)
        package_directory = workspace.find_package_directory(folder)

        try:
            manifest = self.provider.read_manifest(package_directory)
        except ManifestReadError as e:
            raise ConfigurationError(f"Package folder `{folder}` has no usable manifest: {e.reason}") from e

        registry = workspace.load_registry(self.provider)
        search_path = SearchPath(
            [
                package_directory / self.options.modules_dir,
                workspace.root / self.options.modules_dir,
            ]
        )
        return PackagePlan(
            workspace=workspace,
            package_directory=package_directory,
            manifest=manifest,
            registry=registry,
            search_path=search_path,
        )

    def resolve(self, plan: PackagePlan) -> ResolutionResult:
        return resolve(
            plan.manifest.dependencies,
            plan.registry,
            plan.search_path,
            self.provider,
            optional_dependencies=plan.manifest.optional_dependencies,
            required_by=plan.manifest.name,
            modules_dir=self.options.modules_dir,
        )

    def bundle(self, folder: str) -> BundleReport:
        """Run the full packaging sequence for one package folder.

        Returns:
            BundleReport with the closure, warnings and archive path

        Raises:
            ConfigurationError: Invalid workspace, target or options
            BuildError: The build script failed
        """
        plan = self.plan(folder)
        build_dir = self._build_dir(plan)
        # Without an archive the build directory is the output
        keep_build_dir = self.options.keep_build_dir or not self.options.archive

        self._reset_build_dir(build_dir)
        try:
            logger.info(f"Copying {plan.package_directory} to {build_dir}")
            shutil.copytree(plan.package_directory, build_dir, symlinks=True)

            if self.options.build and plan.manifest.has_script("build"):
                self._run_build(build_dir)

            resolution = self.resolve(plan)
            report = BundleReport(package_name=plan.manifest.name, build_dir=build_dir, resolution=resolution)
            modules_root = self._modules_root(plan, build_dir)
            report.copied, report.placement_warnings = self._copy_dependencies(plan, resolution, modules_root)

            if self.options.archive:
                report.archive = self._write_archive(build_dir, self._archive_path(plan))
            return report
        finally:
            if not keep_build_dir and build_dir.exists():
                logger.debug(f"Removing build directory {build_dir}")
                shutil.rmtree(build_dir)

    def _build_dir(self, plan: PackagePlan) -> Path:
        build_dir = (self.root / self.options.build_dir).resolve()
        if build_dir == self.root or self.root.is_relative_to(build_dir):
            raise ConfigurationError(f"Build directory {build_dir} would remove the workspace root")
        if build_dir.is_relative_to(plan.package_directory) or plan.package_directory.is_relative_to(build_dir):
            raise ConfigurationError(f"Build directory {build_dir} overlaps the package directory")
        return build_dir

    def _reset_build_dir(self, build_dir: Path) -> None:
        if build_dir.is_symlink() or build_dir.is_file():
            build_dir.unlink()
        elif build_dir.exists():
            shutil.rmtree(build_dir)

    def _run_build(self, build_dir: Path) -> None:
        command = self.options.build_command
        logger.info(f"Running '{command}' in {build_dir}")
        try:
            result = self.run_command(
                shlex.split(command),
                cwd=build_dir,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise BuildError(command, 127, str(e)) from e

        if result.returncode != 0:
            output = (result.stdout or "") + (result.stderr or "")
            raise BuildError(command, result.returncode, output)

    def _modules_root(self, plan: PackagePlan, build_dir: Path) -> Path:
        if self.options.layout == "layered":
            return build_dir / safe_package_name(plan.manifest.name) / self.options.modules_dir
        return build_dir / self.options.modules_dir

    def _install_path(self, dependency: ResolvedDependency, plan: PackagePlan) -> Path:
        """Destination relative to the bundle's modules directory.

        Mirrors the source location under whichever base search directory
        holds it, so a nested version stays nested under its dependent.
        """
        for base in plan.search_path:
            if dependency.source_directory.is_relative_to(base):
                return dependency.source_directory.relative_to(base)
        return Path(*directory_name(dependency.specifier).split("/"))

    def _copy_dependencies(
        self,
        plan: PackagePlan,
        resolution: ResolutionResult,
        modules_root: Path,
    ) -> tuple[list[tuple[ResolvedDependency, Path]], list[PlacementWarning]]:
        """Copy closure entries into the bundle.

        Entries are placed hoisted-first. An entry whose destination already
        holds a different source is nested under each bundled dependent
        instead, which is where a loader looks first.
        """
        modules_dir = self.options.modules_dir
        dependencies = sorted(
            resolution.dependencies,
            key=lambda dependency: plan.search_path.rank(dependency.source_directory, modules_dir),
        )

        placed: dict[Path, Path] = {}
        claimed: dict[Path, ResolvedDependency] = {}
        copied = []
        deferred = []
        for dependency in dependencies:
            source = dependency.source_directory
            if not source.exists():
                logger.warning(f"Source for {dependency.specifier} disappeared: {source}")
                continue

            destination = modules_root / self._install_path(dependency, plan)
            owner = claimed.get(destination)
            if owner is not None and owner.source_directory != source:
                deferred.append(dependency)
                continue
            claimed[destination] = dependency
            placed[source] = destination
            copied.append((dependency, self._copy_module(dependency, destination)))

        warnings = []
        for dependency in deferred:
            destinations = [
                placed[dependent] / modules_dir / module_directory(Path(), dependency.name)
                for dependent in dependency.dependents
                if dependent in placed
            ]
            if not destinations:
                owner = claimed[modules_root / self._install_path(dependency, plan)]
                logger.warning(f"{dependency.specifier} collides with {owner.specifier} and has no bundled dependent")
                warnings.append(
                    PlacementWarning(
                        specifier=dependency.specifier,
                        source_directory=dependency.source_directory,
                        reason=f"its location is taken by {owner.specifier} and no bundled module requires it",
                    )
                )
                continue
            placed.setdefault(dependency.source_directory, destinations[0])
            for destination in destinations:
                logger.info(f"{dependency.specifier} collides at the top level; nesting it in {destination.parent}")
                copied.append((dependency, self._copy_module(dependency, destination)))

        logger.info(f"Copied {len(copied)} modules into {modules_root}")
        return copied, warnings

    def _copy_module(self, dependency: ResolvedDependency, destination: Path) -> Path:
        if destination.is_symlink():
            destination.unlink()
        logger.debug(f"Copying {dependency.specifier}: {dependency.source_directory} -> {destination}")
        shutil.copytree(
            dependency.source_directory,
            destination,
            symlinks=False,
            ignore_dangling_symlinks=True,
            dirs_exist_ok=True,
        )
        return destination

    def _archive_path(self, plan: PackagePlan) -> Path:
        output = self.options.output or f"{safe_package_name(plan.manifest.name)}.zip"
        return (self.root / output).resolve()

    def _write_archive(self, build_dir: Path, archive: Path) -> Path:
        """Zip the build directory contents (stored, not compressed)."""
        if archive.is_relative_to(build_dir):
            raise ConfigurationError(f"Archive {archive} cannot be written inside the build directory")
        archive.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_STORED) as zf:
            for current, dirnames, filenames in os.walk(build_dir):
                dirnames.sort()
                for filename in sorted(filenames):
                    path = Path(current) / filename
                    if not path.exists():
                        logger.debug(f"Skipping dangling symlink {path}")
                        continue
                    zf.write(path, path.relative_to(build_dir).as_posix())
        logger.info(f"Wrote {archive}")
        return archive
