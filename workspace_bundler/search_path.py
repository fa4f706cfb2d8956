"""Search path stack - where installed modules are looked up.

Search order is explicit: the caller passes the directories, highest
precedence first, mirroring how a host module loader walks from the
nearest `node_modules` outwards to the workspace root. Nothing here walks
the filesystem on its own.
"""

from collections.abc import Iterable
from collections.abc import Iterator
from pathlib import Path

from .providers import ModuleProvider


def module_directory(base: Path, name: str) -> Path:
    """Directory a module named `name` would occupy under `base`.

    Scoped names keep their scope folder: "@scope/util" -> base/@scope/util.
    """
    return base.joinpath(*name.split("/"))


class SearchPath:
    """Immutable ordered list of module directories, highest precedence first."""

    def __init__(self, directories: Iterable[Path]):
        self._directories: tuple[Path, ...] = tuple(Path(d) for d in directories)

    def find(self, name: str, provider: ModuleProvider) -> Path | None:
        """Locate an installed module.

        Searches in precedence order; the first directory holding the module
        wins, so a package-local copy shadows a hoisted one.

        Args:
            name: Module name (scoped names allowed)
            provider: Directory checks

        Returns:
            Module directory if found, None otherwise
        """
        for base in self._directories:
            candidate = module_directory(base, name)
            if provider.is_module(candidate):
                return candidate
        return None

    def for_module(self, directory: Path, modules_dir: str) -> "SearchPath":
        """Search path seen by the module installed at `directory`.

        A host loader resolves a module's imports from the module's own
        location: its nested modules directory first, then every enclosing
        modules directory on the way up, then whichever base directories sit
        above it. Base directories belonging to unrelated packages (another
        package's local `node_modules`) are not visible.

        Args:
            directory: Module (or workspace package) directory
            modules_dir: Name of module directories ("node_modules")

        Returns:
            A new SearchPath, nearest directory first
        """
        directory = Path(directory)
        ordered = [directory / modules_dir]
        for parent in directory.parents:
            if parent.name == modules_dir and any(parent.is_relative_to(base) for base in self._directories):
                ordered.append(parent)
        ordered += [base for base in self._directories if directory.is_relative_to(base.parent)]
        return SearchPath(dict.fromkeys(ordered))

    def rank(self, directory: Path, modules_dir: str) -> tuple[int, int]:
        """Sort key for an installed module: (nesting depth, base index).

        Depth counts the modules directories between the module and the base
        directory holding it, so a hoisted copy ranks before a nested one and
        a copy in an earlier base ranks before one in a later base. Modules
        outside every base rank last.
        """
        directory = Path(directory)
        for index, base in enumerate(self._directories):
            if directory.is_relative_to(base):
                return directory.relative_to(base).parts.count(modules_dir), index
        return len(directory.parts), len(self._directories)

    @property
    def directories(self) -> tuple[Path, ...]:
        return self._directories

    def __iter__(self) -> Iterator[Path]:
        return iter(self._directories)

    def __len__(self) -> int:
        return len(self._directories)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SearchPath):
            return NotImplemented
        return self._directories == other._directories

    def __hash__(self) -> int:
        return hash(self._directories)

    def __repr__(self) -> str:
        return f"SearchPath({[str(d) for d in self._directories]})"
