"""Closure - the deduplicated set of external modules a package needs."""

from collections.abc import Iterator
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

from .models import ResolvedDependency
from .specifier import format_specifier

Rank = tuple[int, int]


@dataclass
class _Entry:
    source_directory: Path
    rank: Rank
    dependents: list[Path] = field(default_factory=list)


class Closure:
    """External modules keyed by specifier, built incrementally.

    Entries are grouped by name and then by version. While a name has a
    single version its specifier is the bare name; once a second version is
    added every entry for that name renders as `name@version`, so the
    specifiers stay unique without a post-pass.

    When the same (name, version) is installed in several directories the
    entry keeps the best-ranked one (lowest rank: hoisted before nested,
    earlier search directory before later). Ties keep the first reached.
    """

    def __init__(self) -> None:
        self._versions_by_name: dict[str, dict[str | None, _Entry]] = {}
        self._key_by_directory: dict[Path, tuple[str, str | None]] = {}

    def add(
        self,
        name: str,
        version: str | None,
        source_directory: Path,
        rank: Rank = (0, 0),
        dependent: Path | None = None,
    ) -> bool:
        """Record a resolved module.

        Args:
            name: Module name
            version: Installed version, None if unknown
            source_directory: Where the module is installed
            rank: Placement rank of `source_directory`, lower is better
            dependent: Directory of the external module that required it
                (None when required by a workspace package)

        Returns:
            True if this added a new entry, False if (name, version) was
            already present
        """
        self._key_by_directory[source_directory] = (name, version)
        versions = self._versions_by_name.setdefault(name, {})
        entry = versions.get(version)
        if entry is None:
            versions[version] = _Entry(source_directory, rank)
            self.add_dependent(source_directory, dependent)
            return True
        if rank < entry.rank:
            entry.source_directory = source_directory
            entry.rank = rank
        self.add_dependent(source_directory, dependent)
        return False

    def add_dependent(self, source_directory: Path, dependent: Path | None) -> None:
        """Note that `dependent` requires the module installed at `source_directory`."""
        key = self._key_by_directory.get(source_directory)
        if key is None or dependent is None:
            return
        name, version = key
        dependents = self._versions_by_name[name][version].dependents
        if dependent not in dependents:
            dependents.append(dependent)

    def entries(self) -> list[ResolvedDependency]:
        """Materialize the entries in insertion order."""
        result = []
        for name, versions in self._versions_by_name.items():
            needs_disambiguation = len(versions) > 1
            for version, entry in versions.items():
                result.append(
                    ResolvedDependency(
                        specifier=format_specifier(name, version, needs_disambiguation),
                        source_directory=entry.source_directory,
                        name=name,
                        version=version,
                        dependents=tuple(entry.dependents),
                    )
                )
        return result

    def specifiers(self) -> list[str]:
        return [entry.specifier for entry in self.entries()]

    def get(self, specifier: str) -> ResolvedDependency | None:
        for entry in self.entries():
            if entry.specifier == specifier:
                return entry
        return None

    def names(self) -> set[str]:
        return set(self._versions_by_name)

    def __iter__(self) -> Iterator[ResolvedDependency]:
        return iter(self.entries())

    def __len__(self) -> int:
        return sum(len(versions) for versions in self._versions_by_name.values())

    def __contains__(self, specifier: object) -> bool:
        return isinstance(specifier, str) and self.get(specifier) is not None

    def __repr__(self) -> str:
        return f"Closure({self.specifiers()})"
