"""Manifest registry - index of workspace package manifests by name.

Loaded once per packaging run and read-only afterwards, so several
resolution runs may share one registry.
"""

import logging
from collections.abc import Iterable
from collections.abc import Iterator
from collections.abc import Mapping
from pathlib import Path

from .errors import ManifestReadError
from .models import WorkspaceManifest
from .providers import FilesystemProvider
from .providers import ModuleProvider

logger = logging.getLogger(__name__)


class ManifestRegistry(Mapping[str, WorkspaceManifest]):
    """Workspace package manifests keyed by package name.

    A name present here is a local workspace package; everything else the
    resolver meets is external.
    """

    def __init__(self, manifests: Iterable[WorkspaceManifest] = ()):
        self._manifests: dict[str, WorkspaceManifest] = {}
        for manifest in manifests:
            if manifest.name in self._manifests:
                logger.warning(
                    f"Duplicate workspace package name '{manifest.name}' "
                    f"({manifest.directory}); keeping {self._manifests[manifest.name].directory}"
                )
                continue
            self._manifests[manifest.name] = manifest

    @classmethod
    def load(cls, directories: Iterable[Path], provider: ModuleProvider | None = None) -> "ManifestRegistry":
        """Read the manifest of every discovered package directory.

        Best effort: a directory without a manifest, or with one that fails
        to parse, is not part of the installable workspace (e.g. a scratch
        folder matched by a glob) and is skipped.

        Args:
            directories: Candidate workspace package directories
            provider: Manifest source (default: real filesystem)

        Returns:
            Registry of the directories that hold valid manifests
        """
        provider = provider or FilesystemProvider()
        manifests = []
        for directory in directories:
            try:
                manifests.append(provider.read_manifest(directory))
            except ManifestReadError as e:
                logger.debug(f"Skipping workspace directory {directory}: {e.reason}")
                continue

        registry = cls(manifests)
        logger.debug(f"Loaded {len(registry)} workspace manifests")
        return registry

    def __getitem__(self, name: str) -> WorkspaceManifest:
        return self._manifests[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._manifests)

    def __len__(self) -> int:
        return len(self._manifests)

    def __repr__(self) -> str:
        return f"ManifestRegistry({sorted(self._manifests)})"
