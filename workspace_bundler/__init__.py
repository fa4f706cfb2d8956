"""workspace-bundler - package a workspace package with its dependency closure.

Public API:
- WorkspaceManifest / ManifestRegistry: workspace package manifests
- SearchPath: ordered module directories, nearest first
- ClosureResolver / resolve: compute the external dependency closure
- Closure / ResolvedDependency: the deduplicated result
- format_specifier / parse_specifier: bundle identities
- Workspace / Bundler: discovery and the packaging sequence
"""

from .bundler import Bundler
from .bundler import BundleReport
from .closure import Closure
from .errors import BuildError
from .errors import BundlerError
from .errors import ConfigurationError
from .errors import ManifestReadError
from .manifest import ManifestRegistry
from .models import ManifestWarning
from .models import ResolvedDependency
from .models import UnresolvedDependencyWarning
from .models import WorkspaceManifest
from .providers import FilesystemProvider
from .providers import ModuleProvider
from .resolver import ClosureResolver
from .resolver import External
from .resolver import Local
from .resolver import ResolutionResult
from .resolver import resolve
from .search_path import SearchPath
from .settings import BundleOptions
from .specifier import format_specifier
from .specifier import parse_specifier
from .workspace import Workspace

__all__ = [
    "BuildError",
    "BundleOptions",
    "BundleReport",
    "Bundler",
    "BundlerError",
    "Closure",
    "ClosureResolver",
    "ConfigurationError",
    "External",
    "FilesystemProvider",
    "Local",
    "ManifestReadError",
    "ManifestRegistry",
    "ManifestWarning",
    "ModuleProvider",
    "ResolutionResult",
    "ResolvedDependency",
    "SearchPath",
    "UnresolvedDependencyWarning",
    "Workspace",
    "WorkspaceManifest",
    "format_specifier",
    "parse_specifier",
    "resolve",
]
