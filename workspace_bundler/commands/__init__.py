"""CLI commands."""

from .bundle import bundle_cmd
from .config import config
from .deps import deps_cmd

__all__ = ["bundle_cmd", "config", "deps_cmd"]
