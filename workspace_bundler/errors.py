"""Exception taxonomy for workspace bundling.

Fatal problems are exceptions; anything found mid-traversal is reported as a
warning value on the resolution result instead (see resolver.py).
"""


class BundlerError(Exception):
    """Base class for all workspace-bundler errors."""


class ConfigurationError(BundlerError):
    """Workspace or target package configuration is unusable.

    Raised before resolution starts: missing root manifest, missing or
    malformed `workspaces` field, target folder not found.
    """


class ManifestReadError(BundlerError):
    """A manifest could not be read or parsed.

    Always recovered by the caller: the directory is treated as
    "not a package".
    """

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read manifest {path}: {reason}")


class BuildError(BundlerError):
    """The package's own build command failed."""

    def __init__(self, command: str, returncode: int, output: str = ""):
        self.command = command
        self.returncode = returncode
        self.output = output
        super().__init__(f"Build command '{command}' failed with exit code {returncode}")
