"""Specifier formatting.

A specifier is the bundle identity of a resolved module: the bare name, or
`name@version` when more than one version of that name must ship. Scoped
names start with "@", so only an "@" after position 0 can delimit a version.
"""

VERSION_DELIMITER = "@"


def format_specifier(name: str, version: str | None, needs_disambiguation: bool) -> str:
    """Render a directory-safe specifier.

    Args:
        name: Module name, possibly scoped ("@scope/util")
        version: Exact installed version, if known
        needs_disambiguation: True when another version of `name` is also
            in the closure

    Returns:
        `name`, or `name@version` when disambiguating and a version is known

    Examples:
        >>> format_specifier("lodash", "4.17.21", False)
        'lodash'
        >>> format_specifier("lodash", "4.17.21", True)
        'lodash@4.17.21'
        >>> format_specifier("@scope/util", "1.0.0", True)
        '@scope/util@1.0.0'
    """
    if not name or name == VERSION_DELIMITER:
        raise ValueError(f"Invalid module name: {name!r}")
    # "@scope" alone would parse back as a scope with no package
    if name.startswith(VERSION_DELIMITER) and "/" not in name:
        raise ValueError(f"Scoped module name without a package part: {name!r}")
    if needs_disambiguation and version:
        return f"{name}{VERSION_DELIMITER}{version}"
    return name


def parse_specifier(specifier: str) -> tuple[str, str | None]:
    """Split a specifier back into (name, version).

    A leading "@" is a scope marker, never a version delimiter.

    Examples:
        >>> parse_specifier("lodash@4.17.0")
        ('lodash', '4.17.0')
        >>> parse_specifier("@scope/util")
        ('@scope/util', None)
        >>> parse_specifier("@scope/util@1.0.0")
        ('@scope/util', '1.0.0')
    """
    index = specifier.rfind(VERSION_DELIMITER)
    if index <= 0:
        return specifier, None
    return specifier[:index], specifier[index + 1 :]


def directory_name(specifier: str) -> str:
    """Name part of a specifier, used as a destination directory."""
    name, _version = parse_specifier(specifier)
    return name


def is_valid_name(name: str) -> bool:
    """True for "pkg" or "@scope/pkg"; anything else cannot name a module directory."""
    if not name or name.startswith(".") or "\\" in name:
        return False
    if name.startswith(VERSION_DELIMITER):
        scope, _, package = name[1:].partition("/")
        return bool(scope) and bool(package) and "/" not in package and VERSION_DELIMITER not in package
    return "/" not in name and VERSION_DELIMITER not in name
