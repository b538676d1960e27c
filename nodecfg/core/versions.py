"""
Version ordering used for singleton conflict resolution.

A version is a dot-separated list of non-negative decimal integers. Versions
compare component by component as integers; missing trailing components are
treated as 0, so "1.2" == "1.2.0" and "2.10.0" > "2.9.0".
"""

from typing import Tuple

from .errors import InvalidVersionError


def version_key(version: str) -> Tuple[int, ...]:
    """
    Parse version into a comparable tuple with trailing zeros stripped.

    Raises:
        InvalidVersionError: If version is not a dotted list of integers
    """
    if not isinstance(version, str) or not version:
        raise InvalidVersionError(f"invalid version string: {version!r}")

    parts = []
    for piece in version.split("."):
        if not piece.isdigit() or not piece.isascii():
            raise InvalidVersionError(f"invalid version string: {version!r}")
        parts.append(int(piece))

    while len(parts) > 1 and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


def compare_versions(a: str, b: str) -> int:
    """Return -1, 0 or 1 as version a is lower, equal or higher than b."""
    ka, kb = version_key(a), version_key(b)
    if ka < kb:
        return -1
    if ka > kb:
        return 1
    return 0
