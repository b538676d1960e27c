"""
Stable identifier generation.
"""

import hashlib


def stable_id(*parts: str) -> str:
    """
    Generate stable ID derived from inputs (no randomness).

    Example:
        stable_id("svc", "e2edev", "1.0.0") -> "9c1f..."
    """
    raw = "|".join(parts).encode("utf-8")
    return hashlib.sha256(raw).hexdigest()
