"""
Pattern resolution.
"""

from .resolver import PatternResolver

__all__ = [
    "PatternResolver",
]
