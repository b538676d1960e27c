"""
Registry clients.

- Registry: Abstract interface for pattern, workload and service lookups
- FileRegistry: Read-only registry backed by a JSON document
"""

from .client import Registry
from .file_registry import FileRegistry

__all__ = [
    "Registry",
    "FileRegistry",
]
