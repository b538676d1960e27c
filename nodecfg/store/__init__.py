"""
Device storage.

This module provides:
- DeviceStore: Abstract interface for device persistence
- InMemoryDeviceStore: Process-local store
- FileDeviceStore: Append-only JSONL event log replayed into node state
"""

from .store import DeviceStore
from .memory_store import InMemoryDeviceStore
from .file_store import FileDeviceStore

__all__ = [
    "DeviceStore",
    "InMemoryDeviceStore",
    "FileDeviceStore",
]
