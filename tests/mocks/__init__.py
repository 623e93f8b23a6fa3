"""Mock implementations for testing."""

from tests.mocks.store import FailingSnapshotStore, MemorySnapshotStore


__all__ = [
    "FailingSnapshotStore",
    "MemorySnapshotStore",
]
