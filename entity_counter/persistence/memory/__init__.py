from .in_memory_snapshot_cache import InMemorySnapshotCache

__all__ = ["InMemorySnapshotCache"]
