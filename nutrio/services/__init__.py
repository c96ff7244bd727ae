"""
Service Layer Package

Async services that own the per-user write discipline around the pure
progression engine:
- ProgressionService: serialized grants, unlocks and rehydration
- ProgressionStore / InMemoryProgressionStore: compare-and-swap persistence boundary
"""

from nutrio.services.progression_service import ProgressionService
from nutrio.services.state_store import ProgressionStore, InMemoryProgressionStore

__all__ = [
    "ProgressionService",
    "ProgressionStore",
    "InMemoryProgressionStore",
]
