"""
Progression State Stores

The engine never writes anything itself; the service hands finished
states to a ProgressionStore. Stores are compare-and-swap on
ProgressionState.version so concurrent writers cannot silently
overwrite each other.

InMemoryProgressionStore keeps JSON documents in a dict, the same shape
a document database would hold. It is what tests and the CLI use.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
import logging

from nutrio.exceptions import StaleStateConflictError
from nutrio.models.progression import ProgressionState

logger = logging.getLogger(__name__)


class ProgressionStore(ABC):
    """Persistence boundary for per-user progression documents"""

    @abstractmethod
    async def load(self, user_id: str) -> Optional[ProgressionState]:
        """Return the stored state, or None if the user has none yet"""

    @abstractmethod
    async def save(self, state: ProgressionState, expected_version: int) -> ProgressionState:
        """
        Persist `state` if the stored version still equals expected_version

        Returns the stored state with its new version.

        Raises:
            StaleStateConflictError: another writer got there first
        """


class InMemoryProgressionStore(ProgressionStore):
    """Dict-backed store holding JSON-serialised progression documents"""

    def __init__(self):
        self._documents: Dict[str, Dict[str, Any]] = {}

    async def load(self, user_id: str) -> Optional[ProgressionState]:
        document = self._documents.get(user_id)
        if document is None:
            return None
        return ProgressionState.model_validate(document)

    async def save(self, state: ProgressionState, expected_version: int) -> ProgressionState:
        if state.user_id is None:
            raise ValueError("Cannot save a progression state without user_id")

        current = self._documents.get(state.user_id)
        current_version = current["version"] if current is not None else 0
        if current_version != expected_version:
            raise StaleStateConflictError(
                user_id=state.user_id,
                operation="save_progression",
                expected_version=expected_version,
                actual_version=current_version,
            )

        saved = state.model_copy(update={"version": expected_version + 1}, deep=True)
        self._documents[state.user_id] = saved.model_dump(mode="json")
        logger.debug(f"Saved progression for user {state.user_id} (version {saved.version})")
        return saved

    def get_document(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Raw stored document (what a document database would hold)"""
        return self._documents.get(user_id)

    def put_document(self, user_id: str, document: Dict[str, Any]) -> None:
        """Overwrite a raw document, bypassing version checks (imports, tests)"""
        self._documents[user_id] = document
