"""Keyed storage for co-pilot conversations.

The engine only depends on ``ConversationStore``; the backend is chosen by the
``CONVERSATION_STORE`` setting. Entries are never evicted.
"""

import copy
import threading
from abc import ABC, abstractmethod

from askapril.core.schemas_copilot import Conversation


class ConversationStore(ABC):
    """Interface for conversation persistence."""

    @abstractmethod
    def get(self, conversation_id: str) -> Conversation | None:
        """Return a copy of the stored conversation, or None."""

    @abstractmethod
    def set(self, conversation: Conversation) -> None:
        """Insert or replace a conversation (last write wins)."""

    @abstractmethod
    def delete(self, conversation_id: str) -> None:
        """Remove a conversation if present."""


class InMemoryConversationStore(ConversationStore):
    """Process-local store; copies on read and write so callers never share state."""

    def __init__(self):
        self._lock = threading.Lock()
        self._conversations: dict[str, Conversation] = {}

    def get(self, conversation_id: str) -> Conversation | None:
        with self._lock:
            conversation = self._conversations.get(conversation_id)
            return copy.deepcopy(conversation) if conversation else None

    def set(self, conversation: Conversation) -> None:
        with self._lock:
            self._conversations[conversation.id] = copy.deepcopy(conversation)

    def delete(self, conversation_id: str) -> None:
        with self._lock:
            self._conversations.pop(conversation_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._conversations)


def create_conversation_store(backend: str) -> ConversationStore:
    """
    Build the configured store.

    Args:
        backend: "memory" or "supabase"

    Raises:
        ValueError: If the backend name is unknown
    """
    if backend == "memory":
        return InMemoryConversationStore()
    if backend == "supabase":
        from askapril.db.conversations import SupabaseConversationStore

        return SupabaseConversationStore()
    raise ValueError(f"Unknown conversation store backend: {backend}")
