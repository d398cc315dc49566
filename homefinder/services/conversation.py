"""Conversation context held by a single search orchestrator."""


class ConversationState:
    """Holds the current NLP conversation id, or None before the first turn."""

    def __init__(self) -> None:
        self._conversation_id: str | None = None

    def current(self) -> str | None:
        return self._conversation_id

    def set(self, conversation_id: str) -> None:
        # Replaced wholesale on every successful translation, never merged
        self._conversation_id = conversation_id

    def clear(self) -> None:
        self._conversation_id = None
