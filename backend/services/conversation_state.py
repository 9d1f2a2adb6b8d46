"""In-memory conversation log for a single viewing session."""
from typing import List

from models.conversation import Message


class ConversationState:
    """Ordered, append-only log of chat messages.

    Purely a display aid: prompts are built from the current question only,
    so nothing here is sent to the model.
    """

    def __init__(self):
        self._messages: List[Message] = []

    def append(self, message: Message) -> None:
        self._messages.append(message)

    def all(self) -> List[Message]:
        """Return the messages in insertion order."""
        return list(self._messages)

    def clear(self) -> None:
        """Drop every message, e.g. when the viewer moves to another session."""
        self._messages.clear()

    def __len__(self) -> int:
        return len(self._messages)
