"""Conversation data models."""
from dataclasses import dataclass
from enum import Enum
from typing import Dict


class Role(str, Enum):
    """Author of a chat message."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class Message:
    """A single role-tagged chat message."""
    role: Role
    content: str

    def to_dict(self) -> Dict[str, str]:
        """Return the chat-completions wire form of the message."""
        return {"role": self.role.value, "content": self.content}
