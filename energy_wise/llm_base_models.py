"""Models for chat handling."""
from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Role in a chat conversation."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """A single message in a chat conversation."""
    id: UUID = Field(default_factory=uuid4)
    role: Role
    content: str
    timestamp: datetime = Field(default_factory=datetime.now)


class ChatHistory(BaseModel):
    """Append-only history of chat messages."""
    messages: List[ChatMessage] = Field(default_factory=list)

    def add_message(self, message: ChatMessage) -> None:
        """Add a message to the history."""
        self.messages.append(message)

    def get_last_message(self) -> Optional[ChatMessage]:
        """Get the last message in the history."""
        return self.messages[-1] if self.messages else None

    def __len__(self) -> int:
        return len(self.messages)
