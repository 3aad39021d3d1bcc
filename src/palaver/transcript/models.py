from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Role(str, Enum):
    """Role of the author of a transcript message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single role-tagged utterance of a conversation.

    Content is stored whitespace-trimmed. It may be empty only for the
    in-progress user turn at the end of a transcript.
    """

    model_config = ConfigDict(frozen=True)

    role: Role = Field(description="Role of the message author")
    content: str = Field(default="", description="Trimmed message body")

    @field_validator("content")
    @classmethod
    def _strip_content(cls, value: str) -> str:
        return value.strip()

    def to_payload(self) -> dict[str, str]:
        """Return the wire form used by the completion endpoint."""
        return {"role": self.role.value, "content": self.content}


@dataclass(frozen=True)
class SeparatorSpan:
    """Location of one message body inside a transcript text.

    Attributes:
        role: Role named by the separator line
        timestamp: Raw text found between the separator brackets
        start: Offset of the first body character (just past the separator line)
        end: Offset one past the last body character
    """

    role: Role
    timestamp: str
    start: int
    end: int
