"""
Palaver: a conversational assistant client built on plain-text transcripts.

A transcript is an ordinary text document of role-tagged sections. It is
decoded into messages, sent to an OpenAI-compatible chat completion
endpoint, and the reply is appended as a new section.
"""

__version__ = "0.1.0"

from .config import AssistantConfig
from .llm import (
    CompletionClient,
    CompletionError,
    OpenAICompletionClient,
    ProtocolError,
    TransportError,
    create_completion_client,
)
from .session import SessionController
from .transcript import Message, Role, decode, encode, encode_separator

__all__ = [
    "AssistantConfig",
    "CompletionClient",
    "CompletionError",
    "OpenAICompletionClient",
    "ProtocolError",
    "TransportError",
    "create_completion_client",
    "SessionController",
    "Message",
    "Role",
    "decode",
    "encode",
    "encode_separator",
]
