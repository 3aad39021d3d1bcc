from .base import CompletionClient, normalize_reply
from .errors import CompletionError, ProtocolError, TransportError
from .factory import create_completion_client
from .models import Choice, ChoiceMessage, CompletionRequest, CompletionResponse
from .providers import OpenAICompletionClient

__all__ = [
    "CompletionClient",
    "normalize_reply",
    "CompletionError",
    "ProtocolError",
    "TransportError",
    "create_completion_client",
    "Choice",
    "ChoiceMessage",
    "CompletionRequest",
    "CompletionResponse",
    "OpenAICompletionClient",
]
