from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from ..reporting import Reporter, console_reporter
from ..transcript import Message
from .errors import CompletionError

# Typographic double quotes are folded to backticks in replies.
SMART_QUOTES = str.maketrans({"“": "`", "”": "`"})


def normalize_reply(text: str) -> str:
    """Fold smart double quotes to backticks and trim surrounding whitespace."""
    return text.translate(SMART_QUOTES).strip()


class CompletionClient(ABC):
    """Abstract base class for completion clients.

    This module hides the design decision of how a conversation reaches the
    remote model. Implementations must handle:
    - Endpoint addressing and authentication
    - Request/response format conversion
    - Mapping transport and protocol failures to CompletionError

    Calls are synchronous: the caller blocks until a reply, an error or the
    configured timeout. No retries are attempted.

    Supports the context manager protocol for resource cleanup:
        with client:
            reply = client.complete(messages)
    """

    def __init__(self, reporter: Reporter | None = None):
        self._reporter = reporter or console_reporter()

    def _report(self, level: str, message: str) -> None:
        self._reporter(level, type(self).__name__, message)

    @abstractmethod
    def request(self, messages: Sequence[Message]) -> str:
        """Send the conversation and return the raw content of the first choice.

        Args:
            messages: Conversation history, oldest first

        Returns:
            Unnormalized reply text

        Raises:
            TransportError: Endpoint unreachable or timed out
            ProtocolError: Non-success status or unexpected body shape
        """

    def complete(self, messages: Sequence[Message]) -> str | None:
        """Send the conversation and return the normalized reply.

        Failures and empty replies are reported and turned into ``None``;
        they never propagate.
        An empty conversation short-circuits without any network call.

        Args:
            messages: Conversation history, oldest first

        Returns:
            Reply text, or None when there is no usable reply
        """
        if not messages:
            self._report("debug", "Nothing to send")
            return None

        try:
            content = self.request(messages)
        except CompletionError as e:
            self._report("error", f"{type(e).__name__}: {e}")
            return None

        reply = normalize_reply(content)
        if not reply:
            self._report("error", "ProtocolError: Endpoint returned an empty reply")
            return None
        return reply

    @abstractmethod
    def close(self) -> None:
        """Close any open connections or resources."""

    def __enter__(self) -> "CompletionClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
