"""Session controller: the user-facing conversation flows.

Transcripts are never cached here. Each flow receives text, decodes it,
makes at most one blocking request and returns text for the host to show.
A missing reply never produces an empty assistant section.
"""

from collections.abc import Callable
from datetime import datetime

from ..config import AssistantConfig
from ..llm import CompletionClient
from ..transcript import (
    Message,
    Role,
    decode,
    encode_separator,
    render_message,
    strip_system_block,
)
from .prompts import PromptTable, with_mode_suffix

TITLE_PROMPT_ID = "title"


def _padding(text: str) -> str:
    # Keeps an appended separator on its own line, after a blank line.
    if not text or text.endswith("\n\n"):
        return ""
    if text.endswith("\n"):
        return "\n"
    return "\n\n"


def append_reply(text: str, reply: str, now: datetime | None = None) -> str:
    """Build the text to append to ``text`` after a successful completion.

    Returns:
        Assistant section holding ``reply`` followed by an empty user separator
    """
    return (
        _padding(text)
        + render_message(Role.ASSISTANT, reply, now)
        + encode_separator(Role.USER, now)
        + "\n\n"
    )


class SessionController:
    """Composes the transcript codec and a completion client."""

    def __init__(
        self,
        client: CompletionClient,
        config: AssistantConfig | None = None,
        prompts: PromptTable | None = None,
        clock: Callable[[], datetime] | None = None
    ):
        """Initialize the controller.

        Args:
            client: Client used for every request
            config: Prompt tables and title excerpt size
            prompts: Prompt lookup (built from ``config`` when omitted)
            clock: Source of separator timestamps (defaults to datetime.now)
        """
        self._client = client
        self._config = config or AssistantConfig()
        self._prompts = prompts or PromptTable(self._config)
        self._clock = clock or datetime.now

    def system_prompt(self, mode: str | None) -> str:
        """System prompt for ``mode``, with the mode named at the end."""
        return with_mode_suffix(self._prompts.resolve_system_prompt(mode), mode)

    def start_session(
        self,
        user_prompt: str,
        selected_text: str | None = None,
        mode: str | None = None
    ) -> str:
        """Start a new conversation.

        Args:
            user_prompt: The user's first request
            selected_text: Optional text the request refers to
            mode: Host mode identifier used to pick the system prompt

        Returns:
            The full transcript. Without a reply it holds only the system and
            user sections, ready to be retried with ``continue_session``.
        """
        now = self._clock()
        user_content = user_prompt.strip()
        if selected_text and selected_text.strip():
            user_content = f"{user_content}\n\n{selected_text.strip()}"

        transcript = (
            render_message(Role.SYSTEM, self.system_prompt(mode), now)
            + render_message(Role.USER, user_content, now)
        )

        reply = self._client.complete(decode(transcript))
        if reply is None:
            return transcript
        return transcript + append_reply(transcript, reply, self._clock())

    def continue_session(self, transcript: str) -> str | None:
        """Continue an existing conversation.

        The whole history is sent; the endpoint keeps no state between calls.

        Returns:
            Text to append to ``transcript``, or None when there was nothing
            to send or no reply arrived
        """
        messages = decode(transcript)
        if not messages:
            return None

        reply = self._client.complete(messages)
        if reply is None:
            return None
        return append_reply(transcript, reply, self._clock())

    def replace_region(
        self,
        prompt: str,
        selected_text: str,
        mode: str | None = None
    ) -> str | None:
        """One-shot rewrite of a selection; the reply replaces it verbatim."""
        query = (
            f"{self.system_prompt(mode)}\n\n{prompt.strip()}\n\n"
            f"Replace the following:\n\n{selected_text}"
        )
        return self._client.complete([Message(role=Role.USER, content=query)])

    def insert(
        self,
        prompt: str,
        selected_text: str | None = None,
        mode: str | None = None
    ) -> str | None:
        """One-shot generation of text to insert at the host's cursor."""
        query = f"{self.system_prompt(mode)}\n\n{prompt.strip()}"
        if selected_text and selected_text.strip():
            query = f"{query}\n\nUser input:\n\n{selected_text}"
        return self._client.complete([Message(role=Role.USER, content=query)])

    def generate_title(self, content: str) -> str | None:
        """Ask for a short title describing a transcript.

        A leading system section is skipped; at most ``title_excerpt_chars``
        characters of what follows are sent. The reply is returned as is.
        """
        excerpt = strip_system_block(content)[:self._config.title_excerpt_chars].strip()
        if not excerpt:
            return None

        messages = [
            Message(role=Role.SYSTEM, content=self._prompts.prompt_text(TITLE_PROMPT_ID)),
            Message(role=Role.USER, content=excerpt),
        ]
        return self._client.complete(messages)
