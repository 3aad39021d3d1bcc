"""Conversion between transcript text and ordered message sequences.

A transcript is plain text made of sections. Every section opens with a
separator line of the form::

    ---[2024-01-01 12:00:00] user:

followed by a blank line and the message body, which runs until the next
separator line or the end of the document.

This module hides the textual grammar of the transcript. Decoding is a
single forward scan over the lines of the document; no backtracking regular
expressions are involved.
"""

from collections.abc import Iterable
from datetime import datetime

from .models import Message, Role, SeparatorSpan

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
SEPARATOR_PREFIX = "---"

_ROLES_BY_NAME = {role.value: role for role in Role}


def encode_separator(role: Role, now: datetime | None = None) -> str:
    """Build the separator line announcing a message of ``role``.

    Args:
        role: One of the three known roles
        now: Timestamp to embed (defaults to the current local time)

    Returns:
        Separator line without a trailing newline
    """
    role = Role(role)
    stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    return f"{SEPARATOR_PREFIX}[{stamp}] {role.value}:"


def render_message(role: Role, content: str, now: datetime | None = None) -> str:
    """Render one transcript section: separator, blank line, body, blank line."""
    return f"{encode_separator(role, now)}\n\n{content.strip()}\n\n"


def encode(messages: Iterable[Message], now: datetime | None = None) -> str:
    """Render an ordered sequence of messages as transcript text."""
    return "".join(render_message(msg.role, msg.content, now) for msg in messages)


def parse_separator(line: str) -> tuple[Role, str] | None:
    """Recognize a separator line.

    Grammar: one or more ``-``, a bracketed timestamp (contents are not
    validated), optional whitespace, a role keyword, a colon, end of line.

    Args:
        line: A single line, with or without its line terminator

    Returns:
        ``(role, timestamp)`` if the line is a separator, else None
    """
    line = line.rstrip("\r\n")

    dashes = len(line) - len(line.lstrip("-"))
    if dashes == 0 or line[dashes:dashes + 1] != "[":
        return None

    close = line.rfind("]", dashes + 1)
    if close == -1:
        return None
    timestamp = line[dashes + 1:close]

    tail = line[close + 1:].lstrip(" \t")
    if not tail.endswith(":"):
        return None

    role = _ROLES_BY_NAME.get(tail[:-1])
    if role is None:
        return None
    return role, timestamp


def _split_lines(text: str) -> list[str]:
    # Only "\n" ends a line; other Unicode line boundaries are body text.
    pieces = text.split("\n")
    lines = [piece + "\n" for piece in pieces[:-1]]
    if pieces[-1]:
        lines.append(pieces[-1])
    return lines


def scan(text: str) -> list[SeparatorSpan]:
    """Locate every message body in ``text``.

    Lines end at line feeds only, so a carriage return stays on its line
    and is tolerated by the separator grammar. Text before the first
    separator produces no span.

    Returns:
        Spans in document order
    """
    spans: list[SeparatorSpan] = []
    pending: tuple[Role, str, int] | None = None
    offset = 0

    for line in _split_lines(text):
        parsed = parse_separator(line)
        if parsed is not None:
            if pending is not None:
                role, stamp, start = pending
                spans.append(SeparatorSpan(role=role, timestamp=stamp, start=start, end=offset))
            pending = (parsed[0], parsed[1], offset + len(line))
        offset += len(line)

    if pending is not None:
        role, stamp, start = pending
        spans.append(SeparatorSpan(role=role, timestamp=stamp, start=start, end=len(text)))

    return spans


def decode(text: str) -> list[Message]:
    """Decode transcript text into an ordered list of messages.

    A text without any separator decodes to an empty list; that is not an
    error, it means there is nothing to send.
    """
    return [
        Message(role=span.role, content=text[span.start:span.end])
        for span in scan(text)
    ]


def _separator_line_start(text: str, body_start: int) -> int:
    # The separator line ends right before body_start.
    return text.rfind("\n", 0, body_start - 1) + 1


def strip_system_block(text: str) -> str:
    """Drop a leading system section, keeping everything from the next separator on.

    Text that does not open with a system section is returned unchanged.
    """
    spans = scan(text)
    if not spans or spans[0].role is not Role.SYSTEM:
        return text
    if text[:_separator_line_start(text, spans[0].start)].strip():
        return text
    if len(spans) == 1:
        return ""
    return text[_separator_line_start(text, spans[1].start):]
