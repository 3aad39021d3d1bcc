"""Transcript module: plain-text conversation documents.

Hides the textual layout of a transcript behind encode/decode functions.
"""

from .codec import (
    decode,
    encode,
    encode_separator,
    parse_separator,
    render_message,
    scan,
    strip_system_block,
)
from .models import Message, Role, SeparatorSpan

__all__ = [
    "Message",
    "Role",
    "SeparatorSpan",
    "decode",
    "encode",
    "encode_separator",
    "parse_separator",
    "render_message",
    "scan",
    "strip_system_block",
]
