"""Session module: conversation flows built on the transcript codec and a completion client."""

from .controller import SessionController, append_reply
from .prompts import PromptTable, resolve_system_prompt, with_mode_suffix

__all__ = [
    "PromptTable",
    "SessionController",
    "append_reply",
    "resolve_system_prompt",
    "with_mode_suffix",
]
