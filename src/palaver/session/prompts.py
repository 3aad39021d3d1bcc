"""Mode to system prompt lookup.

Two chained tables: mode identifier -> prompt identifier -> prompt text.
Both fall through to the default prompt, so the lookup is total.
"""

from ..config import DEFAULT_PROMPT_ID, AssistantConfig
from ..prompts import load_prompt

MODE_SUFFIX_TEMPLATE = "The user is currently working in {mode}."


class PromptTable:
    """Resolves system prompts for host editor modes.

    Prompt texts come from ``AssistantConfig.prompts`` first, then from the
    prompt files (``./prompts`` overrides, then packaged defaults).
    """

    def __init__(self, config: AssistantConfig | None = None):
        config = config or AssistantConfig()
        self._mode_prompts = dict(config.mode_prompts)
        self._prompts = dict(config.prompts)
        self._default_prompt = config.default_prompt

    def resolve_prompt_id(self, mode: str | None) -> str:
        """Map a mode identifier to a prompt identifier."""
        if mode is None:
            return self._default_prompt
        return self._mode_prompts.get(mode, self._default_prompt)

    def prompt_text(self, prompt_id: str) -> str:
        """Map a prompt identifier to its text, falling back to the default prompt."""
        text = self._lookup(prompt_id)
        if text is None:
            text = self._lookup(self._default_prompt)
        if text is None:
            text = load_prompt(DEFAULT_PROMPT_ID)
        return text

    def resolve_system_prompt(self, mode: str | None) -> str:
        """Resolve the system prompt for ``mode`` without any mode suffix."""
        return self.prompt_text(self.resolve_prompt_id(mode))

    def _lookup(self, prompt_id: str) -> str | None:
        if prompt_id in self._prompts:
            return self._prompts[prompt_id]
        try:
            return load_prompt(prompt_id)
        except FileNotFoundError:
            return None


def resolve_system_prompt(mode: str | None, config: AssistantConfig | None = None) -> str:
    """Resolve the system prompt for ``mode`` using the tables in ``config``."""
    return PromptTable(config).resolve_system_prompt(mode)


def with_mode_suffix(prompt: str, mode: str | None) -> str:
    """Append the sentence naming the host mode, when one is known."""
    if not mode:
        return prompt
    return f"{prompt}\n\n{MODE_SUFFIX_TEMPLATE.format(mode=mode)}"
