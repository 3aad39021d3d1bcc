"""Prompt management module.

System prompts live in text files so they can be edited without touching
code. A prompt is looked up by identifier in, in order:

1. ``$PALAVER_PROMPTS_DIR/{name}.txt``
2. ``./prompts/{name}.txt`` in the working directory
3. the packaged defaults next to this module
"""

import os
from functools import lru_cache
from pathlib import Path

_PROMPTS_DIR = Path(__file__).parent


def _search_path() -> list[Path]:
    dirs = [Path.cwd() / "prompts", _PROMPTS_DIR]
    override = os.getenv("PALAVER_PROMPTS_DIR")
    if override:
        dirs.insert(0, Path(override))
    return dirs


@lru_cache(maxsize=32)
def load_prompt(name: str) -> str:
    """Load a prompt text by identifier.

    Args:
        name: Prompt identifier (file name without .txt extension)

    Returns:
        Prompt text with surrounding whitespace removed

    Raises:
        FileNotFoundError: If no directory on the search path has the prompt
    """
    candidates = [directory / f"{name}.txt" for directory in _search_path()]
    for path in candidates:
        if path.is_file():
            return path.read_text(encoding="utf-8").strip()

    searched = "\n".join(f"  - {path}" for path in candidates)
    raise FileNotFoundError(f"Prompt '{name}' not found. Searched:\n{searched}")


def clear_cache() -> None:
    """Clear the prompt cache (useful after modifying prompt files)."""
    load_prompt.cache_clear()


__all__ = [
    "load_prompt",
    "clear_cache",
]
