from typing import Any

from ..config import AssistantConfig
from .base import CompletionClient
from .providers import OpenAICompletionClient


def create_completion_client(
    provider: str = "openai",
    config: AssistantConfig | None = None,
    **kwargs: Any
) -> CompletionClient:
    """Create a completion client instance.

    This factory function hides the instantiation logic for different providers.

    Args:
        provider: Provider type ('openai' covers every OpenAI-compatible endpoint)
        config: Endpoint, model, timeout and credential settings
        **kwargs: Client-specific parameters (reporter, http_client, ...)

    Returns:
        Initialized completion client

    Raises:
        ValueError: If provider type is not supported

    Examples:
        >>> client = create_completion_client(
        ...     "openai",
        ...     config=AssistantConfig(model="gpt-4o-mini", api_key="sk-...")
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower in ("openai", "openai-compatible"):
        return OpenAICompletionClient(config=config, **kwargs)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'openai'"
    )
