"""Provider factory functions for CLI.

Centralizes creation of the configuration, completion client and session
controller from environment variables and command-line overrides.
"""

from rich.console import Console

from ..config import AssistantConfig
from ..llm import CompletionClient, create_completion_client
from ..reporting import LogLevel, console_reporter
from ..session import SessionController

# Default console for diagnostics
_console = Console(stderr=True)


def get_config(
    model: str | None = None,
    api_url: str | None = None,
    timeout: float | None = None
) -> AssistantConfig:
    """Create the configuration from environment variables.

    Command-line values, when given, override the environment.

    Environment variables:
        PALAVER_API_URL, PALAVER_MODEL, PALAVER_TIMEOUT,
        PALAVER_API_KEY, PALAVER_API_KEY_ENV (see AssistantConfig.from_env)
    """
    return AssistantConfig.from_env(model=model, api_url=api_url, timeout=timeout)


def get_client(
    config: AssistantConfig,
    console: Console | None = None,
    verbose: bool = False
) -> CompletionClient:
    """Create the completion client, reporting to ``console``."""
    threshold = LogLevel.DEBUG if verbose else LogLevel.WARNING
    reporter = console_reporter(console or _console, threshold=threshold)
    return create_completion_client("openai", config=config, reporter=reporter)


def get_controller(
    config: AssistantConfig,
    client: CompletionClient
) -> SessionController:
    """Create the session controller for ``client``."""
    return SessionController(client=client, config=config)
