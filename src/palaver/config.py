"""Assistant configuration.

Every tunable of the client lives in one explicit, immutable structure
that is handed to the constructors that need it.
"""

import os

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_API_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_API_KEY_ENV_VAR = "OPENAI_API_KEY"
DEFAULT_PROMPT_ID = "default"

DEFAULT_MODE_PROMPTS: dict[str, str] = {
    "python": "programming",
    "python-mode": "programming",
    "python-ts-mode": "programming",
    "emacs-lisp-mode": "programming",
    "lisp-interaction-mode": "programming",
    "js-mode": "programming",
    "typescript-mode": "programming",
    "rust-mode": "programming",
    "go-mode": "programming",
    "c-mode": "programming",
    "sh-mode": "programming",
    "prog-mode": "programming",
    "markdown-mode": "writing",
    "org-mode": "writing",
    "text-mode": "writing",
}


class AssistantConfig(BaseModel):
    """Configuration shared by the completion client and the session controller.

    Attributes:
        api_url: Base URL of the OpenAI-compatible endpoint
        model: Model identifier sent with every request
        timeout: Seconds a blocking request may take
        api_key: Explicit credential; takes precedence over the environment
        api_key_env_var: Environment variable read when ``api_key`` is unset
        default_prompt: Prompt identifier used for unmapped modes
        mode_prompts: Mode identifier -> prompt identifier
        prompts: Prompt identifier -> prompt text (overrides packaged prompts)
        title_excerpt_chars: Maximum transcript excerpt sent for titling
    """

    model_config = ConfigDict(frozen=True)

    api_url: str = Field(default=DEFAULT_API_URL)
    model: str = Field(default=DEFAULT_MODEL)
    timeout: float = Field(default=60.0, gt=0)
    api_key: str | None = Field(default=None, repr=False)
    api_key_env_var: str = Field(default=DEFAULT_API_KEY_ENV_VAR)
    default_prompt: str = Field(default=DEFAULT_PROMPT_ID)
    mode_prompts: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_MODE_PROMPTS))
    prompts: dict[str, str] = Field(default_factory=dict)
    title_excerpt_chars: int = Field(default=1200, ge=1)

    def resolve_api_key(self) -> str:
        """Resolve the credential: explicit value first, then the environment.

        Returns:
            The credential, or an empty string when neither source has one
        """
        if self.api_key:
            return self.api_key
        return os.getenv(self.api_key_env_var, "")

    @classmethod
    def from_env(cls, **overrides) -> "AssistantConfig":
        """Build a configuration from environment variables.

        Environment variables:
            PALAVER_API_URL: Endpoint base URL (default: OpenAI)
            PALAVER_MODEL: Model identifier (default: gpt-4o-mini)
            PALAVER_TIMEOUT: Request timeout in seconds (default: 60)
            PALAVER_API_KEY: Explicit credential
            PALAVER_API_KEY_ENV: Name of the fallback credential variable
                (default: OPENAI_API_KEY)

        Args:
            **overrides: Field values that win over the environment

        Raises:
            ValidationError: If a value (e.g. PALAVER_TIMEOUT) is invalid
        """
        values = {
            "api_url": os.getenv("PALAVER_API_URL", DEFAULT_API_URL),
            "model": os.getenv("PALAVER_MODEL", DEFAULT_MODEL),
            "timeout": os.getenv("PALAVER_TIMEOUT", "60"),
            "api_key": os.getenv("PALAVER_API_KEY") or None,
            "api_key_env_var": os.getenv("PALAVER_API_KEY_ENV", DEFAULT_API_KEY_ENV_VAR),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
