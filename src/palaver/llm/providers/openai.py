from collections.abc import Sequence
from typing import Any

import httpx
import openai
from openai import OpenAI
from pydantic import ValidationError

from ...config import AssistantConfig
from ...reporting import Reporter
from ...transcript import Message
from ..base import CompletionClient
from ..errors import ProtocolError, TransportError
from ..models import CompletionRequest, CompletionResponse


class OpenAICompletionClient(CompletionClient):
    """Completion client for OpenAI-compatible chat completion endpoints.

    Hidden design decisions:
    - API client initialization (via the OpenAI SDK, retries disabled)
    - Credential resolution (explicit key, then environment variable)
    - Response validation against an explicit schema rather than SDK types
    - Mapping of SDK exceptions onto TransportError / ProtocolError
    """

    def __init__(
        self,
        config: AssistantConfig | None = None,
        reporter: Reporter | None = None,
        http_client: httpx.Client | None = None,
        **client_kwargs: Any
    ):
        """Initialize the client.

        Args:
            config: Endpoint, model, timeout and credential settings
            reporter: Callback receiving user-visible reports
            http_client: Custom httpx client (proxies, test transports)
            **client_kwargs: Additional kwargs for the OpenAI client
        """
        super().__init__(reporter)
        self._config = config or AssistantConfig()

        api_key = self._config.resolve_api_key()
        if not api_key:
            # Sent anyway; the endpoint's rejection surfaces as a ProtocolError.
            self._report(
                "warning",
                f"No API key configured and ${self._config.api_key_env_var} is unset"
            )

        self._client = OpenAI(
            api_key=api_key,
            base_url=self._config.api_url,
            timeout=self._config.timeout,
            max_retries=0,
            http_client=http_client,
            **client_kwargs
        )

    @property
    def model(self) -> str:
        """Get the model name sent with each request."""
        return self._config.model

    def request(self, messages: Sequence[Message]) -> str:
        """Send one chat completion request and return the first choice's content."""
        payload = CompletionRequest(model=self._config.model, messages=list(messages))
        self._report("debug", f"Sending {len(payload.messages)} messages to {self._config.api_url}")

        try:
            raw = self._client.chat.completions.with_raw_response.create(
                model=payload.model,
                messages=payload.messages_payload(),
            )
        except openai.APIConnectionError as e:
            raise TransportError(str(e)) from e
        except openai.APIStatusError as e:
            raise ProtocolError(
                f"Endpoint returned HTTP {e.status_code}: {e.message}",
                status_code=e.status_code
            ) from e
        except openai.APIError as e:
            raise ProtocolError(str(e)) from e

        try:
            response = CompletionResponse.model_validate_json(raw.http_response.text)
        except ValidationError as e:
            raise ProtocolError(
                f"Unexpected response body: {e.error_count()} validation error(s)",
                status_code=raw.http_response.status_code
            ) from e

        return response.content

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()
