from pydantic import BaseModel, ConfigDict, Field

from ..transcript import Message


class CompletionRequest(BaseModel):
    """Request body sent to the chat completion endpoint."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(description="Model identifier")
    messages: list[Message] = Field(description="Conversation history, oldest first")

    def messages_payload(self) -> list[dict[str, str]]:
        """Messages as an ordered array of role/content objects."""
        return [msg.to_payload() for msg in self.messages]


class ChoiceMessage(BaseModel):
    """Message part of a completion choice. Only ``content`` is read."""

    content: str = Field(description="Generated text")


class Choice(BaseModel):
    """One completion alternative returned by the endpoint."""

    message: ChoiceMessage


class CompletionResponse(BaseModel):
    """Response body of the chat completion endpoint.

    Unknown fields are ignored; at least one choice is required.
    """

    choices: list[Choice] = Field(min_length=1)

    @property
    def content(self) -> str:
        """Content of the first choice."""
        return self.choices[0].message.content
