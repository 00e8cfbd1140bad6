"""
Location: python/chat_protocol/types.py

Summary:
    Pydantic models for the chat-protocol SDK. Defines the wire shapes of
    chat messages, completions and streamed completion deltas, plus the
    per-call and per-client option models.

Usage:
    These models are imported and used by client.py, transport.py and
    stream.py. Python attributes are snake_case; the camelCase names used
    on the wire (e.g. "sessionState") are declared as aliases.

Example:
    from chat_protocol.types import ChatMessage, ChatCompletionOptions

    messages = [ChatMessage(role="user", content="Hello")]
    options = ChatCompletionOptions(session_state={"id": "abc"})
"""

from typing import Any, Optional
from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    """
    A single message in a chat conversation.

    Attributes:
        role: Author of the message ("user", "assistant" or "system")
        content: Text of the message
    """
    role: str
    content: str

    model_config = {"populate_by_name": True}


class ChatMessageDelta(BaseModel):
    """
    Partial message carried by a streamed completion delta.

    Both fields are optional: a delta may only carry the role (usually the
    first one) or only a fragment of content.
    """
    role: Optional[str] = None
    content: Optional[str] = None

    model_config = {"populate_by_name": True}


class ChatCompletion(BaseModel):
    """
    Result of a non-streaming chat completion request.

    Attributes:
        message: The message produced by the service
        context: Optional context object returned by the service
        session_state: Opaque state to send back on the next request
    """
    message: ChatMessage
    context: Optional[dict[str, Any]] = None
    session_state: Optional[Any] = Field(None, alias="sessionState")

    model_config = {"populate_by_name": True}


class ChatCompletionDelta(BaseModel):
    """
    One incremental fragment of a streamed chat completion.

    Each line of an NDJSON streaming response decodes into one of these.
    """
    delta: ChatMessageDelta = Field(default_factory=ChatMessageDelta)
    context: Optional[dict[str, Any]] = None
    session_state: Optional[Any] = Field(None, alias="sessionState")

    model_config = {"populate_by_name": True}


class ChatCompletionOptions(BaseModel):
    """
    Per-call options for a chat completion request.

    Attributes:
        context: Optional context object forwarded to the service
        session_state: Opaque session state from a previous completion
    """
    context: Optional[dict[str, Any]] = None
    session_state: Optional[Any] = Field(None, alias="sessionState")

    model_config = {"populate_by_name": True}


class ChatCompletionRequest(BaseModel):
    """
    JSON body sent to the chat endpoint.

    Serialize with ``to_json_body()`` so that absent optional fields are
    omitted and wire aliases are used.
    """
    messages: list[ChatMessage]
    stream: bool = False
    context: Optional[dict[str, Any]] = None
    session_state: Optional[Any] = Field(None, alias="sessionState")

    model_config = {"populate_by_name": True}

    def to_json_body(self) -> dict[str, Any]:
        """Return the request as a JSON-compatible dict using wire names."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ClientOptions(BaseModel):
    """
    Configuration for a ChatProtocolClient.

    Attributes:
        timeout: Request timeout in seconds
        headers: Headers to include on all requests
        user_agent: User-Agent override; the SDK default is used when unset
    """
    timeout: float = 120.0
    headers: dict[str, str] = Field(default_factory=dict)
    user_agent: Optional[str] = Field(None, alias="userAgent")

    model_config = {"populate_by_name": True}
