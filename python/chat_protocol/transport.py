"""
Location: python/chat_protocol/transport.py

Summary:
    Chat protocol wire format helpers. Builds request headers and JSON
    bodies, and classifies responses by status code and content type.

Usage:
    Used by client.py to prepare chat completion requests and to decide
    whether a response can be handed to the JSON or NDJSON decoders.

Example:
    from chat_protocol.transport import build_request_headers, check_status

    headers = build_request_headers(stream=True)
    check_status(response)
"""

from typing import Any, Iterable, Mapping, Optional, Union

import httpx

from .errors import ContentTypeError, HttpStatusError
from .types import ChatCompletionOptions, ChatCompletionRequest, ChatMessage

SDK_NAME = "sdk-python-chat-protocol"
SDK_VERSION = "0.1.0"
DEFAULT_USER_AGENT = f"{SDK_NAME}/{SDK_VERSION}"

JSON_CONTENT_TYPE = "application/json"

# Content types a streaming service is expected to answer with. NDJSON is
# identical to JSON Lines except that it also allows blank lines.
JSON_LINES_CONTENT_TYPES = (
    "application/json-lines",
    "application/jsonl",
    "application/x-jsonlines",
    "application/x-ndjson",
)

CHAT_HEADERS = {
    "CONTENT_TYPE": "Content-Type",
    "ACCEPT": "Accept",
    "USER_AGENT": "User-Agent",
}


def build_request_headers(
    stream: bool,
    headers: Optional[Mapping[str, str]] = None,
    user_agent: Optional[str] = None,
) -> dict[str, str]:
    """
    Build the headers for a chat completion request.

    Caller headers are kept, except Content-Type which is always JSON.
    Accept is only set for non-streaming requests.

    Args:
        stream: Whether a streamed response is requested
        headers: Optional caller headers
        user_agent: User-Agent to set when the caller did not supply one

    Returns:
        New headers dict
    """
    result = dict(headers or {})
    present = {name.lower() for name in result}

    if user_agent and CHAT_HEADERS["USER_AGENT"].lower() not in present:
        result[CHAT_HEADERS["USER_AGENT"]] = user_agent

    for name in list(result):
        if name.lower() == CHAT_HEADERS["CONTENT_TYPE"].lower():
            del result[name]
    result[CHAT_HEADERS["CONTENT_TYPE"]] = JSON_CONTENT_TYPE

    if not stream:
        result[CHAT_HEADERS["ACCEPT"]] = JSON_CONTENT_TYPE

    return result


def build_request_body(
    messages: Iterable[Union[ChatMessage, Mapping[str, Any]]],
    stream: bool,
    options: Optional[ChatCompletionOptions] = None,
) -> dict[str, Any]:
    """
    Build the JSON body of a chat completion request.

    Args:
        messages: Conversation so far, as ChatMessage models or plain dicts
        stream: Whether a streamed response is requested
        options: Optional context and session state

    Returns:
        JSON-compatible dict; absent context/sessionState are omitted

    Raises:
        pydantic.ValidationError: If a message dict is malformed
    """
    options = options or ChatCompletionOptions()
    request = ChatCompletionRequest(
        messages=[ChatMessage.model_validate(m) for m in messages],
        stream=stream,
        context=options.context,
        session_state=options.session_state,
    )
    return request.to_json_body()


def is_success(response: httpx.Response) -> bool:
    """Return True if the response has a 2xx status code."""
    return 200 <= response.status_code < 300


def check_status(response: httpx.Response) -> None:
    """
    Raise if the response is not a 2xx.

    Args:
        response: The httpx response to check

    Raises:
        HttpStatusError: For any non-2xx status code
    """
    if not is_success(response):
        raise HttpStatusError(response)


def check_json_content_type(response: httpx.Response) -> None:
    """
    Ensure a non-streaming response declares a JSON body.

    Args:
        response: The httpx response to check

    Raises:
        ContentTypeError: If Content-Type is missing or not application/json
    """
    content_type = response.headers.get("content-type")
    if not content_type:
        raise ContentTypeError("HTTP response header Content-Type is missing.", response)
    if JSON_CONTENT_TYPE not in content_type.lower():
        raise ContentTypeError(
            f"Content-Type {content_type!r} does not contain {JSON_CONTENT_TYPE}.",
            response,
        )


def is_json_lines(response: httpx.Response) -> bool:
    """
    Check if a response declares one of the JSON Lines / NDJSON media types.

    Args:
        response: The httpx response to check

    Returns:
        True if Content-Type is one of JSON_LINES_CONTENT_TYPES
    """
    content_type = response.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type in JSON_LINES_CONTENT_TYPES


def describe_response(response: httpx.Response) -> str:
    """Format a response status line and headers for logging."""
    lines = [f"Status = {response.reason_phrase} ({response.status_code}), Headers:"]
    for name, value in response.headers.items():
        lines.append(f"    {name}: {value}")
    return "\n".join(lines)
