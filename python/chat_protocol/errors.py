"""
Location: python/chat_protocol/errors.py

Summary:
    Exception hierarchy for the chat-protocol SDK. Every failure surfaced
    by the client or the NDJSON decoder is a ChatProtocolError subclass.

Usage:
    Raised by client.py, transport.py and stream.py. Callers can catch
    ChatProtocolError to handle all SDK failures, or a specific subclass.

Example:
    from chat_protocol.errors import HttpStatusError

    try:
        completion = await client.get_completion(messages)
    except HttpStatusError as exc:
        print(exc.status_code)
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class ChatProtocolError(Exception):
    """
    Base exception for all chat-protocol SDK errors.

    Attributes:
        response: The HTTP response involved, when one is available
    """

    def __init__(self, message: str, response: Optional["httpx.Response"] = None):
        super().__init__(message)
        self.response = response


class HttpStatusError(ChatProtocolError):
    """Exception raised when the service answers with a non-2xx status."""

    def __init__(self, response: "httpx.Response"):
        super().__init__(
            f"Request failed with status code {response.status_code}",
            response,
        )
        self.status_code = response.status_code


class ContentTypeError(ChatProtocolError):
    """Exception raised when a response has a missing or unexpected Content-Type."""
    pass


class DecodeError(ChatProtocolError):
    """
    Exception raised when a JSON line or document cannot be decoded.

    Attributes:
        line: The offending line (or document) text
    """

    def __init__(
        self,
        message: str,
        line: str,
        response: Optional["httpx.Response"] = None,
    ):
        super().__init__(message, response)
        self.line = line


class TransportError(ChatProtocolError):
    """Exception raised when the underlying HTTP transport fails."""
    pass
