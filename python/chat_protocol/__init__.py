"""
Location: python/chat_protocol/__init__.py

Summary:
    Main package initialization for chat-protocol. Exports all public
    classes and functions for convenient importing.

Usage:
    from chat_protocol import ChatProtocolClient, ChatMessage, ApiKeyCredential

    # Or import specific modules
    from chat_protocol.stream import NdjsonDecoder, iter_ndjson
    from chat_protocol.errors import HttpStatusError

Version: 0.1.0
"""

from .client import ChatProtocolClient
from .types import (
    ChatMessage,
    ChatMessageDelta,
    ChatCompletion,
    ChatCompletionDelta,
    ChatCompletionOptions,
    ChatCompletionRequest,
    ClientOptions,
)
from .credentials import ApiKeyCredential, TokenCredential
from .errors import (
    ChatProtocolError,
    HttpStatusError,
    ContentTypeError,
    DecodeError,
    TransportError,
)
from .stream import (
    NdjsonDecoder,
    NdjsonStream,
    iter_ndjson,
    aiter_ndjson,
    parse_ndjson_stream,
)
from .transport import SDK_VERSION, JSON_LINES_CONTENT_TYPES

__version__ = SDK_VERSION

__all__ = [
    # Main client
    "ChatProtocolClient",
    # Types
    "ChatMessage",
    "ChatMessageDelta",
    "ChatCompletion",
    "ChatCompletionDelta",
    "ChatCompletionOptions",
    "ChatCompletionRequest",
    "ClientOptions",
    # Credentials
    "ApiKeyCredential",
    "TokenCredential",
    # Exceptions
    "ChatProtocolError",
    "HttpStatusError",
    "ContentTypeError",
    "DecodeError",
    "TransportError",
    # NDJSON streaming
    "NdjsonDecoder",
    "NdjsonStream",
    "iter_ndjson",
    "aiter_ndjson",
    "parse_ndjson_stream",
    # Wire constants
    "JSON_LINES_CONTENT_TYPES",
]
