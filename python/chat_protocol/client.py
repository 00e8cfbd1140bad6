"""
Location: python/chat_protocol/client.py

Summary:
    Main ChatProtocolClient class for the chat-protocol SDK. Sends chat
    completion requests to a chat endpoint and returns either a single
    completion or a stream of completion deltas decoded from NDJSON.

Usage:
    The primary entry point for using the SDK. Create a ChatProtocolClient
    for an endpoint, optionally with a credential, then request
    completions.

Example:
    from chat_protocol import ChatProtocolClient, ApiKeyCredential

    client = ChatProtocolClient(
        "https://chat.example.com/api/chat",
        credential=ApiKeyCredential("my-key"),
    )

    async with client:
        completion = await client.get_completion(
            [{"role": "user", "content": "Hello"}]
        )
        print(completion.message.content)

        stream = await client.get_streamed_completion(
            [{"role": "user", "content": "Tell me a story"}]
        )
        async with stream:
            async for delta in stream:
                print(delta.delta.content or "", end="")
"""

import json
import logging
from typing import Any, Iterable, Mapping, Optional, Union

import httpx

from .errors import DecodeError, HttpStatusError, TransportError
from .stream import NdjsonStream
from .transport import (
    DEFAULT_USER_AGENT,
    JSON_LINES_CONTENT_TYPES,
    build_request_body,
    build_request_headers,
    check_json_content_type,
    check_status,
    describe_response,
    is_json_lines,
    is_success,
)
from .types import (
    ChatCompletion,
    ChatCompletionDelta,
    ChatCompletionOptions,
    ChatMessage,
    ClientOptions,
)

logger = logging.getLogger(__name__)

Messages = Iterable[Union[ChatMessage, Mapping[str, Any]]]


class ChatProtocolClient:
    """
    Client for a chat protocol endpoint.

    Requests are POSTed to the endpoint URL with a JSON body holding the
    conversation. Non-streaming requests return a ChatCompletion;
    streaming requests return an NdjsonStream of ChatCompletionDelta.

    Connection handling, TLS and retries are left to httpx.

    Attributes:
        endpoint: URL of the chat endpoint
        credential: Optional httpx.Auth credential attached to each request
        options: ClientOptions with timeout and default headers
        user_agent: User-Agent sent unless the caller supplies one
    """

    def __init__(
        self,
        endpoint: str,
        credential: Optional[httpx.Auth] = None,
        options: Optional[ClientOptions] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the ChatProtocolClient.

        Args:
            endpoint: URL of the chat endpoint
            credential: Optional credential, e.g. ApiKeyCredential or TokenCredential
            options: Optional ClientOptions (timeout, headers, user_agent)
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests
        """
        self.endpoint = endpoint
        self.credential = credential
        self.options = options or ClientOptions()
        self.user_agent = self.options.user_agent or DEFAULT_USER_AGENT

        self._http = httpx.AsyncClient(
            timeout=self.options.timeout,
            auth=credential,
            transport=transport,
        )

    async def close(self) -> None:
        """
        Close the HTTP client and release resources.

        Should be called when done with the client, or use
        the async context manager pattern.
        """
        await self._http.aclose()

    async def __aenter__(self) -> "ChatProtocolClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, *args) -> None:
        """Exit async context manager and close resources."""
        await self.close()

    async def get_completion(
        self,
        messages: Messages,
        options: Optional[ChatCompletionOptions] = None,
        *,
        headers: Optional[dict[str, str]] = None,
    ) -> ChatCompletion:
        """
        Request a chat completion and wait for the whole response.

        Args:
            messages: Conversation so far, as ChatMessage models or dicts
            options: Optional context and session state
            headers: Optional headers to add to this request

        Returns:
            The parsed ChatCompletion

        Raises:
            HttpStatusError: If the service answers with a non-2xx status
            ContentTypeError: If the response is not declared as JSON
            DecodeError: If the response body is not a valid completion
            TransportError: If the request fails at the network level
        """
        response = await self._send(messages, options, headers, stream=False)

        check_status(response)
        check_json_content_type(response)

        text = response.text
        logger.debug("Response body: %s", text)

        try:
            return ChatCompletion.model_validate_json(text)
        except ValueError as exc:
            raise DecodeError(f"Invalid chat completion document: {exc}", text, response) from exc

    async def get_streamed_completion(
        self,
        messages: Messages,
        options: Optional[ChatCompletionOptions] = None,
        *,
        headers: Optional[dict[str, str]] = None,
    ) -> NdjsonStream[ChatCompletionDelta]:
        """
        Request a chat completion streamed back as NDJSON.

        The status code is checked before the stream is returned. The
        returned stream owns the response: iterate it to the end, or
        close it with ``aclose()`` / ``async with`` to release the
        connection early.

        Args:
            messages: Conversation so far, as ChatMessage models or dicts
            options: Optional context and session state
            headers: Optional headers to add to this request

        Returns:
            NdjsonStream yielding one ChatCompletionDelta per line

        Raises:
            HttpStatusError: If the service answers with a non-2xx status
            TransportError: If the request fails at the network level

        Iterating the stream may raise DecodeError or TransportError.
        """
        response = await self._send(messages, options, headers, stream=True)

        if not is_success(response):
            try:
                await response.aread()
            except httpx.RequestError as exc:
                raise TransportError(f"Error reading error response: {exc}", response) from exc
            finally:
                await response.aclose()
            raise HttpStatusError(response)

        # Streamed content types are not enforced
        if not is_json_lines(response):
            logger.warning(
                "Unexpected Content-Type %r for streamed completion, expected one of %s",
                response.headers.get("content-type"),
                ", ".join(JSON_LINES_CONTENT_TYPES),
            )

        return NdjsonStream(response, ChatCompletionDelta.model_validate_json)

    async def _send(
        self,
        messages: Messages,
        options: Optional[ChatCompletionOptions],
        headers: Optional[dict[str, str]],
        stream: bool,
    ) -> httpx.Response:
        """
        Build and send a chat completion request.

        Args:
            messages: Conversation so far
            options: Optional context and session state
            headers: Optional per-request headers
            stream: Whether to request and keep a streamed response

        Returns:
            The httpx response; unread when stream is True
        """
        body = build_request_body(messages, stream, options)
        req_headers = build_request_headers(
            stream,
            {**self.options.headers, **(headers or {})},
            self.user_agent,
        )

        request = self._http.build_request("POST", self.endpoint, json=body, headers=req_headers)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("POST %s stream=%s body=%s", self.endpoint, stream, json.dumps(body))

        try:
            response = await self._http.send(request, stream=stream)
        except httpx.RequestError as exc:
            raise TransportError(f"Request to {self.endpoint} failed: {exc}") from exc

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(describe_response(response))

        return response
