"""
Location: python/chat_protocol/credentials.py

Summary:
    Credential implementations for authenticating against a chat endpoint.
    Both are httpx.Auth subclasses, so the HTTP client attaches them to
    every outgoing request.

Usage:
    Pass a credential to ChatProtocolClient. ApiKeyCredential covers static
    keys; TokenCredential covers bearer tokens fetched on demand (e.g.
    from an identity provider).

Example:
    from chat_protocol.credentials import ApiKeyCredential, TokenCredential

    credential = ApiKeyCredential("my-key")
    credential = ApiKeyCredential("my-key", header_name="api-key")

    async def fetch_token() -> str:
        return await identity.get_token()

    credential = TokenCredential(fetch_token)
"""

from typing import AsyncGenerator, Awaitable, Callable, Generator, Optional

import httpx

AUTHORIZATION_HEADER = "Authorization"


class ApiKeyCredential(httpx.Auth):
    """
    Static API key credential.

    Without a header name the key is sent as a bearer token in the
    Authorization header; with one, the raw key is sent in that header.

    Attributes:
        header_name: Custom header carrying the key, or None for bearer auth
    """

    def __init__(self, key: str, header_name: Optional[str] = None):
        """
        Initialize the credential.

        Args:
            key: The API key
            header_name: Optional header to send the raw key in

        Raises:
            ValueError: If the key is empty
        """
        if not key:
            raise ValueError("API key must not be empty")
        self._key = key
        self.header_name = header_name

    def update(self, key: str) -> None:
        """Rotate the key used for subsequent requests."""
        if not key:
            raise ValueError("API key must not be empty")
        self._key = key

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if self.header_name:
            request.headers[self.header_name] = self._key
        else:
            request.headers[AUTHORIZATION_HEADER] = f"Bearer {self._key}"
        yield request

    def __repr__(self) -> str:
        return f"ApiKeyCredential(header_name={self.header_name!r})"


class TokenCredential(httpx.Auth):
    """
    Bearer token credential backed by an async token provider.

    The provider is awaited for every request, so it is responsible for
    any caching or refresh logic.
    """

    def __init__(self, get_token: Callable[[], Awaitable[str]]):
        """
        Initialize the credential.

        Args:
            get_token: Async callable returning a bearer token
        """
        self._get_token = get_token

    def sync_auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        raise RuntimeError("TokenCredential can only be used with an async HTTP client")

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        token = await self._get_token()
        request.headers[AUTHORIZATION_HEADER] = f"Bearer {token}"
        yield request
