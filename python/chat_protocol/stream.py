"""
Location: python/chat_protocol/stream.py

Summary:
    NDJSON (Newline Delimited JSON) streaming utilities. Incrementally
    decodes a chunked byte stream into one message per non-blank line,
    handling lines split across chunks, CRLF endings and a final line
    without a terminator.

Usage:
    Used by client.py to decode streamed chat completions. The decoder
    itself is transport-agnostic and can be fed bytes from any source.

Example:
    from chat_protocol.stream import NdjsonDecoder, parse_ndjson_stream

    decoder = NdjsonDecoder()
    for item in decoder.feed(b'{"a": 1}\\n{"a":'):
        print(item)

    async with client.stream("POST", url) as response:
        async for item in parse_ndjson_stream(response):
            print(item)
"""

import json
import logging
from typing import (
    AsyncIterable,
    AsyncIterator,
    Callable,
    Generic,
    Iterable,
    Iterator,
    TypeVar,
    Union,
)

import httpx

from .errors import DecodeError, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

LINE_TERMINATOR = b"\n"


class NdjsonDecoder(Generic[T]):
    """
    Incremental NDJSON decoder.

    Bytes are appended to a single buffer as they arrive. Each complete
    line is removed from the buffer, stripped of a trailing carriage
    return and passed to ``decode``. Blank lines are skipped, as NDJSON
    allows them.

    A decoder holds the state of one stream and cannot be reused for
    another one.

    Attributes:
        decode: Callable turning one line of text into a message
    """

    def __init__(self, decode: Callable[[str], T] = json.loads):
        """
        Initialize the decoder.

        Args:
            decode: Callable applied to each non-blank line (default json.loads).
                ValueError raised by it (JSONDecodeError, pydantic
                ValidationError) is reported as DecodeError.
        """
        self.decode = decode
        self._buffer = bytearray()
        # Offset up to which the buffer is known to hold no terminator
        self._scanned = 0

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet terminated by a newline."""
        return len(self._buffer)

    def feed(self, chunk: Union[bytes, bytearray, str]) -> Iterator[T]:
        """
        Append a chunk and return the messages of the lines it completes.

        The chunk is buffered immediately; lines are decoded lazily as the
        returned iterator is consumed.

        Args:
            chunk: Raw bytes (str is encoded as UTF-8)

        Returns:
            Iterator over decoded messages, in line order

        Raises:
            DecodeError: While iterating, if a line cannot be decoded
        """
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8")
        self._buffer.extend(chunk)
        return self._drain()

    def flush(self) -> Iterator[T]:
        """
        Decode whatever remains in the buffer once the stream has ended.

        A final line without a trailing newline is still a line. An empty
        or blank remainder produces nothing.

        Returns:
            Iterator over zero or one decoded message
        """
        remainder = bytes(self._buffer)
        self._buffer.clear()
        self._scanned = 0
        return self._decode_line(remainder)

    def _drain(self) -> Iterator[T]:
        while True:
            index = self._buffer.find(LINE_TERMINATOR, self._scanned)
            if index < 0:
                self._scanned = len(self._buffer)
                return
            line = bytes(self._buffer[:index])
            del self._buffer[:index + 1]
            self._scanned = 0
            yield from self._decode_line(line)

    def _decode_line(self, raw: bytes) -> Iterator[T]:
        if raw.endswith(b"\r"):
            raw = raw[:-1]

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(
                f"NDJSON line is not valid UTF-8: {exc}",
                raw.decode("utf-8", errors="replace"),
            ) from exc

        if not text.strip():
            return

        try:
            item = self.decode(text)
        except DecodeError:
            raise
        except ValueError as exc:
            raise DecodeError(f"Invalid NDJSON line {text!r}: {exc}", text) from exc
        yield item


def iter_ndjson(
    chunks: Iterable[Union[bytes, str]],
    decode: Callable[[str], T] = json.loads,
) -> Iterator[T]:
    """
    Decode NDJSON from a synchronous iterable of chunks.

    Args:
        chunks: Byte chunks, in arrival order
        decode: Callable applied to each non-blank line

    Yields:
        One decoded message per non-blank line

    Raises:
        DecodeError: If a line cannot be decoded
    """
    decoder = NdjsonDecoder(decode)
    for chunk in chunks:
        yield from decoder.feed(chunk)
    yield from decoder.flush()


async def aiter_ndjson(
    chunks: AsyncIterable[Union[bytes, str]],
    decode: Callable[[str], T] = json.loads,
) -> AsyncIterator[T]:
    """
    Decode NDJSON from an asynchronous iterable of chunks.

    Nothing is read from ``chunks`` until the next item is requested.

    Args:
        chunks: Byte chunks, in arrival order
        decode: Callable applied to each non-blank line

    Yields:
        One decoded message per non-blank line

    Raises:
        DecodeError: If a line cannot be decoded
    """
    decoder = NdjsonDecoder(decode)
    async for chunk in chunks:
        for item in decoder.feed(chunk):
            yield item
    for item in decoder.flush():
        yield item


async def _aiter_response_bytes(response: httpx.Response) -> AsyncIterator[bytes]:
    try:
        async for chunk in response.aiter_bytes():
            yield chunk
    except (httpx.RequestError, httpx.StreamError) as exc:
        raise TransportError(f"Error reading response stream: {exc}", response) from exc


async def parse_ndjson_stream(
    response: httpx.Response,
    decode: Callable[[str], T] = json.loads,
) -> AsyncIterator[T]:
    """
    Parse an NDJSON stream from an httpx response.

    The response must have been opened with ``stream=True``. This function
    does not close the response; see NdjsonStream for that.

    Args:
        response: An httpx.Response object with an active stream
        decode: Callable applied to each non-blank line (default json.loads)

    Yields:
        Decoded messages from each line

    Raises:
        DecodeError: If a line cannot be decoded
        TransportError: If reading from the connection fails

    Example:
        async with client.stream("POST", url) as response:
            async for item in parse_ndjson_stream(response):
                process(item)
    """
    chunks = _aiter_response_bytes(response)
    items = aiter_ndjson(chunks, decode)
    try:
        async for item in items:
            yield item
    except DecodeError as exc:
        if exc.response is None:
            exc.response = response
        logger.debug("Aborting NDJSON stream: %s", exc)
        raise
    finally:
        await items.aclose()
        await chunks.aclose()


async def _iter_and_release(
    response: httpx.Response,
    decode: Callable[[str], T],
) -> AsyncIterator[T]:
    items = parse_ndjson_stream(response, decode)
    try:
        async for item in items:
            yield item
    finally:
        try:
            await items.aclose()
        finally:
            await response.aclose()


class NdjsonStream(Generic[T]):
    """
    Async iterator over the messages of a streamed NDJSON response.

    Owns the response and closes it once iteration ends, whether it
    finished, failed, was cancelled or was abandoned through ``aclose()``
    or the async context manager. A stream dropped mid-iteration is
    released when the event loop finalizes it. A stream can only be
    iterated once.

    Example:
        async with await client.get_streamed_completion(messages) as stream:
            async for delta in stream:
                print(delta.delta.content, end="")

    Attributes:
        response: The underlying httpx response
    """

    def __init__(self, response: httpx.Response, decode: Callable[[str], T] = json.loads):
        self.response = response
        self._iterator = _iter_and_release(response, decode)
        self._closed = False

    @property
    def status_code(self) -> int:
        """HTTP status code of the response."""
        return self.response.status_code

    @property
    def headers(self) -> httpx.Headers:
        """HTTP headers of the response."""
        return self.response.headers

    @property
    def closed(self) -> bool:
        """True once the stream has been released."""
        return self._closed

    def __aiter__(self) -> "NdjsonStream[T]":
        return self

    async def __anext__(self) -> T:
        if self._closed:
            raise StopAsyncIteration
        try:
            return await self._iterator.__anext__()
        except BaseException:
            # End of stream, decode/transport failure or cancellation
            await self.aclose()
            raise

    async def aclose(self) -> None:
        """
        Stop decoding and release the response.

        Safe to call more than once.
        """
        if self._closed:
            return
        self._closed = True
        try:
            await self._iterator.aclose()
        finally:
            await self.response.aclose()

    async def __aenter__(self) -> "NdjsonStream[T]":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()
