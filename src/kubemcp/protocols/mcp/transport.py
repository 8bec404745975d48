"""MCP stdio transport — ``Content-Length`` framed JSON-RPC messages.

Each frame is a header block terminated by a blank line (``\\r\\n\\r\\n``)
that carries ``Content-Length: <n>``, followed by exactly ``n`` bytes of
UTF-8 JSON::

    Content-Length: 46\\r\\n
    \\r\\n
    {"jsonrpc":"2.0","id":1,"method":"tools/list"}

The reader keeps unconsumed bytes between calls, so a single read may
deliver several frames or only part of one.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
import sys
from typing import Any, Protocol, runtime_checkable

from kubemcp.protocols.errors import FramingError, MessageDecodeError

logger = logging.getLogger(__name__)

HEADER_TERMINATOR = b"\r\n\r\n"

_CONTENT_LENGTH_RE = re.compile(rb"^content-length[ \t]*:[ \t]*(\d+)[ \t]*$", re.IGNORECASE)


@runtime_checkable
class ByteReader(Protocol):
    """Async byte source; ``read`` returns ``b""`` at end of stream."""

    async def read(self, n: int = -1) -> bytes: ...


@runtime_checkable
class ByteWriter(Protocol):
    """Async byte sink."""

    def write(self, data: bytes) -> None: ...
    async def drain(self) -> None: ...


def encode_message(payload: Any) -> bytes:
    """Frame *payload* as header plus UTF-8 JSON body.

    ``Content-Length`` counts encoded bytes, not characters.
    """
    body = json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    header = f"Content-Length: {len(body)}\r\n\r\n".encode("ascii")
    return header + body


def parse_content_length(header: bytes) -> int:
    """Return the ``Content-Length`` declared in a header block.

    Raises:
        FramingError: If the field is missing or not a decimal number.
    """
    for line in header.split(b"\r\n"):
        match = _CONTENT_LENGTH_RE.match(line.strip())
        if match:
            return int(match.group(1))
    msg = f"Header block has no valid Content-Length: {header[:200]!r}"
    raise FramingError(msg)


class MessageTransport:
    """Reads and writes framed JSON-RPC messages over a byte stream.

    Reading is bounded: a header longer than ``max_header_bytes`` without a
    terminator, a header without ``Content-Length``, or a body larger than
    ``max_message_bytes`` raises :class:`FramingError` instead of waiting
    for data that can never complete the frame.
    """

    def __init__(
        self,
        reader: ByteReader,
        writer: ByteWriter,
        *,
        max_header_bytes: int = 8192,
        max_message_bytes: int = 64 * 1024 * 1024,
        read_chunk_size: int = 65536,
    ) -> None:
        self._reader = reader
        self._writer = writer
        self._max_header_bytes = max_header_bytes
        self._max_message_bytes = max_message_bytes
        self._read_chunk_size = read_chunk_size
        self._buffer = bytearray()

    async def read_message(self) -> Any:
        """Return the next decoded message, or ``None`` at end of stream.

        Raises:
            FramingError: On unrecoverable framing problems.
            MessageDecodeError: If a complete frame's body is not JSON.  The
                frame has been consumed, so reading may continue.
        """
        while True:
            body = self._extract_frame()
            if body is not None:
                return _decode_body(body)

            chunk = await self._reader.read(self._read_chunk_size)
            if not chunk:
                if self._buffer.strip():
                    logger.warning(
                        "Input closed with %d bytes of incomplete frame discarded",
                        len(self._buffer),
                    )
                self._buffer.clear()
                return None
            self._buffer.extend(chunk)

    async def write_message(self, payload: Any) -> None:
        """Serialize *payload* and write it as one frame."""
        self._writer.write(encode_message(payload))
        await self._writer.drain()

    def _extract_frame(self) -> bytes | None:
        """Pop one complete body off the buffer, if one has fully arrived."""
        header_end = self._buffer.find(HEADER_TERMINATOR)
        if header_end == -1:
            if len(self._buffer) > self._max_header_bytes:
                msg = f"No header terminator within {self._max_header_bytes} bytes"
                raise FramingError(msg)
            return None

        content_length = parse_content_length(bytes(self._buffer[:header_end]))
        if content_length > self._max_message_bytes:
            msg = (
                f"Declared Content-Length {content_length} exceeds "
                f"limit of {self._max_message_bytes} bytes"
            )
            raise FramingError(msg)

        body_start = header_end + len(HEADER_TERMINATOR)
        body_end = body_start + content_length
        if len(self._buffer) < body_end:
            return None

        body = bytes(self._buffer[body_start:body_end])
        del self._buffer[:body_end]
        return body


def _decode_body(body: bytes) -> Any:
    try:
        return json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MessageDecodeError(str(exc)) from exc


async def open_stdio_transport(**kwargs: Any) -> MessageTransport:
    """Wrap this process's stdin/stdout in a :class:`MessageTransport`.

    Keyword arguments are passed through to :class:`MessageTransport`.
    """
    loop = asyncio.get_running_loop()

    reader = asyncio.StreamReader()
    await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), sys.stdin)

    write_transport, write_protocol = await loop.connect_write_pipe(
        asyncio.streams.FlowControlMixin, sys.stdout
    )
    writer = asyncio.StreamWriter(write_transport, write_protocol, reader, loop)

    return MessageTransport(reader, writer, **kwargs)
