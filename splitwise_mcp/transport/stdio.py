"""Stdio binding: JSON-RPC messages framed over stdin/stdout.

Two framings are accepted on input:

- ``Content-Length: N`` headers, a blank line, then N bytes of JSON
  (the MCP/LSP stream framing).
- A bare JSON object on one line (newline-delimited JSON).

Each reply is written in the framing the request arrived in. Messages are
handled one at a time, so replies leave in receipt order.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import sys
from dataclasses import dataclass

from splitwise_mcp.rpc.dispatcher import Dispatcher
from splitwise_mcp.rpc.protocol import PARSE_ERROR, make_error_response, serialize_response
from splitwise_mcp.rpc.types import Response

logger = logging.getLogger(__name__)

# Upper bound on a single framed message body
MAX_MESSAGE_SIZE = 10 * 1024 * 1024  # 10 MB
DISCARD_CHUNK_SIZE = 64 * 1024


class Framing(enum.Enum):
    """How a message was delimited on the stream."""

    CONTENT_LENGTH = "content-length"
    NEWLINE = "newline"


class FramingError(Exception):
    """Raised for malformed framing.

    Attributes:
        fatal: True when the stream can no longer be delimited (a body of
            unknown length follows). Otherwise the offending input has been
            consumed and the caller may keep reading.
    """

    def __init__(self, message: str, fatal: bool = False) -> None:
        super().__init__(message)
        self.fatal = fatal


@dataclass
class Frame:
    body: bytes
    framing: Framing


async def _discard_line(reader: asyncio.StreamReader) -> None:
    while True:
        try:
            await reader.readuntil(b"\n")
            return
        except asyncio.IncompleteReadError:
            return
        except asyncio.LimitOverrunError as e:
            await reader.readexactly(e.consumed)


async def _readline(reader: asyncio.StreamReader) -> bytes:
    """Read one line, dropping lines longer than the reader's limit."""
    try:
        return await reader.readuntil(b"\n")
    except asyncio.IncompleteReadError as e:
        return e.partial
    except asyncio.LimitOverrunError as e:
        await _discard_line(reader)
        raise FramingError("Line exceeds the maximum message size") from e


async def _discard(reader: asyncio.StreamReader, count: int) -> None:
    while count > 0:
        chunk = await reader.read(min(count, DISCARD_CHUNK_SIZE))
        if not chunk:
            return
        count -= len(chunk)


async def _read_headers(reader: asyncio.StreamReader, first_line: bytes) -> dict[str, str]:
    headers: dict[str, str] = {}
    line = first_line
    while True:
        text = line.decode("ascii", errors="replace").strip()
        if not text:
            return headers
        name, sep, value = text.partition(":")
        if not sep:
            raise FramingError(f"Malformed header line: {text!r}")
        headers[name.strip().lower()] = value.strip()

        line = await _readline(reader)
        if not line:
            raise FramingError("Unexpected end of stream inside headers")


async def read_message(reader: asyncio.StreamReader) -> Frame | None:
    """Read one message from the stream.

    Returns:
        The next Frame, or None at end of stream.

    Raises:
        FramingError: If a line is too long or a header block is malformed.
            An oversized ``Content-Length`` body is skipped. A
            ``Content-Length`` that is not a non-negative integer leaves the
            body undelimited, so the error is fatal.
    """
    while True:
        line = await _readline(reader)
        if not line:
            return None
        stripped = line.strip()
        if not stripped:
            continue

        if stripped.startswith((b"{", b"[")):
            return Frame(body=stripped, framing=Framing.NEWLINE)

        headers = await _read_headers(reader, line)
        raw_length = headers.get("content-length")
        if raw_length is None:
            raise FramingError("Missing Content-Length header")
        try:
            length = int(raw_length)
        except ValueError as e:
            raise FramingError(f"Invalid Content-Length: {raw_length!r}", fatal=True) from e
        if length < 0:
            raise FramingError(f"Content-Length out of range: {length}", fatal=True)
        if length > MAX_MESSAGE_SIZE:
            await _discard(reader, length)
            raise FramingError(f"Content-Length out of range: {length}")

        try:
            body = await reader.readexactly(length)
        except asyncio.IncompleteReadError:
            logger.warning("Stream ended inside a message body (%d bytes expected)", length)
            return None
        return Frame(body=body, framing=Framing.CONTENT_LENGTH)


def encode_message(text: str, framing: Framing) -> bytes:
    """Encode message text for the wire in the given framing."""
    payload = text.encode("utf-8")
    if framing is Framing.NEWLINE:
        return payload + b"\n"
    header = f"Content-Length: {len(payload)}\r\n\r\n".encode("ascii")
    return header + payload


async def write_message(
    writer: asyncio.StreamWriter,
    response: Response,
    framing: Framing = Framing.CONTENT_LENGTH,
) -> None:
    writer.write(encode_message(serialize_response(response), framing))
    await writer.drain()


class StdioServer:
    """Reader loop serving one dispatcher over a byte stream pair."""

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    async def serve(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        """Process messages until end of stream or an unrecoverable framing error.

        Args:
            reader: Input stream (stdin).
            writer: Output stream (stdout).
        """
        logger.info("Splitwise MCP server running on stdio")
        while True:
            try:
                frame = await read_message(reader)
            except FramingError as e:
                logger.warning("Framing error: %s", e)
                await write_message(
                    writer,
                    make_error_response(None, PARSE_ERROR, "Parse error", str(e)),
                )
                if e.fatal:
                    logger.error("Cannot resynchronize input stream, stopping")
                    return
                continue

            if frame is None:
                logger.info("stdin closed, stopping")
                return

            response = await self._dispatcher.handle_message(frame.body)
            if response is not None:
                await write_message(writer, response, frame.framing)


async def open_stdio_streams() -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """Wrap the process's stdin/stdout as asyncio streams."""
    loop = asyncio.get_running_loop()

    reader = asyncio.StreamReader(limit=MAX_MESSAGE_SIZE)
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin)

    transport, write_protocol = await loop.connect_write_pipe(
        asyncio.streams.FlowControlMixin, sys.stdout
    )
    writer = asyncio.StreamWriter(transport, write_protocol, reader, loop)
    return reader, writer


async def run_stdio(dispatcher: Dispatcher) -> None:
    """Serve the dispatcher over the process's stdin/stdout."""
    reader, writer = await open_stdio_streams()
    try:
        await StdioServer(dispatcher).serve(reader, writer)
    finally:
        writer.close()
