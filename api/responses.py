"""ASGI response that streams one byte window of an open file."""

from __future__ import annotations

import asyncio
from typing import BinaryIO

from starlette.responses import Response
from starlette.types import Message, Receive, Scope, Send

from core.errors import SinkError
from core.streaming import ByteInterval, StreamOutcome, astream_window
from core.utils.logger import logger


class ASGIBodySink:
    """AsyncByteSink writing ``http.response.body`` messages."""

    def __init__(self, send: Send):
        self._send = send
        self.disconnected = False

    async def write(self, data: bytes) -> None:
        if self.disconnected:
            raise SinkError("Client disconnected")
        try:
            await self._send(
                {"type": "http.response.body", "body": data, "more_body": True}
            )
        except OSError as e:
            self.disconnected = True
            raise SinkError(f"Client disconnected: {e}", original_error=e) from e

    async def close(self) -> None:
        """Terminate the body."""
        await self._send({"type": "http.response.body", "body": b"", "more_body": False})


async def _watch_disconnect(receive: Receive, sink: ASGIBodySink) -> None:
    while True:
        message: Message = await receive()
        if message["type"] == "http.disconnect":
            sink.disconnected = True
            return


class WindowResponse(Response):
    """Streams ``interval`` of ``source`` after committing status and headers.

    The response takes ownership of ``source`` and closes it once the body
    is sent, the client goes away, or reading fails. Headers are fixed
    before the first byte, so a mid-stream failure can only truncate the
    body; it is logged and the connection is left for the server to close.
    """

    def __init__(
        self,
        source: BinaryIO,
        interval: ByteInterval,
        file_size: int,
        *,
        partial: bool,
        chunk_size: int,
        media_type: str | None = None,
        headers: dict[str, str] | None = None,
        send_body: bool = True,
    ) -> None:
        self.source = source
        self.interval = interval
        self.file_size = file_size
        self.chunk_size = chunk_size
        self.send_body = send_body
        self.outcome: StreamOutcome | None = None

        self.status_code = 206 if partial else 200
        self.media_type = media_type
        self.background = None
        self.body = b""
        self.init_headers(headers)
        self.headers["accept-ranges"] = "bytes"
        self.headers["content-length"] = str(interval.length)
        if partial:
            self.headers["content-range"] = interval.content_range(file_size)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await send(
                {
                    "type": "http.response.start",
                    "status": self.status_code,
                    "headers": self.raw_headers,
                }
            )
            if not self.send_body:
                await send({"type": "http.response.body", "body": b"", "more_body": False})
                return

            sink = ASGIBodySink(send)
            watcher = asyncio.create_task(_watch_disconnect(receive, sink))
            try:
                self.outcome = await astream_window(
                    self.source, self.interval, sink, self.chunk_size
                )
            finally:
                watcher.cancel()

            if self.outcome.complete:
                await sink.close()
            else:
                logger.warning(
                    f"Truncated response for bytes {self.interval.start}-{self.interval.end}: "
                    f"{self.outcome.stop.value} after {self.outcome.bytes_sent}/{self.outcome.expected} bytes"
                )
        finally:
            self.source.close()
