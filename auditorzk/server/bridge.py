"""
Relay between the prover's WebSocket and the engine's duplex channel.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from fastapi import WebSocketDisconnect

from auditorzk.common.config import Config
from auditorzk.common.exceptions import TransportError

if TYPE_CHECKING:
    from fastapi import WebSocket

    from auditorzk.server.duplex import DuplexEndpoint

logger = logging.getLogger(__name__)

# Errors a WebSocket raises once the connection is broken or already closed
_SEND_ERRORS = (WebSocketDisconnect, RuntimeError, OSError)


class StreamBridge:
    """Runs the two independent relay loops of one session."""

    def __init__(
        self,
        websocket: WebSocket,
        endpoint: DuplexEndpoint,
        chunk_size: int = Config.RELAY_CHUNK_SIZE,
        label: str = "",
    ):
        self.websocket = websocket
        self.endpoint = endpoint
        self.chunk_size = chunk_size
        self.label = label
        self.bytes_in = 0
        self.bytes_out = 0
        # Why the relay stopped early, if it did
        self.error: TransportError | None = None
        self._tasks: list[asyncio.Task[None]] = []

    async def inbound(self) -> None:
        """WebSocket binary frames -> duplex channel."""
        try:
            while True:
                message = await self.websocket.receive()
                if message["type"] == "websocket.disconnect":
                    logger.debug("[%s] WebSocket closed by prover", self.label)
                    self.error = TransportError("prover closed the connection")
                    break
                data = message.get("bytes")
                if data is None:
                    # Only binary frames carry protocol bytes
                    continue
                await self.endpoint.write(data)
                self.bytes_in += len(data)
        except BrokenPipeError as e:
            logger.warning("[%s] Error forwarding to engine: %s", self.label, e)
        except _SEND_ERRORS as e:
            logger.warning("[%s] WebSocket error: %s", self.label, e)
            self.error = TransportError(f"WebSocket error: {e}")
        finally:
            await self.endpoint.shutdown()

    async def outbound(self) -> None:
        """Duplex channel -> one binary frame per chunk read."""
        try:
            while True:
                data = await self.endpoint.read(self.chunk_size)
                if not data:
                    break
                await self.websocket.send_bytes(data)
                self.bytes_out += len(data)
        except _SEND_ERRORS as e:
            logger.warning("[%s] Error sending to WebSocket: %s", self.label, e)
            self.error = TransportError(f"Error sending to WebSocket: {e}")
            # Unblock an engine waiting for the prover to drain
            await self.endpoint.close()

    def start(self) -> None:
        self._tasks = [
            asyncio.create_task(self.inbound(), name=f"{self.label}-inbound"),
            asyncio.create_task(self.outbound(), name=f"{self.label}-outbound"),
        ]

    async def finish(self, grace: float = 5.0) -> None:
        """Let pending engine output drain, then stop whatever still runs.

        The outbound loop ends by itself once the engine side is closed. The
        inbound loop normally waits on the prover until it is cancelled here.
        """
        if not self._tasks:
            return
        outbound = self._tasks[1]
        await asyncio.wait({outbound}, timeout=grace)
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        logger.debug(
            "[%s] Relay stopped: %d bytes in, %d bytes out",
            self.label,
            self.bytes_in,
            self.bytes_out,
        )
