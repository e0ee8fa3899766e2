"""
Routes for the verifier server.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from auditorzk.common.exceptions import (
    CLOSE_INTERNAL_ERROR,
    CLOSE_NORMAL,
    AttestationError,
)

from .services import VerifierService

logger = logging.getLogger(__name__)

# RFC 6455 limits the close reason to 123 bytes
MAX_CLOSE_REASON = 123


class VerifierRoutes:
    """Handles FastAPI routes for the verifier server."""

    def __init__(self, service: VerifierService):
        self.service = service

    def setup_routes(self, app: FastAPI) -> None:
        """Setup API routes on the FastAPI app."""
        app.get("/health")(self.health)
        app.get("/pubkey")(self.pubkey)
        app.websocket("/")(self.verify)
        app.websocket("/verify")(self.verify)

    async def health(self) -> dict[str, Any]:
        """Handle /health endpoint."""
        return self.service.health()

    async def pubkey(self) -> dict[str, str]:
        """Handle /pubkey endpoint."""
        return self.service.public_key()

    async def verify(self, websocket: WebSocket) -> None:
        """Run one verification session over the WebSocket."""
        peer = (
            f"{websocket.client.host}:{websocket.client.port}"
            if websocket.client
            else "unknown"
        )
        await websocket.accept()
        logger.info("WebSocket established with %s", peer)

        session = self.service.new_session(websocket, peer)
        try:
            attestation = await session.run()
        except AttestationError as e:
            logger.error(
                "[%s] Error handling client %s: %s", session.session_id, peer, e
            )
            await self._close(websocket, e.close_code, str(e))
            return
        except Exception:
            logger.exception(
                "[%s] Unexpected error handling client %s", session.session_id, peer
            )
            await self._close(websocket, CLOSE_INTERNAL_ERROR, "internal error")
            return

        try:
            await websocket.send_text(attestation.decode())
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            logger.warning(
                "[%s] Could not deliver attestation to %s: %s",
                session.session_id,
                peer,
                e,
            )
            return
        await self._close(websocket, CLOSE_NORMAL, "")
        logger.info("[%s] Verification complete for %s", session.session_id, peer)

    @staticmethod
    async def _close(websocket: WebSocket, code: int, reason: str) -> None:
        reason_bytes = reason.encode()[:MAX_CLOSE_REASON]
        try:
            await websocket.close(
                code=code, reason=reason_bytes.decode("utf-8", errors="ignore")
            )
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            logger.debug("WebSocket already closed: %s", e)
