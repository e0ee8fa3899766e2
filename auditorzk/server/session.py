"""
One verification session per accepted WebSocket.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from auditorzk.common.config import Config
from auditorzk.common.exceptions import EngineError, PolicyReason, PolicyViolation
from auditorzk.server.bridge import StreamBridge
from auditorzk.server.duplex import duplex

if TYPE_CHECKING:
    from fastapi import WebSocket

    from auditorzk.server.commitment_validator import CommitmentValidator
    from auditorzk.server.orchestrator import VerificationOrchestrator
    from auditorzk.server.signer import AttestationSigner

logger = logging.getLogger(__name__)


class VerificationSession:
    """Relays prover traffic to the engine, then validates and signs the result."""

    def __init__(  # noqa: PLR0913
        self,
        websocket: WebSocket,
        peer: str,
        orchestrator: VerificationOrchestrator,
        validator: CommitmentValidator,
        signer: AttestationSigner,
        duplex_capacity: int = Config.DUPLEX_CAPACITY,
        chunk_size: int = Config.RELAY_CHUNK_SIZE,
    ):
        self.session_id = str(uuid.uuid4())
        self.websocket = websocket
        self.peer = peer
        self.orchestrator = orchestrator
        self.validator = validator
        self.signer = signer
        self.duplex_capacity = duplex_capacity
        self.chunk_size = chunk_size

    async def run(self) -> bytes:
        """Return the serialized attestation.

        Raises:
            AttestationError: the session's terminal error
        """
        logger.info("[%s] Starting verification for %s", self.session_id, self.peer)
        prover_end, verifier_end = duplex(self.duplex_capacity)
        bridge = StreamBridge(
            self.websocket, prover_end, self.chunk_size, label=self.session_id
        )
        bridge.start()
        try:
            try:
                output = await self.orchestrator.verify(verifier_end, self.session_id)
            except EngineError as err:
                # A relay failure is the root cause of the engine error
                if bridge.error is not None:
                    raise bridge.error from err
                raise
            commitment = self.validator.validate(output, self.session_id)
            if output.server_name is None:
                raise PolicyViolation(
                    PolicyReason.BAD_IDENTITY, "engine output names no server"
                )
            attestation = self.signer.sign(
                output.server_name, commitment, self.session_id
            )
        finally:
            await bridge.finish()

        logger.info(
            "[%s] Attestation signed, %d bytes", self.session_id, len(attestation)
        )
        return attestation
