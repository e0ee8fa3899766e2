"""Business logic for the verifier service.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from auditorzk.server.session import VerificationSession

if TYPE_CHECKING:
    from fastapi import WebSocket

    from auditorzk.common.config import Config
    from auditorzk.common.interfaces import IKeyProvider
    from auditorzk.server.commitment_validator import CommitmentValidator
    from auditorzk.server.orchestrator import VerificationOrchestrator
    from auditorzk.server.signer import AttestationSigner


class VerifierService:
    """Owns the shared pipeline components and starts sessions."""

    def __init__(  # noqa: PLR0913
        self,
        config: Config,
        orchestrator: VerificationOrchestrator,
        validator: CommitmentValidator,
        signer: AttestationSigner,
        key_provider: IKeyProvider,
    ):
        self.config = config
        self.orchestrator = orchestrator
        self.validator = validator
        self.signer = signer
        self.key_provider = key_provider

    def health(self) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "timestamp": int(time.time())}

    def public_key(self) -> dict[str, str]:
        return {"verifier_pubkey": self.key_provider.public_key_bytes().hex()}

    def new_session(self, websocket: WebSocket, peer: str) -> VerificationSession:
        return VerificationSession(
            websocket,
            peer,
            orchestrator=self.orchestrator,
            validator=self.validator,
            signer=self.signer,
            duplex_capacity=self.config.DUPLEX_CAPACITY,
            chunk_size=self.config.RELAY_CHUNK_SIZE,
        )
