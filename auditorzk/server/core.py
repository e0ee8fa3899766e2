"""
Verifier server assembly using FastAPI.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import FastAPI

from auditorzk.common.config import Config

from .commitment_validator import CommitmentValidator
from .keys import EphemeralKeyProvider
from .orchestrator import VerificationOrchestrator
from .persistence import AttestationStore
from .routes import VerifierRoutes
from .services import VerifierService
from .signer import AttestationSigner

if TYPE_CHECKING:
    from auditorzk.common.interfaces import (
        IAttestationStore,
        IKeyProvider,
        IVerificationEngine,
    )


class VerifierServer:
    """Wires the engine, policy and signer into a FastAPI app.

    The key provider is created here, once, and shared by every session.
    """

    def __init__(  # noqa: PLR0913
        self,
        engine: IVerificationEngine,
        config: Config | None = None,
        key_provider: IKeyProvider | None = None,
        store: IAttestationStore | None = None,
        session_timeout: float | None = None,
    ):
        self.config = config or Config()
        self.server_host = self.config.SERVER_HOST
        self.server_port = self.config.SERVER_PORT

        self.key_provider = key_provider or EphemeralKeyProvider(
            self.config.PUBLIC_KEY_PATH
        )
        self.store = store or AttestationStore(
            self.config.ATTESTATIONS_DIR, self.config.LATEST_ATTESTATION_PATH
        )

        self.orchestrator = VerificationOrchestrator(
            engine,
            max_sent_data=self.config.MAX_SENT_DATA,
            max_recv_data=self.config.MAX_RECV_DATA,
            timeout=(
                session_timeout
                if session_timeout is not None
                else self.config.SESSION_TIMEOUT
            ),
        )
        self.validator = CommitmentValidator(
            self.config.ALLOWED_DOMAIN_SUFFIXES,
            self.config.ALLOWED_LITERAL_IDENTITIES,
        )
        self.signer = AttestationSigner(self.key_provider, self.store)
        self.service = VerifierService(
            self.config,
            self.orchestrator,
            self.validator,
            self.signer,
            self.key_provider,
        )

        self.app = FastAPI(title="AuditorZK Verifier")
        VerifierRoutes(self.service).setup_routes(self.app)
