"""
Attestation signing.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from coincurve import PublicKeyXOnly

from auditorzk.common.crypto import CryptoUtils
from auditorzk.common.exceptions import SigningError
from auditorzk.common.models import Attestation

if TYPE_CHECKING:
    from auditorzk.common.interfaces import IAttestationStore, IKeyProvider


class AttestationSigner:
    """Signs (server name, timestamp, commitment) with the verifier key."""

    def __init__(
        self,
        key_provider: IKeyProvider,
        store: IAttestationStore,
        clock: Callable[[], float] = time.time,
    ):
        self.key_provider = key_provider
        self.store = store
        self.clock = clock
        self.logger = logging.getLogger(__name__)

    def sign(self, server_name: str, commitment: bytes, session_id: str) -> bytes:
        """Create, persist and return the serialized attestation.

        Raises:
            SigningError: if any step fails; nothing is persisted in that case
        """
        self.logger.info("[%s] Creating and signing attestation...", session_id)
        signing_key = self.key_provider.get_signing_key()

        try:
            timestamp = int(self.clock())
        except (OSError, OverflowError, ValueError) as err:
            raise SigningError(f"Failed to read clock: {err}") from err

        message = CryptoUtils.build_message(server_name, timestamp, commitment)
        message_hash = CryptoUtils.digest(message)
        signature = signing_key.sign_schnorr(message_hash)
        hex_signature = CryptoUtils.encode_signature(signature)

        attestation = Attestation(
            server_name=server_name,
            timestamp=timestamp,
            balance_commitment=commitment,
            signature=hex_signature,
            verifier_pubkey=PublicKeyXOnly.from_secret(signing_key.secret).format(),
        )
        self.logger.info(
            "[%s] Attestation details: server=%s timestamp=%d commitment=%s...",
            session_id,
            server_name,
            timestamp,
            commitment[:16].hex(),
        )
        self.logger.info(
            "[%s] Attestation signed with BIP-340 Schnorr: %s...",
            session_id,
            hex_signature[:32],
        )

        try:
            payload = attestation.model_dump_json(indent=2).encode()
        except ValueError as err:
            raise SigningError(f"Failed to serialize attestation: {err}") from err

        try:
            self.store.save(session_id, payload)
        except OSError as err:
            raise SigningError(f"Failed to save attestation: {err}") from err

        return payload
