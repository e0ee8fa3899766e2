"""Canonical attestation message and BIP-340 signature helpers.

Signed message layout, parsed by consumers at fixed offsets::

    0..32   server name, UTF-8, NUL-padded
    32..40  timestamp, unsigned 64-bit little-endian seconds
    40..72  commitment
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from coincurve import PublicKeyXOnly
from cryptography.hazmat.primitives import hashes

from auditorzk.common.exceptions import SigningError

if TYPE_CHECKING:
    from auditorzk.common.models import Attestation

IDENTITY_FIELD_WIDTH = 32
TIMESTAMP_WIDTH = 8
COMMITMENT_LENGTH = 32
MESSAGE_LENGTH = IDENTITY_FIELD_WIDTH + TIMESTAMP_WIDTH + COMMITMENT_LENGTH
SIGNATURE_VERSION = bytes([0x01, 0x00, 0x00])
SCHNORR_SIGNATURE_LENGTH = 64
PUBLIC_KEY_LENGTH = 32


class CryptoUtils:
    """Utility class for attestation message construction and checking."""

    @staticmethod
    def build_message(
        server_name: str,
        timestamp: int,
        commitment: bytes,
        identity_width: int = IDENTITY_FIELD_WIDTH,
    ) -> bytes:
        """Build the fixed-width message that gets hashed and signed."""
        identity = server_name.encode("utf-8")
        if len(identity) > identity_width:
            msg = (
                f"server name is {len(identity)} bytes, "
                f"field holds at most {identity_width}"
            )
            raise SigningError(msg)
        if b"\x00" in identity:
            raise SigningError("server name must not contain NUL bytes")
        if not 0 <= timestamp < 2**64:
            raise SigningError(f"timestamp {timestamp} does not fit in u64")
        if len(commitment) != COMMITMENT_LENGTH:
            msg = (
                f"commitment is {len(commitment)} bytes, "
                f"expected {COMMITMENT_LENGTH}"
            )
            raise SigningError(msg)
        return (
            identity.ljust(identity_width, b"\x00")
            + timestamp.to_bytes(TIMESTAMP_WIDTH, "little")
            + commitment
        )

    @staticmethod
    def digest(message: bytes) -> bytes:
        """SHA-256 of the canonical message."""
        h = hashes.Hash(hashes.SHA256())
        h.update(message)
        return h.finalize()

    @staticmethod
    def encode_signature(
        signature: bytes, version: bytes = SIGNATURE_VERSION
    ) -> str:
        """Prefix the raw signature with its version tag and hex-encode it."""
        return (version + signature).hex()

    @staticmethod
    def decode_signature(
        encoded: str, version: bytes = SIGNATURE_VERSION
    ) -> bytes:
        """Strip and check the version tag; return the raw signature."""
        raw = bytes.fromhex(encoded)
        if raw[: len(version)] != version:
            msg = f"unsupported signature version {raw[: len(version)].hex()}"
            raise ValueError(msg)
        signature = raw[len(version) :]
        if len(signature) != SCHNORR_SIGNATURE_LENGTH:
            msg = f"signature is {len(signature)} bytes, expected 64"
            raise ValueError(msg)
        return signature

    @staticmethod
    def verify_attestation(attestation: Attestation) -> bool:
        """Check the signature against the message rebuilt from the fields."""
        try:
            message = CryptoUtils.build_message(
                attestation.server_name,
                attestation.timestamp,
                attestation.balance_commitment,
            )
            signature = CryptoUtils.decode_signature(attestation.signature)
            if len(attestation.verifier_pubkey) != PUBLIC_KEY_LENGTH:
                return False
            public_key = PublicKeyXOnly(attestation.verifier_pubkey)
        except (SigningError, ValueError):
            return False
        return public_key.verify(signature, CryptoUtils.digest(message))
