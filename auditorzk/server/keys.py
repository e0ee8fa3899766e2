"""
Process-wide secp256k1 signing key for attestations.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from coincurve import PrivateKey, PublicKeyXOnly

from auditorzk.common.exceptions import SigningError

logger = logging.getLogger(__name__)


class EphemeralKeyProvider:
    """Generates the signing key on first use and keeps it for the process.

    The private key is never written to disk, so a restart yields a new
    verifier identity. The hex x-only public key is written to
    ``public_key_path`` each time a key is generated.
    """

    def __init__(self, public_key_path: Path):
        self.public_key_path = public_key_path
        self._key: PrivateKey | None = None
        self._lock = threading.Lock()

    def get_signing_key(self) -> PrivateKey:
        with self._lock:
            if self._key is None:
                self._key = self._generate_key()
            return self._key

    def public_key_bytes(self) -> bytes:
        """Raw 32-byte BIP-340 public key."""
        return PublicKeyXOnly.from_secret(self.get_signing_key().secret).format()

    def _generate_key(self) -> PrivateKey:
        logger.info("Generating new secp256k1 signing key")
        key = PrivateKey()
        public_key = PublicKeyXOnly.from_secret(key.secret).format()

        try:
            self.public_key_path.parent.mkdir(parents=True, exist_ok=True)
            self.public_key_path.write_text(public_key.hex())
        except OSError as err:
            msg = f"Failed to save public key to {self.public_key_path}: {err}"
            raise SigningError(msg) from err

        logger.info("Public key saved to %s", self.public_key_path)
        logger.warning("Key persistence not implemented, using ephemeral key")
        return key
