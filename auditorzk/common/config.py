"""
Configuration settings for the attestation verifier service.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path


class Config:
    """Central configuration class for all service settings."""

    # Limits on the TLS session being verified, sized to the balance API
    MAX_SENT_DATA: int = 4096  # 4KB for requests
    MAX_RECV_DATA: int = 16384  # 16KB for responses

    # Relay settings
    DUPLEX_CAPACITY: int = 1 << 20  # 1MB buffer per direction
    RELAY_CHUNK_SIZE: int = 8192
    DEFAULT_SESSION_TIMEOUT: float = 300.0

    # Origin policy
    ALLOWED_DOMAIN_SUFFIXES: tuple[str, ...] = ("plaid.com",)
    ALLOWED_LITERAL_IDENTITIES: tuple[str, ...] = ("localhost", "127.0.0.1")

    def __init__(self) -> None:
        # Server settings
        self.SERVER_HOST: str = os.getenv("AUDITORZK_SERVER_HOST", "0.0.0.0")  # noqa: S104
        self.SERVER_PORT: int = int(os.getenv("AUDITORZK_SERVER_PORT", "7047"))

        # Verification engine, as "package.module:attribute"
        self.ENGINE: str | None = os.getenv("AUDITORZK_ENGINE")

        self.SESSION_TIMEOUT: float = float(
            os.getenv("AUDITORZK_SESSION_TIMEOUT", str(self.DEFAULT_SESSION_TIMEOUT))
        )

        # File paths
        self.DATA_DIR: Path = Path(
            os.getenv("AUDITORZK_DATA_DIR", str(Path.cwd() / "config"))
        )
        self.PUBLIC_KEY_PATH: Path = self.DATA_DIR / "notary_pubkey.hex"
        self.ATTESTATIONS_DIR: Path = self.DATA_DIR / "attestations"
        self.LATEST_ATTESTATION_PATH: Path = Path(
            os.getenv(
                "AUDITORZK_ATTESTATION_PATH", "/tmp/auditor_zk_attestation.json"  # noqa: S108
            )
        )

        # Logging
        self.LOG_LEVEL: int = logging.getLevelName(
            os.getenv("AUDITORZK_LOG_LEVEL", "INFO").upper()
        )
