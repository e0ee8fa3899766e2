"""
Attestation persistence.
"""

from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path

from auditorzk.common.models import Attestation

logger = logging.getLogger(__name__)


class AttestationStore:
    """Writes one file per session plus a "latest" file for the settlement side.

    Per-session files never overwrite each other. The latest file is replaced
    atomically, so a reader sees either the previous or the new attestation.
    """

    def __init__(self, attestations_dir: Path, latest_path: Path | None = None):
        self.attestations_dir = attestations_dir
        self.latest_path = latest_path

    def save(self, session_id: str, payload: bytes) -> Path:
        """Save serialized attestation bytes for a session."""
        self.attestations_dir.mkdir(parents=True, exist_ok=True)
        path = self.attestations_dir / f"{session_id}.json"
        self._replace_atomically(path, payload)

        if self.latest_path is not None:
            try:
                self._replace_atomically(self.latest_path, payload)
            except OSError:
                # Both files are written or neither is
                path.unlink(missing_ok=True)
                raise
            logger.info("Latest attestation updated at %s", self.latest_path)
        logger.info("Attestation saved to %s", path)
        return path

    @staticmethod
    def load(path: Path) -> Attestation:
        """Load an attestation from file."""
        return Attestation.model_validate_json(path.read_bytes())

    @staticmethod
    def _replace_atomically(target: Path, payload: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_name(f".{target.name}.{uuid.uuid4().hex}.tmp")
        try:
            tmp.write_bytes(payload)
            os.replace(tmp, target)
        finally:
            tmp.unlink(missing_ok=True)
