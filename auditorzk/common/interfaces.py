"""
Interfaces and protocols for dependency injection.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from coincurve import PrivateKey

from auditorzk.common.models import Attestation, ProtocolLimits, VerificationOutput


class IByteStream(Protocol):
    """One end of a byte-oriented duplex channel."""

    async def read(self, n: int = -1) -> bytes: ...

    async def write(self, data: bytes) -> None: ...

    async def close(self) -> None: ...


class IVerificationEngine(Protocol):
    """External MPC-TLS verifier driven over a duplex endpoint."""

    async def verify(
        self, socket: IByteStream, limits: ProtocolLimits
    ) -> VerificationOutput: ...


class IKeyProvider(Protocol):
    """Source of the process-wide signing key."""

    def get_signing_key(self) -> PrivateKey: ...

    def public_key_bytes(self) -> bytes: ...


class IAttestationStore(Protocol):
    """Destination for completed attestations."""

    def save(self, session_id: str, payload: bytes) -> Path: ...

    def load(self, path: Path) -> Attestation: ...
