"""
Custom exceptions for the attestation pipeline.

Every error here is terminal for the session that raised it and never for
the service. ``close_code`` is the WebSocket close code sent to the prover.
"""

from __future__ import annotations

from enum import Enum

CLOSE_NORMAL = 1000
CLOSE_POLICY_VIOLATION = 1008
CLOSE_INTERNAL_ERROR = 1011


class AttestationError(Exception):
    """Base exception for session failures."""

    def __init__(self, message: str, close_code: int = CLOSE_INTERNAL_ERROR) -> None:
        super().__init__(message)
        self.close_code = close_code


class TransportError(AttestationError):
    """Frame read or write failure on the client transport."""


class EngineError(AttestationError):
    """Verification protocol failure reported by the engine."""


class PolicyReason(str, Enum):
    BAD_IDENTITY = "bad-identity"
    NO_COMMITMENTS = "no-commitments"
    UNSUPPORTED_ALGORITHM = "unsupported-algorithm"


class PolicyViolation(AttestationError):
    """Engine output rejected by the acceptance policy."""

    def __init__(self, reason: PolicyReason, message: str) -> None:
        super().__init__(f"{reason.value}: {message}", CLOSE_POLICY_VIOLATION)
        self.reason = reason


class SigningError(AttestationError):
    """Attestation could not be built, signed or encoded."""
