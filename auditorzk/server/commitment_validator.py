"""
Acceptance policy for verification output.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from auditorzk.common.config import Config
from auditorzk.common.exceptions import PolicyReason, PolicyViolation
from auditorzk.common.models import (
    HashAlgorithm,
    HashCommitment,
    UnknownCommitment,
    VerificationOutput,
)


class CommitmentValidator:
    """Decides whether engine output may be attested and picks the commitment.

    The commitment value is taken exactly as the prover supplied it. It is
    never recomputed from revealed plaintext, so pure selective disclosure
    works without the verifier seeing the committed data.
    """

    def __init__(
        self,
        allowed_domain_suffixes: Iterable[str] = Config.ALLOWED_DOMAIN_SUFFIXES,
        allowed_identities: Iterable[str] = Config.ALLOWED_LITERAL_IDENTITIES,
    ):
        self.allowed_domain_suffixes = tuple(
            s.lower().lstrip(".") for s in allowed_domain_suffixes
        )
        self.allowed_identities = frozenset(i.lower() for i in allowed_identities)
        self.logger = logging.getLogger(__name__)

    def is_allowed_identity(self, server_name: str) -> bool:
        """Subdomain of an allow-listed domain, or a literal test identity."""
        name = server_name.lower()
        if name in self.allowed_identities:
            return True
        return any(name.endswith("." + suffix) for suffix in self.allowed_domain_suffixes)

    def validate(self, output: VerificationOutput, label: str = "") -> bytes:
        """Apply the policy in order and return the commitment to attest.

        Raises:
            PolicyViolation: on the first failing check
        """
        self.logger.info("[%s] Validating server connection...", label)

        server_name = output.server_name
        if not server_name or not self.is_allowed_identity(server_name):
            self.logger.warning(
                "[%s] Rejected: %s (server name %r)",
                label,
                PolicyReason.BAD_IDENTITY.value,
                server_name,
            )
            raise PolicyViolation(
                PolicyReason.BAD_IDENTITY,
                "server must be an approved API endpoint or localhost for testing",
            )
        self.logger.info("[%s] Confirmed valid server: %s", label, server_name)

        commitments = output.transcript_commitments
        if not commitments:
            self.logger.warning(
                "[%s] Rejected: %s", label, PolicyReason.NO_COMMITMENTS.value
            )
            raise PolicyViolation(
                PolicyReason.NO_COMMITMENTS, "prover must commit to transcript data"
            )
        self.logger.info(
            "[%s] %d transcript commitments received", label, len(commitments)
        )

        for commitment in commitments:
            if isinstance(commitment, UnknownCommitment):
                self.logger.warning(
                    "[%s] Ignoring unknown commitment kind: %s",
                    label,
                    commitment.detail or "<no detail>",
                )

        selected = next(
            (
                c
                for c in commitments
                if isinstance(c, HashCommitment) and c.algorithm == HashAlgorithm.SHA256
            ),
            None,
        )
        if selected is None:
            self.logger.warning(
                "[%s] Rejected: %s (kinds: %s)",
                label,
                PolicyReason.UNSUPPORTED_ALGORITHM.value,
                ", ".join(self._describe(c) for c in commitments),
            )
            raise PolicyViolation(
                PolicyReason.UNSUPPORTED_ALGORITHM,
                "a SHA-256 hash commitment is required",
            )

        if output.transcript is not None:
            self._observe_revealed_transcript(output.transcript.received, label)

        self.logger.info(
            "[%s] Using %s hash commitment on %s data",
            label,
            selected.algorithm_name,
            selected.direction.value,
        )
        return selected.value

    def _observe_revealed_transcript(self, received: bytes, label: str) -> None:
        self.logger.warning(
            "[%s] Prover revealed the full transcript; "
            "accepting with reduced privacy",
            label,
        )
        recv = received.decode("utf-8", errors="replace")
        if '"accounts"' in recv:
            self.logger.info("[%s] Detected balance API response structure", label)
        elif "HTTP/1.1" in recv or "HTTP/1.0" in recv:
            self.logger.info("[%s] Valid HTTP response received", label)
        else:
            self.logger.warning(
                "[%s] Response doesn't look like expected API response", label
            )

    @staticmethod
    def _describe(commitment: object) -> str:
        if isinstance(commitment, HashCommitment):
            return f"hash/{commitment.algorithm_name}"
        return getattr(commitment, "kind", type(commitment).__name__)
