# AuditorZK verifier: MPC-TLS session attestation

from auditorzk.common.crypto import CryptoUtils
from auditorzk.common.models import Attestation, VerificationOutput
from auditorzk.server.core import VerifierServer

__all__ = [
    "Attestation",
    "CryptoUtils",
    "VerificationOutput",
    "VerifierServer",
]
