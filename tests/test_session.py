import asyncio

import pytest

from auditorzk.common.crypto import CryptoUtils
from auditorzk.common.exceptions import EngineError, PolicyViolation, TransportError
from auditorzk.common.models import Attestation
from auditorzk.server.commitment_validator import CommitmentValidator
from auditorzk.server.orchestrator import VerificationOrchestrator
from auditorzk.server.session import VerificationSession

from .fakes import DISCONNECT, EchoEngine, FakeWebSocket, binary, sandbox_output


def run_session(engine, messages, signer, timeout: float = 5.0):
    async def scenario():
        ws = FakeWebSocket(messages)
        session = VerificationSession(
            ws,
            "test-peer",
            orchestrator=VerificationOrchestrator(engine, timeout=timeout),
            validator=CommitmentValidator(),
            signer=signer,
            duplex_capacity=64,
        )
        return await session.run(), ws.sent

    return asyncio.run(scenario())


def test_session_returns_signed_attestation(signer) -> None:
    engine = EchoEngine(expect=4)
    payload, sent = run_session(engine, [binary(b"ab"), binary(b"cd")], signer)
    assert sent == [b"abcd"]
    assert CryptoUtils.verify_attestation(Attestation.model_validate_json(payload))


def test_prover_disconnect_is_transport_error(signer, config) -> None:
    engine = EchoEngine(expect=10)
    with pytest.raises(TransportError, match="prover closed"):
        run_session(engine, [binary(b"par"), DISCONNECT], signer)
    assert not config.ATTESTATIONS_DIR.exists()


def test_stalled_prover_hits_deadline(signer) -> None:
    """No frames and no close: the deadline ends the session."""
    engine = EchoEngine(expect=10)
    with pytest.raises(EngineError, match="did not complete"):
        run_session(engine, [], signer, timeout=0.05)


def test_policy_violation_skips_signing(signer, config) -> None:
    engine = EchoEngine(output=sandbox_output(server_name="evil.example.com"))
    with pytest.raises(PolicyViolation):
        run_session(engine, [], signer)
    assert not config.PUBLIC_KEY_PATH.exists()
    assert not config.ATTESTATIONS_DIR.exists()


def test_output_without_server_name_is_never_signed(signer, config) -> None:
    class PermissiveValidator:
        def validate(self, output, label=""):
            return b"\xaa" * 32

    async def scenario():
        session = VerificationSession(
            FakeWebSocket(),
            "test-peer",
            orchestrator=VerificationOrchestrator(
                EchoEngine(output=sandbox_output(server_name=None))
            ),
            validator=PermissiveValidator(),
            signer=signer,
        )
        return await session.run()

    with pytest.raises(PolicyViolation, match="bad-identity"):
        asyncio.run(scenario())
    assert not config.ATTESTATIONS_DIR.exists()
