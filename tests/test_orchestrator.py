import asyncio

import pytest

from auditorzk.common.exceptions import EngineError, PolicyViolation, PolicyReason
from auditorzk.common.models import HashCommitment, VerificationOutput
from auditorzk.server.commitment_validator import CommitmentValidator
from auditorzk.server.duplex import duplex
from auditorzk.server.orchestrator import VerificationOrchestrator

from .fakes import COMMITMENT, EchoEngine, sandbox_output


def run_verify(orchestrator: VerificationOrchestrator, prover_bytes: bytes = b""):
    async def scenario():
        prover_end, verifier_end = duplex(1024)
        if prover_bytes:
            await prover_end.write(prover_bytes)
        output = await orchestrator.verify(verifier_end, "test")
        return output, await prover_end.read()

    return asyncio.run(scenario())


def test_engine_receives_fixed_limits() -> None:
    engine = EchoEngine()
    run_verify(VerificationOrchestrator(engine))
    assert engine.limits is not None
    assert engine.limits.max_sent_data == 4096  # noqa: PLR2004
    assert engine.limits.max_recv_data == 16384  # noqa: PLR2004


def test_engine_talks_through_socket() -> None:
    engine = EchoEngine(expect=5)
    output, echoed = run_verify(VerificationOrchestrator(engine), b"hello")
    assert engine.received == b"hello"
    assert echoed == b"hello"
    assert output.server_name == "sandbox.plaid.com"


def test_dict_output_is_normalized() -> None:
    engine = EchoEngine(
        output={
            "server_name": "localhost",
            "transcript_commitments": [
                {
                    "kind": "hash",
                    "algorithm": "sha256",
                    "direction": "received",
                    "value": COMMITMENT,
                },
                {"kind": "encoding", "direction": "sent"},
            ],
        }
    )
    output, _ = run_verify(VerificationOrchestrator(engine))
    assert isinstance(output, VerificationOutput)
    assert isinstance(output.transcript_commitments[0], HashCommitment)
    assert output.transcript is None


def test_malformed_output_is_engine_error() -> None:
    engine = EchoEngine(output={"transcript_commitments": [{"kind": "hash"}]})
    with pytest.raises(EngineError, match="malformed"):
        run_verify(VerificationOrchestrator(engine))


def test_engine_failure_is_engine_error() -> None:
    engine = EchoEngine(error=RuntimeError("max_sent_data exceeded"))
    with pytest.raises(EngineError, match="max_sent_data exceeded"):
        run_verify(VerificationOrchestrator(engine))


def test_attestation_errors_pass_through() -> None:
    error = PolicyViolation(PolicyReason.BAD_IDENTITY, "nope")
    engine = EchoEngine(error=error)
    with pytest.raises(PolicyViolation):
        run_verify(VerificationOrchestrator(engine))


def test_deadline_expiry_is_engine_error_and_closes_socket() -> None:
    class StalledEngine:
        async def verify(self, socket, limits):
            await asyncio.Event().wait()

    async def scenario() -> bytes:
        prover_end, verifier_end = duplex(1024)
        orchestrator = VerificationOrchestrator(StalledEngine(), timeout=0.05)
        with pytest.raises(EngineError, match="did not complete"):
            await orchestrator.verify(verifier_end, "test")
        return await asyncio.wait_for(prover_end.read(), 1)

    assert asyncio.run(scenario()) == b""


def test_socket_closed_after_success() -> None:
    """The prover side sees end-of-stream once the engine is done."""
    _, trailing = run_verify(VerificationOrchestrator(EchoEngine()))
    assert trailing == b""


def test_output_with_reveal_is_kept() -> None:
    engine = EchoEngine(
        output=sandbox_output(transcript={"sent": b"GET /", "received": b"HTTP/1.1 200"})
    )
    output, _ = run_verify(VerificationOrchestrator(engine))
    assert output.transcript is not None
    assert output.transcript.received == b"HTTP/1.1 200"


def test_unlisted_algorithm_reaches_policy() -> None:
    """Unrecognized hash algorithms are parsed and rejected by the validator."""
    engine = EchoEngine(
        output={
            "server_name": "localhost",
            "transcript_commitments": [
                {
                    "kind": "hash",
                    "algorithm": "poseidon2",
                    "direction": "received",
                    "value": COMMITMENT,
                }
            ],
        }
    )
    output, _ = run_verify(VerificationOrchestrator(engine))
    with pytest.raises(PolicyViolation) as exc:
        CommitmentValidator().validate(output)
    assert exc.value.reason is PolicyReason.UNSUPPORTED_ALGORITHM


def test_unlisted_kinds_are_ignored_next_to_sha256() -> None:
    engine = EchoEngine(
        output={
            "server_name": "sandbox.plaid.com",
            "transcript_commitments": [
                {"kind": "plaintext_hash", "idx": [0, 12]},
                {
                    "kind": "hash",
                    "algorithm": "poseidon2",
                    "direction": "sent",
                    "value": b"\x01" * 32,
                },
                {
                    "kind": "hash",
                    "algorithm": "sha256",
                    "direction": "received",
                    "value": COMMITMENT,
                },
            ],
        }
    )
    output, _ = run_verify(VerificationOrchestrator(engine))
    assert CommitmentValidator().validate(output) == COMMITMENT
