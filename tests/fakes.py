"""Test doubles shared across the suite."""

from __future__ import annotations

import asyncio

from auditorzk.common.models import (
    Direction,
    HashAlgorithm,
    HashCommitment,
    ProtocolLimits,
    VerificationOutput,
)

COMMITMENT = b"\xaa" * 32


class EchoEngine:
    """Stands in for the MPC-TLS engine.

    Reads ``expect`` bytes from the socket, writes them back, then returns
    ``output`` (or raises ``error``).
    """

    def __init__(
        self,
        output: VerificationOutput | dict | None = None,
        expect: int = 0,
        error: Exception | None = None,
    ):
        self.output = output if output is not None else sandbox_output()
        self.expect = expect
        self.error = error
        self.limits: ProtocolLimits | None = None
        self.received = b""

    async def verify(self, socket, limits: ProtocolLimits):
        self.limits = limits
        received = bytearray()
        while len(received) < self.expect:
            chunk = await socket.read(65536)
            if not chunk:
                raise ConnectionError("prover hung up")
            received += chunk
        self.received = bytes(received)
        if received:
            await socket.write(bytes(received))
        if self.error is not None:
            raise self.error
        return self.output


def sha256_commitment(value: bytes = COMMITMENT) -> HashCommitment:
    return HashCommitment(
        algorithm=HashAlgorithm.SHA256, direction=Direction.RECEIVED, value=value
    )


def sandbox_output(**overrides) -> VerificationOutput:
    fields = {
        "server_name": "sandbox.plaid.com",
        "transcript_commitments": [sha256_commitment()],
    }
    fields.update(overrides)
    return VerificationOutput(**fields)


class FakeWebSocket:
    """Minimal stand-in for a server-side WebSocket."""

    def __init__(self, messages=(), fail_send: bool = False):
        self.incoming: asyncio.Queue = asyncio.Queue()
        for message in messages:
            self.incoming.put_nowait(message)
        self.sent: list[bytes] = []
        self.fail_send = fail_send

    async def receive(self) -> dict:
        return await self.incoming.get()

    async def send_bytes(self, data: bytes) -> None:
        if self.fail_send:
            raise RuntimeError("connection closed")
        self.sent.append(data)


def binary(data: bytes) -> dict:
    return {"type": "websocket.receive", "bytes": data}


def text(data: str) -> dict:
    return {"type": "websocket.receive", "text": data}


DISCONNECT = {"type": "websocket.disconnect", "code": 1000}
