"""
Pydantic models for engine output and signed attestations.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    Discriminator,
    Field,
    Tag,
    field_serializer,
    field_validator,
    model_validator,
)


class Direction(str, Enum):
    SENT = "sent"
    RECEIVED = "received"


class HashAlgorithm(str, Enum):
    SHA256 = "sha256"
    BLAKE3 = "blake3"
    KECCAK256 = "keccak256"


class HashCommitment(BaseModel):
    """Prover's hash commitment to a range of transcript data.

    Algorithms outside ``HashAlgorithm`` are kept as their reported name so
    the acceptance policy, not parsing, decides whether they qualify.
    """

    kind: Literal["hash"] = "hash"
    algorithm: Union[HashAlgorithm, str] = Field(union_mode="left_to_right")
    direction: Direction
    value: bytes

    @property
    def algorithm_name(self) -> str:
        if isinstance(self.algorithm, HashAlgorithm):
            return self.algorithm.value
        return self.algorithm


class EncodingCommitment(BaseModel):
    """Commitment to transcript encodings; binds positions, not a value."""

    kind: Literal["encoding"] = "encoding"
    direction: Direction
    root: bytes = b""


class UnknownCommitment(BaseModel):
    """Any commitment kind the engine reports that this service does not know.

    ``kind`` keeps the reported tag.
    """

    kind: str = "unknown"
    detail: str = ""

    @model_validator(mode="before")
    @classmethod
    def _keep_reported_kind(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("detail") and data.get("kind"):
            return {**data, "detail": str(data["kind"])}
        return data


def _commitment_tag(value: Any) -> str:
    if isinstance(value, dict):
        kind = value.get("kind")
    else:
        kind = getattr(value, "kind", None)
    if kind in ("hash", "encoding"):
        return kind
    return "unknown"


Commitment = Annotated[
    Union[
        Annotated[HashCommitment, Tag("hash")],
        Annotated[EncodingCommitment, Tag("encoding")],
        Annotated[UnknownCommitment, Tag("unknown")],
    ],
    Discriminator(_commitment_tag),
]


class PartialTranscript(BaseModel):
    sent: bytes
    received: bytes


class ProtocolLimits(BaseModel):
    max_sent_data: int = Field(gt=0)
    max_recv_data: int = Field(gt=0)


class VerificationOutput(BaseModel):
    server_name: str | None = None
    transcript: PartialTranscript | None = None
    transcript_commitments: list[Commitment] = Field(default_factory=list)


class Attestation(BaseModel):
    """Signed statement binding origin, time and the prover's commitment."""

    server_name: str
    timestamp: int = Field(ge=0, lt=2**64)
    balance_commitment: bytes
    signature: str
    verifier_pubkey: bytes

    @field_validator("balance_commitment", "verifier_pubkey", mode="before")
    @classmethod
    def _decode_hex(cls, value: Any) -> Any:
        if isinstance(value, str):
            return bytes.fromhex(value)
        return value

    @field_serializer("balance_commitment", "verifier_pubkey")
    def _encode_hex(self, value: bytes) -> str:
        return value.hex()
