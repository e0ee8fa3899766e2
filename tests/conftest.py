from __future__ import annotations

from pathlib import Path

import pytest

from auditorzk.common.config import Config
from auditorzk.server.keys import EphemeralKeyProvider
from auditorzk.server.persistence import AttestationStore
from auditorzk.server.signer import AttestationSigner


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Config with every output path under tmp_path."""
    config = Config()
    config.DATA_DIR = tmp_path / "config"
    config.PUBLIC_KEY_PATH = config.DATA_DIR / "notary_pubkey.hex"
    config.ATTESTATIONS_DIR = config.DATA_DIR / "attestations"
    config.LATEST_ATTESTATION_PATH = tmp_path / "latest_attestation.json"
    return config


@pytest.fixture
def key_provider(config: Config) -> EphemeralKeyProvider:
    return EphemeralKeyProvider(config.PUBLIC_KEY_PATH)


@pytest.fixture
def store(config: Config) -> AttestationStore:
    return AttestationStore(config.ATTESTATIONS_DIR, config.LATEST_ATTESTATION_PATH)


@pytest.fixture
def signer(key_provider: EphemeralKeyProvider, store: AttestationStore) -> AttestationSigner:
    return AttestationSigner(key_provider, store, clock=lambda: 1_700_000_000)
