"""
Command-line interface for the AuditorZK verifier.
"""

from __future__ import annotations

import os
from pathlib import Path

import click
from pydantic import ValidationError

from auditorzk.common.config import Config
from auditorzk.common.crypto import CryptoUtils
from auditorzk.server import start_server
from auditorzk.server.persistence import AttestationStore


@click.group()
def cli() -> None:
    """AuditorZK verifier CLI"""


@cli.command()
@click.option(
    "--engine",
    default=None,
    help="Verification engine as 'module:attribute' (default: AUDITORZK_ENGINE env)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind server to (default: AUDITORZK_SERVER_HOST env or 0.0.0.0)",
)
@click.option(
    "--port",
    default=None,
    type=int,
    help="Port to bind server to (default: AUDITORZK_SERVER_PORT env or 7047)",
)
@click.option(
    "--data-dir",
    default=None,
    help="Directory for the public key and attestations (default: ./config)",
)
@click.option(
    "--session-timeout",
    default=None,
    type=float,
    help="Seconds a session may take to verify (default: 300)",
)
def serve(
    engine: str | None,
    host: str | None,
    port: int | None,
    data_dir: str | None,
    session_timeout: float | None,
) -> None:
    """Start the verifier server"""
    # Set environment variables before building the config
    if engine:
        os.environ["AUDITORZK_ENGINE"] = engine
    if host:
        os.environ["AUDITORZK_SERVER_HOST"] = host
    if port:
        os.environ["AUDITORZK_SERVER_PORT"] = str(port)
    if data_dir:
        os.environ["AUDITORZK_DATA_DIR"] = data_dir
    if session_timeout is not None:
        os.environ["AUDITORZK_SESSION_TIMEOUT"] = str(session_timeout)

    config = Config()
    if not config.ENGINE:
        msg = "ERROR: pass --engine or set AUDITORZK_ENGINE to 'module:attribute'."
        raise click.ClickException(msg)

    try:
        start_server(config)
    except (ImportError, ValueError) as e:
        raise click.ClickException(str(e)) from e


@cli.command()
@click.argument(
    "attestation_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--pubkey",
    default=None,
    help="Expected verifier public key (hex); rejects attestations from other keys",
)
def verify(attestation_file: Path, pubkey: str | None) -> None:
    """Check an attestation's signature offline"""
    try:
        attestation = AttestationStore.load(attestation_file)
    except (ValidationError, ValueError) as e:
        raise click.ClickException(f"Malformed attestation: {e}") from e

    if pubkey is not None and attestation.verifier_pubkey.hex() != pubkey.lower():
        raise click.ClickException("Attestation was signed by a different key")

    if not CryptoUtils.verify_attestation(attestation):
        raise click.ClickException("Invalid signature")

    click.echo(
        f"Valid attestation for {attestation.server_name} "
        f"at {attestation.timestamp} "
        f"(commitment {attestation.balance_commitment.hex()})"
    )


if __name__ == "__main__":
    cli()
