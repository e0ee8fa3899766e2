"""
Entry point for the verifier server.
"""

from __future__ import annotations

import uvicorn

from auditorzk.common.config import Config
from auditorzk.common.interfaces import IVerificationEngine
from auditorzk.common.logging_utils import setup_logger

from .core import VerifierServer
from .engine import load_engine


def start_server(
    config: Config | None = None, engine: IVerificationEngine | None = None
) -> None:
    """Start the verifier server."""
    if config is None:
        config = Config()
    if engine is None:
        if not config.ENGINE:
            msg = "No verification engine configured; set AUDITORZK_ENGINE"
            raise ValueError(msg)
        engine = load_engine(config.ENGINE)

    logger = setup_logger(config.LOG_LEVEL)
    server = VerifierServer(engine, config=config)
    logger.info(
        "AuditorZK Verifier Server listening on %s:%s",
        server.server_host,
        server.server_port,
    )
    uvicorn.run(server.app, host=server.server_host, port=server.server_port)
