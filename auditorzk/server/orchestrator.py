"""
Drives the external verification engine for one session.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from auditorzk.common.config import Config
from auditorzk.common.exceptions import AttestationError, EngineError
from auditorzk.common.models import ProtocolLimits, VerificationOutput

if TYPE_CHECKING:
    from auditorzk.common.interfaces import IByteStream, IVerificationEngine

logger = logging.getLogger(__name__)


class VerificationOrchestrator:
    """Configures the engine with fixed protocol limits and normalizes its output."""

    def __init__(
        self,
        engine: IVerificationEngine,
        max_sent_data: int = Config.MAX_SENT_DATA,
        max_recv_data: int = Config.MAX_RECV_DATA,
        timeout: float | None = Config.DEFAULT_SESSION_TIMEOUT,
    ):
        self.engine = engine
        self.limits = ProtocolLimits(
            max_sent_data=max_sent_data, max_recv_data=max_recv_data
        )
        self.timeout = timeout

    async def verify(self, socket: IByteStream, label: str = "") -> VerificationOutput:
        """Run the verification protocol over ``socket``.

        The socket is closed when the engine returns, fails or runs out of
        time, which ends the relay loops feeding it.

        Raises:
            EngineError: on any engine failure or when the deadline passes
        """
        logger.info(
            "[%s] Protocol limits: %dKB sent, %dKB recv",
            label,
            self.limits.max_sent_data // 1024,
            self.limits.max_recv_data // 1024,
        )
        logger.info("[%s] Starting MPC-TLS verification...", label)
        try:
            result = await asyncio.wait_for(
                self.engine.verify(socket, self.limits), self.timeout
            )
        except asyncio.TimeoutError as err:
            msg = f"verification did not complete within {self.timeout}s"
            raise EngineError(msg) from err
        except AttestationError:
            raise
        except Exception as err:
            msg = f"Verification failed: {err}"
            raise EngineError(msg) from err
        finally:
            await socket.close()

        output = self._normalize(result)
        logger.info("[%s] MPC-TLS verification complete", label)
        self._log_output(output, label)
        return output

    @staticmethod
    def _normalize(result: object) -> VerificationOutput:
        if isinstance(result, VerificationOutput):
            return result
        try:
            return VerificationOutput.model_validate(result)
        except ValidationError as err:
            msg = f"engine returned malformed output: {err}"
            raise EngineError(msg) from err

    @staticmethod
    def _log_output(output: VerificationOutput, label: str) -> None:
        if output.server_name is not None:
            logger.info("[%s] Verified server: %s", label, output.server_name)
        if output.transcript is not None:
            logger.info(
                "[%s] Transcript: %d bytes sent, %d bytes received",
                label,
                len(output.transcript.sent),
                len(output.transcript.received),
            )
        logger.info(
            "[%s] Commitments: %d transcript commitments received",
            label,
            len(output.transcript_commitments),
        )
