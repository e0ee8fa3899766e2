"""
Loading of the external MPC-TLS verification engine.
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING, cast

if TYPE_CHECKING:
    from auditorzk.common.interfaces import IVerificationEngine

logger = logging.getLogger(__name__)


def load_engine(import_string: str) -> IVerificationEngine:
    """Resolve ``"package.module:attribute"`` to an engine instance.

    The attribute may be an engine object or a zero-argument factory
    (class or function) returning one.
    """
    module_name, sep, attr = import_string.partition(":")
    if not sep or not module_name or not attr:
        msg = f"engine must be given as 'module:attribute', got {import_string!r}"
        raise ValueError(msg)

    module = importlib.import_module(module_name)
    try:
        target = getattr(module, attr)
    except AttributeError as err:
        msg = f"module {module_name!r} has no attribute {attr!r}"
        raise ValueError(msg) from err

    if isinstance(target, type) or not hasattr(target, "verify"):
        if not callable(target):
            msg = f"{import_string!r} is neither an engine nor an engine factory"
            raise ValueError(msg)
        engine = target()
    else:
        engine = target
    if not callable(getattr(engine, "verify", None)):
        msg = f"{import_string!r} does not provide a verify() coroutine"
        raise ValueError(msg)

    logger.info("Using verification engine %s", import_string)
    return cast("IVerificationEngine", engine)
