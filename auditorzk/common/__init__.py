# Common utilities
from auditorzk.common.crypto import CryptoUtils as CryptoUtils
from auditorzk.common.logging_utils import setup_logger as setup_logger

__all__ = ["CryptoUtils", "setup_logger"]
