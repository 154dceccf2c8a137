import logging
import os
from typing import Optional

ROOT_LOGGER = "otp_vault"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_logger(name: Optional[str] = None, *, level: Optional[int] = None) -> logging.Logger:
    """Create or return a configured logger under the ``otp_vault`` root.

    Policy:
    - INFO: secrets saved, service start
    - DEBUG: store and key backend selection, counters (never key material)
    - Quiet by default; controllable via OTPVAULT_LOG_LEVEL env.
    """

    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        env_level = os.getenv("OTPVAULT_LOG_LEVEL", "WARNING").upper()
        resolved_level = getattr(logging, env_level, logging.WARNING)
        root.setLevel(resolved_level)
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)
        root.propagate = False
    if level is not None:
        root.setLevel(level)
    return root.getChild(name) if name else root
