"""Global logging helper mirroring the warninghandler API.

Use ``set_global_log`` to configure a module-level logger and obtain a callable via
``get_global_log``. The callable signature matches the warninghandler style: pass a
message (and optionally a logging level) and it will dispatch to the configured
logging backend.
"""
from __future__ import annotations

import io
import logging
import sys
from collections.abc import Callable

_GLOBAL_LOG: Callable | None = None


def _silent(_: str, *args, **kwargs) -> None:
    return None


def set_global_log(
    mode: str,
    verbose: int = 1,
    logfile_buffer: io.TextIOBase | None = None,
) -> None:
    """Configure the global log callable.

    Parameters
    ----------
    mode : str
        Either ``"cli"`` or ``"api"``. Controls formatting only.
    verbose : int
        0/1 disable logging, 2 enables to stderr, 3 enables to ``logfile_buffer`` (fallback stderr).
    logfile_buffer : file-like, optional
        Target stream for verbose==3. If ``None``, falls back to stderr.
    """
    global _GLOBAL_LOG
    if mode not in {"cli", "api"}:
        raise ValueError(f"Invalid mode: {mode}.")
    if verbose not in {0, 1, 2, 3}:
        raise ValueError(f"Invalid verbosity: {verbose}.")

    if verbose in {0, 1}:
        _GLOBAL_LOG = _silent
        return

    logger = logging.getLogger("aqi2frame")
    # Clear existing handlers to avoid duplicate logs across repeated setup.
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.propagate = False

    level = logging.INFO
    logger.setLevel(level)

    target_stream = logfile_buffer if (verbose == 3 and logfile_buffer is not None) else sys.stderr
    handler = logging.StreamHandler(target_stream)
    handler.setLevel(level)

    fmt = "%(levelname)s: %(message)s" if mode == "cli" else "%(name)s %(levelname)s: %(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)

    def log(message: str, level: int = logging.INFO, **kwargs) -> None:
        logger.log(level, message, **kwargs)

    _GLOBAL_LOG = log


def get_global_log() -> Callable:
    """Return the configured global log callable (silent until configured)."""
    if _GLOBAL_LOG is None:
        return _silent
    return _GLOBAL_LOG
