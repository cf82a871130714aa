"""Unified warning handling for CLI and API usage.

- CLI mode: write warnings to ``stderr`` with a consistent prefix and flush.
- API mode: emit standard Python warnings so users can filter or capture them.

``set_global_warn`` picks the implementation based on ``mode`` and ``verbose``.
"""
from __future__ import annotations

import io
import sys
import warnings
from collections.abc import Callable

_GLOBAL_WARN: Callable | None = None


class ConversionWarning(UserWarning):
    """Category of the warnings raised in api mode, for use with warnings filters."""


def set_global_warn(mode: str, verbose: int = 1, logfile_buffer: io.TextIOBase | None = None) -> None:
    if verbose == 0:
        def warn(_, **kwargs) -> None:
            pass
    elif verbose in {1, 2}:
        if mode == "cli":
            def warn(message: str, **kwargs) -> None:
                sys.stderr.write(f"WARNING: {message}\n")
                sys.stderr.flush()
        elif mode == "api":
            def warn(message: str, *, category: type[Warning] = ConversionWarning, stacklevel: int = 2) -> None:
                warnings.warn(message, category=category, stacklevel=stacklevel)
        else:
            raise ValueError(f"Invalid mode: {mode}.")
    elif verbose == 3:
        if logfile_buffer is None:
            raise ValueError("verbose=3 requires a log file buffer.")

        def warn(message: str, **kwargs) -> None:
            logfile_buffer.write(f"WARNING: {message}\n")
    else:
        raise ValueError(f"Invalid verbosity: {verbose}.")

    global _GLOBAL_WARN
    _GLOBAL_WARN = warn


def get_global_warn() -> Callable:
    if _GLOBAL_WARN is None:
        set_global_warn("api")
    return _GLOBAL_WARN
