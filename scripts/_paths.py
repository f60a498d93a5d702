"""Locate the directory of the module asking for it."""

from __future__ import annotations

import sys
from pathlib import Path


def get_dir_name() -> Path:
    """Return the absolute directory containing the calling module.

    The lookup uses the caller's ``__file__`` so the answer does not depend on
    the current working directory or on where the process was started from.
    """

    caller = sys._getframe(1)
    try:
        filename = caller.f_globals.get("__file__") or caller.f_code.co_filename
    finally:
        del caller
    return Path(filename).resolve().parent


__all__ = ["get_dir_name"]
