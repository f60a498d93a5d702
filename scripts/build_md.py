#!/usr/bin/env python3
"""Run the generated application bundle in production mode."""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path
from typing import BinaryIO, List, Optional, Sequence

if __package__ is None:  # pragma: no cover - executed when run as a script
    sys.path.append(str(Path(__file__).resolve().parents[1]))

from scripts._command_utils import CommandError, Spawner, stream_command

NODE_ENV_VAR = "NODE_ENV"
PRODUCTION = "production"
NODE_BINARY = "node"
TARGET_SCRIPT = "./src/App.fs.js"


def build_command(mode: str) -> List[str]:
    return [NODE_BINARY, TARGET_SCRIPT, mode]


async def run(
    mode: str,
    *,
    spawn: Spawner | None = None,
    stdout: BinaryIO | None = None,
    stderr: BinaryIO | None = None,
) -> None:
    """Launch the bundle with ``mode`` and wait for it to exit cleanly.

    ``NODE_ENV`` is set for the whole process before the child starts and is
    left in place afterwards. The child runs in the caller's working
    directory. Raises :class:`CommandFailedError` when the child exits
    non-zero, :class:`LaunchError` when it cannot start and
    :class:`RelayError` when its output cannot be written.
    """

    os.environ[NODE_ENV_VAR] = PRODUCTION
    await stream_command(
        build_command(mode),
        stdout=stdout,
        stderr=stderr,
        spawn=spawn,
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    # The first argument is the mode, whatever it looks like; the bundle owns
    # its parsing, so nothing here is treated as an option and extra
    # arguments are ignored.
    args = list(sys.argv[1:] if argv is None else argv)
    mode = args[0] if args else ""

    print(f"Run {Path(TARGET_SCRIPT).name} with mode: {mode}", flush=True)
    try:
        asyncio.run(run(mode))
    except CommandError as exc:
        print(f"Error running script: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
