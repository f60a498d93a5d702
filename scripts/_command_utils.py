"""Lightweight wrappers for running child processes from helper scripts."""

from __future__ import annotations

import asyncio
import codecs
import shlex
import sys
from contextlib import suppress
from pathlib import Path
from typing import Any, Awaitable, BinaryIO, Callable, List, Optional, Sequence, TextIO

CHUNK_SIZE = 64 * 1024

Spawner = Callable[..., Awaitable[Any]]


class CommandError(RuntimeError):
    """Raised when a command could not run to a successful exit."""

    def __init__(self, command: Sequence[str], message: str):
        super().__init__(message)
        self.command = list(command)


class LaunchError(CommandError):
    """Raised when the child process could not be started."""

    def __init__(self, command: Sequence[str], cause: OSError):
        super().__init__(
            command,
            f"Command '{command[0]}' could not be started: {cause}",
        )
        self.cause = cause


class CommandFailedError(CommandError):
    """Raised when the child process exits with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int):
        super().__init__(
            command,
            f"Child process exited with code {returncode}: {format_command(command)}",
        )
        self.returncode = returncode


class RelayError(CommandError):
    """Raised when the child's output could not be written to the parent."""

    def __init__(self, command: Sequence[str], cause: OSError):
        super().__init__(
            command,
            f"Relaying output of '{command[0]}' failed: {cause}",
        )
        self.cause = cause


def format_command(command: Sequence[str]) -> str:
    """Render ``command`` the way a shell would accept it."""

    return " ".join(shlex.quote(part) for part in command)


class _TextSink:
    """Write bytes into a text stream that has no binary ``buffer``."""

    def __init__(self, stream: TextIO):
        self._stream = stream
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def write(self, chunk: bytes) -> None:
        self._stream.write(self._decoder.decode(chunk))

    def flush(self) -> None:
        self._stream.flush()


def _parent_stream(name: str) -> Any:
    stream = getattr(sys, name)
    buffer = getattr(stream, "buffer", None)
    if buffer is not None:
        return buffer
    return _TextSink(stream)


async def _forward(
    reader: Optional[asyncio.StreamReader],
    sink: BinaryIO | None,
    stream_name: str,
) -> None:
    """Copy ``reader`` into ``sink`` chunk by chunk until EOF.

    Without an explicit ``sink`` the parent's ``sys.<stream_name>`` is looked
    up when the first chunk arrives.
    """

    if reader is None:
        return
    while True:
        chunk = await reader.read(CHUNK_SIZE)
        if not chunk:
            break
        if sink is None:
            sink = _parent_stream(stream_name)
        sink.write(chunk)
        sink.flush()


async def _abandon(process: Any, relays: List["asyncio.Future[None]"]) -> None:
    """Stop relaying, kill the child if it is still running and reap it."""

    for relay in relays:
        relay.cancel()
    await asyncio.gather(*relays, return_exceptions=True)
    if process.returncode is None:
        with suppress(ProcessLookupError):
            process.kill()
    await process.wait()


async def stream_command(
    command: Sequence[str],
    *,
    cwd: Path | None = None,
    stdout: BinaryIO | None = None,
    stderr: BinaryIO | None = None,
    spawn: Spawner | None = None,
) -> None:
    """Run ``command`` relaying its output, raising unless it exits with 0.

    The child's stdout and stderr are copied to ``stdout``/``stderr`` (the
    parent's own streams by default) as the data arrives. The call returns
    once both pipes are drained and the child has exited. The command echo
    goes to the parent's stderr so stdout carries only the child's bytes.
    """

    spawn = spawn or asyncio.create_subprocess_exec

    print(f"→ {format_command(command)}", file=sys.stderr, flush=True)
    try:
        process = await spawn(
            *command,
            cwd=str(cwd) if cwd else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise LaunchError(command, exc) from exc

    relays = [
        asyncio.ensure_future(_forward(process.stdout, stdout, "stdout")),
        asyncio.ensure_future(_forward(process.stderr, stderr, "stderr")),
    ]
    try:
        await asyncio.gather(*relays)
    except OSError as exc:
        await _abandon(process, relays)
        raise RelayError(command, exc) from exc
    except BaseException:
        await _abandon(process, relays)
        raise

    returncode = await process.wait()
    if returncode != 0:
        raise CommandFailedError(command, returncode)


__all__ = [
    "CommandError",
    "CommandFailedError",
    "LaunchError",
    "RelayError",
    "Spawner",
    "format_command",
    "stream_command",
]
