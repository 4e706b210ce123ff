"""
Async helpers for running external commands.

Every command is started with ``asyncio.create_subprocess_exec`` from an
argument list; no shell is involved, so query text is always a single
argument and can never change what runs.
"""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass

from .error_handling import CommandFailedError, ProcessSpawnError


@dataclass(frozen=True)
class CommandResult:
    command: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _decode(data: bytes | None) -> str:
    return (data or b"").decode("utf-8", errors="replace")


def terminate(proc: asyncio.subprocess.Process) -> None:
    """Kill a process that may already have exited."""
    try:
        proc.kill()
    except ProcessLookupError:
        pass


async def run_command(
    command: list[str], cwd: str | None = None, check: bool = False
) -> CommandResult:
    """Run a command to completion and collect its output.

    Raises:
        ProcessSpawnError: If the executable or working directory is missing.
        CommandFailedError: If ``check`` is set and the command exits non-zero.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *command,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise ProcessSpawnError(
            f"Failed to start {command[0]}: {exc}", command=command, context={"cwd": cwd}
        ) from exc

    stdout, stderr = await proc.communicate()
    result = CommandResult(
        command=command,
        returncode=proc.returncode if proc.returncode is not None else -1,
        stdout=_decode(stdout),
        stderr=_decode(stderr),
    )
    if check and not result.ok:
        raise CommandFailedError(
            f"{command[0]} exited with status {result.returncode}",
            command=command,
            returncode=result.returncode,
            stderr=result.stderr,
            context={"cwd": cwd},
        )
    return result


async def command_succeeds(command: list[str], cwd: str | None = None) -> bool:
    """Return True when the command starts and exits with status 0."""
    try:
        result = await run_command(command, cwd=cwd)
    except ProcessSpawnError:
        return False
    return result.ok


async def run_pipeline(
    producer: list[str], consumer: list[str], cwd: str | None = None, check: bool = True
) -> CommandResult:
    """Run ``producer | consumer`` with an OS pipe between the two processes.

    The result carries the consumer's output and exit status, like a shell
    pipeline without ``pipefail``. When the consumer exits early the producer
    is left to die of SIGPIPE on its next write.

    Raises:
        ProcessSpawnError: If either process cannot be started.
        CommandFailedError: If ``check`` is set and the consumer exits non-zero.
    """
    read_fd, write_fd = os.pipe()
    try:
        producer_proc = await asyncio.create_subprocess_exec(
            *producer,
            cwd=cwd,
            stdout=write_fd,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except OSError as exc:
        os.close(read_fd)
        raise ProcessSpawnError(
            f"Failed to start {producer[0]}: {exc}", command=producer, context={"cwd": cwd}
        ) from exc
    finally:
        os.close(write_fd)

    try:
        consumer_proc = await asyncio.create_subprocess_exec(
            *consumer,
            cwd=cwd,
            stdin=read_fd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        terminate(producer_proc)
        await producer_proc.wait()
        raise ProcessSpawnError(
            f"Failed to start {consumer[0]}: {exc}", command=consumer, context={"cwd": cwd}
        ) from exc
    finally:
        os.close(read_fd)

    stdout, stderr = await consumer_proc.communicate()
    await producer_proc.wait()

    command = [*producer, "|", *consumer]
    result = CommandResult(
        command=command,
        returncode=consumer_proc.returncode if consumer_proc.returncode is not None else -1,
        stdout=_decode(stdout),
        stderr=_decode(stderr),
    )
    if check and not result.ok:
        raise CommandFailedError(
            f"{consumer[0]} exited with status {result.returncode}",
            command=command,
            returncode=result.returncode,
            stderr=result.stderr,
            context={"cwd": cwd},
        )
    return result
