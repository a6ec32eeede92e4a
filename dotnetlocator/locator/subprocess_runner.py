"""
Run external commands without blocking the event loop.

stdout and stderr are drained concurrently so a chatty child can never fill
one pipe and deadlock while we wait on the other. Cancelling the awaiting
task terminates the child, waits for it to exit and re-raises
``asyncio.CancelledError``.
"""

import asyncio
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

from dotnetlocator.core.exceptions import ProcessExecutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandOutput:
    """Captured result of a finished command."""

    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


async def run_command(
    argv: Sequence[str],
    cwd: Optional[Union[str, Path]] = None,
    timeout: Optional[float] = None,
) -> CommandOutput:
    """
    Run a command and capture its output.

    Args:
        argv: Program and arguments
        cwd: Working directory for the child
        timeout: Seconds to wait before killing the child (None waits forever)

    Returns:
        CommandOutput with exit code and decoded stdout/stderr

    Raises:
        ProcessExecutionError: If the program cannot be started or times out
        asyncio.CancelledError: If the awaiting task is cancelled
    """
    logger.debug(f"Running {' '.join(argv)} (cwd={cwd})")

    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            cwd=str(cwd) if cwd is not None else None,
            stdin=subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise ProcessExecutionError(f"Failed to start {argv[0]}: {e}") from e

    try:
        if timeout is None:
            stdout, stderr = await process.communicate()
        else:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout)
    except asyncio.TimeoutError:
        await _terminate(process)
        raise ProcessExecutionError(
            f"{argv[0]} timed out after {timeout} seconds",
            exit_code=process.returncode,
        )
    except asyncio.CancelledError:
        logger.debug(f"Cancelled while waiting for {argv[0]}, terminating child")
        await _terminate(process)
        raise

    result = CommandOutput(
        returncode=process.returncode if process.returncode is not None else -1,
        stdout=_decode(stdout),
        stderr=_decode(stderr),
    )
    logger.debug(f"{argv[0]} exited with {result.returncode}")
    return result


async def _terminate(process: asyncio.subprocess.Process) -> None:
    """Kill a child that is still running and reap it."""
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
    await process.wait()


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")
