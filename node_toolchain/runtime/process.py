"""Process runner: spawn a command, capture its output, enforce a timeout.

Commands run without a shell. Each call is bounded by its own timeout; a
timed-out child is killed when anyio's process context exits.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from typing import Protocol

import anyio

from node_toolchain.errors import ProcessError, ProcessTimeout
from node_toolchain.logging import get_logger

log = get_logger(__name__)


class ProcessRunner(Protocol):
    async def run(
        self,
        command: str,
        args: Sequence[str] = (),
        *,
        cwd: str | None = None,
        timeout: float,
        stdout_only: bool = False,
    ) -> str: ...

    async def command_exists_and_runs(
        self, command: str, probe_args: Sequence[str], *, timeout: float
    ) -> bool: ...


def _decode(data: bytes | None) -> str:
    return (data or b"").decode("utf-8", errors="replace")


class AnyioProcessRunner:
    async def run(
        self,
        command: str,
        args: Sequence[str] = (),
        *,
        cwd: str | None = None,
        timeout: float,
        stdout_only: bool = False,
    ) -> str:
        """Run *command* and return stdout followed by stderr.

        With *stdout_only* the stderr stream is left out of the result, for
        callers that parse what the command prints.

        Raises ProcessError when the command cannot be started or exits
        non-zero, ProcessTimeout when it outlives *timeout* seconds.
        """
        argv = [command, *args]
        log.debug("exec", extra={"ctx": {"argv": argv, "cwd": cwd, "timeout": timeout}})
        try:
            with anyio.fail_after(timeout):
                result = await anyio.run_process(
                    argv,
                    cwd=cwd,
                    check=False,
                    stdin=subprocess.DEVNULL,
                )
        except TimeoutError as exc:
            raise ProcessTimeout(command, list(args), timeout) from exc
        except OSError as exc:
            raise ProcessError(command, list(args), None, str(exc)) from exc

        stdout = _decode(result.stdout)
        stderr = _decode(result.stderr)
        if result.returncode != 0:
            raise ProcessError(command, list(args), result.returncode, stdout + stderr)
        return stdout if stdout_only else stdout + stderr

    async def command_exists_and_runs(
        self, command: str, probe_args: Sequence[str], *, timeout: float
    ) -> bool:
        try:
            await self.run(command, probe_args, timeout=timeout)
        except ProcessError:
            return False
        return True
