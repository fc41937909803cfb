from __future__ import annotations

import sys

import pytest

from node_toolchain.errors import ProcessError, ProcessTimeout
from node_toolchain.locator import parse_self_report
from node_toolchain.runtime.process import AnyioProcessRunner

pytestmark = [pytest.mark.anyio, pytest.mark.timeout(30)]

# Stands in for a node binary that prints a runtime warning while reporting itself.
NOISY_NODE = (
    "import sys\n"
    "print('/opt/node/bin/node')\n"
    "print('v20.11.1')\n"
    "print('(node:42) ExperimentalWarning: something', file=sys.stderr)\n"
)


async def test_stdout_only_leaves_stderr_out() -> None:
    output = await AnyioProcessRunner().run(
        sys.executable, ["-c", NOISY_NODE], timeout=20, stdout_only=True
    )
    assert "ExperimentalWarning" not in output
    assert parse_self_report(output) == ("/opt/node/bin/node", (20, 11))


async def test_default_output_includes_stderr() -> None:
    output = await AnyioProcessRunner().run(sys.executable, ["-c", NOISY_NODE], timeout=20)
    assert output.startswith("/opt/node/bin/node")
    assert "ExperimentalWarning" in output


async def test_non_zero_exit_raises_with_output() -> None:
    script = "import sys; print('oops', file=sys.stderr); sys.exit(3)"
    with pytest.raises(ProcessError) as excinfo:
        await AnyioProcessRunner().run(sys.executable, ["-c", script], timeout=20, stdout_only=True)
    assert excinfo.value.returncode == 3
    assert "oops" in excinfo.value.output


async def test_missing_executable_raises() -> None:
    with pytest.raises(ProcessError) as excinfo:
        await AnyioProcessRunner().run("definitely-not-a-real-command-xyz", timeout=5)
    assert excinfo.value.returncode is None


async def test_timeout_raises_process_timeout() -> None:
    with pytest.raises(ProcessTimeout):
        await AnyioProcessRunner().run(
            sys.executable, ["-c", "import time; time.sleep(10)"], timeout=0.5
        )


async def test_command_exists_and_runs() -> None:
    runner = AnyioProcessRunner()
    assert await runner.command_exists_and_runs(sys.executable, ["--version"], timeout=20)
    assert not await runner.command_exists_and_runs(
        "definitely-not-a-real-command-xyz", ["--version"], timeout=5
    )
