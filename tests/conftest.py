from __future__ import annotations

import ntpath
import posixpath
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from node_toolchain.config import ToolchainConfig
from node_toolchain.core import NodeToolchain
from node_toolchain.errors import ProcessError
from node_toolchain.platforms import LinuxPlatform, Platform
from node_toolchain.runtime.environment import Environment
from node_toolchain.runtime.filesystem import LocalFileSystem

Handler = Callable[[list[str], str | None], str]


def _basename(command: str) -> str:
    return ntpath.basename(command)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


class FakeProcessRunner:
    """Canned process outputs keyed by command, falling back to its basename.

    ``/usr/bin/npm`` is answered by an ``npm`` handler unless a handler for the
    full path exists. Unknown commands behave like a missing executable.
    """

    def __init__(self) -> None:
        self.handlers: dict[str, Handler] = {}
        self.available: set[str] = set()
        self.calls: list[tuple[str, list[str], str | None]] = []
        self.probes: list[str] = []
        self.stdout_only: list[bool] = []

    def on(self, command: str, output: str | Handler) -> None:
        if callable(output):
            self.handlers[command] = output
        else:
            self.handlers[command] = lambda args, cwd, _o=output: _o

    def fail(self, command: str, returncode: int = 1) -> None:
        def _raise(args: list[str], cwd: str | None) -> str:
            raise ProcessError(command, args, returncode, "boom")

        self.handlers[command] = _raise

    def commands(self) -> list[str]:
        """Basenames of the commands run, in order."""
        return [_basename(c) for c, _, _ in self.calls]

    async def run(
        self,
        command: str,
        args: Sequence[str] = (),
        *,
        cwd: str | None = None,
        timeout: float,
        stdout_only: bool = False,
    ) -> str:
        self.calls.append((command, list(args), cwd))
        self.stdout_only.append(stdout_only)
        handler = self.handlers.get(command) or self.handlers.get(_basename(command))
        if handler is None:
            raise ProcessError(command, list(args), None, "not found")
        return handler(list(args), cwd)

    async def command_exists_and_runs(
        self, command: str, probe_args: Sequence[str], *, timeout: float
    ) -> bool:
        self.probes.append(command)
        return command in self.available


class FakeFileSystem:
    """In-memory filesystem; paths are plain strings joined with *pathmod*."""

    def __init__(self, pathmod=posixpath) -> None:
        self.pathmod = pathmod
        self.files: dict[str, str | bytes] = {}
        self.dirs: set[str] = set()
        self.writes: list[str] = []

    def add_file(self, path: str, content: str | bytes = "") -> None:
        self.files[path] = content
        self.add_dir(self.pathmod.dirname(path))

    def add_dir(self, path: str) -> None:
        while path and path not in self.dirs:
            self.dirs.add(path)
            parent = self.pathmod.dirname(path)
            if parent == path:
                break
            path = parent

    async def file_exists(self, path: str) -> bool:
        return path in self.files

    async def directory_exists(self, path: str) -> bool:
        return path in self.dirs

    async def list_subdirectories(self, path: str) -> list[str]:
        return sorted(d for d in self.dirs if d != path and self.pathmod.dirname(d) == path)

    async def read_text(self, path: str) -> str:
        content = await self.read_bytes(path)
        return content.decode("utf-8")

    async def read_bytes(self, path: str) -> bytes:
        if path not in self.files:
            raise FileNotFoundError(path)
        content = self.files[path]
        return content.encode("utf-8") if isinstance(content, str) else content

    async def write_text(self, path: str, content: str) -> None:
        self.writes.append(path)
        self.files[path] = content


@pytest.fixture
def fake_runner() -> FakeProcessRunner:
    return FakeProcessRunner()


@pytest.fixture
def fake_fs() -> FakeFileSystem:
    return FakeFileSystem()


@pytest.fixture
def fake_fs_factory() -> Callable[..., FakeFileSystem]:
    return FakeFileSystem


def node_report(path: str, version: str) -> str:
    return f"{path}\n{version}\n"


@pytest.fixture
def report() -> Callable[[str, str], str]:
    return node_report


@pytest.fixture
def make_toolchain(
    fake_runner: FakeProcessRunner,
) -> Callable[..., NodeToolchain]:
    """Build a NodeToolchain over fakes; pass fs/env/platform to override."""

    def _make(
        fs=None,
        env: dict[str, str] | None = None,
        platform: Platform | None = None,
        config: ToolchainConfig | None = None,
    ) -> NodeToolchain:
        config = config or ToolchainConfig()
        return NodeToolchain(
            runner=fake_runner,
            fs=fs if fs is not None else LocalFileSystem(),
            env=Environment(env or {}),
            platform=platform or LinuxPlatform(config),
            config=config,
        )

    return _make


@pytest.fixture
def node_project(tmp_path: Path) -> Path:
    project = tmp_path / "web"
    project.mkdir()
    (project / "package.json").write_text('{"name": "web", "version": "1.0.0"}', encoding="utf-8")
    return project
