"""Executable locator for ``node``, ``npm`` and ``npx``.

Search order for Node.js:
- Windows hosted tool cache (``$AGENT_TOOLSDIRECTORY/Node/<version>/x64/node.exe``)
- Candidate commands (``node``/``nodejs``), each asked to report its own
  executable path and version

Every probe returns ``None`` on failure so the search moves on; only caller
cancellation propagates.
"""

from __future__ import annotations

from node_toolchain.config import ToolchainConfig
from node_toolchain.errors import ProcessError
from node_toolchain.logging import get_logger
from node_toolchain.platforms import Platform
from node_toolchain.runtime.environment import Environment
from node_toolchain.runtime.filesystem import FileSystem
from node_toolchain.runtime.process import ProcessRunner
from node_toolchain.version import VersionConstraint, matches, parse_version

log = get_logger(__name__)

SCRIPT_EXEC_PATH = ["-e", "console.log(process.execPath)"]
SCRIPT_VERSION = ["-e", "console.log(process.version)"]
SCRIPT_EXEC_PATH_AND_VERSION = ["-e", "console.log(process.execPath + '\\n' + process.version)"]


def parse_self_report(output: str) -> tuple[str, tuple[int, int] | None] | None:
    """Split self-report output into ``(exec_path, (major, minor))``.

    The last newline separates path from version. Single-line or empty output
    yields None; an unparseable version yields ``(path, None)``.
    """
    s = output.strip()
    nl = s.rfind("\n")
    if nl <= 0:
        return None
    exec_path = s[:nl].strip()
    version = s[nl + 1 :].strip()
    if not exec_path or not version:
        return None
    return exec_path, parse_version(version)


class ExecutableLocator:
    def __init__(
        self,
        runner: ProcessRunner,
        fs: FileSystem,
        env: Environment,
        platform: Platform,
        config: ToolchainConfig | None = None,
    ) -> None:
        self._runner = runner
        self._fs = fs
        self._env = env
        self._platform = platform
        self._config = config or platform.config

    # ------------------------------------------------------------------
    # npm / npx
    # ------------------------------------------------------------------

    def _path_entries(self) -> list[str]:
        raw = self._env.get("PATH")
        if not raw:
            return []
        return [d.strip() for d in raw.split(self._platform.path_separator) if d.strip()]

    async def locate_tool(self, tool: str) -> str:
        """Return the absolute path of *tool*, or *tool* itself when not found.

        The bare name lets the OS resolve the command at execution time.
        """
        names = self._platform.tool_filenames(tool)
        for directory in self._path_entries():
            for name in names:
                candidate = self._platform.path.join(directory, name)
                if await self._fs.file_exists(candidate):
                    return candidate

        for candidate in self._platform.well_known_tool_paths(tool, self._env):
            if await self._fs.file_exists(candidate):
                return candidate

        log.debug("%s not found on PATH or in well-known locations", tool)
        return tool

    # ------------------------------------------------------------------
    # node
    # ------------------------------------------------------------------

    async def get_node_path(self, command: str = "node") -> str:
        output = await self._runner.run(
            command, SCRIPT_EXEC_PATH, timeout=self._config.probe_timeout, stdout_only=True
        )
        return output.strip()

    async def get_version_at(self, node_path: str) -> str | None:
        try:
            output = await self._runner.run(
                node_path, SCRIPT_VERSION, timeout=self._config.probe_timeout, stdout_only=True
            )
        except ProcessError:
            return None
        return output.strip() or None

    async def locate_node(self, constraint: VersionConstraint | None = None) -> str | None:
        """Find a node executable satisfying *constraint* (None means any version)."""
        cached = await self._probe_tool_cache(constraint)
        if cached:
            return cached

        for command in self._platform.node_commands:
            found = await self._probe_command(command, constraint)
            if found:
                return found
        return None

    async def _probe_tool_cache(self, constraint: VersionConstraint | None) -> str | None:
        root = self._platform.hosted_tool_cache_root(self._env)
        if root is None or not await self._fs.directory_exists(root):
            return None

        try:
            version_dirs = await self._fs.list_subdirectories(root)
        except OSError as exc:
            log.warning("cannot list tool cache %s: %s", root, exc)
            return None

        ranked: list[tuple[tuple[int, int], str]] = []
        for version_dir in version_dirs:
            name = self._platform.path.basename(version_dir.rstrip("\\/"))
            version = parse_version(name)
            if version is None:
                if constraint is None:
                    ranked.append(((-1, -1), version_dir))
                continue
            if matches(version, constraint):
                ranked.append((version, version_dir))

        # Newest first; directory listing order is not meaningful.
        ranked.sort(key=lambda item: item[0], reverse=True)
        for _, version_dir in ranked:
            candidate = self._platform.path.join(version_dir, "x64", "node.exe")
            if await self._fs.file_exists(candidate):
                return candidate
        return None

    async def _probe_command(
        self, command: str, constraint: VersionConstraint | None
    ) -> str | None:
        try:
            output = await self._runner.run(
                command,
                SCRIPT_EXEC_PATH_AND_VERSION,
                timeout=self._config.probe_timeout,
                stdout_only=True,
            )
        except ProcessError as exc:
            log.warning("probe of %s failed: %s", command, exc)
            return None

        report = parse_self_report(output)
        if report is None:
            return None
        exec_path, version = report
        if constraint is None:
            return exec_path
        if version is None or not matches(version, constraint):
            return None
        return exec_path
