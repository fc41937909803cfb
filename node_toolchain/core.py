"""Toolchain orchestration: locate → (install → relocate) for Node.js, plus npm.

``NodeToolchain`` is the public facade. ``try_locate``/``try_locate_any`` are
read-only and never raise; ``ensure_installed`` installs on absence when
allowed and retries the lookup exactly once.
"""

from __future__ import annotations

from node_toolchain.config import ToolchainConfig
from node_toolchain.errors import InvalidVersionFormat, NodeNotFound, NodeVersionNotFound
from node_toolchain.installer.marker import InstallMarkerCache
from node_toolchain.installer.node import NodeInstaller
from node_toolchain.installer.npm import NpmInstaller
from node_toolchain.locator import ExecutableLocator
from node_toolchain.logging import get_logger
from node_toolchain.platforms import Platform, detect_platform
from node_toolchain.runtime.environment import Environment
from node_toolchain.runtime.filesystem import FileSystem, LocalFileSystem
from node_toolchain.runtime.process import AnyioProcessRunner, ProcessRunner
from node_toolchain.types import NpmInstallOptions
from node_toolchain.version import VersionConstraint, parse_constraint

log = get_logger(__name__)


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


class NodeToolchain:
    def __init__(
        self,
        runner: ProcessRunner,
        fs: FileSystem,
        env: Environment,
        platform: Platform,
        config: ToolchainConfig | None = None,
    ) -> None:
        self.runner = runner
        self.fs = fs
        self.env = env
        self.platform = platform
        self.config = config or platform.config
        self.locator = ExecutableLocator(runner, fs, env, platform, self.config)
        self.installer = NodeInstaller(runner, platform, self.config)
        self.marker_cache = InstallMarkerCache(fs, self.config)
        self.npm = NpmInstaller(self, self.marker_cache)

    # -- tool paths ---------------------------------------------------------

    async def get_npm_path(self) -> str:
        return await self.locator.locate_tool("npm")

    async def get_npx_path(self) -> str:
        return await self.locator.locate_tool("npx")

    async def get_node_path(self, node_command: str = "node") -> str:
        """Absolute path reported by *node_command* itself; ProcessError propagates."""
        return await self.locator.get_node_path(node_command)

    # -- locate ---------------------------------------------------------------

    async def try_locate_any(self) -> str | None:
        return await self.locator.locate_node(None)

    async def try_locate(self, min_version: str | None = None) -> str | None:
        """Return a node matching *min_version* (major or major.minor), else None.

        A blank *min_version* behaves like :meth:`try_locate_any`; an
        unparseable one yields None.
        """
        if _is_blank(min_version):
            return await self.try_locate_any()
        try:
            constraint = parse_constraint(min_version)
        except InvalidVersionFormat:
            return None
        return await self.locator.locate_node(constraint)

    # -- install --------------------------------------------------------------

    async def try_install(self, version: str | VersionConstraint | None = None) -> None:
        """Install Node.js via the platform package manager (best effort).

        Raises InstallerUnavailable when the host has no usable package manager.
        """
        if isinstance(version, str):
            version = None if _is_blank(version) else parse_constraint(version)
        await self.installer.install(version)

    async def ensure_installed(
        self, min_version: str | None = None, install_if_missing: bool = True
    ) -> str:
        any_version = _is_blank(min_version)
        log.info("Ensuring Node.js %s is installed", "any (latest)" if any_version else min_version)

        if any_version:
            path = await self.try_locate_any()
            if path is None and install_if_missing:
                await self.try_install(None)
                path = await self.try_locate_any()
            if path is None:
                raise NodeNotFound()
            await self._log_version(path)
            return path

        required = parse_constraint(min_version)
        path = await self.locator.locate_node(required)
        if path is None and install_if_missing:
            await self.try_install(required)
            path = await self.locator.locate_node(required)
        if path is None:
            raise NodeVersionNotFound(str(min_version).strip())
        await self._log_version(path)
        return path

    async def _log_version(self, node_path: str) -> None:
        version = await self.locator.get_version_at(node_path)
        if version:
            log.info(
                "Node.js found at %s, version %s",
                node_path,
                version,
                extra={"ctx": {"node_path": node_path, "node_version": version}},
            )

    # -- npm ------------------------------------------------------------------

    async def npm_install(
        self,
        directory: str,
        clean_install: bool = False,
        omit_dev: bool = False,
        ignore_scripts: bool = False,
        no_audit: bool = True,
        no_fund: bool = True,
        skip_if_up_to_date: bool = True,
    ) -> str:
        options = NpmInstallOptions(
            clean_install=clean_install,
            omit_dev=omit_dev,
            ignore_scripts=ignore_scripts,
            no_audit=no_audit,
            no_fund=no_fund,
            skip_if_up_to_date=skip_if_up_to_date,
        )
        return await self.npm.run_install(directory, options)


def create_toolchain(
    runner: ProcessRunner | None = None,
    fs: FileSystem | None = None,
    env: Environment | None = None,
    platform: Platform | None = None,
    config: ToolchainConfig | None = None,
) -> NodeToolchain:
    """Wire a NodeToolchain with the default collaborators for this host."""
    env = env or Environment()
    config = config or ToolchainConfig.from_env(env)
    return NodeToolchain(
        runner=runner or AnyioProcessRunner(),
        fs=fs or LocalFileSystem(),
        env=env,
        platform=platform or detect_platform(config),
        config=config,
    )
