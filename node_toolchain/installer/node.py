"""Node.js installation through the host's package manager.

Best effort: a failed install is logged and swallowed, since Node.js may
already be present through another mechanism and the caller re-locates
afterwards anyway. The one hard failure is a Windows host with neither winget
nor Chocolatey available.
"""

from __future__ import annotations

from node_toolchain.config import ToolchainConfig
from node_toolchain.errors import InstallerUnavailable, ProcessError
from node_toolchain.logging import get_logger
from node_toolchain.platforms import InstallCommand, Platform
from node_toolchain.runtime.process import ProcessRunner
from node_toolchain.version import VersionConstraint

log = get_logger(__name__)


class NodeInstaller:
    def __init__(
        self,
        runner: ProcessRunner,
        platform: Platform,
        config: ToolchainConfig | None = None,
    ) -> None:
        self._runner = runner
        self._platform = platform
        self._config = config or platform.config

    async def _select(self, commands: list[InstallCommand]) -> InstallCommand | None:
        for cmd in commands:
            if not cmd.probe:
                return cmd
            if await self._runner.command_exists_and_runs(
                cmd.manager, ["--version"], timeout=self._config.exists_timeout
            ):
                return cmd
            log.warning("%s is not available", cmd.manager)
        return None

    async def install(self, version: VersionConstraint | None = None) -> None:
        """Install Node.js, the latest release when *version* is None."""
        commands = self._platform.install_commands(version)
        if not commands:
            log.warning("No Node.js installer known for platform %s", self._platform.name)
            return

        chosen = await self._select(commands)
        if chosen is None:
            managers = " nor ".join(c.manager for c in commands)
            raise InstallerUnavailable(
                f"Neither {managers} is available to install Node.js on this host."
            )

        if version is not None and not self._platform.supports_version_pinning:
            log.info(
                "%s cannot pin Node.js %s; installing the distribution package",
                chosen.manager,
                version,
            )

        log.info(
            "Installing Node.js %s via %s",
            version or "latest",
            chosen.manager,
            extra={"ctx": {"command": [chosen.command, *chosen.args]}},
        )
        try:
            await self._runner.run(chosen.command, chosen.args, timeout=chosen.timeout)
        except ProcessError as exc:
            log.warning(
                "%s install of Node.js failed (node may already be installed or the "
                "install may require elevated privileges): %s",
                chosen.manager,
                exc,
            )
