"""Per-OS strategies: where Node.js tools live and how to install Node.js.

One strategy is selected at startup by :func:`detect_platform`; the locator and
installer never branch on the OS themselves.
"""

from __future__ import annotations

import ntpath
import posixpath
import sys
from dataclasses import dataclass, field

from node_toolchain.config import ToolchainConfig
from node_toolchain.runtime.environment import Environment
from node_toolchain.version import VersionConstraint


@dataclass(frozen=True)
class InstallCommand:
    manager: str
    command: str
    args: list[str]
    timeout: float
    # Probe `<manager> --version` before use; unavailable managers are skipped.
    probe: bool = False


@dataclass
class Platform:
    config: ToolchainConfig = field(default_factory=ToolchainConfig)

    name = "unknown"
    path = posixpath
    path_separator = ":"
    node_commands = ("node", "nodejs")
    supports_version_pinning = True

    def tool_filenames(self, tool: str) -> tuple[str, ...]:
        return (tool,)

    def well_known_tool_paths(self, tool: str, env: Environment) -> list[str]:
        return []

    def hosted_tool_cache_root(self, env: Environment) -> str | None:
        return None

    def install_commands(self, version: VersionConstraint | None) -> list[InstallCommand]:
        return []

    @property
    def npm_install_timeout(self) -> float:
        return self.config.npm_install_timeout_unix


class WindowsPlatform(Platform):
    name = "windows"
    path = ntpath
    path_separator = ";"
    node_commands = ("node", "node.exe")

    def tool_filenames(self, tool: str) -> tuple[str, ...]:
        return (f"{tool}.cmd", f"{tool}.exe", tool)

    def well_known_tool_paths(self, tool: str, env: Environment) -> list[str]:
        join = self.path.join
        paths: list[str] = []
        program_files = env.get("ProgramFiles")
        if program_files:
            paths += [join(program_files, "nodejs", f"{tool}.cmd"),
                      join(program_files, "nodejs", f"{tool}.exe")]
        local_app_data = env.get("LOCALAPPDATA")
        if local_app_data:
            paths += [join(local_app_data, "Programs", "node", f"{tool}.cmd"),
                      join(local_app_data, "Programs", "node", f"{tool}.exe")]
        app_data = env.get("APPDATA")
        if app_data:
            paths.append(join(app_data, "npm", f"{tool}.cmd"))
        return paths

    def hosted_tool_cache_root(self, env: Environment) -> str | None:
        root = env.get("AGENT_TOOLSDIRECTORY") or self.config.hosted_tool_cache_default
        return self.path.join(root, "Node")

    def install_commands(self, version: VersionConstraint | None) -> list[InstallCommand]:
        package_id = "OpenJS.NodeJS" if version is None else f"OpenJS.NodeJS.{version.major}"
        winget_args = [
            "install", "--exact", "--id", package_id, "--silent",
            "--disable-interactivity", "--accept-source-agreements",
            "--accept-package-agreements", "--source", "winget",
        ]
        choco_args = ["install", "nodejs"]
        if version is not None:
            choco_args += ["--version", f"{version.major}.0.0"]
        choco_args += ["-y", "--no-progress"]
        timeout = self.config.install_timeout_windows
        return [
            InstallCommand("winget", "winget", winget_args, timeout, probe=True),
            InstallCommand("choco", "choco", choco_args, timeout, probe=True),
        ]

    @property
    def npm_install_timeout(self) -> float:
        return self.config.npm_install_timeout_windows


class MacOSPlatform(Platform):
    name = "macos"

    def well_known_tool_paths(self, tool: str, env: Environment) -> list[str]:
        return [f"/usr/local/bin/{tool}", f"/opt/homebrew/bin/{tool}"]

    def install_commands(self, version: VersionConstraint | None) -> list[InstallCommand]:
        formula = "node" if version is None else f"node@{version.major}"
        return [
            InstallCommand("brew", "brew", ["install", formula], self.config.install_timeout_macos)
        ]


class LinuxPlatform(Platform):
    name = "linux"
    # Distribution repositories carry a single Node.js major.
    supports_version_pinning = False

    def well_known_tool_paths(self, tool: str, env: Environment) -> list[str]:
        return [f"/usr/bin/{tool}", f"/usr/local/bin/{tool}"]

    def install_commands(self, version: VersionConstraint | None) -> list[InstallCommand]:
        script = "sudo apt-get -qq update && sudo apt-get -y install nodejs"
        return [
            InstallCommand("apt-get", "bash", ["-c", script], self.config.install_timeout_linux)
        ]


def detect_platform(
    config: ToolchainConfig | None = None, sys_platform: str | None = None
) -> Platform:
    """Pick the strategy for *sys_platform* (defaults to ``sys.platform``)."""
    config = config or ToolchainConfig()
    plat = sys_platform or sys.platform
    if plat.startswith(("win32", "cygwin")):
        return WindowsPlatform(config)
    if plat.startswith("darwin"):
        return MacOSPlatform(config)
    return LinuxPlatform(config)
