"""Node dependency installation: ``npm ci`` / ``npm install`` in a project.

Node.js is ensured first (any version, installed when missing). When the
install marker shows ``node_modules`` is current, the run is skipped and no
process is started.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from node_toolchain.errors import DirectoryNotFound, InvalidArgument
from node_toolchain.installer.marker import InstallMarkerCache
from node_toolchain.logging import get_logger
from node_toolchain.types import NpmInstallOptions

if TYPE_CHECKING:
    from node_toolchain.core import NodeToolchain

log = get_logger(__name__)


class NpmInstaller:
    def __init__(self, toolchain: NodeToolchain, cache: InstallMarkerCache) -> None:
        self._toolchain = toolchain
        self._cache = cache

    async def run_install(
        self, directory: str, options: NpmInstallOptions | None = None
    ) -> str:
        """Install dependencies in *directory* and return npm's output.

        Returns an empty string when the install was skipped.
        """
        options = options or NpmInstallOptions()
        if directory is None or not directory.strip():
            raise InvalidArgument("Directory is required.")

        directory = os.path.abspath(directory)
        fs = self._toolchain.fs
        if not await fs.directory_exists(directory):
            raise DirectoryNotFound(directory)

        # npm ships with node
        await self._toolchain.ensure_installed(None, install_if_missing=True)

        if not await fs.file_exists(os.path.join(directory, "package.json")):
            log.warning("npm install requested but package.json not found in %s", directory)

        if options.skip_if_up_to_date and await self._cache.should_skip(
            directory, options.clean_install
        ):
            log.info("Skipping npm install in %s (node_modules up-to-date)", directory)
            return ""

        npm = await self._toolchain.get_npm_path()
        args = options.to_args()
        log.info("Running %s %s in %s", npm, " ".join(args), directory)

        output = await self._toolchain.runner.run(
            npm,
            args,
            cwd=directory,
            timeout=self._toolchain.platform.npm_install_timeout,
        )

        await self._cache.record_success(directory)
        return output
