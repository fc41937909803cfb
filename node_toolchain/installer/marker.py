"""Install marker: skip ``npm install`` when dependencies are already current.

After a successful install the SHA-256 of the most authoritative manifest
(``npm-shrinkwrap.json`` > ``package-lock.json`` > ``package.json``) is written
next to ``node_modules``. A later install is skipped only when ``node_modules``
exists, the marker exists and the marker matches the current fingerprint.

The marker is not locked; concurrent installs into one directory must be
serialized by the caller.
"""

from __future__ import annotations

import hashlib
import os

from node_toolchain.config import ToolchainConfig
from node_toolchain.logging import get_logger
from node_toolchain.runtime.filesystem import FileSystem
from node_toolchain.types import ManifestSelection

log = get_logger(__name__)

NODE_MODULES = "node_modules"

# Highest priority first; the flag marks lock-like manifests.
MANIFESTS: tuple[tuple[str, bool], ...] = (
    ("npm-shrinkwrap.json", True),
    ("package-lock.json", True),
    ("package.json", False),
)


def fingerprint_bytes(data: bytes) -> str:
    """Return the hex SHA-256 of *data*; line endings and encoding are not normalized."""
    return hashlib.sha256(data).hexdigest()


class InstallMarkerCache:
    def __init__(self, fs: FileSystem, config: ToolchainConfig | None = None) -> None:
        self._fs = fs
        self._config = config or ToolchainConfig()

    def marker_path(self, directory: str) -> str:
        return os.path.join(directory, self._config.marker_file_name)

    async def select_manifest(self, directory: str) -> ManifestSelection | None:
        for name, lock_like in MANIFESTS:
            path = os.path.join(directory, name)
            if await self._fs.file_exists(path):
                return ManifestSelection(path=path, name=name, lock_like=lock_like)
        return None

    async def fingerprint(self, path: str) -> str:
        return fingerprint_bytes(await self._fs.read_bytes(path))

    async def _read_marker(self, directory: str) -> str | None:
        marker = self.marker_path(directory)
        if not await self._fs.file_exists(marker):
            return None
        try:
            stored = (await self._fs.read_text(marker)).strip()
        except (OSError, UnicodeDecodeError) as exc:
            log.debug("cannot read install marker %s: %s", marker, exc)
            return None
        return stored or None

    async def should_skip(self, directory: str, clean_install_requested: bool) -> bool:
        if not await self._fs.directory_exists(os.path.join(directory, NODE_MODULES)):
            return False

        stored = await self._read_marker(directory)
        if stored is None:
            return False

        manifest = await self.select_manifest(directory)
        if manifest is None:
            return False

        # npm ci needs a lock or shrinkwrap; package.json alone is not reproducible.
        if clean_install_requested and not manifest.lock_like:
            return False

        try:
            current = await self.fingerprint(manifest.path)
        except OSError as exc:
            log.debug("cannot fingerprint %s: %s", manifest.path, exc)
            return False

        return stored == current

    async def _write_marker(self, directory: str) -> bool:
        manifest = await self.select_manifest(directory)
        if manifest is None:
            return False

        current = await self.fingerprint(manifest.path)
        if await self._read_marker(directory) == current:
            return False

        await self._fs.write_text(self.marker_path(directory), current)
        return True

    async def record_success(self, directory: str) -> bool:
        """Persist the current fingerprint; return True when the marker was written.

        Never raises: a marker that cannot be written must not fail an
        otherwise successful install.
        """
        try:
            return await self._write_marker(directory)
        except Exception as exc:
            log.debug("install marker not written in %s: %s", directory, exc)
            return False
