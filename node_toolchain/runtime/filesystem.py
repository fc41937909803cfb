"""Async filesystem access used by the locator and the install marker cache."""

from __future__ import annotations

from typing import Protocol

import anyio


class FileSystem(Protocol):
    async def file_exists(self, path: str) -> bool: ...

    async def directory_exists(self, path: str) -> bool: ...

    async def list_subdirectories(self, path: str) -> list[str]: ...

    async def read_text(self, path: str) -> str: ...

    async def read_bytes(self, path: str) -> bytes: ...
    async def write_text(self, path: str, content: str) -> None: ...


class LocalFileSystem:
    async def file_exists(self, path: str) -> bool:
        try:
            return await anyio.Path(path).is_file()
        except OSError:
            return False

    async def directory_exists(self, path: str) -> bool:
        try:
            return await anyio.Path(path).is_dir()
        except OSError:
            return False

    async def list_subdirectories(self, path: str) -> list[str]:
        """Return full paths of the immediate subdirectories of *path*, sorted."""
        found: list[str] = []
        async for child in anyio.Path(path).iterdir():
            if await child.is_dir():
                found.append(str(child))
        return sorted(found)

    async def read_text(self, path: str) -> str:
        return await anyio.Path(path).read_text(encoding="utf-8")

    async def read_bytes(self, path: str) -> bytes:
        return await anyio.Path(path).read_bytes()

    async def write_text(self, path: str, content: str) -> None:
        await anyio.Path(path).write_text(content, encoding="utf-8")
