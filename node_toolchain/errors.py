"""Typed failures surfaced by node-toolchain.

Callers see a resolved path, an explicit ``None``, or one of these. Probe and
install failures are absorbed internally and never reach the caller as raw
``OSError`` or exit codes.
"""

from __future__ import annotations


class ToolchainError(Exception):
    """Base class for all node-toolchain failures."""


class InvalidArgument(ToolchainError, ValueError):
    pass


class InvalidVersionFormat(InvalidArgument):
    def __init__(self, text: str | None) -> None:
        super().__init__(f'Bad version string "{text}".')
        self.text = text


class NotFound(ToolchainError):
    pass


class NodeNotFound(NotFound):
    def __init__(self, message: str = "Node.js not found.") -> None:
        super().__init__(message)


class NodeVersionNotFound(NodeNotFound):
    def __init__(self, version: str) -> None:
        super().__init__(f"Node.js {version} not found.")
        self.version = version


class DirectoryNotFound(NotFound, FileNotFoundError):
    def __init__(self, directory: str) -> None:
        super().__init__(f"Directory not found: {directory}")
        self.directory = directory


class InstallerUnavailable(ToolchainError):
    pass


class ProcessError(ToolchainError):
    """A command could not be spawned or exited non-zero."""

    def __init__(
        self, command: str, args: list[str], returncode: int | None, output: str = ""
    ) -> None:
        shown = " ".join([command, *args])
        if returncode is None:
            message = f"{shown!r} could not be started"
        else:
            message = f"{shown!r} exited with code {returncode}"
        super().__init__(message)
        self.command = command
        self.args_list = list(args)
        self.returncode = returncode
        self.output = output


class ProcessTimeout(ProcessError):
    def __init__(self, command: str, args: list[str], timeout: float) -> None:
        super().__init__(command, args, None)
        self.timeout = timeout
        self.args = (f"{' '.join([command, *args])!r} timed out after {timeout:g}s",)
