"""node-toolchain CLI: locate, ensure and install Node.js; run npm installs.

Commands:
- node-path: absolute path reported by a node command
- which npm|npx: resolved package-manager executable
- locate [--version]: find an installed node (no install)
- ensure [--version] [--no-install]: find or install node
- install [--version]: install node via the host package manager
- npm-install DIR: npm install / npm ci with skip-if-up-to-date
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import anyio
import typer
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from node_toolchain.core import NodeToolchain, create_toolchain
from node_toolchain.errors import ToolchainError
from node_toolchain.logging import configure_logging

app = typer.Typer(add_completion=False, help="Locate, ensure and install Node.js toolchains")
console = Console()

T = TypeVar("T")

# Tests swap this for a factory wired with fakes.
toolchain_factory: Callable[[], NodeToolchain] = create_toolchain


def _run(fn: Callable[[NodeToolchain], Awaitable[T]]) -> T:
    try:
        toolchain = toolchain_factory()

        async def _main() -> Any:
            return await fn(toolchain)

        return anyio.run(_main)
    except ToolchainError as exc:
        rprint(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc


def _echo(text: str) -> None:
    # Paths and npm output are printed verbatim: no markup, highlighting or wrapping.
    console.print(text, markup=False, highlight=False, soft_wrap=True)


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="DEBUG|INFO|WARNING|ERROR"),
) -> None:
    try:
        configure_logging(log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc


@app.command("node-path")
def node_path(
    command: str = typer.Option("node", "--command", help="Node command or launcher to ask"),
) -> None:
    _echo(_run(lambda tc: tc.get_node_path(command)))


@app.command()
def which(tool: str = typer.Argument(..., help='"npm" or "npx"')) -> None:
    if tool not in {"npm", "npx"}:
        raise typer.BadParameter("expected npm or npx", param_hint="TOOL")
    _echo(_run(lambda tc: tc.get_npm_path() if tool == "npm" else tc.get_npx_path()))


@app.command()
def locate(
    version: str | None = typer.Option(None, "--version", help='e.g. "20" or "20.11"'),
) -> None:
    path = _run(lambda tc: tc.try_locate(version))
    if path is None:
        wanted = f"Node.js {version}" if version else "Node.js"
        rprint(f"[yellow]{wanted} not found[/yellow]")
        raise typer.Exit(code=1)
    _echo(path)


@app.command()
def ensure(
    version: str | None = typer.Option(None, "--version", help='e.g. "20" or "20.11"'),
    no_install: bool = typer.Option(False, "--no-install", help="Fail instead of installing"),
) -> None:
    _echo(_run(lambda tc: tc.ensure_installed(version, install_if_missing=not no_install)))


@app.command()
def install(
    version: str | None = typer.Option(None, "--version", help="Major to install (default latest)"),
) -> None:
    _run(lambda tc: tc.try_install(version))
    rprint(f"[green]Install attempted:[/green] Node.js {version or 'latest'}")


@app.command("npm-install")
def npm_install(
    directory: str = typer.Argument(".", help="Project directory containing package.json"),
    ci: bool = typer.Option(False, "--ci", help="Use npm ci (clean install)"),
    omit_dev: bool = typer.Option(False, "--omit-dev", help="Pass --omit=dev"),
    ignore_scripts: bool = typer.Option(False, "--ignore-scripts", help="Pass --ignore-scripts"),
    audit: bool = typer.Option(False, "--audit/--no-audit", help="Run npm audit"),
    fund: bool = typer.Option(False, "--fund/--no-fund", help="Show funding messages"),
    force: bool = typer.Option(False, "--force", help="Install even if node_modules is current"),
) -> None:
    output = _run(
        lambda tc: tc.npm_install(
            directory,
            clean_install=ci,
            omit_dev=omit_dev,
            ignore_scripts=ignore_scripts,
            no_audit=not audit,
            no_fund=not fund,
            skip_if_up_to_date=not force,
        )
    )

    table = Table(title="npm install")
    table.add_column("Directory", style="cyan")
    table.add_column("Result")
    table.add_row(directory, "skipped (up to date)" if output == "" else "installed")
    console.print(table)
    if output:
        _echo(output.rstrip())


if __name__ == "__main__":
    app()
