from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from cutrelease import __version__
from cutrelease.cli.context import build_release_context
from cutrelease.core.config import CONFIG_FILE_NAME, load_config_or_default
from cutrelease.core.errors import ErrorCode
from cutrelease.core.result import Err
from cutrelease.output.console import ConsoleProtocol, RichConsole, Style
from cutrelease.release.errors import ReleaseError, release_exit_code
from cutrelease.release.validate import parse_request
from cutrelease.release.workflow import run_release


app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    rich_markup_mode="rich",
    help="Cut a signed release: bump the manifest, tag, push and publish.",
)


def exit_release(error: ReleaseError, console: ConsoleProtocol) -> NoReturn:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
    raise typer.Exit(code=int(release_exit_code(error.kind)))


def _show_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))


@app.command()
def release(
    ctx: typer.Context,
    version: str | None = typer.Argument(
        None, metavar="VERSION", help="Version to release, without the leading 'v'.", show_default=False
    ),
    notes: str | None = typer.Argument(
        None,
        metavar="RELEASE_NOTES_PATH",
        help="Release notes file; drafted in your editor if it does not exist.",
        show_default=False,
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing tag."),
    publish_only: bool = typer.Option(
        False, "--publish-only", help="Only publish to the registry (tag already pushed)."
    ),
    config_path: Path | None = typer.Option(
        None, "--config", help=f"Config file (default: ./{CONFIG_FILE_NAME})."
    ),
    show_version: bool = typer.Option(
        False,
        "--version",
        callback=_show_version,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    args = [a for a in (version, notes) if a is not None]
    console = RichConsole()

    request = parse_request(args, force_tag=force, publish_only=publish_only)
    if isinstance(request, Err):
        if request.error.kind == "usage":
            typer.echo(ctx.get_help())
            raise typer.Exit(code=int(ErrorCode.USAGE_ERROR))
        exit_release(request.error, console)

    console.step(f"Releasing {request.value.tag}")
    root = Path.cwd()
    loaded = load_config_or_default(config_path or root / CONFIG_FILE_NAME)
    if isinstance(loaded, Err):
        console.error(loaded.error.message)
        raise typer.Exit(code=int(ErrorCode.USAGE_ERROR))

    result = run_release(request.value, build_release_context(root, loaded.value, console))
    if isinstance(result, Err):
        exit_release(result.error, console)


def main() -> None:
    app()
