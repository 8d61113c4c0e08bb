"""CLI entrypoint for cbox."""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import ConfigError, load_settings, parse_sort_mode


def _setup_logging(verbose: bool) -> None:
    from rich.console import Console
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(__version__, prog_name="cbox")
@click.option(
    "--root",
    "-r",
    type=click.Path(exists=False, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Workspace root to scan (defaults to the current directory)",
)
@click.option("--verbose", is_flag=True, help="Log cache and scan activity to stderr")
@click.pass_context
def cli(ctx: click.Context, root: Path | None, verbose: bool) -> None:
    """cbox - cycle inline `[CB]:` value annotations.

    An annotation declares the legal values of the assignment before it:

        debug = True  # [CB]: True|False

    List, validate and toggle annotations across a workspace.
    """
    ctx.ensure_object(dict)
    _setup_logging(verbose)

    root = root or Path.cwd()
    if not root.exists() or not root.is_dir():
        raise click.BadParameter(f"Directory '{root}' does not exist.", param_hint="--root / -r")

    try:
        settings = load_settings(root)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    ctx.obj["root"] = root.resolve()
    ctx.obj["settings"] = settings


@cli.command("list")
@click.option(
    "--sort",
    "sort_mode",
    type=click.Choice(["alphabetical", "modified", "none"]),
    default=None,
    help="File order (defaults to the configured sort_mode)",
)
@click.option("--search", "query", type=str, default=None, help="Only show annotations whose variable name matches")
@click.option("--case-sensitive", is_flag=True, help="Match --search case-sensitively")
@click.option(
    "--regex/--no-regex",
    "use_regex",
    default=None,
    help="Treat --search as a regular expression (auto-detected from ^ or [ by default)",
)
@click.option("--json", "output_json", is_flag=True, help="Output the tree as JSON")
@click.pass_context
def list_annotations(
    ctx: click.Context,
    sort_mode: str | None,
    query: str | None,
    case_sensitive: bool,
    use_regex: bool | None,
    output_json: bool,
) -> None:
    """Show annotated files, their annotations and declared values.

    Examples:

        cbox list

        cbox list --sort modified

        cbox list --search "^debug" --json
    """
    from .commands.list_cmd import run_list
    from .workspace.tree import filter_from_query

    search = filter_from_query(query, case_sensitive, use_regex) if query else None
    exit_code = run_list(
        ctx.obj["root"],
        ctx.obj["settings"],
        sort_mode=parse_sort_mode(sort_mode) if sort_mode else None,
        search=search,
        output_json=output_json,
    )
    sys.exit(exit_code)


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.pass_context
def check(ctx: click.Context, output_json: bool) -> None:
    """Validate assigned values against their declared values.

    Exits with status 1 when any value is not declared.
    """
    from .commands.check_cmd import run_check

    exit_code = run_check(ctx.obj["root"], ctx.obj["settings"], output_json=output_json)
    sys.exit(exit_code)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("line", type=click.IntRange(min=1))
def toggle(file: Path, line: int) -> None:
    """Cycle the value on LINE (1-based) of FILE to the next declared value.

    Examples:

        cbox toggle settings.py 12
    """
    from .commands.edit_cmd import run_toggle

    sys.exit(run_toggle(file, line))


@cli.command("set")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("line", type=click.IntRange(min=1))
@click.argument("value")
@click.option("--force", is_flag=True, help="Allow a value that is not declared")
def set_value(file: Path, line: int, value: str, force: bool) -> None:
    """Assign VALUE on LINE (1-based) of FILE.

    Examples:

        cbox set settings.py 12 '"prod"'
    """
    from .commands.edit_cmd import run_set

    sys.exit(run_set(file, line, value, force=force))


@cli.command()
@click.pass_context
def watch(ctx: click.Context) -> None:
    """Watch the workspace and report annotation changes.

    Runs until interrupted (Ctrl+C).
    """
    from .commands.watch_cmd import run_watch

    run_watch(ctx.obj["root"], ctx.obj["settings"])


@cli.command("lsp")
@click.option(
    "--transport",
    type=click.Choice(["stdio", "tcp"]),
    default="stdio",
    show_default=True,
    help="Transport method (stdio for editors, tcp for debugging)",
)
@click.option("--port", type=int, default=2087, show_default=True, help="Port for the tcp transport")
@click.pass_context
def lsp(ctx: click.Context, transport: str, port: int) -> None:
    """Start the LSP server.

    The LSP server provides:

    \b
    - Diagnostics for undeclared values
    - Code lenses to toggle annotated lines
    - Hover info with the declared cycle
    - Commands: cbox.toggleAtLine, cbox.setValue, cbox.listAnnotations, cbox.refresh

    Examples:

        cbox lsp

        cbox -r ../project lsp --transport tcp
    """
    from .lsp import start_server

    start_server(root=ctx.obj.get("root"), transport=transport, port=port)


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()
