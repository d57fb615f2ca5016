"""CLI entrypoint for cssgrade."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import DEFAULT_CONFIG_NAME, load_config
from .errors import CssGradeError


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(__version__, prog_name="cssgrade")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Grader config file (defaults to ./{DEFAULT_CONFIG_NAME} when present)",
)
@click.option("--verbose", is_flag=True, help="Log debug details to stderr")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """cssgrade - presence-based autograder for CSS lab submissions.

    Checks that required selectors and properties exist in a stylesheet.
    Values are never inspected.
    """
    _configure_logging(verbose)
    ctx.ensure_object(dict)

    if config_path is None:
        candidate = Path.cwd() / DEFAULT_CONFIG_NAME
        config_path = candidate if candidate.exists() else None
    elif not config_path.exists():
        raise click.BadParameter(f"File '{config_path}' does not exist.", param_hint="--config")

    try:
        ctx.obj["config"] = load_config(config_path)
    except CssGradeError as e:
        raise click.ClickException(str(e)) from e


@cli.command()
@click.argument(
    "submission_dir",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    default=Path("."),
)
@click.option("--catalog", type=str, default=None, help="Builtin catalog name or path to a catalog TOML")
@click.option("--due", type=str, default=None, metavar="ISO8601", help="Due instant, e.g. 2025-10-09T23:59:00+03:00")
@click.option("--student", "student_id", type=str, default=None, help="Student id (defaults to CI environment)")
@click.option(
    "--artifacts-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Where grade.csv and feedback/README.md are written",
)
@click.option("--json", "output_json", is_flag=True, help="Print the report as JSON on stdout")
@click.option("--no-write", is_flag=True, help="Do not write artifacts")
@click.pass_context
def grade(
    ctx: click.Context,
    submission_dir: Path,
    catalog: str | None,
    due: str | None,
    student_id: str | None,
    artifacts_dir: Path | None,
    output_json: bool,
    no_write: bool,
) -> None:
    """Grade the stylesheet in SUBMISSION_DIR (default: current directory).

    A missing or empty stylesheet is graded as status 2, not reported as an
    error: a report is produced on every run.
    """
    from .commands.grade import run_grade

    try:
        config = ctx.obj["config"].with_overrides(catalog=catalog, due=due, artifacts_dir=artifacts_dir)
        exit_code = run_grade(
            submission_dir,
            config,
            student_id=student_id,
            output_json=output_json,
            write=not no_write,
        )
    except CssGradeError as e:
        raise click.ClickException(str(e)) from e
    sys.exit(exit_code)


@cli.command("catalog")
@click.option("--catalog", "catalog_ref", type=str, default=None, help="Builtin catalog name or path")
@click.option("--list", "list_only", is_flag=True, help="List builtin catalogs and exit")
@click.pass_context
def catalog_cmd(ctx: click.Context, catalog_ref: str | None, list_only: bool) -> None:
    """Show the tasks and checks of a grading catalog."""
    from .catalog import available_catalogs, resolve_catalog
    from .commands.catalog_cmd import run_catalog

    if list_only:
        for name in available_catalogs():
            click.echo(name)
        return

    try:
        catalog = resolve_catalog(catalog_ref or ctx.obj["config"].catalog)
    except CssGradeError as e:
        raise click.ClickException(str(e)) from e
    sys.exit(run_catalog(catalog))


@cli.command()
@click.argument("css_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def rules(css_file: Path) -> None:
    """List the rules the parser extracts from CSS_FILE."""
    from .commands.catalog_cmd import run_rules

    sys.exit(run_rules(css_file))


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
