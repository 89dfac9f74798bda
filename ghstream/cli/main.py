"""
ghstream CLI - Query the GitHub API with SQL

Usage:
    ghstream query <sql> [options]
    ghstream tables
"""

import itertools
import sys
import time
from typing import Any, Dict, Optional

import click

from ghstream import __version__
from ghstream import query as query_fn
from ghstream.cli.formatters import get_formatter
from ghstream.config import load_settings
from ghstream.errors import GHStreamError
from ghstream.utils.log_setup import configure_logging


def _build_query(
    config: Optional[str],
    verbose: bool,
    cli_overrides: Optional[Dict[str, Any]] = None,
):
    loaded = load_settings(config_path=config, cli_overrides=cli_overrides)
    settings = loaded.settings
    configure_logging("DEBUG" if verbose else settings.log_level)
    return query_fn(settings=settings)


def _infer_format(fmt: str, output: Optional[str]) -> str:
    # -o without -f: pick the format from the file extension
    if output and fmt == "table":
        if output.endswith(".json"):
            return "json"
        if output.endswith(".csv"):
            return "csv"
        if output.endswith(".md"):
            return "markdown"
    return fmt


@click.group()
@click.version_option(version=__version__, prog_name="ghstream")
def cli():
    """
    ghstream - Query the GitHub API with SQL

    Remote GitHub connections are exposed as tables that are fetched
    lazily, one rate-limited page at a time.
    """


@cli.command()
@click.argument("sql", type=str)
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(["table", "json", "csv", "markdown"], case_sensitive=False),
    default="table",
    help="Output format (default: table)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="Write output to file instead of stdout",
)
@click.option(
    "--limit",
    "-l",
    type=int,
    default=None,
    help="Stop after this many rows (no further pages are fetched)",
)
@click.option(
    "--token",
    type=str,
    default=None,
    help="GitHub token (default: $GITHUB_TOKEN)",
)
@click.option(
    "--per-second",
    type=float,
    default=None,
    help="Maximum GitHub requests per second (default: 1)",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML config file",
)
@click.option(
    "--no-color",
    is_flag=True,
    help="Disable colored output",
)
@click.option(
    "--explain",
    is_flag=True,
    help="Show query execution plan instead of results",
)
@click.option(
    "--time",
    "-t",
    "show_time",
    is_flag=True,
    help="Show execution time",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Log page fetches and rate limit waits to stderr",
)
def query(
    sql: str,
    fmt: str,
    output: Optional[str],
    limit: Optional[int],
    token: Optional[str],
    per_second: Optional[float],
    config: Optional[str],
    no_color: bool,
    explain: bool,
    show_time: bool,
    verbose: bool,
):
    """
    Execute a SQL query against GitHub

    Examples:

        \b
        # Most recently starred repositories of a user
        $ ghstream query "SELECT name_with_owner, starred_at FROM github_starred_repos
                          WHERE login = 'octocat' ORDER BY starred_at DESC LIMIT 10"

        \b
        # Popular repositories, as JSON
        $ ghstream query "SELECT name, stargazer_count FROM github_starred_repos
                          WHERE login = 'octocat' AND stargazer_count > 1000" -f json

        \b
        # Show what is pushed down to GitHub
        $ ghstream query "SELECT * FROM github_starred_repos WHERE login = 'octocat'" --explain

        \b
        # Save results to file
        $ ghstream query "SELECT * FROM github_starred_repos WHERE login = 'octocat'" -o stars.csv
    """
    try:
        start_time = time.time()

        with _build_query(
            config, verbose, {"github_token": token, "per_second": per_second}
        ) as q:
            result = q.sql(sql)

            if explain:
                click.echo(result.explain())
                return

            rows = iter(result)
            if limit is not None:
                rows = itertools.islice(rows, max(limit, 0))
            results_list = list(rows)

        output_format = _infer_format(fmt.lower(), output)
        formatter = get_formatter(output_format)
        output_text = formatter.format(
            results_list,
            columns=result.columns,
            no_color=no_color or (not sys.stdout.isatty()),
            show_footer=not output,
        )

        if show_time:
            elapsed = time.time() - start_time
            output_text += (
                f"\nProcessed {len(results_list)} rows "
                f"({result.rows_scanned} scanned) in {elapsed:.3f}s"
            )

        if output:
            with open(output, "w", encoding="utf-8") as f:
                f.write(output_text)
            click.echo(f"Results written to {output} ({output_format} format)", err=True)
        else:
            click.echo(output_text)

    except (GHStreamError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("Interrupted", err=True)
        sys.exit(130)


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML config file",
)
def tables(config: Optional[str]):
    """
    List available tables and their columns

    Hidden columns can be filtered on but are not returned by SELECT *.
    """
    try:
        with _build_query(config, verbose=False) as q:
            for table in q.tables():
                click.echo(table.name)
                for column in table.columns:
                    flags = []
                    if column.hidden:
                        flags.append("hidden")
                    if any(f.required for f in column.filters):
                        flags.append("required")
                    if column.order_by:
                        flags.append("orderable")
                    suffix = f"  ({', '.join(flags)})" if flags else ""
                    click.echo(f"  {column.name}: {column.type.value}{suffix}")
    except GHStreamError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def main():
    cli()


if __name__ == "__main__":
    main()
