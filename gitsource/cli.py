"""
Command-line interface for the git source ingestion engine.

Provides commands for mirroring a remote repository and ingesting its
files with contributor and commit-log metadata.
"""

import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from gitsource import __version__
from gitsource.core.config import Config, LogOptions, SourceConfig
from gitsource.core.exceptions import PipelineError
from gitsource.utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def _fail(ctx, error: Exception) -> None:
    click.echo(f"Error: {error}", err=True)
    if ctx.obj.get("verbose"):
        logger.exception("Command failed")
    sys.exit(1)


def _engine(work_dir, storage_dir=None):
    from gitsource.engine import GitSourceEngine

    config = Config.get()
    if work_dir:
        config.work_dir = work_dir
    if storage_dir:
        config.storage.storage_dir = storage_dir
    return GitSourceEngine(config)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output"
)
@click.option(
    "--log-file",
    type=click.Path(),
    help="Path to log file"
)
@click.pass_context
def cli(ctx, verbose, log_file):
    """
    Git source ingestion

    Mirror remote git repositories and extract contributor and
    commit-log metadata for their files.
    """
    ctx.ensure_object(dict)
    load_dotenv()
    config = Config.load_from_env()
    verbose = verbose or config.verbose
    ctx.obj["verbose"] = verbose

    log_level = "DEBUG" if verbose else "INFO"
    setup_logging(level=log_level, log_file=Path(log_file) if log_file else None)


def source_options(func):
    """Options shared by every command operating on a single source."""
    options = [
        click.argument("name"),
        click.argument("remote"),
        click.option("--branch", "-b", help="Branch to track (default: remote default)"),
        click.option("--depth", default="1", show_default=True,
                     help="Clone/fetch depth, or 'all' for full history"),
        click.option("--local", type=click.Path(), help="Mirror directory override"),
        click.option("--work-dir", type=click.Path(),
                     help="Working root for the default mirror cache"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@cli.command()
@source_options
@click.pass_context
def sync(ctx, name, remote, branch, depth, local, work_dir):
    """
    Clone or update the mirror of a remote repository.

    Examples:

        gitsource sync docs https://github.com/org/docs.git

        gitsource sync docs git@github.com:org/docs.git --branch main --depth all
    """
    source = SourceConfig(name=name, remote=remote, branch=branch, local=local, depth=depth)

    try:
        engine = _engine(work_dir)
        result = engine.sync(source)
    except PipelineError as e:
        _fail(ctx, e)
        return

    click.echo(f"Mirror:  {result.local_path}")
    click.echo(f"Action:  {result.action.value}")
    click.echo(f"Ref:     {result.resolved_ref}")


@cli.command()
@source_options
@click.option(
    "--pattern", "-p", "patterns",
    multiple=True,
    help="Glob pattern selecting files (repeatable, default: **)"
)
@click.option(
    "--contributors",
    type=click.Choice(["all", "repo", "path"]),
    help="Attach contributor lists to the repository, files, or both"
)
@click.option("--log", "with_log", is_flag=True, help="Attach a commit-log excerpt to every file")
@click.option("--log-pretty", help="Format token forwarded as --pretty=<token>")
@click.option("--log-count", type=int, help="Commits per excerpt (0 = full history)")
@click.option("--storage-dir", type=click.Path(), help="Directory for stored records")
@click.pass_context
def ingest(ctx, name, remote, branch, depth, local, work_dir, patterns,
           contributors, with_log, log_pretty, log_count, storage_dir):
    """
    Mirror a remote repository and store metadata records for its files.

    Examples:

        gitsource ingest docs https://github.com/org/docs.git -p '**/*.md'

        gitsource ingest docs https://github.com/org/docs.git --contributors all --log-count 5
    """
    log = None
    if with_log or log_pretty or log_count is not None:
        log = LogOptions(pretty=log_pretty, count=1 if log_count is None else log_count)

    source = SourceConfig(
        name=name,
        remote=remote,
        branch=branch,
        patterns=list(patterns) or ["**"],
        local=local,
        depth=depth,
        contributors=contributors,
        log=log,
    )

    try:
        engine = _engine(work_dir, storage_dir)
        summary = engine.ingest(source)
    except PipelineError as e:
        _fail(ctx, e)
        return

    _print_summary(summary, engine.config.storage.storage_dir)


@cli.command()
@click.argument("config_file", type=click.Path(exists=True))
@click.pass_context
def run(ctx, config_file):
    """
    Ingest every source listed in a configuration file.
    """
    try:
        Config.load_from_file(config_file)
        engine = _engine(None)
        summaries = engine.ingest_all()
    except PipelineError as e:
        _fail(ctx, e)
        return

    for summary in summaries:
        _print_summary(summary, engine.config.storage.storage_dir)


@cli.command()
@click.option(
    "--output", "-o",
    type=click.Path(),
    default="config.json",
    help="Output path for configuration file"
)
def init(output):
    """
    Initialize configuration file.

    Creates a default configuration file that can be customized.
    """
    Config.save_to_file(output)
    click.echo(f"Configuration saved to: {output}")


def _print_summary(summary, storage_dir) -> None:
    remote = summary.repository.remote
    click.echo("=" * 60)
    click.echo(f"Source:  {summary.repository.source_instance_name}")
    click.echo(f"Remote:  {remote.web_link or remote.source}")
    click.echo(f"Ref:     {remote.ref}")
    click.echo(f"Files:   {summary.file_count}")
    click.echo(f"Records: {storage_dir}")
    click.echo("=" * 60)


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
