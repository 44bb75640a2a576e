"""Command-line interface: ``gitfame`` / ``python -m gitfame``."""

from __future__ import annotations

import logging
import sys

import click

from gitfame import __version__
from gitfame.config import (
    DEFAULT_FORMAT,
    DEFAULT_ORDER_BY,
    DEFAULT_REPOSITORY,
    DEFAULT_REVISION,
    DEFAULT_WORKERS,
    WORKERS_ENV,
    ORDER_KEYS,
    OUTPUT_FORMATS,
)
from gitfame.exceptions import ConfigurationError, GitFameError
from gitfame.formatters import render
from gitfame.git import GitRepository
from gitfame.pipeline import collect_statistics

logger = logging.getLogger(__name__)


def _split_list(ctx: click.Context, param: click.Parameter, value: tuple[str, ...]) -> list[str]:
    """Accept both ``--opt a,b`` and repeated ``--opt a --opt b``."""
    items: list[str] = []
    for chunk in value:
        items.extend(part.strip() for part in chunk.split(",") if part.strip())
    return items


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--repository", default=DEFAULT_REPOSITORY, show_default=True,
              help="Path to the git repository.")
@click.option("--revision", default=DEFAULT_REVISION, show_default=True,
              help="Commit, tag or branch to analyze.")
@click.option("--order-by", type=click.Choice(ORDER_KEYS), default=DEFAULT_ORDER_BY,
              show_default=True, help="Primary sort key.")
@click.option("--use-committer", is_flag=True,
              help="Attribute lines to the committer instead of the author.")
@click.option("--format", "output_format", type=click.Choice(OUTPUT_FORMATS),
              default=DEFAULT_FORMAT, show_default=True, help="Output format.")
@click.option("--extensions", multiple=True, callback=_split_list,
              help="Comma-separated file extensions to include, e.g. .go,.md")
@click.option("--languages", multiple=True, callback=_split_list,
              help="Comma-separated languages to include, e.g. go,python")
@click.option("--exclude", multiple=True, callback=_split_list,
              help="Comma-separated glob patterns of files to skip.")
@click.option("--restrict-to", multiple=True, callback=_split_list,
              help="Comma-separated glob patterns; only matching files are analyzed.")
@click.option("-j", "--jobs", type=click.IntRange(min=1), default=DEFAULT_WORKERS,
              envvar=WORKERS_ENV, show_envvar=True,
              show_default=True, help="Number of files blamed in parallel.")
@click.option("-v", "--verbose", is_flag=True, help="Log progress to stderr.")
@click.version_option(__version__, prog_name="gitfame")
def main(
    repository: str,
    revision: str,
    order_by: str,
    use_committer: bool,
    output_format: str,
    extensions: list[str],
    languages: list[str],
    exclude: list[str],
    restrict_to: list[str],
    jobs: int,
    verbose: bool,
) -> None:
    """Per-author line, commit and file ownership for a git repository."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        authors = collect_statistics(
            GitRepository(repository),
            revision=revision,
            order_by=order_by,
            use_committer=use_committer,
            extensions=extensions,
            languages=languages,
            exclude=exclude,
            restrict_to=restrict_to,
            max_workers=jobs,
        )
    except ConfigurationError as exc:
        raise click.UsageError(str(exc)) from exc
    except GitFameError as exc:
        logger.debug("Run aborted", exc_info=True)
        raise click.ClickException(str(exc)) from exc

    render(authors, output_format, sys.stdout)


if __name__ == "__main__":
    main()
