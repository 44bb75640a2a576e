"""Run orchestration: list → blame (parallel) → merge (serial) → rank."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from gitfame.aggregate import Aggregator
from gitfame.blame import parse_porcelain
from gitfame.config import DEFAULT_ORDER_BY, DEFAULT_REVISION, DEFAULT_WORKERS, PROGRESS_EVERY
from gitfame.exceptions import ConfigurationError
from gitfame.filters import select_files, validate_patterns
from gitfame.git import GitRepository
from gitfame.models import FileBlame, RankedAuthor
from gitfame.ranking import rank_authors, validate_order_key

logger = logging.getLogger(__name__)


def analyze_file(
    repo: GitRepository,
    revision: str,
    path: str,
    use_committer: bool = False,
) -> FileBlame:
    """Blame one file; fall back to its last commit when blame is empty."""
    stream = repo.blame(revision, path)
    if not stream:
        commit, name = repo.last_commit(revision, path, use_committer=use_committer)
        logger.debug("%s: empty blame, attributing to last commit %s", path, commit)
        return FileBlame.from_last_commit(path, commit, name)
    return parse_porcelain(stream, path=path, use_committer=use_committer)


def aggregate_files(
    repo: GitRepository,
    revision: str,
    files: Sequence[str],
    use_committer: bool = False,
    max_workers: int = DEFAULT_WORKERS,
) -> Aggregator:
    """Blame *files* on a worker pool and fold each result into one Aggregator.

    Results are merged one file at a time on the calling thread, in the
    order of *files*.  The first failure cancels queued work and propagates.
    """
    aggregator = Aggregator()
    total = len(files)

    def _work(path: str) -> FileBlame:
        return analyze_file(repo, revision, path, use_committer)

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        try:
            for blame in pool.map(_work, files):
                aggregator.merge(blame)
                done = aggregator.files_merged
                if done % PROGRESS_EVERY == 0 or done == total:
                    logger.info("Blamed files: %d/%d", done, total)
        except BaseException:
            pool.shutdown(wait=True, cancel_futures=True)
            raise

    return aggregator


def collect_statistics(
    repo: GitRepository,
    revision: str = DEFAULT_REVISION,
    order_by: str = DEFAULT_ORDER_BY,
    use_committer: bool = False,
    extensions: Sequence[str] = (),
    languages: Sequence[str] = (),
    exclude: Sequence[str] = (),
    restrict_to: Sequence[str] = (),
    max_workers: int = DEFAULT_WORKERS,
) -> list[RankedAuthor]:
    """Compute the ranked ownership report for *repo* at *revision*.

    Configuration is validated before git is invoked at all.
    """
    validate_order_key(order_by)
    validate_patterns(exclude)
    validate_patterns(restrict_to)
    if max_workers < 1:
        raise ConfigurationError(f"worker count must be at least 1, got {max_workers}")

    files = select_files(
        repo.list_files(revision),
        extensions=extensions,
        languages=languages,
        exclude_patterns=exclude,
        restrict_patterns=restrict_to,
    )
    logger.info("Analyzing %d files at %s in %s", len(files), revision, repo.path)

    aggregator = aggregate_files(repo, revision, files, use_committer, max_workers)
    authors = rank_authors(aggregator.statistics(), order_by)
    logger.info("Ranked %d authors by %s", len(authors), order_by)
    return authors
