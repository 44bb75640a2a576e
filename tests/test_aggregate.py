"""Tests for cross-file aggregation and the statistics reducer."""

from __future__ import annotations

import itertools

import pytest

from gitfame.aggregate import Aggregator, reduce_statistics
from gitfame.exceptions import MalformedBlameError
from gitfame.models import FileBlame, Statistics


# ── Helpers ─────────────────────────────────────────────────────────────────

def _make_blame(
    path: str,
    lines: dict[str, int],
    authors: dict[str, str] | None = None,
) -> FileBlame:
    return FileBlame(path=path, lines=dict(lines), authors=dict(authors or {}))


def _stats(agg: Aggregator) -> dict[str, Statistics]:
    return {a.name: a.statistics for a in agg.statistics()}


def _scenario_files() -> list[FileBlame]:
    """Files A, B, C: c1 by Alice, c2 by Bob, continuations carry no identity."""
    return [
        _make_blame("A", {"c1": 10}, {"c1": "Alice"}),
        _make_blame("B", {"c1": 5, "c2": 3}, {"c2": "Bob"}),
        _make_blame("C", {"c2": 2}),
    ]


# ── Example scenarios ───────────────────────────────────────────────────────


def test_three_file_scenario() -> None:
    agg = Aggregator()
    for blame in _scenario_files():
        agg.merge(blame)

    stats = _stats(agg)
    assert stats["Alice"] == Statistics(lines=15, commits=1, files=2)
    assert stats["Bob"] == Statistics(lines=5, commits=1, files=2)
    assert agg.files_merged == 3


def test_empty_file_fallback_keeps_zero_line_author() -> None:
    agg = Aggregator()
    agg.merge(_make_blame("A", {"c1": 4}, {"c1": "Alice"}))
    agg.merge(FileBlame.from_last_commit("D", "c3", "Carol"))

    stats = _stats(agg)
    assert stats["Carol"] == Statistics(lines=0, commits=1, files=1)
    assert stats["Alice"] == Statistics(lines=4, commits=1, files=1)


# ── Dedup & set semantics ───────────────────────────────────────────────────


def test_commit_seen_in_many_files_counts_once() -> None:
    agg = Aggregator()
    for i in range(5):
        agg.merge(_make_blame(f"f{i}", {"c1": 2}, {"c1": "Alice"}))

    assert _stats(agg)["Alice"] == Statistics(lines=10, commits=1, files=5)
    assert agg.author_commits["Alice"] == {"c1"}
    assert agg.commit_lines["c1"] == 10


def test_file_counts_once_per_author_regardless_of_commits() -> None:
    agg = Aggregator()
    agg.merge(_make_blame(
        "big.py",
        {"c1": 1, "c2": 1, "c3": 1},
        {"c1": "Alice", "c2": "Alice", "c3": "Bob"},
    ))

    stats = _stats(agg)
    assert stats["Alice"] == Statistics(lines=2, commits=2, files=1)
    assert stats["Bob"] == Statistics(lines=1, commits=1, files=1)


def test_case_differing_names_stay_distinct() -> None:
    agg = Aggregator()
    agg.merge(_make_blame("a", {"c1": 1, "c2": 1}, {"c1": "alice", "c2": "Alice"}))
    assert set(_stats(agg)) == {"alice", "Alice"}


# ── Merge order ─────────────────────────────────────────────────────────────


def test_merge_is_order_independent() -> None:
    files = _scenario_files() + [
        _make_blame("D", {"c3": 7, "c1": 1}, {"c3": "Carol"}),
        FileBlame.from_last_commit("E", "c4", "Bob"),
    ]
    results = []
    for perm in itertools.permutations(files):
        agg = Aggregator()
        for blame in perm:
            agg.merge(_make_blame(blame.path, blame.lines, blame.authors))
        results.append(_stats(agg))

    assert all(r == results[0] for r in results)
    assert results[0]["Bob"] == Statistics(lines=5, commits=2, files=3)


def test_pending_commit_settles_when_identity_arrives() -> None:
    agg = Aggregator()
    agg.merge(_make_blame("C", {"c2": 2}))
    assert agg.unresolved == {"c2"}

    agg.merge(_make_blame("B", {"c2": 3}, {"c2": "Bob"}))
    assert agg.unresolved == set()
    assert _stats(agg)["Bob"] == Statistics(lines=5, commits=1, files=2)


def test_unresolved_commit_at_end_is_fatal() -> None:
    agg = Aggregator()
    agg.merge(_make_blame("orphan.py", {"c9": 3}))
    with pytest.raises(MalformedBlameError, match="c9"):
        agg.statistics()


def test_unresolved_error_lists_every_missing_commit() -> None:
    agg = Aggregator()
    agg.merge(_make_blame("x.py", {"c8": 1}))
    agg.merge(_make_blame("y.py", {"c9": 2, "c1": 1}, {"c1": "Alice"}))
    assert agg.unresolved == {"c8", "c9"}
    with pytest.raises(MalformedBlameError, match=r"x\.py: .*c8, c9"):
        agg.statistics()


# ── Conflicts ───────────────────────────────────────────────────────────────


def test_conflicting_identity_is_fatal_and_leaves_tables_untouched() -> None:
    agg = Aggregator()
    agg.merge(_make_blame("A", {"c1": 10}, {"c1": "Alice"}))

    with pytest.raises(MalformedBlameError, match="previously 'Alice'"):
        agg.merge(_make_blame("B", {"c1": 1, "c2": 4}, {"c1": "Mallory", "c2": "Bob"}))

    assert dict(agg.commit_lines) == {"c1": 10}
    assert "Bob" not in agg.author_commits
    assert agg.files_merged == 1

    agg.merge(_make_blame("C", {"c2": 2}))
    assert agg.unresolved == {"c2"}


def test_repeated_identical_identity_is_fine() -> None:
    agg = Aggregator()
    agg.merge(_make_blame("A", {"c1": 1}, {"c1": "Alice"}))
    agg.merge(_make_blame("B", {"c1": 1}, {"c1": "Alice"}))
    assert _stats(agg)["Alice"] == Statistics(lines=2, commits=1, files=2)


# ── Reducer ─────────────────────────────────────────────────────────────────


def test_reduce_statistics_is_pure() -> None:
    author_commits = {"Alice": {"c1", "c2"}, "Bob": {"c3"}}
    commit_lines = {"c1": 4, "c2": 6, "c3": 0}
    author_files = {"Alice": 3, "Bob": 1}

    result = {a.name: a.statistics for a in reduce_statistics(author_commits, commit_lines, author_files)}

    assert result == {
        "Alice": Statistics(lines=10, commits=2, files=3),
        "Bob": Statistics(lines=0, commits=1, files=1),
    }
    assert author_commits == {"Alice": {"c1", "c2"}, "Bob": {"c3"}}


def test_empty_run_reduces_to_nothing() -> None:
    assert Aggregator().statistics() == []
