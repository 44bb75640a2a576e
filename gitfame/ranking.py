"""Ranking of authors by a configurable composite key.

The order key picks the primary field; the other two follow in their
declared order (``lines, commits, files``).  All three sort descending.
Ties on every count fall back to the author name, ascending and
case-insensitive, so the output never depends on dict iteration order.
"""

from __future__ import annotations

from collections.abc import Iterable

from gitfame.config import ORDER_KEYS
from gitfame.exceptions import ConfigurationError
from gitfame.models import RankedAuthor


def validate_order_key(order_by: str) -> str:
    """Return *order_by* unchanged, or raise ``ConfigurationError``."""
    if order_by not in ORDER_KEYS:
        raise ConfigurationError(
            f"unsupported order key {order_by!r}; expected one of {', '.join(ORDER_KEYS)}"
        )
    return order_by


def sort_fields(order_by: str) -> tuple[str, str, str]:
    """``commits`` → ``("commits", "lines", "files")`` and so on."""
    validate_order_key(order_by)
    rest = [k for k in ORDER_KEYS if k != order_by]
    return (order_by, rest[0], rest[1])


def sort_key(author: RankedAuthor, fields: tuple[str, str, str]) -> tuple:
    """Ascending-sortable key: negated counts, then folded and raw name."""
    stats = author.statistics
    counts = tuple(-getattr(stats, f) for f in fields)
    return (*counts, author.name.lower(), author.name)


def rank_authors(authors: Iterable[RankedAuthor], order_by: str) -> list[RankedAuthor]:
    """Return *authors* fully ordered for display."""
    fields = sort_fields(order_by)
    return sorted(authors, key=lambda a: sort_key(a, fields))
