"""Renderers for the ranked author list."""

from __future__ import annotations

import csv
import json
from collections.abc import Callable, Sequence
from typing import TextIO

from gitfame.config import OUTPUT_FORMATS
from gitfame.exceptions import ConfigurationError
from gitfame.models import RankedAuthor

HEADER: tuple[str, ...] = ("Name", "Lines", "Commits", "Files")


def _row(author: RankedAuthor) -> tuple[str, ...]:
    s = author.statistics
    return (author.name, str(s.lines), str(s.commits), str(s.files))


def format_tabular(authors: Sequence[RankedAuthor], stream: TextIO) -> None:
    """Left-aligned columns separated by a single space."""
    rows = [HEADER] + [_row(a) for a in authors]
    widths = [max(len(r[i]) for r in rows) for i in range(len(HEADER))]
    for row in rows:
        cells = [f"{cell:<{widths[i]}}" for i, cell in enumerate(row)]
        stream.write(" ".join(cells).rstrip() + "\n")


def format_csv(authors: Sequence[RankedAuthor], stream: TextIO) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(HEADER)
    writer.writerows(_row(a) for a in authors)


def format_json(authors: Sequence[RankedAuthor], stream: TextIO) -> None:
    """Compact JSON array of ``{name, lines, commits, files}`` records."""
    stream.write(json.dumps([a.to_dict() for a in authors], ensure_ascii=False, separators=(",", ":")))


def format_json_lines(authors: Sequence[RankedAuthor], stream: TextIO) -> None:
    for a in authors:
        stream.write(json.dumps(a.to_dict(), ensure_ascii=False, separators=(",", ":")) + "\n")


FORMATTERS: dict[str, Callable[[Sequence[RankedAuthor], TextIO], None]] = {
    "tabular": format_tabular,
    "csv": format_csv,
    "json": format_json,
    "json-lines": format_json_lines,
}


def get_formatter(name: str) -> Callable[[Sequence[RankedAuthor], TextIO], None]:
    """Look up a renderer by format name."""
    try:
        return FORMATTERS[name]
    except KeyError:
        raise ConfigurationError(
            f"unsupported format {name!r}; expected one of {', '.join(OUTPUT_FORMATS)}"
        ) from None


def render(authors: Sequence[RankedAuthor], fmt: str, stream: TextIO) -> None:
    get_formatter(fmt)(authors, stream)
