"""Parser for ``git blame --porcelain`` record streams.

The stream is a sequence of chunks, one per blamed line:

    <commit> <orig-line> <final-line> [<run-length>]
    author Jane Doe                 ← only after the first header of a run,
    author-mail <jane@example.com>     and only the first time the commit
    ...                                appears in the stream
    \t<line content>

``run-length`` is given on the header that opens a run of consecutive lines
from the same commit and omitted on the headers that continue it.  The
parser tracks how many lines of the open run are left and only expects a
run length once that counter reaches zero.

Key invariants:
    - The sum of parsed line counts equals the number of content lines.
    - An identity is recorded from the run-opening metadata only; later
      occurrences of the same commit carry no identity and need none.
"""

from __future__ import annotations

import enum
import logging
import re
from collections.abc import Iterable

from gitfame.config import AUTHOR_PREFIX, COMMITTER_PREFIX
from gitfame.exceptions import MalformedBlameError
from gitfame.models import FileBlame

logger = logging.getLogger(__name__)

# SHA-1 or SHA-256 object name, lowercase as git prints it
_COMMIT_RE = re.compile(r"[0-9a-f]{40}(?:[0-9a-f]{24})?")


class _State(enum.Enum):
    EXPECT_HEADER = "header"
    EXPECT_METADATA = "metadata"
    EXPECT_CONTENT = "content"


def _identity_prefix(use_committer: bool) -> str:
    return COMMITTER_PREFIX if use_committer else AUTHOR_PREFIX


class PorcelainParser:
    """State machine consuming one file's porcelain stream.

    Feed lines with :meth:`feed`, then call :meth:`finish` to get the
    :class:`FileBlame`.  Each instance parses exactly one file.
    """

    def __init__(self, path: str = "", use_committer: bool = False) -> None:
        self.path = path
        self._prefix = _identity_prefix(use_committer)
        self._state = _State.EXPECT_HEADER
        self._remaining = 0
        self._commit: str | None = None
        self._line_no = 0
        self._result = FileBlame(path=path)

    @property
    def state(self) -> str:
        """Current state name, mostly useful for tests and debugging."""
        return self._state.value

    @property
    def remaining(self) -> int:
        """Lines of the currently open run not yet consumed."""
        return self._remaining

    # ── Transitions ─────────────────────────────────────────────────────

    def feed(self, line: str) -> None:
        """Consume one line of the stream."""
        self._line_no += 1
        if self._state is _State.EXPECT_HEADER:
            self._on_header(line)
        elif line.startswith("\t"):
            self._state = _State.EXPECT_HEADER
        elif self._state is _State.EXPECT_METADATA and line.startswith(self._prefix):
            name = line[len(self._prefix):]
            self._result.authors[self._commit] = name
            self._state = _State.EXPECT_CONTENT

    def _on_header(self, line: str) -> None:
        fields = line.split(" ")
        if len(fields) < 3 or not _COMMIT_RE.fullmatch(fields[0]):
            raise self._error(f"expected '<commit> <orig> <final> [<count>]' header, got {line!r}")
        commit = fields[0]

        if self._remaining == 0:
            if len(fields) < 4:
                raise self._error(f"run-opening header for {commit} has no line count")
            try:
                run_length = int(fields[3])
            except ValueError:
                raise self._error(f"invalid line count {fields[3]!r} for {commit}") from None
            if run_length <= 0:
                raise self._error(f"non-positive line count {run_length} for {commit}")
            self._remaining = run_length
            self._commit = commit
            self._result.lines[commit] = self._result.lines.get(commit, 0) + run_length
            self._state = _State.EXPECT_METADATA
        else:
            if commit != self._commit:
                raise self._error(
                    f"header for {commit} inside an open run of {self._commit}"
                )
            self._state = _State.EXPECT_CONTENT

        self._remaining -= 1

    def finish(self) -> FileBlame:
        """Return the parsed facts; fails if the stream stopped mid-chunk."""
        if self._state is not _State.EXPECT_HEADER or self._remaining:
            raise self._error("stream ended inside an unfinished chunk")
        return self._result

    def _error(self, message: str) -> MalformedBlameError:
        where = f"{self.path}:{self._line_no}" if self.path else f"line {self._line_no}"
        return MalformedBlameError(f"{where}: {message}")


def parse_porcelain(
    lines: Iterable[str],
    path: str = "",
    use_committer: bool = False,
) -> FileBlame:
    """Parse a whole porcelain stream into a :class:`FileBlame`.

    Empty strings are skipped; content lines always start with a tab, so a
    blank entry can only be a trailing newline artefact.
    """
    parser = PorcelainParser(path=path, use_committer=use_committer)
    for line in lines:
        if line:
            parser.feed(line)
    result = parser.finish()
    logger.debug(
        "%s: %d lines across %d commits", path or "<stream>", result.total_lines, len(result.lines)
    )
    return result


def parse_last_commit(output: str, path: str = "") -> tuple[str, str]:
    """Split ``git log --pretty=format:'%H %an'`` output into (commit, name)."""
    first = output.split("\n", 1)[0].rstrip("\r")
    parts = first.split(" ", 1)
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise MalformedBlameError(
            f"{path or '<log>'}: cannot read commit and name from {first!r}"
        )
    return parts[0], parts[1]
