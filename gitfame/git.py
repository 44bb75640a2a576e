"""Read-only git subprocess wrapper."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from gitfame.blame import parse_last_commit
from gitfame.config import DEFAULT_REPOSITORY
from gitfame.exceptions import GitCommandError, MalformedBlameError

logger = logging.getLogger(__name__)


class GitRepository:
    """Runs the handful of git commands gitfame needs against one repository.

    Every failure is fatal: a non-zero exit status or a missing ``git``
    executable raises :class:`GitCommandError`, and nothing is retried.
    """

    def __init__(self, path: str | Path = DEFAULT_REPOSITORY) -> None:
        self.path = Path(path)

    def run(self, *args: str) -> str:
        """Run ``git -C <repo> <args>`` and return its decoded stdout."""
        cmd = ["git", "-C", str(self.path), *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=True,
            )
        except FileNotFoundError as exc:
            raise GitCommandError("git executable not found on PATH") from exc
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or "").strip()
            raise GitCommandError(
                f"git {args[0]} failed in {self.path} (exit {exc.returncode}): {stderr}"
            ) from exc
        return result.stdout

    # ── Commands ────────────────────────────────────────────────────────

    def list_files(self, revision: str) -> list[str]:
        """All blob paths in *revision*, in ls-tree order.

        Submodule entries (type ``commit``) are skipped; they have no
        lines of their own to blame.
        """
        output = self.run("ls-tree", "-r", "-z", revision)
        files: list[str] = []
        for entry in output.split("\0"):
            if not entry:
                continue
            # <mode> SP <type> SP <object> TAB <path>
            meta, _, path = entry.partition("\t")
            fields = meta.split(" ")
            if len(fields) != 3 or not path:
                raise MalformedBlameError(f"unexpected ls-tree entry {entry!r}")
            if fields[1] == "blob":
                files.append(path)
            else:
                logger.debug("Skipping %s entry %s", fields[1], path)
        return files

    def blame(self, revision: str, path: str) -> list[str]:
        """Porcelain blame stream for *path*; empty for an empty file."""
        output = self.run("blame", "--porcelain", revision, "--", path)
        return [line for line in output.split("\n") if line]

    def last_commit(
        self,
        revision: str,
        path: str,
        use_committer: bool = False,
    ) -> tuple[str, str]:
        """Most recent commit touching *path* and its author (or committer)."""
        fmt = "%H %cn" if use_committer else "%H %an"
        output = self.run("log", "-n", "1", f"--pretty=format:{fmt}", revision, "--", path)
        return parse_last_commit(output, path)
