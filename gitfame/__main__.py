"""Entry-point for ``python -m gitfame``."""

from __future__ import annotations

from gitfame.cli import main

if __name__ == "__main__":
    main(prog_name="gitfame")
