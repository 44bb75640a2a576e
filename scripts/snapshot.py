"""CLI: Compute ownership statistics and save a snapshot for the dashboard."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from gitfame.config import (
    DEFAULT_ORDER_BY,
    DEFAULT_REPOSITORY,
    DEFAULT_REVISION,
    PROCESSED_DIR,
    workers_from_env,
)
from gitfame.git import GitRepository
from gitfame.pipeline import collect_statistics

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s"
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Blame the configured repository and save results to processed/."""
    repo = GitRepository(DEFAULT_REPOSITORY)
    authors = collect_statistics(
        repo,
        revision=DEFAULT_REVISION,
        order_by=DEFAULT_ORDER_BY,
        max_workers=workers_from_env(),
    )
    logger.info("Computed statistics for %d authors", len(authors))

    PROCESSED_DIR.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
    out_path = PROCESSED_DIR / f"ownership_{timestamp}.json"

    serialized = {
        "_metadata": {
            "repository": str(repo.path.resolve()),
            "revision": DEFAULT_REVISION,
            "computed_at": datetime.now(timezone.utc).isoformat(),
            "author_count": len(authors),
            "total_lines": sum(a.statistics.lines for a in authors),
        },
        "authors": [a.to_dict() for a in authors],
    }

    out_path.write_text(json.dumps(serialized, indent=2, ensure_ascii=False))
    logger.info("Saved snapshot → %s", out_path)

    print(f"\nTop 10 authors by {DEFAULT_ORDER_BY} at {DEFAULT_REVISION}:\n")
    for i, a in enumerate(authors[:10], 1):
        s = a.statistics
        print(
            f"  {i:2d}. {a.name:<30s}  Lines={s.lines:8d}  "
            f"Commits={s.commits:6d}  Files={s.files:5d}"
        )


if __name__ == "__main__":
    main()
