"""Streamlit dashboard for gitfame ownership snapshots."""

from __future__ import annotations

import json

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from gitfame.config import ORDER_KEYS, PROCESSED_DIR
from gitfame.models import RankedAuthor, Statistics
from gitfame.ranking import rank_authors


# ── Data loading (cached) ──────────────────────────────────────────────────

@st.cache_data
def _load_latest_snapshot() -> tuple[list[dict], dict] | None:
    """Load the most recent snapshot JSON file. Returns (authors, metadata)."""
    files = sorted(PROCESSED_DIR.glob("ownership_*.json"))
    if not files:
        return None
    data = json.loads(files[-1].read_text())
    return data.get("authors", []), data.get("_metadata", {})


def _rerank(records: list[dict], order_by: str) -> list[dict]:
    """Re-order snapshot records in memory with the CLI's ranking rules."""
    authors = [
        RankedAuthor(
            name=r["name"],
            statistics=Statistics(lines=r["lines"], commits=r["commits"], files=r["files"]),
        )
        for r in records
    ]
    return [a.to_dict() for a in rank_authors(authors, order_by)]


# ── Dashboard ───────────────────────────────────────────────────────────────

def main() -> None:
    """Render the Streamlit dashboard."""
    st.set_page_config(page_title="gitfame ownership", layout="wide")
    loaded = _load_latest_snapshot()
    if loaded is None:
        st.error(
            "No snapshot found. Run the pipeline first:\n\n"
            "```bash\n"
            "GITFAME_REPOSITORY=/path/to/repo python scripts/snapshot.py\n"
            "```"
        )
        return

    records, metadata = loaded
    total_lines = metadata.get("total_lines", sum(r["lines"] for r in records))

    # ── Compact header ───────────────────────────────────────────────────
    col_h1, col_h2 = st.columns([3, 2])
    with col_h1:
        st.markdown("## Code Ownership")
        st.caption(metadata.get("repository", ""))
    with col_h2:
        st.caption(
            f"{len(records)} authors · {total_lines} lines · "
            f"revision {metadata.get('revision', '?')} · "
            f"computed {metadata.get('computed_at', 'unknown')}"
        )

    # ── Sidebar filters ─────────────────────────────────────────────────
    with st.sidebar:
        st.header("Filters")
        order_by = st.selectbox("Order by", ORDER_KEYS, index=0)
        if len(records) > 1:
            top_n = st.slider(
                "Top N authors", min_value=1, max_value=len(records),
                value=min(10, len(records)),
            )
        else:
            top_n = len(records)

    df = pd.DataFrame(_rerank(records, order_by))
    if df.empty:
        st.warning("The snapshot contains no authors.")
        return

    top = df.head(top_n)
    display_df = top.rename(columns={
        "name": "Author",
        "lines": "Lines",
        "commits": "Commits",
        "files": "Files",
    })
    display_df["Share"] = (top["lines"] / max(total_lines, 1)).apply(
        lambda x: f"{x:.0%}"
    )
    display_df = display_df.reset_index(drop=True)
    display_df.index = display_df.index + 1

    col_table, col_chart = st.columns([3, 2])

    with col_table:
        st.markdown(f"**Top {len(top)} Authors by {order_by}**")
        st.dataframe(display_df, use_container_width=True)

    with col_chart:
        st.markdown(f"**{order_by.capitalize()} per author**")
        fig = go.Figure()
        fig.add_trace(go.Bar(
            x=top["name"],
            y=top[order_by],
            name=order_by,
            marker_color="#4ECDC4",
        ))
        fig.update_layout(
            xaxis_title="Author",
            yaxis_title=order_by.capitalize(),
            margin=dict(t=10, b=40, l=50, r=10),
        )
        st.plotly_chart(fig, use_container_width=True)

    with st.expander("How counts work"):
        st.markdown("""
- **Lines** — lines at this revision that `git blame` attributes to the author.
- **Commits** — distinct commits behind those lines; a commit spanning many files counts once.
- **Files** — files holding at least one of the author's lines. Empty files count toward whoever last touched them.

Ties are broken by the remaining two counts, then by name (case-insensitive).
""")


if __name__ == "__main__":
    main()
