from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

import click
from flask import current_app

from .models import utcnow
from .repos import posts_repo, trends_repo
from .store import Store
from .text import token_counts

TREND_WINDOW = timedelta(days=7)
RISING_RECENT = timedelta(hours=24)
RISING_BASELINE = timedelta(days=7)
TOP_N = 40


def _aware(dt: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def rising_score(recent: int, prev: int) -> float:
    return (recent + 1) / (prev / 7 + 1)


def _collect(store: Store, since: datetime) -> List[Tuple[Optional[str], datetime, str]]:
    posts = posts_repo.recent_posts(store, since, columns=["board", "title", "content", "created_at"])
    comments = posts_repo.recent_comments(store, since, columns=["board", "content", "created_at"])
    entries = [(p["board"], _aware(p["created_at"]), f"{p['title'] or ''} {p['content'] or ''}") for p in posts]
    entries += [(c["board"], _aware(c["created_at"]), c["content"] or "") for c in comments]
    return entries


def _rising_rows(board: Optional[str], recent: Counter, prev: Counter, now: datetime, top_n: int) -> List[Dict]:
    rows = []
    for kw, r in recent.items():
        p = prev.get(kw, 0)
        rows.append({
            "board": board,
            "keyword": kw,
            "recent_cnt": r,
            "prev_cnt": p,
            "delta": r - p,
            "ratio": (r / p) if p else None,
            "score": rising_score(r, p),
            "computed_at": now,
        })
    rows.sort(key=lambda x: x["score"], reverse=True)
    return rows[:top_n]


def refresh_trends(store: Store, now: Optional[datetime] = None, top_n: int = TOP_N) -> Dict[str, int]:
    """
    Rebuild trend_keywords (7-day top-N) and rising_keywords (last 24h against
    the 7 days before it), once for all boards (board NULL) and once per board.
    """
    now = _aware(now or utcnow())
    trend_since = now - TREND_WINDOW
    recent_since = now - RISING_RECENT
    baseline_since = recent_since - RISING_BASELINE

    entries = _collect(store, min(trend_since, baseline_since))
    scopes: List[Optional[str]] = [None] + sorted({b for b, _, _ in entries if b})

    trend_rows: List[Dict] = []
    rising_rows: List[Dict] = []
    for scope in scopes:
        mine = [(ts, text) for b, ts, text in entries if scope is None or b == scope]
        week = token_counts(text for ts, text in mine if ts >= trend_since)
        trend_rows += [
            {"board": scope, "keyword": kw, "cnt": n, "computed_at": now}
            for kw, n in week.most_common(top_n)
        ]
        recent = token_counts(text for ts, text in mine if ts >= recent_since)
        prev = token_counts(text for ts, text in mine if baseline_since <= ts < recent_since)
        rising_rows += _rising_rows(scope, recent, prev, now, top_n)

    written = {
        "trend": trends_repo.replace_trends(store, trend_rows),
        "rising": trends_repo.replace_rising(store, rising_rows),
    }
    current_app.logger.info("refreshed trends: %(trend)d trend rows, %(rising)d rising rows", written)
    return written


def register_cli(app) -> None:
    @app.cli.command("refresh-trends")
    def refresh_trends_command():
        """Recompute trend and rising keyword tables."""
        from . import get_store
        written = refresh_trends(get_store())
        click.echo(f"✔ trend_keywords={written['trend']} rising_keywords={written['rising']}")
