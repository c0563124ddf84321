"""
Aggregate views with the disclosure policy already applied.

Every payload built here is safe to hand to a client as-is: counts under the
minimum sample are bucketed, keywords under it are masked and evidence lists
are withheld.
"""
from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Sequence

from ..anonymity import bucket_count, mask_keyword, should_hide_evidence, should_hide_keyword
from ..boards import DEFAULT_OPS_BOARDS, safe_decode
from ..config import MIN_EVIDENCE_SAMPLE
from ..errors import BadInput
from ..models import utcnow
from ..repos import posts_repo, trends_repo
from ..schemas.trends import RisingRow, TrendRow
from ..store import Store
from ..text import cut, keyword_frequency, sanitize_query

TOPIC_MAP: Dict[str, Dict[str, Any]] = {
    "jing": {"title": "징벌", "keywords": ["징", "징벌", "징연습"]},
    "run": {"title": "주행", "keywords": ["주행"]},
    "sup": {"title": "서폿", "keywords": ["서폿"]},
    "meta": {"title": "메타", "keywords": ["메타", "티어", "밸런스"]},
    "ops": {"title": "운영", "keywords": ["운영", "판단", "각", "콜", "시야", "포지션", "동선"]},
    "mind": {"title": "멘탈", "keywords": ["멘탈", "매너", "비매너", "욕", "채팅", "싸움", "분쟁"]},
    "free": {"title": "자유", "keywords": []},
}

TOPIC_WINDOW_DAYS = 60
TOPIC_POST_LIMIT = 700
TOPIC_COMMENT_LIMIT = 900


def iso(value: Optional[datetime]) -> str:
    return value.isoformat() if value else ""


def _keyword_entry(keyword: str, cnt: int, min_sample: int) -> Dict[str, Any]:
    hide = should_hide_keyword(cnt, min_sample)
    return {
        "keyword": mask_keyword(keyword) if hide else keyword,
        "count": bucket_count(cnt, min_sample),
        "evidence_hidden": hide,
    }


# -- trend ---------------------------------------------------------------

def trend_view(store: Store, min_sample: int = MIN_EVIDENCE_SAMPLE, limit: int = 30) -> Dict[str, Any]:
    rows = [TrendRow.model_validate(r) for r in trends_repo.top_trends(store, None, limit)]
    return {
        "window": "7d",
        "min_sample": min_sample,
        "items": [_keyword_entry(r.keyword, r.cnt, min_sample) for r in rows],
    }


def _rising_entry(r: RisingRow, min_sample: int) -> Dict[str, Any]:
    evidence_hidden = should_hide_evidence(r.recent_cnt, min_sample)
    keyword_hidden = should_hide_keyword(r.recent_cnt, min_sample)
    entry: Dict[str, Any] = {
        "label": "비공개 키워드" if keyword_hidden else mask_keyword(r.keyword),
        "recent": bucket_count(r.recent_cnt, min_sample) if evidence_hidden else str(r.recent_cnt),
        "prev": bucket_count(r.prev_cnt, min_sample) if evidence_hidden else str(r.prev_cnt),
        "delta": r.delta,
        "score": round(r.score, 2),
        "evidence_hidden": evidence_hidden,
    }
    if not keyword_hidden:
        entry["keyword"] = r.keyword
    return entry


def rising_view(store: Store, min_sample: int = MIN_EVIDENCE_SAMPLE, limit: int = 50) -> Dict[str, Any]:
    rows = [RisingRow.model_validate(r) for r in trends_repo.top_rising(store, None, "score", limit)]
    return {
        "basis": "24h vs previous 7d (excluding last 24h)",
        "min_sample": min_sample,
        "items": [_rising_entry(r, min_sample) for r in rows],
    }


# -- ops dashboard -------------------------------------------------------

def _ops_rising(r: RisingRow, min_sample: int) -> Dict[str, Any]:
    hide = should_hide_evidence(r.recent_cnt, min_sample)
    entry: Dict[str, Any] = {
        "keyword": r.keyword,
        "count": bucket_count(r.recent_cnt, min_sample),
        "evidence_hidden": hide,
    }
    if not hide:
        entry.update(delta=r.delta, prev=r.prev_cnt,
                     ratio=round(r.ratio, 2) if r.ratio is not None else None)
    return entry


def _ops_trend(r: TrendRow, min_sample: int) -> Dict[str, Any]:
    return {
        "keyword": r.keyword,
        "count": bucket_count(r.cnt, min_sample),
        "evidence_hidden": should_hide_evidence(r.cnt, min_sample),
    }


def ops_view(store: Store, tab: str = "all", board: Optional[str] = None,
             min_sample: int = MIN_EVIDENCE_SAMPLE) -> Dict[str, Any]:
    if tab not in ("all", "board"):
        raise BadInput("tab must be 'all' or 'board'")
    boards = trends_repo.trend_boards(store) or list(DEFAULT_OPS_BOARDS)
    scope: Optional[str] = None
    if tab == "board":
        scope = safe_decode((board or "").strip()) or boards[0]
    rising = [RisingRow.model_validate(r) for r in trends_repo.top_rising(store, scope, "delta", 20)]
    trend = [TrendRow.model_validate(r) for r in trends_repo.top_trends(store, scope, 20)]
    return {
        "tab": tab,
        "board": scope,
        "boards": boards,
        "min_sample": min_sample,
        "rising": [_ops_rising(r, min_sample) for r in rising],
        "trend": [_ops_trend(r, min_sample) for r in trend],
    }


# -- search-like views ---------------------------------------------------

def analyze_view(store: Store, raw_q: str, min_sample: int = MIN_EVIDENCE_SAMPLE) -> Dict[str, Any]:
    q = sanitize_query(raw_q)
    if not q:
        return {"q": "", "count": None, "evidence_hidden": True}
    cnt = posts_repo.count_matching_posts(store, q)
    return {
        "q": q,
        "sanitized": q != (raw_q or "").strip(),
        "count": bucket_count(cnt, min_sample),
        "evidence_hidden": should_hide_evidence(cnt, min_sample),
    }


def _post_evidence(p: Dict[str, Any], n: int = 130) -> Dict[str, Any]:
    return {
        "id": p["id"],
        "board": p.get("board") or "기타",
        "title": p.get("title") or "(제목 없음)",
        "snippet": cut(f"{p.get('title') or ''} {p.get('content') or ''}", n),
        "created_at": iso(p.get("created_at")),
    }


def topic_view(store: Store, raw_slug: str, now: Optional[datetime] = None,
               min_sample: int = MIN_EVIDENCE_SAMPLE) -> Dict[str, Any]:
    slug = safe_decode((raw_slug or "").strip())
    topic = TOPIC_MAP.get(slug) or {"title": slug or "주제", "keywords": []}
    since = (now or utcnow()) - timedelta(days=TOPIC_WINDOW_DAYS)

    posts = posts_repo.recent_posts(store, since, TOPIC_POST_LIMIT,
                                    columns=["id", "board", "title", "content", "created_at"])
    comments = posts_repo.recent_comments(store, since, TOPIC_COMMENT_LIMIT,
                                          columns=["id", "post_id", "content", "created_at"])
    keys = [k.lower() for k in topic["keywords"]]
    if keys:
        posts = [p for p in posts if any(k in f"{p['title'] or ''} {p['content'] or ''}".lower() for k in keys)]
        comments = [c for c in comments if any(k in (c["content"] or "").lower() for k in keys)]

    texts = [f"{p['title'] or ''} {p['content'] or ''}" for p in posts] + [c["content"] or "" for c in comments]
    boards = Counter((p["board"] or "기타") for p in posts).most_common(8)
    total = len(posts) + len(comments)
    hide = should_hide_evidence(total, min_sample)

    return {
        "topic": {"slug": slug, "title": topic["title"], "keywords": topic["keywords"]},
        "window_days": TOPIC_WINDOW_DAYS,
        "min_sample": min_sample,
        "sample": {
            "posts": bucket_count(len(posts), min_sample),
            "comments": bucket_count(len(comments), min_sample),
            "total": bucket_count(total, min_sample),
        },
        "top_words": [_keyword_entry(w, n, min_sample) for w, n in keyword_frequency(texts, 20)],
        "top_boards": [{"board": b, "count": bucket_count(n, min_sample)} for b, n in boards],
        "evidence_hidden": hide,
        "evidence": [] if hide else [_post_evidence(p) for p in posts[:10]],
    }


def keyword_view(store: Store, raw_kw: str, min_sample: int = MIN_EVIDENCE_SAMPLE) -> Dict[str, Any]:
    kw = sanitize_query(safe_decode(raw_kw or ""))
    if not kw:
        raise BadInput("keyword required")
    posts = posts_repo.search_posts(store, kw, 50)
    comments = posts_repo.search_comments(store, kw, 50)
    parents = {p["id"]: p for p in posts_repo.posts_by_ids(store, (c["post_id"] for c in comments))}
    total = len(posts) + len(comments)
    hide = should_hide_evidence(total, min_sample)

    payload: Dict[str, Any] = {
        "keyword": kw,
        "min_sample": min_sample,
        "posts_count": bucket_count(len(posts), min_sample),
        "comments_count": bucket_count(len(comments), min_sample),
        "total": bucket_count(total, min_sample),
        "evidence_hidden": hide,
        "posts": [],
        "comments": [],
    }
    if hide:
        return payload
    payload["posts"] = [_post_evidence(p, 140) for p in posts]
    for c in comments:
        parent = parents.get(c["post_id"]) or {}
        payload["comments"].append({
            "id": c["id"],
            "post_id": c["post_id"],
            "board": parent.get("board") or "기타",
            "title": parent.get("title") or "(원글 제목 없음)",
            "snippet": cut(c["content"] or "", 140),
            "created_at": iso(c["created_at"]),
        })
    return payload


def who_view(store: Store, raw_q: str, min_sample: int = MIN_EVIDENCE_SAMPLE) -> Dict[str, Any]:
    target = sanitize_query(raw_q)
    if not target:
        raise BadInput("q required")
    stats = store.rpc("who_stats", target=target)
    keywords: Sequence[Dict[str, Any]] = store.rpc("who_keywords", target=target, lim=30)
    total = int(stats.get("total_cnt") or 0)
    hide = should_hide_evidence(total, min_sample)
    return {
        "target": target,
        "min_sample": min_sample,
        "stats": {
            "posts": bucket_count(stats.get("posts_cnt"), min_sample),
            "comments": bucket_count(stats.get("comments_cnt"), min_sample),
            "total": bucket_count(total, min_sample),
        },
        "evidence_hidden": hide,
        "keywords": [
            {
                "keyword": mask_keyword(k["keyword"]) if hide else k["keyword"],
                "count": bucket_count(k["cnt"], min_sample) if hide else str(k["cnt"]),
            }
            for k in keywords
        ],
    }

