from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from ..anonymity import anonymize_text, bucket_count, should_hide_evidence
from ..boards import safe_decode
from ..config import MIN_EVIDENCE_SAMPLE
from ..errors import BadInput
from ..models import utcnow
from ..repos import posts_repo
from ..store import Store
from ..text import count_mentions, cut
from .analytics import iso

POSITIVE_CUES = ("잘함", "잘해", "고수", "좋다", "추천", "멋", "센스", "안정", "캐리", "빠름", "깔끔", "인정", "최고")
NEGATIVE_CUES = ("못함", "못해", "트롤", "별로", "욕", "짜증", "패배", "민폐", "느림", "답답", "비매너", "혐오", "최악")
TAGS = (
    ("징/징벌", ("징", "징벌", "징작", "징연습")),
    ("주행", ("주행", "라인", "드리프트", "코너", "속도", "부스터")),
    ("서폿", ("서폿", "서포", "보조", "힐", "지원")),
    ("운영/판단", ("운영", "판단", "각", "콜", "시야", "포지션")),
    ("멘탈/태도", ("멘탈", "비매너", "매너", "채팅", "욕", "싸움")),
)

PROFILE_WINDOW_DAYS = 180
PROFILE_POST_LIMIT = 800
PROFILE_COMMENT_LIMIT = 1200


def confidence_tier(samples: int) -> str:
    if samples >= 30:
        return "높음"
    if samples >= 10:
        return "중간"
    if samples >= 3:
        return "낮음"
    return "매우 낮음"


def tone_label(pos: int, neg: int) -> str:
    if pos - neg >= 5:
        return "대체로 호평이 많음"
    if neg - pos >= 5:
        return "부정 의견이 상대적으로 많음"
    return "호불호가 섞여 있음"


def summarize(posts: List[Dict[str, Any]], comments: List[Dict[str, Any]], name: str) -> Dict[str, Any]:
    """Cue-word tallies over every text mentioning `name`; substring hits, not tokens."""
    boards: Counter = Counter()
    tags: Counter = Counter()
    pos = neg = mentions = 0

    texts = []
    for p in posts:
        boards[p.get("board") or "기타"] += 1
        texts.append(f"{p.get('title') or ''} {p.get('content') or ''}")
    texts.extend(c.get("content") or "" for c in comments)

    for t in texts:
        mentions += count_mentions(t, name)
        low = t.lower()
        pos += sum(1 for w in POSITIVE_CUES if w in low)
        neg += sum(1 for w in NEGATIVE_CUES if w in low)
        for label, keys in TAGS:
            hit = sum(1 for k in keys if k in low)
            if hit:
                tags[label] += hit

    samples = len(posts) + len(comments)
    return {
        "samples": samples,
        "confidence": confidence_tier(samples),
        "tone": tone_label(pos, neg),
        "pos": pos,
        "neg": neg,
        "mention_total": mentions,
        "top_boards": boards.most_common(6),
        "top_tags": tags.most_common(8),
    }


def _evidence(posts, comments, parents, n: int = 120) -> List[Dict[str, Any]]:
    items = []
    for p in posts[:6]:
        items.append({
            "type": "post",
            "id": p["id"],
            "post_id": p["id"],
            "board": p.get("board") or "기타",
            "snippet": anonymize_text(cut(f"{p.get('title') or ''} {p.get('content') or ''}", n)),
            "created_at": p.get("created_at"),
        })
    for c in comments[:6]:
        parent = parents.get(c["post_id"]) or {}
        items.append({
            "type": "comment",
            "id": c["id"],
            "post_id": c["post_id"],
            "board": parent.get("board") or "기타",
            "snippet": anonymize_text(cut(c.get("content") or "", n)),
            "created_at": c.get("created_at"),
        })
    items.sort(key=lambda e: iso(e["created_at"]), reverse=True)
    for e in items:
        e["created_at"] = iso(e["created_at"])
    return items[:10]


def profile_view(store: Store, raw_name: str, now: Optional[datetime] = None,
                 min_sample: int = MIN_EVIDENCE_SAMPLE) -> Dict[str, Any]:
    name = safe_decode((raw_name or "").strip()).strip()
    if not name:
        raise BadInput("name required")
    since = (now or utcnow()) - timedelta(days=PROFILE_WINDOW_DAYS)

    posts = posts_repo.recent_posts(store, since, PROFILE_POST_LIMIT, needles=[name],
                                    columns=["id", "board", "title", "content", "created_at"])
    comments = posts_repo.recent_comments(store, since, PROFILE_COMMENT_LIMIT, needles=[name],
                                          columns=["id", "post_id", "content", "created_at"])
    summary = summarize(posts, comments, name)
    hide = should_hide_evidence(summary["samples"], min_sample)

    payload: Dict[str, Any] = {
        "name": name,
        "window_days": PROFILE_WINDOW_DAYS,
        "min_sample": min_sample,
        "samples": bucket_count(summary["samples"], min_sample),
        "confidence": summary["confidence"],
        "tone": summary["tone"],
        "pos": summary["pos"],
        "neg": summary["neg"],
        "mention_total": summary["mention_total"],
        "top_boards": [{"board": b, "count": bucket_count(n, min_sample)} for b, n in summary["top_boards"]],
        "top_tags": [{"tag": t, "count": n} for t, n in summary["top_tags"]],
        "evidence_hidden": hide,
        "evidence": [],
    }
    if not hide:
        parents = {p["id"]: p for p in posts_repo.posts_by_ids(store, (c["post_id"] for c in comments))}
        payload["evidence"] = _evidence(posts, comments, parents)
    return payload
