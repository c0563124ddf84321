"""Stored procedures callable through Store.rpc(name, **params)."""
from typing import Dict, List

import sqlalchemy as sa
from sqlalchemy import or_

from .errors import NotFound
from .store import Store, contains
from .text import keyword_frequency


def increment_post_like(store: Store, p_id: str) -> Dict[str, object]:
    with store.begin() as cx:
        res = cx.execute(
            sa.text("UPDATE posts SET likes = COALESCE(likes, 0) + 1 WHERE id = :id AND hidden = :hidden"),
            {"id": p_id, "hidden": False},
        )
        if res.rowcount == 0:
            raise NotFound("post not found")
        likes = cx.execute(sa.text("SELECT COALESCE(likes, 0) FROM posts WHERE id = :id"), {"id": p_id}).scalar()
    return {"id": p_id, "likes": int(likes or 0)}


def _post_match(store: Store, target: str):
    return or_(contains(store.column("posts", "title"), target), contains(store.column("posts", "content"), target))


def who_stats(store: Store, target: str) -> Dict[str, int]:
    posts_cnt = store.count("posts", filters={"hidden": False}, where=[_post_match(store, target)])
    comments_cnt = store.count("comments", filters={"hidden": False},
                               where=[contains(store.column("comments", "content"), target)])
    return {"posts_cnt": posts_cnt, "comments_cnt": comments_cnt, "total_cnt": posts_cnt + comments_cnt}


def who_keywords(store: Store, target: str, lim: int = 30) -> List[Dict[str, object]]:
    posts = store.select("posts", columns=["title", "content"], filters={"hidden": False},
                         where=[_post_match(store, target)], order="created_at", desc=True, limit=800)
    comments = store.select("comments", columns=["content"], filters={"hidden": False},
                            where=[contains(store.column("comments", "content"), target)],
                            order="created_at", desc=True, limit=1200)
    texts = [f"{p['title'] or ''} {p['content'] or ''}" for p in posts] + [c["content"] or "" for c in comments]
    return [{"keyword": k, "cnt": n} for k, n in keyword_frequency(texts, lim, exclude=[target])]


def register_rpcs(store: Store) -> None:
    store.register_rpc("increment_post_like", increment_post_like)
    store.register_rpc("who_stats", who_stats)
    store.register_rpc("who_keywords", who_keywords)
