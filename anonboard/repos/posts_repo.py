from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import or_

from ..store import Row, Store, contains

POSTS = "posts"
COMMENTS = "comments"


def list_board_posts(store: Store, board: str, limit: int = 50) -> List[Row]:
    return store.select(POSTS, filters={"board": board, "hidden": False},
                        order="created_at", desc=True, limit=limit)


def get_post(store: Store, post_id: str) -> Optional[Row]:
    rows = store.select(POSTS, filters={"id": post_id}, limit=1)
    return rows[0] if rows else None


def create_post(store: Store, row: dict) -> Row:
    return store.insert(POSTS, row)[0]


def list_comments(store: Store, post_id: str) -> List[Row]:
    return store.select(COMMENTS, filters={"post_id": post_id, "hidden": False}, order="created_at")


def create_comment(store: Store, row: dict) -> Row:
    return store.insert(COMMENTS, row)[0]


def posts_by_ids(store: Store, ids: Iterable[str]) -> List[Row]:
    ids = sorted({i for i in ids if i})
    if not ids:
        return []
    return store.select(POSTS, columns=["id", "board", "title"],
                        where=[store.column(POSTS, "id").in_(ids)])


def recent_posts(store: Store, since: datetime, limit: Optional[int] = None,
                 needles: Iterable[str] = (), columns=None) -> List[Row]:
    """Visible posts created at/after `since`; `needles` OR-filters title/content."""
    where = [store.column(POSTS, "created_at") >= since]
    needles = [n for n in needles if n]
    if needles:
        title, content = store.column(POSTS, "title"), store.column(POSTS, "content")
        where.append(or_(*[c for n in needles for c in (contains(title, n), contains(content, n))]))
    return store.select(POSTS, columns=columns, filters={"hidden": False}, where=where,
                        order="created_at", desc=True, limit=limit)


def recent_comments(store: Store, since: datetime, limit: Optional[int] = None,
                    needles: Iterable[str] = (), columns=None) -> List[Row]:
    where = [store.column(COMMENTS, "created_at") >= since]
    needles = [n for n in needles if n]
    if needles:
        content = store.column(COMMENTS, "content")
        where.append(or_(*[contains(content, n) for n in needles]))
    return store.select(COMMENTS, columns=columns, filters={"hidden": False}, where=where,
                        order="created_at", desc=True, limit=limit)


def search_posts(store: Store, q: str, limit: int = 50) -> List[Row]:
    title, content = store.column(POSTS, "title"), store.column(POSTS, "content")
    return store.select(POSTS, columns=["id", "board", "title", "content", "created_at"],
                        filters={"hidden": False}, where=[or_(contains(title, q), contains(content, q))],
                        order="created_at", desc=True, limit=limit)


def search_comments(store: Store, q: str, limit: int = 50) -> List[Row]:
    return store.select(COMMENTS, columns=["id", "post_id", "content", "created_at"],
                        filters={"hidden": False}, where=[contains(store.column(COMMENTS, "content"), q)],
                        order="created_at", desc=True, limit=limit)


def count_matching_posts(store: Store, q: str) -> int:
    title, content = store.column(POSTS, "title"), store.column(POSTS, "content")
    return store.count(POSTS, filters={"hidden": False}, where=[or_(contains(title, q), contains(content, q))])


def list_hidden(store: Store, table: str, limit: int = 200) -> List[Row]:
    return store.select(table, filters={"hidden": True}, order="hidden_at", desc=True, limit=limit)
