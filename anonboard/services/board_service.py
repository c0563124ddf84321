from typing import Dict, List, Tuple

from flask import current_app

from ..boards import BoardInfo, resolve_board
from ..errors import NotFound
from ..repos import posts_repo
from ..schemas.board import CommentIn, CommentRow, PostIn, PostRow
from ..store import Store


def list_board(store: Store, raw_board: str, limit: int = 50) -> Tuple[BoardInfo, List[PostRow]]:
    info = resolve_board(raw_board)
    rows = posts_repo.list_board_posts(store, info.db, limit)
    return info, [PostRow.model_validate(r) for r in rows]


def _visible_post(store: Store, post_id: str) -> Dict:
    row = posts_repo.get_post(store, post_id)
    if row is None or row["hidden"]:
        raise NotFound("post not found")
    return row


def get_post_detail(store: Store, post_id: str) -> Tuple[PostRow, List[CommentRow]]:
    post = _visible_post(store, post_id)
    comments = posts_repo.list_comments(store, post_id)
    return PostRow.model_validate(post), [CommentRow.model_validate(c) for c in comments]


def create_post(store: Store, raw_board: str, data: PostIn, anon_id: str) -> PostRow:
    info = resolve_board(raw_board)
    row = posts_repo.create_post(store, {
        "board": info.db,
        "title": data.title,
        "content": data.content,
        "author": data.author or None,
        "author_anon_id": anon_id,
    })
    current_app.logger.info("post %s created on %s", row["id"], info.db)
    return PostRow.model_validate(row)


def create_comment(store: Store, post_id: str, data: CommentIn, anon_id: str) -> CommentRow:
    post = _visible_post(store, post_id)
    row = posts_repo.create_comment(store, {
        "post_id": post["id"],
        "board": post["board"],
        "content": data.content,
        "author": data.author or None,
        "author_anon_id": anon_id,
    })
    return CommentRow.model_validate(row)


def like_post(store: Store, post_id: str) -> Dict[str, object]:
    return store.rpc("increment_post_like", p_id=post_id)
