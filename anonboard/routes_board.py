from __future__ import annotations

from flask import Blueprint, jsonify

from . import get_store, limiter
from .boards import home_boards
from .schemas import parse
from .schemas.board import CommentIn, PostIn
from .services import board_service
from .utils import json_payload
from .utils.fingerprint import anon_id

board_bp = Blueprint("board", __name__)


@board_bp.get("/boards")
def list_boards():
    return jsonify(ok=True, boards=home_boards())


@board_bp.get("/boards/<board>/posts")
def list_posts(board: str):
    info, posts = board_service.list_board(get_store(), board)
    return jsonify(ok=True, board=info.as_dict(), posts=[p.model_dump(mode="json") for p in posts])


@board_bp.post("/boards/<board>/posts")
@limiter.limit("1 per 10 seconds")
@limiter.limit("500 per day")
def create_post(board: str):
    body = parse(PostIn, json_payload())
    post = board_service.create_post(get_store(), board, body, anon_id(body.anon_id))
    return jsonify(ok=True, post=post.model_dump(mode="json")), 201


@board_bp.get("/posts/<post_id>")
def get_post(post_id: str):
    post, comments = board_service.get_post_detail(get_store(), post_id)
    return jsonify(ok=True, post=post.model_dump(mode="json"),
                   comments=[c.model_dump(mode="json") for c in comments])


@board_bp.post("/posts/<post_id>/comments")
@limiter.limit("6 per minute")
def create_comment(post_id: str):
    body = parse(CommentIn, json_payload())
    comment = board_service.create_comment(get_store(), post_id, body, anon_id(body.anon_id))
    return jsonify(ok=True, comment=comment.model_dump(mode="json")), 201


@board_bp.post("/posts/<post_id>/like")
@limiter.limit("30 per minute")
def like_post(post_id: str):
    res = board_service.like_post(get_store(), post_id)
    return jsonify(ok=True, id=res["id"], likes=res["likes"])
