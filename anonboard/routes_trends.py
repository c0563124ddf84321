from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from . import get_store
from .services import analytics, profile

trends_bp = Blueprint("trends", __name__)


def _min_sample() -> int:
    return current_app.config["MIN_EVIDENCE_SAMPLE"]


@trends_bp.get("/trend")
def trend():
    return jsonify(ok=True, **analytics.trend_view(get_store(), _min_sample()))


@trends_bp.get("/trend/rising")
def rising():
    return jsonify(ok=True, **analytics.rising_view(get_store(), _min_sample()))


@trends_bp.get("/topic/ops")
def ops():
    tab = (request.args.get("tab") or "all").strip()
    view = analytics.ops_view(get_store(), tab, request.args.get("board"), _min_sample())
    return jsonify(ok=True, **view)


@trends_bp.get("/analyze")
def analyze():
    return jsonify(ok=True, **analytics.analyze_view(get_store(), request.args.get("q", ""), _min_sample()))


@trends_bp.get("/who")
def who():
    return jsonify(ok=True, **analytics.who_view(get_store(), request.args.get("q", ""), _min_sample()))


@trends_bp.get("/u/<name>")
def user_mentions(name: str):
    return jsonify(ok=True, **profile.profile_view(get_store(), name, min_sample=_min_sample()))


@trends_bp.get("/topic/keyword/<kw>")
def topic_keyword(kw: str):
    return jsonify(ok=True, **analytics.keyword_view(get_store(), kw, _min_sample()))


@trends_bp.get("/topic/<slug>")
def topic(slug: str):
    return jsonify(ok=True, **analytics.topic_view(get_store(), slug, min_sample=_min_sample()))
