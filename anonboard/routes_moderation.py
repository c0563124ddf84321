from __future__ import annotations

import hmac
from functools import wraps

from flask import Blueprint, current_app, jsonify, request

from . import get_store, limiter
from .errors import Unauthorized
from .schemas import parse
from .schemas.reports import ReportIn, ResolveIn, UnhideIn
from .services import moderation
from .utils import json_payload

moderation_bp = Blueprint("moderation", __name__)


def admin_required(fn):
    """Shared-secret check against the x-admin-key header; an unset ADMIN_KEY locks every admin route."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        secret = current_app.config.get("ADMIN_KEY") or ""
        given = request.headers.get("x-admin-key") or ""
        if not secret or not hmac.compare_digest(given.encode("utf-8"), secret.encode("utf-8")):
            current_app.logger.warning("admin call rejected: %s %s", request.method, request.path)
            raise Unauthorized("invalid admin key")
        return fn(*args, **kwargs)
    return wrapper


@moderation_bp.post("/report")
@limiter.limit("10 per minute")
def report():
    body = parse(ReportIn, json_payload())
    cfg = current_app.config
    outcome = moderation.submit_report(
        get_store(),
        body,
        threshold=cfg["REPORT_HIDE_THRESHOLD"],
        dedupe=cfg["REPORT_DEDUPE"],
    )
    return jsonify(ok=True, reportCount=outcome.report_count, hidden=outcome.hidden)


@moderation_bp.post("/admin/unhide")
@admin_required
def admin_unhide():
    body = parse(UnhideIn, json_payload())
    res = moderation.unhide(get_store(), body)
    return jsonify(ok=True, **res)


@moderation_bp.post("/admin/resolve")
@admin_required
def admin_resolve():
    body = parse(ResolveIn, json_payload())
    action = moderation.resolve(get_store(), body.report_id)
    return jsonify(ok=True, action=action)


@moderation_bp.get("/admin/reports")
@admin_required
def admin_reports():
    rows = moderation.list_reports(get_store())
    return jsonify(ok=True, reports=[r.model_dump(mode="json") for r in rows])


@moderation_bp.get("/admin/hidden")
@admin_required
def admin_hidden():
    hidden = moderation.list_hidden(get_store())
    return jsonify(ok=True, **{k: [r.model_dump(mode="json") for r in rows] for k, rows in hidden.items()})
