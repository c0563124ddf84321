from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from flask import current_app

from ..config import REPORT_HIDE_THRESHOLD
from ..errors import AlreadyReported, StoreError, UNDEFINED_COLUMN, UNIQUE_VIOLATION
from ..models import utcnow
from ..repos import posts_repo, reports_repo
from ..schemas.board import HiddenRow
from ..schemas.reports import ReportIn, ReportOutcome, ReportRow, UnhideIn
from ..store import Store


def hidden_reason(threshold: int) -> str:
    return f"reports>={threshold}"


def submit_report(
    store: Store,
    data: ReportIn,
    *,
    threshold: int = REPORT_HIDE_THRESHOLD,
    dedupe: bool = False,
    now: Optional[datetime] = None,
) -> ReportOutcome:
    """
    Record a report, recount every report on the target and hide it once the
    count reaches `threshold`.

    Insert, count and update are separate store calls with no transaction
    spanning them; two concurrent reporters may both write a stale count.
    Only the report insert is mandatory: a failed count or target update is
    logged and the caller still gets a successful outcome (count 0 when the
    count itself failed).
    """
    log = current_app.logger
    now = now or utcnow()

    if dedupe and data.reporter:
        try:
            reports_repo.insert_dedupe(store, data.type, data.target_id, data.reporter)
        except StoreError as e:
            if e.code == UNIQUE_VIOLATION:
                raise AlreadyReported("already reported") from e
            raise

    reports_repo.insert_report(store, data.type, data.target_id, data.board, data.reason, data.reporter)
    count = 0
    hidden = False

    try:
        count = reports_repo.count_reports(store, data.type, data.target_id)
        hidden = count >= threshold
        current = reports_repo.get_target_state(store, data.type, data.target_id)
        if current is None:
            log.warning("report on missing %s %s", data.type, data.target_id)
        else:
            patch: Dict[str, object] = {"report_count": count}
            if current["hidden"]:
                hidden = True
            elif hidden:
                patch.update(hidden=True, hidden_at=now, hidden_reason=hidden_reason(threshold))
                log.info("auto-hid %s %s after %d reports", data.type, data.target_id, count)
            reports_repo.write_target_state(store, data.type, data.target_id, patch)
    except StoreError as e:
        log.error("report count update failed for %s %s: %s", data.type, data.target_id, e.message)

    log.info("report on %s %s (count=%d hidden=%s)", data.type, data.target_id, count, hidden)
    return ReportOutcome(report_count=count, hidden=hidden)


def unhide(store: Store, data: UnhideIn) -> Dict[str, int]:
    """
    Restore visibility and zero the stored count. Reports stay on record, so
    the next report recounts all of them and can hide the target again.
    """
    updated = reports_repo.clear_target(store, data.type, data.target_id)
    current_app.logger.info("admin unhide %s %s (updated=%d)", data.type, data.target_id, updated)
    return {"updated": updated}


def resolve(store: Store, report_id: str) -> str:
    """Mark a report resolved; deployments without the column drop the row instead."""
    try:
        n = reports_repo.mark_resolved(store, report_id)
        action = "resolved"
    except StoreError as e:
        if e.code != UNDEFINED_COLUMN:
            raise
        n = reports_repo.delete_report(store, report_id)
        action = "deleted"
    current_app.logger.info("admin %s report %s (rows=%d)", action, report_id, n)
    return action


def list_reports(store: Store, limit: int = 200) -> List[ReportRow]:
    return [ReportRow.model_validate(r) for r in reports_repo.latest_reports(store, limit)]


def list_hidden(store: Store, limit: int = 200) -> Dict[str, List[HiddenRow]]:
    return {
        "posts": [HiddenRow.model_validate(r) for r in posts_repo.list_hidden(store, posts_repo.POSTS, limit)],
        "comments": [HiddenRow.model_validate(r) for r in posts_repo.list_hidden(store, posts_repo.COMMENTS, limit)],
    }
