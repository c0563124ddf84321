from typing import List, Optional

from ..store import Row, Store

REPORTS = "reports"
# read back without `resolved`: older reports tables were created before it existed
REPORT_COLUMNS = ["id", "target_type", "target_id", "board", "reason", "reporter", "created_at"]
DEDUPE = "report_dedupe"

TARGET_TABLES = {"post": "posts", "comment": "comments"}


def target_table(target_type: str) -> str:
    return TARGET_TABLES[target_type]


def insert_dedupe(store: Store, target_type: str, target_id: str, reporter: str) -> Row:
    return store.insert(DEDUPE, {"target_type": target_type, "target_id": target_id, "reporter": reporter})[0]


def insert_report(store: Store, target_type: str, target_id: str, board: Optional[str],
                  reason: Optional[str], reporter: Optional[str]) -> Row:
    return store.insert(REPORTS, {
        "target_type": target_type,
        "target_id": target_id,
        "board": board,
        "reason": reason,
        "reporter": reporter,
    }, columns=REPORT_COLUMNS)[0]


def count_reports(store: Store, target_type: str, target_id: str) -> int:
    return store.count(REPORTS, filters={"target_type": target_type, "target_id": target_id})


def get_target_state(store: Store, target_type: str, target_id: str) -> Optional[Row]:
    rows = store.select(target_table(target_type), columns=["id", "hidden", "report_count"],
                        filters={"id": target_id}, limit=1)
    return rows[0] if rows else None


def write_target_state(store: Store, target_type: str, target_id: str, patch: dict) -> int:
    return store.update(target_table(target_type), patch, {"id": target_id})


def clear_target(store: Store, target_type: str, target_id: str) -> int:
    return store.update(target_table(target_type), {
        "hidden": False,
        "report_count": 0,
        "hidden_reason": None,
        "hidden_at": None,
    }, {"id": target_id})


def mark_resolved(store: Store, report_id: str) -> int:
    return store.update(REPORTS, {"resolved": True}, {"id": report_id})


def delete_report(store: Store, report_id: str) -> int:
    return store.delete(REPORTS, {"id": report_id})


def latest_reports(store: Store, limit: int = 200) -> List[Row]:
    return store.select(REPORTS, order="created_at", desc=True, limit=limit)
