from typing import List, Optional, Sequence

from ..store import Row, Store

TRENDS = "trend_keywords"
RISING = "rising_keywords"


def top_trends(store: Store, board: Optional[str] = None, limit: int = 30) -> List[Row]:
    return store.select(TRENDS, columns=["board", "keyword", "cnt"], filters={"board": board},
                        order="cnt", desc=True, limit=limit)


def top_rising(store: Store, board: Optional[str] = None, order: str = "score", limit: int = 50) -> List[Row]:
    return store.select(RISING, columns=["board", "keyword", "recent_cnt", "prev_cnt", "delta", "ratio", "score"],
                        filters={"board": board}, order=order, desc=True, limit=limit)


def trend_boards(store: Store, limit: int = 200) -> List[str]:
    rows = store.select(TRENDS, columns=["board"], where=[store.column(TRENDS, "board").isnot(None)], limit=limit)
    seen = []
    for r in rows:
        if r["board"] not in seen:
            seen.append(r["board"])
    return seen


def replace_trends(store: Store, rows: Sequence[dict]) -> int:
    return store.replace(TRENDS, rows)


def replace_rising(store: Store, rows: Sequence[dict]) -> int:
    return store.replace(RISING, rows)
