from datetime import datetime, timedelta, timezone

import pytest

from anonboard.errors import StoreError
from anonboard.repos import trends_repo
from anonboard.tasks import refresh_trends, rising_score

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def seeded(store, add_post, add_comment):
    a = add_post(board="징벌", title="", content="징벌 루트", created_at=NOW - timedelta(hours=2))
    add_post(board="주행", title="", content="징벌 코너", created_at=NOW - timedelta(hours=3))
    add_comment(a, content="루트 좋다", created_at=NOW - timedelta(hours=1))
    add_post(board="징벌", title="", content="징벌 징벌", created_at=NOW - timedelta(days=3))
    add_post(board="메타", title="", content="오래된 메타", created_at=NOW - timedelta(days=10))
    add_post(board="징벌", title="", content="숨김 징벌", created_at=NOW - timedelta(hours=1), hidden=True)
    return store


def _trend(store, board=None):
    rows = store.select("trend_keywords", filters={"board": board}, order="cnt", desc=True)
    return {r["keyword"]: r["cnt"] for r in rows}


def _rising(store, board=None):
    return store.select("rising_keywords", filters={"board": board}, order="score", desc=True)


def test_rising_score():
    assert rising_score(0, 0) == 1
    assert rising_score(6, 7) == pytest.approx(3.5)


def test_refresh_builds_global_and_board_trends(seeded):
    written = refresh_trends(seeded, NOW)
    assert _trend(seeded) == {"징벌": 4, "루트": 2, "코너": 1, "좋다": 1}
    assert _trend(seeded, "징벌") == {"징벌": 3, "루트": 2, "좋다": 1}
    assert _trend(seeded, "주행") == {"징벌": 1, "코너": 1}
    assert _trend(seeded, "메타") == {}
    assert written["trend"] == seeded.count("trend_keywords")


def test_refresh_builds_rising(seeded):
    refresh_trends(seeded, NOW)
    rows = _rising(seeded)
    assert rows[0]["keyword"] == "루트"
    jing = next(r for r in rows if r["keyword"] == "징벌")
    assert (jing["recent_cnt"], jing["prev_cnt"], jing["delta"]) == (2, 2, 0)
    assert jing["ratio"] == pytest.approx(1.0)
    assert jing["score"] == pytest.approx(3 / (2 / 7 + 1))
    route = rows[0]
    assert route["prev_cnt"] == 0 and route["ratio"] is None


def test_refresh_replaces_previous_rows(seeded):
    refresh_trends(seeded, NOW)
    first = seeded.count("trend_keywords"), seeded.count("rising_keywords")
    refresh_trends(seeded, NOW)
    assert (seeded.count("trend_keywords"), seeded.count("rising_keywords")) == first


def test_failed_rebuild_keeps_previous_rows(seeded):
    refresh_trends(seeded, NOW)
    before = _trend(seeded)
    assert before

    bad = [{"board": None, "keyword": "새 키워드", "cnt": 1}, {"board": None, "keyword": None, "cnt": 1}]
    with pytest.raises(StoreError):
        trends_repo.replace_trends(seeded, bad)
    assert _trend(seeded) == before


def test_refresh_on_empty_store(store):
    assert refresh_trends(store, NOW) == {"trend": 0, "rising": 0}


def test_cli_command(app, seeded):
    result = app.test_cli_runner().invoke(args=["refresh-trends"])
    assert result.exit_code == 0
    assert "trend_keywords=" in result.output
