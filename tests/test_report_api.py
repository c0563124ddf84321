from anonboard.errors import StoreError


def _report(client, target_id, reporter=None, type_="post", **extra):
    body = {"type": type_, "targetId": target_id}
    if reporter:
        body["reporter"] = reporter
    body.update(extra)
    return client.post("/api/report", json=body)


def test_three_reports_hide_post(client, store, add_post):
    add_post(id="post-123")
    counts = []
    for i in range(3):
        r = _report(client, "post-123", reporter=f"anon_{i}")
        assert r.status_code == 200
        data = r.get_json()
        assert data["ok"] is True
        counts.append((data["reportCount"], data["hidden"]))
    assert counts == [(1, False), (2, False), (3, True)]

    row = store.select("posts", filters={"id": "post-123"})[0]
    assert row["hidden"] is True
    assert row["report_count"] == 3
    assert row["hidden_reason"] == "reports>=3"
    assert row["hidden_at"] is not None

    # hidden posts disappear from the public detail view
    assert client.get("/api/posts/post-123").status_code == 404


def test_comment_reports_hide_comment(client, store, add_post, add_comment):
    c = add_comment(add_post())
    for _ in range(3):
        _report(client, c["id"], type_="comment")
    assert store.select("comments", filters={"id": c["id"]})[0]["hidden"] is True


def test_resolved_reports_still_count(client, store, add_post, admin_headers):
    add_post(id="p1")
    for i in range(3):
        _report(client, "p1", reporter=f"r{i}")
    for row in store.select("reports", filters={"target_id": "p1"}, limit=2):
        client.post("/api/admin/resolve", json={"reportId": row["id"]}, headers=admin_headers)

    data = _report(client, "p1", reporter="r9").get_json()
    assert data["reportCount"] == 4
    assert data["hidden"] is True
    assert store.select("posts", filters={"id": "p1"})[0]["hidden"] is True


def test_report_on_missing_target_is_still_recorded(client, store):
    r = _report(client, "ghost")
    assert r.status_code == 200
    assert r.get_json() == {"ok": True, "reportCount": 1, "hidden": False}
    assert store.count("reports", {"target_id": "ghost"}) == 1


def test_failed_count_still_records_report(client, store, add_post, monkeypatch):
    add_post(id="p1")

    def broken_count(*args, **kwargs):
        raise StoreError("connection reset")

    monkeypatch.setattr(store, "count", broken_count)
    r = _report(client, "p1")
    assert r.status_code == 200
    assert r.get_json() == {"ok": True, "reportCount": 0, "hidden": False}
    assert len(store.select("reports", filters={"target_id": "p1"})) == 1
    assert store.select("posts", filters={"id": "p1"})[0]["hidden"] is False


def test_report_validation(client, store):
    assert client.post("/api/report", json={"targetId": "x"}).status_code == 400
    assert client.post("/api/report", json={"type": "post"}).status_code == 400
    assert client.post("/api/report", json={"type": "post", "targetId": "  "}).status_code == 400
    r = client.post("/api/report", json={"type": "user", "targetId": "x"})
    assert r.status_code == 400
    assert r.get_json()["error"] == "bad_request"
    assert client.post("/api/report", data="not json", content_type="text/plain").status_code == 400
    assert store.count("reports") == 0


def test_numeric_target_id_is_accepted(client, store):
    assert _report(client, 42).status_code == 200
    assert store.count("reports", {"target_id": "42"}) == 1


def test_dedupe_rejects_second_report(make_app):
    app = make_app(REPORT_DEDUPE=True)
    client = app.test_client()
    with app.app_context():
        from anonboard import get_store
        store = get_store()
        store.insert("posts", {"id": "p1", "board": "징벌", "title": "t", "content": "c"})

    assert _report(client, "p1", reporter="same").status_code == 200
    r = _report(client, "p1", reporter="same")
    assert r.status_code == 409
    assert r.get_json()["error"] == "already_reported"
    assert _report(client, "p1", reporter="other").get_json()["reportCount"] == 2
