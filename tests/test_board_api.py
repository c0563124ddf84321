from urllib.parse import quote


def test_health(client):
    assert client.get("/api/health").get_json() == {"ok": True, "service": "anonboard"}


def test_board_list(client):
    data = client.get("/api/boards").get_json()
    assert data["ok"] is True
    assert data["boards"][0]["name"] == "징벌"


def test_create_and_list_posts(client):
    r = client.post("/api/boards/%EC%A3%BC%ED%96%89/posts",
                    json={"title": " 코너 공략 ", "content": "부스터 타이밍", "anonId": "anon_test_1"})
    assert r.status_code == 201
    post = r.get_json()["post"]
    assert post["board"] == "주행"
    assert post["title"] == "코너 공략"
    assert "author_anon_id" not in post

    data = client.get("/api/boards/주행/posts").get_json()
    assert data["board"]["db"] == "주행"
    assert [p["id"] for p in data["posts"]] == [post["id"]]


def test_create_post_stores_anon_id(client, store):
    client.post("/api/boards/징벌/posts", json={"title": "t", "content": "c"},
                headers={"X-Anon-Id": "anon_header_id"})
    assert store.select("posts", columns=["author_anon_id"])[0]["author_anon_id"] == "anon_header_id"


def test_create_post_falls_back_to_fingerprint(client, store):
    client.post("/api/boards/징벌/posts", json={"title": "t", "content": "c"})
    anon = store.select("posts", columns=["author_anon_id"])[0]["author_anon_id"]
    assert anon.startswith("anon_") and len(anon) == len("anon_") + 32


def test_create_post_requires_title_and_content(client, store):
    assert client.post("/api/boards/징벌/posts", json={"title": "  ", "content": "c"}).status_code == 400
    assert client.post("/api/boards/징벌/posts", json={"title": "t"}).status_code == 400
    assert store.count("posts") == 0


def test_alias_board_posts_land_on_db_name(client):
    client.post("/api/boards/who/posts", json={"title": "t", "content": "c"})
    data = client.get("/api/boards/" + quote("이 사람 어때?", safe="") + "/posts").get_json()
    assert len(data["posts"]) == 1


def test_listing_skips_hidden_posts(client, add_post):
    add_post(board="메타", title="visible")
    add_post(board="메타", title="hidden", hidden=True)
    titles = [p["title"] for p in client.get("/api/boards/메타/posts").get_json()["posts"]]
    assert titles == ["visible"]


def test_post_detail_with_comments(client, add_post, add_comment):
    post = add_post(id="p1")
    add_comment(post, content="첫 댓글")
    add_comment(post, content="숨긴 댓글", hidden=True)
    data = client.get("/api/posts/p1").get_json()
    assert data["post"]["id"] == "p1"
    assert [c["content"] for c in data["comments"]] == ["첫 댓글"]


def test_missing_post_is_json_404(client):
    r = client.get("/api/posts/nope")
    assert r.status_code == 404
    assert r.get_json()["error"] == "not_found"


def test_create_comment(client, store, add_post):
    post = add_post(id="p1", board="징벌")
    r = client.post("/api/posts/p1/comments", json={"content": "좋은 글"})
    assert r.status_code == 201
    comment = r.get_json()["comment"]
    assert comment["post_id"] == "p1"
    assert comment["board"] == post["board"]


def test_comment_on_hidden_post_is_404(client, add_post):
    add_post(id="p1", hidden=True)
    assert client.post("/api/posts/p1/comments", json={"content": "x"}).status_code == 404


def test_comment_requires_content(client, add_post):
    add_post(id="p1")
    assert client.post("/api/posts/p1/comments", json={"content": ""}).status_code == 400


def test_like(client, add_post):
    add_post(id="p1")
    assert client.post("/api/posts/p1/like").get_json() == {"ok": True, "id": "p1", "likes": 1}
    assert client.post("/api/posts/p1/like").get_json()["likes"] == 2
    assert client.post("/api/posts/nope/like").status_code == 404


def test_unknown_api_route_and_method_are_json(client):
    assert client.get("/api/nope").get_json()["error"] == "not_found"
    r = client.get("/api/report")
    assert r.status_code == 405
    assert r.get_json()["error"] == "method_not_allowed"


def test_rate_limit_returns_json_429(make_app):
    client = make_app(RATELIMIT_ENABLED=True).test_client()
    body = {"title": "t", "content": "c"}
    assert client.post("/api/boards/징벌/posts", json=body).status_code == 201
    r = client.post("/api/boards/징벌/posts", json=body)
    assert r.status_code == 429
    assert r.get_json()["error"] == "too_many_requests"
