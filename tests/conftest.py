import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from anonboard import create_app, get_store  # noqa: E402

ADMIN_KEY = "test-admin-key"


@pytest.fixture
def make_app():
    def _make(**overrides):
        config = {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "RATELIMIT_ENABLED": False,
            "ADMIN_KEY": ADMIN_KEY,
            "REPORT_DEDUPE": False,
        }
        config.update(overrides)
        return create_app(config)
    return _make


@pytest.fixture
def app(make_app):
    app = make_app()
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return get_store()


@pytest.fixture
def admin_headers():
    return {"x-admin-key": ADMIN_KEY}


@pytest.fixture
def add_post(store):
    def _add(board="징벌", title="제목", content="내용", **extra):
        row = {"board": board, "title": title, "content": content}
        row.update(extra)
        return store.insert("posts", row)[0]
    return _add


@pytest.fixture
def add_comment(store):
    def _add(post, content="댓글", **extra):
        row = {"post_id": post["id"], "board": post["board"], "content": content}
        row.update(extra)
        return store.insert("comments", row)[0]
    return _add
