from anonboard.config import load_config


def _clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("BOARD_SQLITE_PATH", "DATABASE_URL", "SQLALCHEMY_DATABASE_URI"):
        monkeypatch.delenv(name, raising=False)


def test_uri_override_skips_sqlite_fallback(make_app, monkeypatch, tmp_path):
    _clean_env(monkeypatch, tmp_path)
    app = make_app()
    assert app.config["SQLALCHEMY_DATABASE_URI"] == "sqlite:///:memory:"
    assert not (tmp_path / "data").exists()


def test_fallback_creates_sqlite_directory(monkeypatch, tmp_path):
    _clean_env(monkeypatch, tmp_path)
    config = load_config()
    assert config["SQLALCHEMY_DATABASE_URI"].endswith("/data/anonboard.db")
    assert (tmp_path / "data").is_dir()


def test_engine_options_follow_overridden_uri(monkeypatch, tmp_path):
    _clean_env(monkeypatch, tmp_path)
    config = load_config({"SQLALCHEMY_DATABASE_URI": "postgresql://u@db/board"})
    assert config["SQLALCHEMY_ENGINE_OPTIONS"]["pool_size"] == 3
    assert not (tmp_path / "data").exists()

    custom = load_config({"SQLALCHEMY_DATABASE_URI": "sqlite://", "SQLALCHEMY_ENGINE_OPTIONS": {}})
    assert custom["SQLALCHEMY_ENGINE_OPTIONS"] == {}


def test_legacy_postgres_scheme_is_normalized(monkeypatch, tmp_path):
    _clean_env(monkeypatch, tmp_path)
    monkeypatch.setenv("DATABASE_URL", "postgres://u@db/board")
    assert load_config()["SQLALCHEMY_DATABASE_URI"] == "postgresql://u@db/board"
