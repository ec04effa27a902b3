from sqlalchemy import create_engine, inspect

from chthon.core import config as config_module
from chthon.db import init_db as init_module


def test_init_db_creates_tables_for_sqlite_in_production(monkeypatch):
    engine = create_engine("sqlite:///:memory:", connect_args={"check_same_thread": False})
    monkeypatch.setattr(init_module, "engine", engine)
    monkeypatch.setattr(config_module.settings, "ENV", "production")
    monkeypatch.setattr(config_module.settings, "DATABASE_URL", "sqlite:///:memory:")

    init_module.init_db(drop_all=True)

    tables = set(inspect(engine).get_table_names())
    assert {"users", "refresh_tokens", "chat_sessions", "chat_messages", "analytics"} <= tables


def test_init_db_skips_tables_in_production_without_auto_create(monkeypatch):
    engine = create_engine("sqlite:///:memory:", connect_args={"check_same_thread": False})
    monkeypatch.setattr(init_module, "engine", engine)
    monkeypatch.setattr(config_module.settings, "ENV", "production")
    monkeypatch.setattr(config_module.settings, "DATABASE_URL", "mysql+pymysql://chthon:chthon@db:3306/chthon?charset=utf8mb4")
    monkeypatch.setattr(config_module.settings, "AUTO_CREATE_TABLES", False)

    init_module.init_db()

    assert inspect(engine).get_table_names() == []


def test_init_db_creates_tables_when_auto_create_enabled(monkeypatch):
    engine = create_engine("sqlite:///:memory:", connect_args={"check_same_thread": False})
    monkeypatch.setattr(init_module, "engine", engine)
    monkeypatch.setattr(config_module.settings, "ENV", "production")
    monkeypatch.setattr(config_module.settings, "DATABASE_URL", "mysql+pymysql://chthon:chthon@db:3306/chthon?charset=utf8mb4")
    monkeypatch.setattr(config_module.settings, "AUTO_CREATE_TABLES", True)

    init_module.init_db(drop_all=True)

    assert "users" in inspect(engine).get_table_names()
