import json

from chthon.core.config import Settings


def test_default_database_url_is_local_sqlite(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    settings = Settings(_env_file=None)
    assert settings.DATABASE_URL == "sqlite:///./chthon.db"
    assert settings.API_V1_PREFIX == "/api/v1"
    assert settings.CONTEXT_TOKEN_BUDGET == 4000


def test_default_tiers_cover_every_tier(monkeypatch):
    monkeypatch.delenv("TIERS", raising=False)
    tiers = json.loads(Settings(_env_file=None).TIERS)
    assert set(tiers) == {"registered", "premium", "custom"}
    assert tiers["premium"]["max_tokens"] > tiers["registered"]["max_tokens"]


def test_cors_origins_parse_comma_list(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
    settings = Settings(_env_file=None)
    assert settings.CORS_ORIGINS == ["https://a.example", "https://b.example"]


def test_public_base_url_trailing_slash_is_stripped(monkeypatch):
    monkeypatch.setenv("PUBLIC_BASE_URL", "https://chat.example/")
    assert Settings(_env_file=None).PUBLIC_BASE_URL == "https://chat.example"


def test_cors_origins_wildcard_and_empty(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "*")
    assert Settings(_env_file=None).CORS_ORIGINS == ["*"]
    monkeypatch.setenv("CORS_ORIGINS", "")
    assert Settings(_env_file=None).CORS_ORIGINS == []
