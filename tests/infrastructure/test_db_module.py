"""Tests for the infrastructure.db module."""

import pytest

from invoice_engine.infrastructure import db as db_module


def test_get_env_var_reads_environment(monkeypatch):
    """_get_env_var should load .env and return the requested value."""
    monkeypatch.setattr(db_module.dotenv, "load_dotenv", lambda: None)
    monkeypatch.setenv("INVOICING_DB_URL", "sqlite:///invoices.db")

    assert db_module._get_env_var("INVOICING_DB_URL") == "sqlite:///invoices.db"


def test_get_env_var_raises_when_missing(monkeypatch):
    """Missing env vars should raise a RuntimeError."""
    monkeypatch.setattr(db_module.dotenv, "load_dotenv", lambda: None)
    monkeypatch.delenv("INVOICING_DB_URL", raising=False)

    with pytest.raises(RuntimeError, match="INVOICING_DB_URL"):
        db_module._get_env_var("INVOICING_DB_URL")


def test_create_engine_enables_health_checks(monkeypatch):
    """_create_engine should enable pre-ping and the 2.0 API."""
    captured = {}

    def fake_create_engine(db_url, **kwargs):
        captured["db_url"] = db_url
        captured["kwargs"] = kwargs
        return "engine"

    monkeypatch.setattr(db_module, "create_engine", fake_create_engine)

    engine = db_module._create_engine("postgresql://invoicing")

    assert engine == "engine"
    assert captured["db_url"] == "postgresql://invoicing"
    assert captured["kwargs"]["pool_pre_ping"] is True
    assert captured["kwargs"]["future"] is True


def test_get_invoicing_engine_caches_engine(monkeypatch):
    """get_invoicing_engine should memoize the created engine."""
    monkeypatch.setattr(db_module, "_invoicing_engine", None)
    created = []

    def fake_create_engine(url):
        created.append(url)
        return f"engine:{url}"

    monkeypatch.setattr(db_module, "_create_engine", fake_create_engine)
    monkeypatch.setattr(db_module.dotenv, "load_dotenv", lambda: None)
    monkeypatch.setenv("INVOICING_DB_URL", "postgresql://invoicing")

    engine_one = db_module.get_invoicing_engine()
    engine_two = db_module.get_invoicing_engine()

    assert engine_one is engine_two
    assert engine_one == "engine:postgresql://invoicing"
    assert created == ["postgresql://invoicing"]


def test_adapter_returns_underlying_engine(monkeypatch):
    """SqlAlchemyDatabaseEngineAdapter should proxy the module helper."""
    monkeypatch.setattr(
        db_module,
        "get_invoicing_engine",
        lambda: "invoicing_engine",
    )

    adapter = db_module.SqlAlchemyDatabaseEngineAdapter()

    assert adapter.get_invoicing_engine() == "invoicing_engine"
