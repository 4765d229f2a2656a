"""Smoke tests for DealDesk Alembic migrations."""

from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from dealdesk.config import settings


def _config() -> Config:
    repo_root = Path(__file__).resolve().parents[2]
    return Config(str(repo_root / "dealdesk" / "alembic.ini"))


def test_alembic_upgrade_creates_crm_tables(tmp_path: Path, monkeypatch):
    db_path = tmp_path / "dealdesk_migrations.db"
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{db_path}")

    command.upgrade(_config(), "head")

    engine = create_engine(f"sqlite:///{db_path}")
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names())
        deal_columns = {c["name"] for c in inspector.get_columns("deals")}
    finally:
        engine.dispose()

    assert {"profiles", "companies", "contacts", "deals", "activities"} <= tables
    assert {"title", "value", "stage", "company_id", "assigned_to"} <= deal_columns


def test_alembic_downgrade_drops_crm_tables(tmp_path: Path, monkeypatch):
    db_path = tmp_path / "dealdesk_downgrade.db"
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{db_path}")

    cfg = _config()
    command.upgrade(cfg, "head")
    command.downgrade(cfg, "base")

    engine = create_engine(f"sqlite:///{db_path}")
    try:
        tables = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()

    assert tables <= {"alembic_version"}
