from __future__ import annotations

from sqlalchemy import create_engine, inspect, text

from app.db.migration import run_migrations


def test_run_migrations_creates_schema(tmp_path):
    database_url = f"sqlite:///{tmp_path / 'migrated.db'}"

    run_migrations(database_url)

    engine = create_engine(database_url)
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names())
        assert {"users", "trades", "system_logs", "alembic_version"} <= tables

        trade_columns = {column["name"] for column in inspector.get_columns("trades")}
        assert {"user_id", "entry_price", "exit_price", "pnl", "pnl_percent", "is_from_bot", "bot_name"} <= trade_columns

        with engine.connect() as connection:
            version = connection.execute(text("SELECT version_num FROM alembic_version")).scalar_one()
        assert version == "0001"
    finally:
        engine.dispose()


def test_run_migrations_is_idempotent(tmp_path):
    database_url = f"sqlite:///{tmp_path / 'twice.db'}"
    run_migrations(database_url)
    run_migrations(database_url)

    engine = create_engine(database_url)
    try:
        assert "trades" in inspect(engine).get_table_names()
    finally:
        engine.dispose()
