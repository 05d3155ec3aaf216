"""Schema bootstrap tests."""

from sqlalchemy import create_engine, inspect

from memoir.database import init_db


def test_init_db_creates_tables():
    engine = create_engine("sqlite://")

    init_db(engine)

    tables = set(inspect(engine).get_table_names())
    assert {"users", "diaries", "contacts"} <= tables
    engine.dispose()


def test_init_db_is_idempotent():
    engine = create_engine("sqlite://")

    init_db(engine)
    init_db(engine)

    assert "users" in inspect(engine).get_table_names()
    engine.dispose()
