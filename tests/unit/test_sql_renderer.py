import sqlite3
from datetime import date
from decimal import Decimal

from adapters.sql_renderer import get_sql_dialect


def test_postgres_dialect_quotes_with_double_quotes():
    dialect = get_sql_dialect("postgresql")
    assert dialect.engine == "postgres"
    assert dialect.quote_identifier('odd"name') == '"odd""name"'
    assert dialect.render_identifier("users") == "users"
    assert dialect.render_identifier("order items") == '"order items"'


def test_mysql_dialect_quotes_with_backticks_and_escapes_backslashes():
    dialect = get_sql_dialect("mysql")
    assert dialect.quote_identifier("we`ird") == "`we``ird`"
    assert dialect.render_literal("C:\\tmp\\it's") == "'C:\\\\tmp\\\\it''s'"


def test_render_literal_rules():
    dialect = get_sql_dialect("postgres")
    assert dialect.render_literal(None) == "NULL"
    assert dialect.render_literal("O'Brien") == "'O''Brien'"
    assert dialect.render_literal("null") == "'null'"
    assert dialect.render_literal(42) == "42"
    assert dialect.render_literal(Decimal("10.50")) == "10.50"
    assert dialect.render_literal(True) == "TRUE"
    assert dialect.render_literal(date(2024, 1, 2)) == "'2024-01-02'"
    assert dialect.render_literal({"tags": ["a"]}) == "'{\"tags\": [\"a\"]}'"


def test_render_inserts_users_scenario():
    dialect = get_sql_dialect("postgres")
    text = dialect.render_inserts("users", [{"id": 1, "name": None}])
    assert text == "INSERT INTO users (id, name) VALUES (1, NULL);"


def test_render_inserts_joins_rows_with_newlines_and_uses_first_row_columns():
    dialect = get_sql_dialect("postgres")
    rows = [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]
    assert dialect.render_inserts("users", rows).split("\n") == [
        "INSERT INTO users (id, name) VALUES (1, 'a');",
        "INSERT INTO users (id, name) VALUES (2, 'b');",
    ]


def test_render_inserts_empty_rows_returns_empty_string():
    dialect = get_sql_dialect("postgres")
    assert dialect.render_inserts("users", []) == ""
    assert dialect.render_inserts("users", [{}]) == ""


def test_rendered_inserts_replay_into_sqlite():
    rows = [
        {"id": 1, "full name": "O'Brien", "score": 2.5},
        {"id": 2, "full name": None, "score": None},
        {"id": 3, "full name": "x'); DROP TABLE people; --", "score": 0},
    ]
    script = get_sql_dialect("postgres").render_inserts("people", rows)

    conn = sqlite3.connect(":memory:")
    try:
        conn.execute('CREATE TABLE people (id INTEGER NOT NULL, "full name" TEXT, score REAL)')
        for statement in script.split("\n"):
            conn.execute(statement)
        replayed = conn.execute('SELECT id, "full name", score FROM people ORDER BY id').fetchall()
    finally:
        conn.close()

    assert replayed == [(1, "O'Brien", 2.5), (2, None, None), (3, "x'); DROP TABLE people; --", 0)]


def test_bytes_render_as_dialect_hex_literals():
    assert get_sql_dialect("postgres").render_literal(b"\x00ab") == "'\\x006162'::bytea"
    assert get_sql_dialect("mysql").render_literal(bytearray(b"\x00ab")) == "X'006162'"
    assert get_sql_dialect("mysql").render_literal(memoryview(b"\xff")) == "X'ff'"


def test_non_finite_numbers_are_quoted():
    dialect = get_sql_dialect("postgres")
    assert dialect.render_literal(float("nan")) == "'NaN'"
    assert dialect.render_literal(float("inf")) == "'Infinity'"
    assert dialect.render_literal(float("-inf")) == "'-Infinity'"
    assert dialect.render_literal(Decimal("NaN")) == "'NaN'"


def test_rendered_blob_inserts_replay_into_sqlite():
    rows = [{"id": 1, "data": b"\x00ab"}, {"id": 2, "data": b"'\\"}]
    script = get_sql_dialect("mysql").render_inserts("blobs", rows)

    conn = sqlite3.connect(":memory:")
    try:
        conn.execute("CREATE TABLE blobs (id INTEGER NOT NULL, data BLOB)")
        for statement in script.split("\n"):
            conn.execute(statement)
        replayed = conn.execute("SELECT id, data FROM blobs ORDER BY id").fetchall()
    finally:
        conn.close()

    assert replayed == [(1, b"\x00ab"), (2, b"'\\")]
