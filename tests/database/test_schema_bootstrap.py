from pathlib import Path

from dayflow.database.bootstrap import _SKIPPED_STATEMENT, split_statements

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_schema_splits_into_table_statements():
    statements = [s for s in split_statements(SCHEMA.read_text(encoding="utf-8")) if not _SKIPPED_STATEMENT.match(s)]

    assert len(statements) == 6
    assert all(s.upper().startswith("CREATE TABLE IF NOT EXISTS") for s in statements)
    payroll = next(s for s in statements if "payroll_records" in s.split("(")[0])
    assert "total_work_hours" in payroll
    assert "on_leave_days" in payroll


def test_semicolon_inside_quotes_does_not_split():
    sql = "INSERT INTO t VALUES ('a;b');\nINSERT INTO t VALUES (\"it\\\"s;\");"

    assert split_statements(sql) == [
        "INSERT INTO t VALUES ('a;b')",
        "INSERT INTO t VALUES (\"it\\\"s;\")",
    ]


def test_line_comments_are_dropped():
    sql = "-- setup; not a statement\nCREATE TABLE a (id INT); -- trailing\n\n"

    assert split_statements(sql) == ["CREATE TABLE a (id INT)"]


def test_database_selection_is_skipped():
    assert _SKIPPED_STATEMENT.match("CREATE DATABASE IF NOT EXISTS dayflow")
    assert _SKIPPED_STATEMENT.match("use dayflow")
    assert not _SKIPPED_STATEMENT.match("CREATE TABLE users (id INT)")
