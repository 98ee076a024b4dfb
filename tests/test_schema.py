from pathlib import Path

from dayflow.database.bootstrap import schema_statements

SCHEMA = Path(__file__).resolve().parents[1] / "database" / "schema.sql"


def test_schema_file_splits_into_create_table_statements():
    statements = list(schema_statements(SCHEMA.read_text(encoding="utf-8")))

    assert len(statements) == 5
    assert all(s.startswith("CREATE TABLE IF NOT EXISTS") for s in statements)


def test_splitter_keeps_semicolons_inside_quotes_and_drops_database_lines():
    sql = """
    -- setup
    CREATE DATABASE IF NOT EXISTS other;
    USE other;
    INSERT INTO t(note) VALUES ('a;b');
    INSERT INTO t(note) VALUES ("c;d")
    """

    assert list(schema_statements(sql)) == [
        "INSERT INTO t(note) VALUES ('a;b')",
        'INSERT INTO t(note) VALUES ("c;d")',
    ]
