from src.attendance_engine.attendance_engine.database.bootstrap import (
    DEFAULT_SCHEMA_PATH,
    _strip_create_db_and_use,
    _strip_line_comments,
    iter_sql_statements,
)


def test_default_schema_ships_next_to_bootstrap_module():
    assert DEFAULT_SCHEMA_PATH.name == "schema.sql"
    assert DEFAULT_SCHEMA_PATH.parent.name == "database"
    assert DEFAULT_SCHEMA_PATH.is_file()


def test_schema_statements_create_engine_tables():
    sql = DEFAULT_SCHEMA_PATH.read_text(encoding="utf-8")
    statements = list(iter_sql_statements(_strip_line_comments(_strip_create_db_and_use(sql))))

    assert len(statements) == 3
    assert all(s.upper().startswith("CREATE TABLE IF NOT EXISTS") for s in statements)
    joined = "\n".join(statements)
    for table in ("users", "attendance_records", "leave_requests"):
        assert f"EXISTS {table}" in joined
    assert "UNIQUE KEY uq_attendance_user_day (user_id, work_date)" in joined


def test_splitter_ignores_semicolons_in_quotes():
    sql = "INSERT INTO t VALUES ('a;b'); INSERT INTO t VALUES (\"c;d\");"

    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'INSERT INTO t VALUES ("c;d")',
    ]
