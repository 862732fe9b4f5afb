"""Unit tests for sqlsmith.loader.sql_loader."""

from __future__ import annotations

import textwrap
from pathlib import Path
from unittest.mock import patch

import pytest

from sqlsmith.errors import ErrorCode, FileSystemError, SqlParseError
from sqlsmith.loader import collect_statements, find_sql_files, load_sql_directory, load_sql_file
from sqlsmith.models import Dialect, StatementType

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

USERS_SQL = textwrap.dedent("""\
    CREATE TABLE users (
        id SERIAL PRIMARY KEY,
        email TEXT NOT NULL
    );
""")

POSTS_SQL = textwrap.dedent("""\
    CREATE TABLE posts (
        id SERIAL PRIMARY KEY,
        user_id INT NOT NULL REFERENCES users(id)
    );

    CREATE VIEW recent_posts AS
    SELECT * FROM posts WHERE id > 100;
""")


def _write(directory: Path, name: str, content: str) -> Path:
    path = directory / name
    path.write_text(content, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# find_sql_files
# ---------------------------------------------------------------------------


class TestFindSqlFiles:
    def test_sorted_and_top_level_only(self, tmp_path: Path):
        _write(tmp_path, "b.sql", USERS_SQL)
        _write(tmp_path, "a.SQL", USERS_SQL)
        _write(tmp_path, "notes.txt", "not sql")
        nested = tmp_path / "nested"
        nested.mkdir()
        _write(nested, "c.sql", USERS_SQL)

        assert [p.name for p in find_sql_files(tmp_path)] == ["a.SQL", "b.sql"]

    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(FileSystemError) as exc_info:
            find_sql_files(tmp_path / "missing")
        assert exc_info.value.code == ErrorCode.DIRECTORY_NOT_FOUND

    def test_file_instead_of_directory(self, tmp_path: Path):
        path = _write(tmp_path, "users.sql", USERS_SQL)
        with pytest.raises(FileSystemError) as exc_info:
            find_sql_files(path)
        assert exc_info.value.code == ErrorCode.NOT_A_DIRECTORY


# ---------------------------------------------------------------------------
# load_sql_file
# ---------------------------------------------------------------------------


class TestLoadSqlFile:
    def test_extracts_statements_in_file_order(self, tmp_path: Path):
        path = _write(tmp_path, "posts.sql", POSTS_SQL)
        sql_file = load_sql_file(path)

        assert sql_file.path == str(path)
        assert sql_file.name == "posts.sql"
        assert sql_file.content == POSTS_SQL
        assert sql_file.dialect == Dialect.POSTGRESQL
        assert [(s.type, s.name) for s in sql_file.statements] == [
            (StatementType.TABLE, "posts"),
            (StatementType.VIEW, "recent_posts"),
        ]
        assert sql_file.statements[0].dependency_names == ["users"]
        assert sql_file.statements[1].line_number == 6
        assert all(s.source_file == str(path) for s in sql_file.statements)

    def test_empty_file(self, tmp_path: Path):
        path = _write(tmp_path, "empty.sql", "\n  \n")
        assert load_sql_file(path).statements == []

    def test_comment_only_file(self, tmp_path: Path):
        path = _write(tmp_path, "notes.sql", "-- nothing here yet\n")
        assert load_sql_file(path).statements == []

    def test_parse_error_names_file(self, tmp_path: Path):
        path = _write(tmp_path, "broken.sql", "CREATE TABLE users (id INT")
        with pytest.raises(SqlParseError) as exc_info:
            load_sql_file(path)
        err = exc_info.value
        assert err.file_path == str(path)
        assert "broken.sql" in str(err)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileSystemError):
            load_sql_file(tmp_path / "missing.sql")

    def test_invalid_utf8_names_file(self, tmp_path: Path):
        path = tmp_path / "cafe.sql"
        path.write_bytes(b"CREATE TABLE caf\xe9 (id INT);")
        with pytest.raises(FileSystemError) as exc_info:
            load_sql_file(path)
        err = exc_info.value
        assert err.code == ErrorCode.FILE_READ_ERROR
        assert err.context == {"path": str(path)}
        assert "cafe.sql" in str(err)

    def test_os_error_is_wrapped(self, tmp_path: Path):
        path = _write(tmp_path, "users.sql", USERS_SQL)
        with patch.object(Path, "read_text", side_effect=PermissionError("denied")):
            with pytest.raises(FileSystemError) as exc_info:
                load_sql_file(path)
        assert exc_info.value.code == ErrorCode.FILE_READ_ERROR
        assert "denied" in str(exc_info.value)

    def test_dialect_is_recorded(self, tmp_path: Path):
        path = _write(tmp_path, "users.sql", "CREATE TABLE users (id INTEGER PRIMARY KEY);")
        assert load_sql_file(path, Dialect.SQLITE).dialect == Dialect.SQLITE


# ---------------------------------------------------------------------------
# load_sql_directory / collect_statements
# ---------------------------------------------------------------------------


class TestLoadSqlDirectory:
    def test_loads_every_file(self, tmp_path: Path):
        _write(tmp_path, "02_posts.sql", POSTS_SQL)
        _write(tmp_path, "01_users.sql", USERS_SQL)

        files = load_sql_directory(tmp_path)
        assert [f.name for f in files] == ["01_users.sql", "02_posts.sql"]
        assert [s.name for s in collect_statements(files)] == ["users", "posts", "recent_posts"]

    def test_no_sql_files(self, tmp_path: Path):
        _write(tmp_path, "readme.md", "# schema")
        with pytest.raises(FileSystemError) as exc_info:
            load_sql_directory(tmp_path)
        assert exc_info.value.code == ErrorCode.NO_SQL_FILES

    def test_collect_statements_of_nothing(self):
        assert collect_statements([]) == []
