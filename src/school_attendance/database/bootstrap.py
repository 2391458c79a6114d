from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, Optional

from werkzeug.security import generate_password_hash

from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"
SEED_PATH = Path(__file__).resolve().parent / "seed.sql"

# quoted strings (with backslash escapes), statement separators, everything else
_SQL_TOKEN_RE = re.compile(r"""'(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*"|;|[^;'"]+|['"]""")

DEMO_USERS = (
    ("System Administrator", "admin", "admin123", "admin"),
    ("Data Entry User", "dataentry", "data123", "dataentry"),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on top-level semicolons; quoted semicolons stay put."""
    buf: list[str] = []
    for token in _SQL_TOKEN_RE.findall(sql):
        if token == ";":
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
        else:
            buf.append(token)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connect(db_config: dict, *, with_database: bool = True):
    return DatabaseConnection(DBConfig.from_dict(db_config)).connect(with_database=with_database)


def _run_script(db_config: dict, path: Path) -> None:
    sql = _strip_comments(_strip_create_db_and_use(path.read_text(encoding="utf-8")))

    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(db_config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: Optional[str | Path] = None) -> None:
    ensure_database_exists(db_config)
    _run_script(db_config, Path(schema_path or SCHEMA_PATH))
    logger.info("Schema applied to %s", db_config.get("database"))


def apply_seed_sql(db_config: dict, *, seed_path: Optional[str | Path] = None) -> None:
    _run_script(db_config, Path(seed_path or SEED_PATH))
    logger.info("Seed data applied to %s", db_config.get("database"))


def ensure_demo_users(db_config: dict) -> None:
    """Create or refresh the demo admin and data-entry accounts."""

    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        for full_name, username, password, role in DEMO_USERS:
            cur.execute(
                """
                INSERT INTO users (full_name, username, password_hash, role, is_active)
                VALUES (%s, %s, %s, %s, 1)
                ON DUPLICATE KEY UPDATE
                    full_name=VALUES(full_name), password_hash=VALUES(password_hash),
                    role=VALUES(role), is_active=1
                """,
                (full_name, username, generate_password_hash(password), role),
            )
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
