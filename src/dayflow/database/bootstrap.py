"""Schema and seed helpers used on startup and by ``scripts/``."""
from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path
from typing import Iterator

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

# A statement is a run of quoted strings or anything but ';' and quotes.
_STATEMENT_RE = re.compile(r"""(?:'(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*"|`[^`]*`|[^;'"`])+""")
_DATABASE_LINE_RE = re.compile(r"(?im)^\s*(?:CREATE\s+DATABASE|USE)\b[^;]*;")


def schema_statements(sql: str) -> Iterator[str]:
    """Yield the statements of a schema file.

    Comment lines and CREATE DATABASE / USE lines are dropped so the schema
    applies to whichever database the settings name.
    """
    body = "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))
    body = _DATABASE_LINE_RE.sub("", body)
    for match in _STATEMENT_RE.finditer(body):
        statement = match.group(0).strip()
        if statement:
            yield statement


def _server(target: DBConfig, *, use_database: bool = True):
    kwargs = {
        "host": target.host,
        "port": target.port,
        "user": target.user,
        "password": target.password,
        "charset": target.charset,
        "connection_timeout": target.connect_timeout,
    }
    if use_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    with closing(_server(target, use_database=False)) as conn, closing(conn.cursor()) as cur:
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    """Create the database if needed and run every statement of ``schema_path``."""
    target = DBConfig.from_dict(db_config)
    ensure_database_exists(db_config)
    statements = list(schema_statements(Path(schema_path).read_text(encoding="utf-8")))

    with closing(_server(target)) as conn, closing(conn.cursor()) as cur:
        for statement in statements:
            cur.execute(statement)
        conn.commit()
    logger.info("Applied %d schema statements to %s", len(statements), target.describe())


def ensure_hr_account(
    db_config: dict,
    *,
    employee_id: str,
    email: str,
    password: str,
    name: str = "HR Administrator",
) -> bool:
    """Create the first HR account unless that email is already registered.

    Returns True when a new account was inserted.
    """
    target = DBConfig.from_dict(db_config)
    with closing(_server(target)) as conn, closing(conn.cursor(dictionary=True)) as cur:
        cur.execute("SELECT user_id FROM employees WHERE email=%s", (email.lower(),))
        if cur.fetchone():
            return False
        cur.execute(
            """
            INSERT INTO employees(employee_id, name, email, password_hash, role, department, position, status, join_date)
            VALUES(%s,%s,%s,%s,'hr','Human Resources','HR Manager','active',CURDATE())
            """,
            (employee_id.upper(), name, email.lower(), generate_password_hash(password)),
        )
        conn.commit()
    logger.info("Seeded HR account %s", email)
    return True


def list_tables(db_config: dict) -> list[str]:
    target = DBConfig.from_dict(db_config)
    with closing(_server(target)) as conn, closing(conn.cursor()) as cur:
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
