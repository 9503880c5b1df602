"""
SQLite store backend.

Keeps the three onboarding tables in a local database file.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Optional, Union

from rvs_onboarding.logging_config import get_logger
from rvs_onboarding.models import PROFILE_FIELDS
from rvs_onboarding.store.base import (
    CONFIG_TABLE,
    PROFILES_TABLE,
    USERS_TABLE,
    OnboardingStore,
    StoreResult,
    utc_now,
)

logger = get_logger(__name__)

SCHEMA = f"""
CREATE TABLE IF NOT EXISTS {CONFIG_TABLE} (
    component_name TEXT PRIMARY KEY,
    page_number INTEGER NOT NULL CHECK (page_number IN (2, 3)),
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS {USERS_TABLE} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    current_step INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS {PROFILES_TABLE} (
    user_id INTEGER NOT NULL UNIQUE REFERENCES {USERS_TABLE}(id),
    about_me TEXT,
    street_address TEXT,
    city TEXT,
    state TEXT,
    zip TEXT,
    birthdate TEXT,
    updated_at TEXT
);
"""

# Layout seeded into an empty config table
DEFAULT_LAYOUT = [
    ("about_me", 2),
    ("address", 2),
    ("birthdate", 3),
]


class SQLiteStore(OnboardingStore):
    """Onboarding store backed by a local SQLite file."""

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = db_path if str(db_path) == ":memory:" else Path(db_path)
        self._conn: Optional[sqlite3.Connection] = None

    def _get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
        return self._conn

    @contextmanager
    def transaction(self):
        """Commit on success, roll back on error."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def initialize(self, seed: bool = True) -> None:
        """Create tables and seed the default layout into an empty config table."""
        with self.transaction() as conn:
            conn.executescript(SCHEMA)
            if seed:
                count = conn.execute(f"SELECT COUNT(*) FROM {CONFIG_TABLE}").fetchone()[0]
                if count == 0:
                    now = utc_now()
                    conn.executemany(
                        f"INSERT INTO {CONFIG_TABLE} (component_name, page_number, updated_at) "
                        "VALUES (?, ?, ?)",
                        [(name, page, now) for name, page in DEFAULT_LAYOUT]
                    )
                    logger.info("Seeded default onboarding layout")

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _fetch_one(self, operation: str, table: str, query: str, params: tuple = ()) -> StoreResult:
        try:
            row = self._get_connection().execute(query, params).fetchone()
        except sqlite3.Error as e:
            return StoreResult.failure(str(e), operation, table)
        return StoreResult.success(dict(row) if row else None, operation, table)

    def _write(self, operation: str, table: str, query: str, params: tuple = ()) -> StoreResult:
        try:
            with self.transaction() as conn:
                cursor = conn.execute(query, params)
        except sqlite3.Error as e:
            return StoreResult.failure(str(e), operation, table)
        return StoreResult.success(cursor.rowcount, operation, table)

    def _update(self, operation: str, table: str, query: str, params: tuple = ()) -> StoreResult:
        """Run an UPDATE; matching no row is a failure."""
        result = self._write(operation, table, query, params)
        if result.ok and result.data == 0:
            return StoreResult.failure(f"No {table} row matched", operation, table)
        return result

    def load_config(self) -> StoreResult:
        try:
            rows = self._get_connection().execute(
                f"SELECT component_name, page_number FROM {CONFIG_TABLE}"
            ).fetchall()
        except sqlite3.Error as e:
            return StoreResult.failure(str(e), "load_config", CONFIG_TABLE)
        return StoreResult.success([dict(row) for row in rows], "load_config", CONFIG_TABLE)

    def save_config(self, component_name: str, page_number: int) -> StoreResult:
        return self._write(
            "save_config", CONFIG_TABLE,
            f"""
            INSERT INTO {CONFIG_TABLE} (component_name, page_number, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(component_name) DO UPDATE SET
                page_number = excluded.page_number,
                updated_at = excluded.updated_at
            """,
            (component_name, page_number, utc_now())
        )

    def get_user_by_id(self, user_id: int) -> StoreResult:
        return self._fetch_one(
            "get_user_by_id", USERS_TABLE,
            f"SELECT id, email, current_step FROM {USERS_TABLE} WHERE id = ?",
            (user_id,)
        )

    def get_user_by_email(self, email: str) -> StoreResult:
        return self._fetch_one(
            "get_user_by_email", USERS_TABLE,
            f"SELECT id, email, current_step FROM {USERS_TABLE} WHERE email = ?",
            (email,)
        )

    def create_user(self, email: str, password: str, current_step: int) -> StoreResult:
        now = utc_now()
        try:
            with self.transaction() as conn:
                cursor = conn.execute(
                    f"INSERT INTO {USERS_TABLE} "
                    "(email, password_hash, current_step, created_at, updated_at) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (email, password, current_step, now, now)
                )
        except sqlite3.Error as e:
            return StoreResult.failure(str(e), "create_user", USERS_TABLE)
        return StoreResult.success(
            {"id": cursor.lastrowid, "email": email, "current_step": current_step},
            "create_user", USERS_TABLE
        )

    def create_profile(self, user_id: int) -> StoreResult:
        return self._write(
            "create_profile", PROFILES_TABLE,
            f"INSERT INTO {PROFILES_TABLE} (user_id, updated_at) VALUES (?, ?)",
            (user_id, utc_now())
        )

    def get_profile(self, user_id: int) -> StoreResult:
        return self._fetch_one(
            "get_profile", PROFILES_TABLE,
            f"SELECT * FROM {PROFILES_TABLE} WHERE user_id = ?",
            (user_id,)
        )

    def update_profile(self, user_id: int, fields: Dict[str, Optional[str]]) -> StoreResult:
        columns = [name for name in PROFILE_FIELDS if name in fields]
        assignments = ", ".join(f"{name} = ?" for name in columns + ["updated_at"])
        params = tuple(fields[name] for name in columns) + (utc_now(), user_id)
        return self._update(
            "update_profile", PROFILES_TABLE,
            f"UPDATE {PROFILES_TABLE} SET {assignments} WHERE user_id = ?",
            params
        )

    def update_step(self, user_id: int, current_step: int) -> StoreResult:
        return self._update(
            "update_step", USERS_TABLE,
            f"UPDATE {USERS_TABLE} SET current_step = ?, updated_at = ? WHERE id = ?",
            (current_step, utc_now(), user_id)
        )

    def list_users(self) -> StoreResult:
        try:
            rows = self._get_connection().execute(
                f"""
                SELECT u.id, u.email, u.current_step, u.created_at,
                       p.user_id AS profile_user_id,
                       p.about_me, p.street_address, p.city, p.state, p.zip, p.birthdate
                FROM {USERS_TABLE} u
                LEFT JOIN {PROFILES_TABLE} p ON p.user_id = u.id
                ORDER BY u.created_at DESC, u.id DESC
                """
            ).fetchall()
        except sqlite3.Error as e:
            return StoreResult.failure(str(e), "list_users", USERS_TABLE)

        users = []
        for row in rows:
            row = dict(row)
            profile = None
            if row.pop("profile_user_id") is not None:
                profile = {name: row[name] for name in PROFILE_FIELDS}
            for name in PROFILE_FIELDS:
                row.pop(name)
            row[PROFILES_TABLE] = profile
            users.append(row)
        return StoreResult.success(users, "list_users", USERS_TABLE)
