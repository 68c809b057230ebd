import sqlite3
import aiosqlite
import csv
import os
import datetime
import logging
import math
import uuid
from contextlib import contextmanager, asynccontextmanager
from typing import List, Tuple, Optional

from config import YamlConfig
from settings_schema import validate_settings

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the underlying store rejects an operation."""


class FetchError(StoreError):
    """Raised when records cannot be read from the store."""


def _now() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def _new_id() -> str:
    return uuid.uuid4().hex


def _require_finite(*values: float) -> None:
    if not all(math.isfinite(v) for v in values):
        raise ValueError("goal values must be finite numbers")


class Database:
    """Provides SQLite connection management and schema initialization."""

    _TABLE_DEFINITIONS = {
        "users": (
            """CREATE TABLE users (
                    id TEXT PRIMARY KEY,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    created_at TEXT NOT NULL
                );""",
            ["id", "email", "password_hash", "created_at"],
        ),
        "sessions": (
            """CREATE TABLE sessions (
                    token_digest TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
                );""",
            ["token_digest", "user_id", "created_at"],
        ),
        "workouts": (
            """CREATE TABLE workouts (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    duration_minutes INTEGER,
                    calories_burned INTEGER,
                    workout_date TEXT NOT NULL,
                    notes TEXT,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
                );""",
            [
                "id",
                "user_id",
                "title",
                "duration_minutes",
                "calories_burned",
                "workout_date",
                "notes",
                "created_at",
            ],
        ),
        "goals": (
            """CREATE TABLE goals (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    target_value REAL NOT NULL,
                    current_value REAL NOT NULL DEFAULT 0,
                    unit TEXT NOT NULL,
                    target_date TEXT,
                    achieved INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
                );""",
            [
                "id",
                "user_id",
                "title",
                "target_value",
                "current_value",
                "unit",
                "target_date",
                "achieved",
                "created_at",
            ],
        ),
        "exercises": (
            """CREATE TABLE exercises (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL UNIQUE,
                    description TEXT,
                    category TEXT NOT NULL,
                    muscle_group TEXT,
                    difficulty TEXT NOT NULL
                );""",
            ["id", "name", "description", "category", "muscle_group", "difficulty"],
        ),
        "settings": (
            """CREATE TABLE settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );""",
            ["key", "value"],
        ),
    }

    def __init__(self, db_path: str = "fittrack.db") -> None:
        self._db_path = db_path
        self._ensure_schema()
        self._import_exercise_catalog_data()
        self._init_settings()

    @contextmanager
    def _connection(self):
        connection = sqlite3.connect(self._db_path)
        try:
            connection.execute("PRAGMA foreign_keys=on;")
            yield connection
            connection.commit()
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute("PRAGMA foreign_keys=off;")
            for table, (sql, columns) in self._TABLE_DEFINITIONS.items():
                self._ensure_table(conn, table, sql, columns)
            cursor.execute("PRAGMA foreign_keys=on;")

    def _ensure_table(
        self, conn: sqlite3.Connection, table: str, sql: str, columns: List[str]
    ) -> None:
        cur = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?;", (table,)
        )
        if cur.fetchone() is None:
            conn.execute(sql)
            return

        cur = conn.execute(f"PRAGMA table_info({table});")
        existing_cols = [row[1] for row in cur.fetchall()]
        if existing_cols == columns:
            return

        logger.info("Rebuilding table %s with columns %s", table, columns)
        conn.execute(f"ALTER TABLE {table} RENAME TO {table}_old;")
        conn.execute(sql)

        common = [c for c in existing_cols if c in columns]
        if common:
            cols = ", ".join(common)
            missing = [c for c in columns if c not in existing_cols]
            if missing:
                def default_val(col: str) -> str:
                    if col in ("current_value", "achieved"):
                        return "0"
                    if col == "created_at":
                        return f"'{_now()}'"
                    return "NULL"

                defaults = ", ".join(default_val(c) for c in missing)
                conn.execute(
                    f"INSERT INTO {table} ({cols}, {', '.join(missing)}) SELECT {cols}, {defaults} FROM {table}_old;"
                )
            else:
                conn.execute(
                    f"INSERT INTO {table} ({cols}) SELECT {cols} FROM {table}_old;"
                )
        conn.execute(f"DROP TABLE {table}_old;")

    def _import_exercise_catalog_data(self) -> None:
        csv_path = os.path.join(os.path.dirname(__file__), "exercise_catalog.csv")
        if not os.path.exists(csv_path):
            return
        with open(csv_path, newline="", encoding="utf-8") as csvfile:
            reader = csv.DictReader(csvfile)
            records = [
                (
                    row["Name"],
                    row.get("Description") or None,
                    row["Category"],
                    row.get("Muscle Group") or None,
                    row["Difficulty"],
                )
                for row in reader
            ]
        with self._connection() as conn:
            for name, description, category, muscle_group, difficulty in records:
                conn.execute(
                    "INSERT INTO exercises (id, name, description, category, muscle_group, difficulty) "
                    "VALUES (?, ?, ?, ?, ?, ?) "
                    "ON CONFLICT(name) DO UPDATE SET description=excluded.description, category=excluded.category, "
                    "muscle_group=excluded.muscle_group, difficulty=excluded.difficulty;",
                    (_new_id(), name, description, category, muscle_group, difficulty),
                )

    def _init_settings(self) -> None:
        defaults = {
            "chart_window": "7",
            "recent_workout_limit": "20",
            "recent_history_size": "5",
            "weeks_per_month": "4",
            "log_level": "INFO",
            "bcrypt_rounds": "12",
        }
        with self._connection() as conn:
            for key, value in defaults.items():
                conn.execute(
                    "INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?);",
                    (key, value),
                )


class BaseRepository(Database):
    """Base repository providing helper methods."""

    def execute(self, query: str, params: Tuple = ()) -> int:
        try:
            with self._connection() as conn:
                cursor = conn.cursor()
                cursor.execute(query, params)
                return cursor.rowcount
        except sqlite3.Error as e:
            logger.error("Store write failed: %s", e)
            raise StoreError(str(e)) from e

    def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        try:
            with self._connection() as conn:
                cursor = conn.cursor()
                cursor.execute(query, params)
                return cursor.fetchall()
        except sqlite3.Error as e:
            logger.error("Store read failed: %s", e)
            raise FetchError(str(e)) from e


class AsyncDatabase(Database):
    """Provides asynchronous connection management."""

    @asynccontextmanager
    async def _async_connection(self):
        conn = await aiosqlite.connect(self._db_path)
        try:
            yield conn
            await conn.commit()
        finally:
            await conn.close()


class AsyncBaseRepository(AsyncDatabase):
    """Asynchronous variant of BaseRepository using aiosqlite."""

    async def execute(self, query: str, params: Tuple = ()) -> int:
        try:
            async with self._async_connection() as conn:
                cursor = await conn.execute(query, params)
                await conn.commit()
                return cursor.rowcount
        except sqlite3.Error as e:
            logger.error("Store write failed: %s", e)
            raise StoreError(str(e)) from e

    async def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        try:
            async with self._async_connection() as conn:
                cursor = await conn.execute(query, params)
                rows = await cursor.fetchall()
                return list(rows)
        except sqlite3.Error as e:
            logger.error("Store read failed: %s", e)
            raise FetchError(str(e)) from e


_WORKOUT_COLUMNS = (
    "id, user_id, title, duration_minutes, calories_burned, workout_date, notes, created_at"
)


def _workout_row(r: Tuple) -> dict[str, object]:
    return {
        "id": r[0],
        "user_id": r[1],
        "title": r[2],
        "duration_minutes": r[3],
        "calories_burned": r[4],
        "workout_date": r[5],
        "notes": r[6],
        "created_at": r[7],
    }


def _recent_workouts_query(descending: bool) -> str:
    order = "DESC" if descending else "ASC"
    return (
        f"SELECT {_WORKOUT_COLUMNS} FROM workouts WHERE user_id = ? "
        f"ORDER BY workout_date {order}, created_at {order} LIMIT ?;"
    )


class WorkoutRepository(BaseRepository):
    """Repository for workout table operations."""

    def create(
        self,
        user_id: str,
        title: str,
        duration_minutes: Optional[int] = None,
        calories_burned: Optional[int] = None,
        notes: str | None = None,
        workout_date: str | None = None,
    ) -> str:
        if not title or not title.strip():
            raise ValueError("title required")
        workout_id = _new_id()
        self.execute(
            "INSERT INTO workouts (id, user_id, title, duration_minutes, calories_burned, workout_date, notes, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?);",
            (
                workout_id,
                user_id,
                title.strip(),
                duration_minutes,
                calories_burned,
                workout_date or _now(),
                notes,
                _now(),
            ),
        )
        return workout_id

    def fetch_recent(
        self, user_id: str, limit: int = 20, descending: bool = True
    ) -> list[dict[str, object]]:
        """Return up to ``limit`` workouts of ``user_id`` ordered by workout date."""
        rows = self.fetch_all(_recent_workouts_query(descending), (user_id, limit))
        return [_workout_row(r) for r in rows]

    def fetch_all_workouts(self, user_id: str) -> list[dict[str, object]]:
        rows = self.fetch_all(
            f"SELECT {_WORKOUT_COLUMNS} FROM workouts WHERE user_id = ? "
            "ORDER BY workout_date DESC, created_at DESC;",
            (user_id,),
        )
        return [_workout_row(r) for r in rows]

    def delete(self, user_id: str, workout_id: str) -> None:
        rows = self.fetch_all(
            "SELECT id FROM workouts WHERE id = ? AND user_id = ?;",
            (workout_id, user_id),
        )
        if not rows:
            raise ValueError("workout not found")
        self.execute(
            "DELETE FROM workouts WHERE id = ? AND user_id = ?;", (workout_id, user_id)
        )


class AsyncWorkoutRepository(AsyncBaseRepository):
    """Async repository for workout reads."""

    async def fetch_recent(
        self, user_id: str, limit: int = 20, descending: bool = True
    ) -> list[dict[str, object]]:
        rows = await self.fetch_all(
            _recent_workouts_query(descending), (user_id, limit)
        )
        return [_workout_row(r) for r in rows]


class GoalRepository(BaseRepository):
    """Repository for goal management."""

    _COLUMNS = (
        "id, user_id, title, target_value, current_value, unit, target_date, achieved, created_at"
    )

    @staticmethod
    def _row(r: Tuple) -> dict[str, object]:
        return {
            "id": r[0],
            "user_id": r[1],
            "title": r[2],
            "target_value": float(r[3]),
            "current_value": float(r[4]),
            "unit": r[5],
            "target_date": r[6],
            "achieved": bool(r[7]),
            "created_at": r[8],
        }

    def add(
        self,
        user_id: str,
        title: str,
        target_value: float,
        unit: str,
        current_value: float = 0.0,
        target_date: str | None = None,
    ) -> str:
        if not title or not title.strip():
            raise ValueError("title required")
        _require_finite(target_value, current_value)
        goal_id = _new_id()
        self.execute(
            "INSERT INTO goals (id, user_id, title, target_value, current_value, unit, target_date, achieved, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, 0, ?);",
            (
                goal_id,
                user_id,
                title.strip(),
                target_value,
                current_value,
                unit,
                target_date,
                _now(),
            ),
        )
        return goal_id

    def fetch_for_user(self, user_id: str) -> list[dict[str, object]]:
        rows = self.fetch_all(
            f"SELECT {self._COLUMNS} FROM goals WHERE user_id = ? ORDER BY created_at DESC;",
            (user_id,),
        )
        return [self._row(r) for r in rows]

    def fetch(self, user_id: str, goal_id: str) -> dict[str, object]:
        rows = self.fetch_all(
            f"SELECT {self._COLUMNS} FROM goals WHERE id = ? AND user_id = ?;",
            (goal_id, user_id),
        )
        if not rows:
            raise ValueError("goal not found")
        return self._row(rows[0])

    def update(
        self,
        user_id: str,
        goal_id: str,
        current_value: float | None = None,
        achieved: bool | None = None,
    ) -> None:
        self.fetch(user_id, goal_id)
        fields = []
        params: list[object] = []
        if current_value is not None:
            _require_finite(current_value)
            fields.append("current_value = ?")
            params.append(current_value)
        if achieved is not None:
            fields.append("achieved = ?")
            params.append(int(achieved))
        if fields:
            params.extend([goal_id, user_id])
            self.execute(
                f"UPDATE goals SET {', '.join(fields)} WHERE id = ? AND user_id = ?;",
                tuple(params),
            )

    def set_achieved(self, user_id: str, goal_id: str, achieved: bool) -> None:
        self.update(user_id, goal_id, achieved=achieved)


class ExerciseRepository(BaseRepository):
    """Repository for the shared exercise catalog."""

    def add(
        self,
        name: str,
        category: str,
        difficulty: str,
        description: str | None = None,
        muscle_group: str | None = None,
    ) -> str:
        if self.fetch_all("SELECT id FROM exercises WHERE name = ?;", (name,)):
            raise ValueError("exercise exists")
        exercise_id = _new_id()
        self.execute(
            "INSERT INTO exercises (id, name, description, category, muscle_group, difficulty) VALUES (?, ?, ?, ?, ?, ?);",
            (exercise_id, name, description, category, muscle_group, difficulty),
        )
        return exercise_id

    def fetch_catalog(self) -> list[dict[str, object]]:
        """Return every catalog entry ordered by name."""
        rows = self.fetch_all(
            "SELECT id, name, description, category, muscle_group, difficulty FROM exercises ORDER BY name;"
        )
        return [
            {
                "id": r[0],
                "name": r[1],
                "description": r[2],
                "category": r[3],
                "muscle_group": r[4],
                "difficulty": r[5],
            }
            for r in rows
        ]


class UserRepository(BaseRepository):
    """Repository for user accounts."""

    def create(self, email: str, password_hash: str) -> str:
        if self.fetch_by_email(email) is not None:
            raise ValueError("email already registered")
        user_id = _new_id()
        self.execute(
            "INSERT INTO users (id, email, password_hash, created_at) VALUES (?, ?, ?, ?);",
            (user_id, email, password_hash, _now()),
        )
        return user_id

    def fetch_by_email(self, email: str) -> dict[str, str] | None:
        rows = self.fetch_all(
            "SELECT id, email, password_hash FROM users WHERE email = ?;", (email,)
        )
        if not rows:
            return None
        uid, mail, pw_hash = rows[0]
        return {"id": uid, "email": mail, "password_hash": pw_hash}

    def fetch(self, user_id: str) -> dict[str, str]:
        rows = self.fetch_all("SELECT id, email FROM users WHERE id = ?;", (user_id,))
        if not rows:
            raise ValueError("user not found")
        return {"id": rows[0][0], "email": rows[0][1]}


class SessionRepository(BaseRepository):
    """Repository for signed-in sessions keyed by token digest."""

    def add(self, token_digest: str, user_id: str) -> None:
        self.execute(
            "INSERT INTO sessions (token_digest, user_id, created_at) VALUES (?, ?, ?);",
            (token_digest, user_id, _now()),
        )

    def fetch_user_id(self, token_digest: str) -> str | None:
        rows = self.fetch_all(
            "SELECT user_id FROM sessions WHERE token_digest = ?;", (token_digest,)
        )
        return rows[0][0] if rows else None

    def delete(self, token_digest: str) -> bool:
        return (
            self.execute(
                "DELETE FROM sessions WHERE token_digest = ?;", (token_digest,)
            )
            > 0
        )


class SettingsRepository(BaseRepository):
    """Repository for general application settings synchronized with YAML."""

    TEXT_KEYS = {"log_level"} | YamlConfig.SENSITIVE_KEYS

    def __init__(
        self, db_path: str = "fittrack.db", yaml_path: str = "settings.yaml"
    ) -> None:
        super().__init__(db_path)
        self._yaml = YamlConfig(yaml_path)
        self._sync_from_yaml()
        self._sync_to_yaml()

    def _raw_all_settings(self) -> dict:
        rows = self.fetch_all("SELECT key, value FROM settings ORDER BY key;")
        result: dict[str, int | float | str] = {}
        for k, v in rows:
            if k in self.TEXT_KEYS:
                result[k] = v
                continue
            try:
                result[k] = int(v)
            except ValueError:
                try:
                    result[k] = float(v)
                except ValueError:
                    result[k] = v
        return result

    def _sync_from_yaml(self) -> None:
        data = self._yaml.load()
        if not data:
            return
        validate_settings(data)
        with self._connection() as conn:
            for key, value in data.items():
                conn.execute(
                    "INSERT INTO settings (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
                    (key, str(value)),
                )

    def _sync_to_yaml(self) -> None:
        self._yaml.save(self._raw_all_settings())

    def get_text(self, key: str, default: str) -> str:
        self._sync_from_yaml()
        rows = self.fetch_all("SELECT value FROM settings WHERE key = ?;", (key,))
        return rows[0][0] if rows else default

    def get_int(self, key: str, default: int) -> int:
        try:
            return int(float(self.get_text(key, str(default))))
        except ValueError:
            return default

    def set_text(self, key: str, value: str) -> None:
        self.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
            (key, value),
        )
        self._sync_to_yaml()

    def set_int(self, key: str, value: int) -> None:
        self.set_text(key, str(value))

    def all_settings(self) -> dict:
        self._sync_from_yaml()
        data = self._raw_all_settings()
        for key in YamlConfig.SENSITIVE_KEYS:
            data.pop(key, None)
        return data
