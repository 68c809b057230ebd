import os
import sqlite3
import sys

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from db import Database
from migrate import migrate


class TestSchemaMigration:
    def test_rebuilds_table_with_missing_columns(self, tmp_path):
        db_file = tmp_path / "test.db"
        conn = sqlite3.connect(str(db_file))
        conn.execute(
            "CREATE TABLE goals (id TEXT PRIMARY KEY, user_id TEXT, title TEXT, target_value REAL, unit TEXT)"
        )
        conn.execute(
            "INSERT INTO goals VALUES ('g1', 'u1', 'Run', 10.0, 'km')"
        )
        conn.commit()
        conn.close()

        Database(str(db_file))

        conn = sqlite3.connect(str(db_file))
        cur = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='goals_old'"
        )
        assert cur.fetchone() is None
        cur = conn.execute("PRAGMA table_info(goals)")
        cols = [row[1] for row in cur.fetchall()]
        assert "achieved" in cols
        assert "current_value" in cols
        row = conn.execute(
            "SELECT title, current_value, achieved FROM goals WHERE id = 'g1'"
        ).fetchone()
        assert row == ("Run", 0.0, 0)
        conn.close()

    def test_migrate_adds_columns_and_sessions(self, tmp_path):
        db_file = str(tmp_path / "old.db")
        conn = sqlite3.connect(db_file)
        conn.execute(
            "CREATE TABLE workouts (id TEXT PRIMARY KEY, user_id TEXT, title TEXT, workout_date TEXT)"
        )
        conn.commit()
        conn.close()

        added = migrate(db_file)
        assert "workouts.notes" in added
        assert "sessions" in added
        assert migrate(db_file) == []
