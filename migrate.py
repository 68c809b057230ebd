import sqlite3
import sys

COLUMN_UPGRADES = [
    ("workouts", "notes", "TEXT"),
    ("workouts", "created_at", "TEXT NOT NULL DEFAULT ''"),
    ("goals", "current_value", "REAL NOT NULL DEFAULT 0"),
    ("goals", "target_date", "TEXT"),
    ("goals", "created_at", "TEXT NOT NULL DEFAULT ''"),
    ("exercises", "muscle_group", "TEXT"),
]


def migrate(db_path='fittrack.db'):
    conn = sqlite3.connect(db_path)
    cur = conn.cursor()
    added = []
    for table, column, decl in COLUMN_UPGRADES:
        cur.execute(f"PRAGMA table_info({table});")
        cols = [r[1] for r in cur.fetchall()]
        if cols and column not in cols:
            cur.execute(f"ALTER TABLE {table} ADD COLUMN {column} {decl};")
            added.append(f"{table}.{column}")
    cur.execute("PRAGMA table_info(sessions);")
    if not cur.fetchall():
        cur.execute(
            "CREATE TABLE sessions (token_digest TEXT PRIMARY KEY, user_id TEXT NOT NULL, created_at TEXT NOT NULL);"
        )
        added.append("sessions")
    conn.commit()
    conn.close()
    return added


if __name__ == '__main__':
    path = sys.argv[1] if len(sys.argv) > 1 else 'fittrack.db'
    print(", ".join(migrate(path)) or "Database is up to date")
