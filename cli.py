import argparse
import csv
import os
import datetime
import shutil

from config import configure_logging
from db import (
    UserRepository,
    SessionRepository,
    SettingsRepository,
    WorkoutRepository,
    GoalRepository,
    ExerciseRepository,
)
from auth_service import AuthService, AuthError
from stats_service import StatisticsService

DEMO_EMAIL = "demo@fittrack.local"
DEMO_PASSWORD = "demo-password"
DEFAULT_DB = os.environ.get("DB_PATH", "fittrack.db")
DEFAULT_YAML = os.environ.get("SETTINGS_PATH", "settings.yaml")


def _services(db_path: str, yaml_path: str) -> tuple[AuthService, StatisticsService]:
    settings = SettingsRepository(db_path, yaml_path)
    users = UserRepository(db_path)
    auth = AuthService(users, SessionRepository(db_path), settings)
    stats = StatisticsService(
        WorkoutRepository(db_path),
        GoalRepository(db_path),
        ExerciseRepository(db_path),
        settings,
    )
    return auth, stats


def export_workouts(db_path: str, email: str, out_path: str) -> int:
    """Write every workout of ``email`` to a CSV file and return the row count."""
    user = UserRepository(db_path).fetch_by_email(email.strip().lower())
    if user is None:
        raise ValueError("user not found")
    rows = WorkoutRepository(db_path).fetch_all_workouts(user["id"])
    with open(out_path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["Date", "Title", "Duration (min)", "Calories", "Notes"])
        for w in rows:
            writer.writerow(
                [
                    w["workout_date"],
                    w["title"],
                    w["duration_minutes"] if w["duration_minutes"] is not None else "",
                    w["calories_burned"] if w["calories_burned"] is not None else "",
                    w["notes"] or "",
                ]
            )
    return len(rows)


def backup_db(db_path: str, backup_path: str) -> None:
    shutil.copy(db_path, backup_path)


def restore_db(backup_path: str, db_path: str) -> None:
    shutil.copy(backup_path, db_path)


def demo_data(db_path: str, yaml_path: str) -> str:
    """Create the demo account with a week of workouts and two goals."""
    auth, stats = _services(db_path, yaml_path)
    try:
        user = auth.sign_up(DEMO_EMAIL, DEMO_PASSWORD)["user"]
    except AuthError:
        print("Demo account already exists")
        return auth.users.fetch_by_email(DEMO_EMAIL)["id"]
    today = datetime.date.today()
    sessions = [
        ("Morning Run", 30, 320),
        ("Leg Day", 55, 410),
        ("Yoga Flow", 40, None),
        ("Cycling", 60, 540),
        ("Upper Body", 45, 350),
        ("Rest Walk", None, 120),
        ("Intervals", 25, 300),
    ]
    for offset, (title, duration, calories) in enumerate(sessions):
        day = today - datetime.timedelta(days=len(sessions) - offset)
        stats.workouts.create(
            user["id"],
            title,
            duration,
            calories,
            None,
            datetime.datetime.combine(day, datetime.time(7, 0)).isoformat(),
        )
    stats.goals.add(user["id"], "Run 100 km", 100.0, "km", 42.5)
    stats.goals.add(user["id"], "Bench 80 kg", 80.0, "kg", 80.0)
    print("Demo data inserted")
    return user["id"]


def print_stats(db_path: str, yaml_path: str, email: str) -> dict:
    auth, stats = _services(db_path, yaml_path)
    user = auth.users.fetch_by_email(email.strip().lower())
    if user is None:
        raise ValueError("user not found")
    summary = stats.dashboard(user["id"])
    totals = summary["stats"]
    print(f"Workouts: {totals['count']}")
    print(
        f"Total duration: {totals['total_duration_minutes']}m "
        f"(avg {totals['average_duration_minutes']}m)"
    )
    print(f"Calories burned: {totals['total_calories']}")
    print(f"Weekly average: {summary['weekly_average']}x")
    for point in summary["chart"]:
        print(f"  {point['label']:>7}  {point['duration_minutes']:>4}m  {point['calories']:>5} kcal")
    goals = stats.goals_overview(user["id"])
    for goal in goals["goals"]:
        mark = "achieved" if goal["achieved"] else f"{goal['progress']['percent']}%"
        print(f"Goal {goal['title']}: {mark}")
    return summary


def resolve_log_level(args: argparse.Namespace) -> str:
    """Return the ``--log-level`` flag or, when absent, the stored setting."""
    if args.log_level:
        return args.log_level
    settings = SettingsRepository(
        getattr(args, "db", DEFAULT_DB), getattr(args, "yaml", DEFAULT_YAML)
    )
    return settings.get_text("log_level", "INFO")


def main() -> None:
    parser = argparse.ArgumentParser(description="FitTrack utility commands")
    parser.add_argument("--log-level", default=None)
    sub = parser.add_subparsers(dest="cmd", required=True)

    exp = sub.add_parser("export")
    exp.add_argument("--db", default=DEFAULT_DB)
    exp.add_argument("--email", required=True)
    exp.add_argument("--out", default="workouts.csv")

    bkp = sub.add_parser("backup")
    bkp.add_argument("--db", default=DEFAULT_DB)
    bkp.add_argument("--out", default="backup.db")

    rst = sub.add_parser("restore")
    rst.add_argument("--in", dest="src", default="backup.db")
    rst.add_argument("--db", default=DEFAULT_DB)

    demo = sub.add_parser("demo")
    demo.add_argument("--db", default=DEFAULT_DB)
    demo.add_argument("--yaml", default=DEFAULT_YAML)

    st = sub.add_parser("stats")
    st.add_argument("--db", default=DEFAULT_DB)
    st.add_argument("--yaml", default=DEFAULT_YAML)
    st.add_argument("--email", default=DEMO_EMAIL)

    serve = sub.add_parser("serve")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    args = parser.parse_args()
    configure_logging(resolve_log_level(args))

    if args.cmd == "export":
        count = export_workouts(args.db, args.email, args.out)
        print(f"Exported {count} workouts to {args.out}")
    elif args.cmd == "backup":
        backup_db(args.db, args.out)
    elif args.cmd == "restore":
        restore_db(args.src, args.db)
    elif args.cmd == "demo":
        demo_data(args.db, args.yaml)
    elif args.cmd == "stats":
        print_stats(args.db, args.yaml, args.email)
    elif args.cmd == "serve":
        import uvicorn

        uvicorn.run("rest_api:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
