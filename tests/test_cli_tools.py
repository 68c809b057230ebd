import argparse
import csv
import os
import sys
import unittest
sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from cli import (
    DEMO_EMAIL,
    export_workouts,
    backup_db,
    restore_db,
    demo_data,
    print_stats,
    resolve_log_level,
)
from db import SettingsRepository, WorkoutRepository, GoalRepository


class CLIToolsTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_cli.db"
        self.yaml_path = "test_cli.yaml"
        self._cleanup()
        SettingsRepository(self.db_path, self.yaml_path).set_int("bcrypt_rounds", 4)

    def tearDown(self) -> None:
        self._cleanup()

    def _cleanup(self) -> None:
        for path in [self.db_path, self.yaml_path, "backup.db", "workouts_export.csv"]:
            if os.path.exists(path):
                os.remove(path)

    def test_demo_data(self) -> None:
        user_id = demo_data(self.db_path, self.yaml_path)
        workouts = WorkoutRepository(self.db_path).fetch_all_workouts(user_id)
        self.assertEqual(len(workouts), 7)
        goals = GoalRepository(self.db_path).fetch_for_user(user_id)
        self.assertEqual(len(goals), 2)
        self.assertFalse(any(g["achieved"] for g in goals))
        self.assertEqual(demo_data(self.db_path, self.yaml_path), user_id)
        self.assertEqual(
            len(WorkoutRepository(self.db_path).fetch_all_workouts(user_id)), 7
        )

    def test_export_backup_restore(self) -> None:
        demo_data(self.db_path, self.yaml_path)
        count = export_workouts(self.db_path, DEMO_EMAIL, "workouts_export.csv")
        self.assertEqual(count, 7)
        with open("workouts_export.csv", newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        self.assertEqual(rows[0], ["Date", "Title", "Duration (min)", "Calories", "Notes"])
        self.assertEqual(len(rows), 8)
        self.assertEqual(rows[1][1], "Intervals")
        with self.assertRaises(ValueError):
            export_workouts(self.db_path, "nobody@example.com", "workouts_export.csv")

        backup_db(self.db_path, "backup.db")
        self.assertTrue(os.path.exists("backup.db"))
        os.remove(self.db_path)
        restore_db("backup.db", self.db_path)
        self.assertTrue(os.path.exists(self.db_path))
        self.assertEqual(export_workouts(self.db_path, DEMO_EMAIL, "workouts_export.csv"), 7)

    def test_print_stats(self) -> None:
        demo_data(self.db_path, self.yaml_path)
        summary = print_stats(self.db_path, self.yaml_path, DEMO_EMAIL)
        self.assertEqual(summary["stats"]["count"], 7)
        self.assertEqual(summary["stats"]["total_duration_minutes"], 255)
        self.assertEqual(summary["stats"]["total_calories"], 2040)
        self.assertEqual(summary["stats"]["average_duration_minutes"], 36)
        self.assertEqual(summary["weekly_average"], 2)
        self.assertEqual(len(summary["chart"]), 7)
        self.assertEqual(len(summary["recent"]), 5)

    def test_log_level_falls_back_to_setting(self) -> None:
        SettingsRepository(self.db_path, self.yaml_path).set_text("log_level", "DEBUG")
        args = argparse.Namespace(log_level=None, db=self.db_path, yaml=self.yaml_path)
        self.assertEqual(resolve_log_level(args), "DEBUG")
        args.log_level = "WARNING"
        self.assertEqual(resolve_log_level(args), "WARNING")


if __name__ == "__main__":
    unittest.main()
