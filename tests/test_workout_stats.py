import os
import sys
import copy
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from algorithms import WorkoutStatsAggregator


class WorkoutStatsAggregatorTest(unittest.TestCase):
    def test_empty_list(self) -> None:
        self.assertEqual(
            WorkoutStatsAggregator.compute_stats([]),
            {
                "count": 0,
                "total_duration_minutes": 0,
                "total_calories": 0,
                "average_duration_minutes": 0,
            },
        )

    def test_single_workout_average(self) -> None:
        stats = WorkoutStatsAggregator.compute_stats(
            [{"duration_minutes": 45, "calories_burned": 300}]
        )
        self.assertEqual(stats["count"], 1)
        self.assertEqual(stats["average_duration_minutes"], 45)
        self.assertEqual(stats["total_calories"], 300)

    def test_missing_and_negative_values_count_as_zero(self) -> None:
        workouts = [
            {"duration_minutes": 30, "calories_burned": None},
            {"duration_minutes": None, "calories_burned": 200},
            {"title": "no metrics"},
            {"duration_minutes": -20, "calories_burned": -50},
        ]
        stats = WorkoutStatsAggregator.compute_stats(workouts)
        self.assertEqual(stats["count"], 4)
        self.assertEqual(stats["total_duration_minutes"], 30)
        self.assertEqual(stats["total_calories"], 200)
        self.assertEqual(stats["average_duration_minutes"], 8)

    def test_average_rounds_half_up(self) -> None:
        stats = WorkoutStatsAggregator.compute_stats(
            [{"duration_minutes": 20}, {"duration_minutes": 25}]
        )
        self.assertEqual(stats["total_duration_minutes"], 45)
        self.assertEqual(stats["average_duration_minutes"], 23)

    def test_idempotent(self) -> None:
        workouts = [{"duration_minutes": 10, "calories_burned": 90}] * 3
        before = copy.deepcopy(workouts)
        first = WorkoutStatsAggregator.compute_stats(workouts)
        second = WorkoutStatsAggregator.compute_stats(workouts)
        self.assertEqual(first, second)
        self.assertEqual(workouts, before)

    def test_weekly_average(self) -> None:
        workouts = [{}] * 10
        self.assertEqual(WorkoutStatsAggregator.weekly_average(workouts), 3)
        self.assertEqual(WorkoutStatsAggregator.weekly_average(workouts[:2]), 1)
        self.assertEqual(WorkoutStatsAggregator.weekly_average([]), 0)
        self.assertEqual(WorkoutStatsAggregator.weekly_average(workouts, 0), 0)

    def test_recent(self) -> None:
        workouts = [{"id": str(i)} for i in range(8)]
        recent = WorkoutStatsAggregator.recent(workouts)
        self.assertEqual([w["id"] for w in recent], ["0", "1", "2", "3", "4"])
        self.assertEqual(len(workouts), 8)
        self.assertEqual(WorkoutStatsAggregator.recent(workouts, 0), [])


if __name__ == "__main__":
    unittest.main()
