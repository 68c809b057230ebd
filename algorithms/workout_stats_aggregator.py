from typing import Iterable, Mapping, Sequence

from .math_tools import MathTools


class WorkoutStatsAggregator:
    """Reduce a list of workouts into dashboard totals and averages."""

    @staticmethod
    def compute_stats(workouts: Iterable[Mapping]) -> dict[str, int | float]:
        """Return count, total duration, total calories and average duration.

        Missing or malformed ``duration_minutes`` and ``calories_burned`` values
        count as 0. The average is 0 for an empty list.
        """
        count = 0
        total_duration: int | float = 0
        total_calories: int | float = 0
        for workout in workouts:
            count += 1
            total_duration += MathTools.non_negative(workout.get("duration_minutes"))
            total_calories += MathTools.non_negative(workout.get("calories_burned"))
        average = MathTools.round_half_up(total_duration / count) if count > 0 else 0
        return {
            "count": count,
            "total_duration_minutes": total_duration,
            "total_calories": total_calories,
            "average_duration_minutes": average,
        }

    @staticmethod
    def weekly_average(workouts: Sequence[Mapping], weeks: int = 4) -> int:
        """Return the number of workouts per week over ``weeks`` weeks."""
        if weeks <= 0:
            return 0
        return MathTools.round_half_up(len(workouts) / weeks)

    @staticmethod
    def recent(workouts: Sequence[Mapping], limit: int = 5) -> list[Mapping]:
        """Return the first ``limit`` workouts of a most-recent-first list."""
        if limit <= 0:
            return []
        return list(workouts[:limit])
