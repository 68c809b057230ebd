import datetime
from typing import Mapping, Sequence

from .math_tools import MathTools


class ChartWindowBuilder:
    """Build the chronologically ordered series shown on workout charts."""

    DEFAULT_WINDOW = 7
    MONTHS = (
        "Jan", "Feb", "Mar", "Apr", "May", "Jun",
        "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
    )
    WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

    @staticmethod
    def parse_date(value: object) -> datetime.date | None:
        """Return the calendar date of an ISO timestamp, date or datetime."""
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, datetime.date):
            return value
        if not isinstance(value, str) or not value.strip():
            return None
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.datetime.fromisoformat(text).date()
        except ValueError:
            pass
        try:
            return datetime.date.fromisoformat(text[:10])
        except ValueError:
            return None

    @classmethod
    def label(cls, workout_date: object) -> str:
        """Return a short ``"Oct 18"`` label or an empty string for bad dates."""
        day = cls.parse_date(workout_date)
        if day is None:
            return ""
        return f"{cls.MONTHS[day.month - 1]} {day.day}"

    @classmethod
    def history_label(cls, workout_date: object) -> str:
        """Return a ``"Sun, Oct 18, 2026"`` label for the workout history list."""
        day = cls.parse_date(workout_date)
        if day is None:
            return ""
        return (
            f"{cls.WEEKDAYS[day.weekday()]}, {cls.MONTHS[day.month - 1]} "
            f"{day.day}, {day.year}"
        )

    @classmethod
    def build_window(
        cls, workouts: Sequence[Mapping], n: int = DEFAULT_WINDOW
    ) -> list[dict[str, object]]:
        """Return up to ``n`` of the most recent workouts, oldest first.

        ``workouts`` is expected most-recent-first, as fetched from the store.
        The input sequence is left untouched.
        """
        if n <= 0:
            return []
        window = list(workouts[:n])
        window.reverse()
        return [
            {
                "label": cls.label(w.get("workout_date")),
                "duration_minutes": MathTools.non_negative(w.get("duration_minutes")),
                "calories": MathTools.non_negative(w.get("calories_burned")),
            }
            for w in window
        ]
