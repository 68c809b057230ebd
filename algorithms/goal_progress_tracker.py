import math
from typing import Iterable, Mapping

from .math_tools import MathTools


class GoalProgressTracker:
    """Compute goal completion and split goals by their achievement flag.

    Progress values only drive the progress indicator. Whether a goal counts
    as achieved is decided by the stored ``achieved`` flag, so a goal whose
    current value has reached the target stays active until it is marked.
    """

    @staticmethod
    def _as_float(value: object) -> float:
        if value is None or isinstance(value, bool):
            return 0.0
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0.0
        return number if math.isfinite(number) else 0.0

    @classmethod
    def compute_progress(cls, goal: Mapping) -> dict[str, object]:
        """Return ``ratio`` in [0, 1], whole ``percent`` and ``is_complete``."""
        target = cls._as_float(goal.get("target_value"))
        current = cls._as_float(goal.get("current_value"))
        ratio = MathTools.clamp(MathTools.safe_ratio(current, target), 0.0, 1.0)
        return {
            "ratio": ratio,
            "percent": MathTools.round_half_up(ratio * 100),
            "is_complete": ratio >= 1,
        }

    @staticmethod
    def is_achieved(goal: Mapping) -> bool:
        return bool(goal.get("achieved"))

    @classmethod
    def active_goals(cls, goals: Iterable[Mapping]) -> list[Mapping]:
        return [g for g in goals if not cls.is_achieved(g)]

    @classmethod
    def achieved_goals(cls, goals: Iterable[Mapping]) -> list[Mapping]:
        return [g for g in goals if cls.is_achieved(g)]

    @classmethod
    def partition(cls, goals: Iterable[Mapping]) -> tuple[list[Mapping], list[Mapping]]:
        """Return ``(active, achieved)`` preserving the original order."""
        active: list[Mapping] = []
        achieved: list[Mapping] = []
        for goal in goals:
            (achieved if cls.is_achieved(goal) else active).append(goal)
        return active, achieved
