from __future__ import annotations
import asyncio
import logging
from typing import Dict, List, Optional
from db import (
    WorkoutRepository,
    AsyncWorkoutRepository,
    GoalRepository,
    ExerciseRepository,
    SettingsRepository,
)
from algorithms import (
    WorkoutStatsAggregator,
    ChartWindowBuilder,
    GoalProgressTracker,
    ExerciseCatalogFilter,
)

logger = logging.getLogger(__name__)


class StatisticsService:
    """Fetch a snapshot of records and run the metric calculators over it."""

    def __init__(
        self,
        workout_repo: WorkoutRepository,
        goal_repo: GoalRepository,
        exercise_repo: ExerciseRepository,
        settings_repo: SettingsRepository | None = None,
        async_workout_repo: "AsyncWorkoutRepository" | None = None,
    ) -> None:
        self.workouts = workout_repo
        self.goals = goal_repo
        self.exercises = exercise_repo
        self.settings = settings_repo
        self.async_workouts = async_workout_repo

    def _setting(self, key: str, default: int) -> int:
        if self.settings is None:
            return default
        return self.settings.get_int(key, default)

    def _dashboard_options(self, window: Optional[int]) -> Dict[str, int]:
        """Resolve every setting the dashboard needs in one blocking pass."""
        return {
            "limit": self._setting("recent_workout_limit", 20),
            "window": window if window is not None else self._setting("chart_window", 7),
            "history": self._setting("recent_history_size", 5),
            "weeks": self._setting("weeks_per_month", 4),
        }

    @staticmethod
    def _summarize(
        workouts: List[Dict[str, object]], options: Dict[str, int]
    ) -> Dict[str, object]:
        history = WorkoutStatsAggregator.recent(workouts, options["history"])
        return {
            "stats": WorkoutStatsAggregator.compute_stats(workouts),
            "weekly_average": WorkoutStatsAggregator.weekly_average(
                workouts, options["weeks"]
            ),
            "chart": ChartWindowBuilder.build_window(workouts, options["window"]),
            "recent": [
                {**w, "date_label": ChartWindowBuilder.history_label(w["workout_date"])}
                for w in history
            ],
        }

    def recent_workouts(self, user_id: str, limit: Optional[int] = None) -> List[Dict[str, object]]:
        count = limit if limit is not None else self._setting("recent_workout_limit", 20)
        return self.workouts.fetch_recent(user_id, count, descending=True)

    def dashboard(self, user_id: str, window: Optional[int] = None) -> Dict[str, object]:
        """Return stats, weekly average, chart series and recent history."""
        options = self._dashboard_options(window)
        workouts = self.recent_workouts(user_id, options["limit"])
        logger.debug("Dashboard for %s over %d workouts", user_id, len(workouts))
        return self._summarize(workouts, options)

    async def dashboard_async(
        self, user_id: str, window: Optional[int] = None
    ) -> Dict[str, object]:
        """Same as :meth:`dashboard` without blocking the event loop.

        Settings live behind synchronous SQLite and YAML access, so they are
        resolved in a worker thread before the aiosqlite fetch.
        """
        if self.async_workouts is None:
            return await asyncio.to_thread(self.dashboard, user_id, window)
        options = await asyncio.to_thread(self._dashboard_options, window)
        workouts = await self.async_workouts.fetch_recent(
            user_id, options["limit"], descending=True
        )
        return self._summarize(workouts, options)

    def goals_overview(self, user_id: str) -> Dict[str, object]:
        """Return goals with progress split by their ``achieved`` flag."""
        goals = [
            {**g, "progress": GoalProgressTracker.compute_progress(g)}
            for g in self.goals.fetch_for_user(user_id)
        ]
        active, achieved = GoalProgressTracker.partition(goals)
        return {
            "goals": goals,
            "active": active,
            "achieved": achieved,
            "active_count": len(active),
        }

    def goal_progress(self, user_id: str, goal_id: str) -> Dict[str, object]:
        goal = self.goals.fetch(user_id, goal_id)
        return GoalProgressTracker.compute_progress(goal)

    def exercise_library(
        self,
        search_term: str = "",
        category: str = ExerciseCatalogFilter.ALL,
        difficulty: str = ExerciseCatalogFilter.ALL,
    ) -> Dict[str, object]:
        catalog = self.exercises.fetch_catalog()
        matches = ExerciseCatalogFilter.filter(catalog, search_term, category, difficulty)
        return {"exercises": matches, "count": len(matches), "empty": not matches}

    def exercise_filters(self) -> Dict[str, List[str]]:
        catalog = self.exercises.fetch_catalog()
        return {
            "categories": ExerciseCatalogFilter.categories(catalog),
            "difficulties": ExerciseCatalogFilter.difficulties(catalog),
        }
