from .math_tools import MathTools
from .workout_stats_aggregator import WorkoutStatsAggregator
from .chart_window_builder import ChartWindowBuilder
from .goal_progress_tracker import GoalProgressTracker
from .exercise_catalog_filter import ExerciseCatalogFilter

__all__ = [
    "MathTools",
    "WorkoutStatsAggregator",
    "ChartWindowBuilder",
    "GoalProgressTracker",
    "ExerciseCatalogFilter",
]
