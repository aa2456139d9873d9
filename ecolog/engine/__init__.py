"""Impact and aggregation engine for EcoLog."""

from ecolog.engine.impact import calculate_impact, parse_quantity
from ecolog.engine.metrics import sum_impacts, build_user_metrics, build_corporate_metrics, window_start_for_period
from ecolog.engine.leaderboard import rank_leaderboard, display_name

__all__ = [
    "calculate_impact",
    "parse_quantity",
    "sum_impacts",
    "build_user_metrics",
    "build_corporate_metrics",
    "window_start_for_period",
    "rank_leaderboard",
    "display_name",
]
