"""Statistics computed over player snapshots."""

from .engine import (
    average_bmi,
    bmi,
    calculate_statistics,
    country_with_highest_win_ratio,
    median_height,
    round_half_away,
)

__all__ = [
    "average_bmi",
    "bmi",
    "calculate_statistics",
    "country_with_highest_win_ratio",
    "median_height",
    "round_half_away",
]
