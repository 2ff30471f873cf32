"""Aggregate statistics over a snapshot of player records."""

from __future__ import annotations

import math
from typing import Dict, Sequence, Tuple

from tennis_api.models import CountryWinRatio, Player, Statistics


def round_half_away(value: float, places: int) -> float:
    """Round to ``places`` decimals with halves moving away from zero."""

    factor = 10 ** places
    scaled = math.floor(abs(value) * factor + 0.5)
    return math.copysign(scaled / factor, value) if scaled else 0.0


def bmi(weight_grams: int, height_cm: int) -> float:
    weight_kg = weight_grams / 1000
    height_m = height_cm / 100
    return weight_kg / (height_m * height_m)


def country_with_highest_win_ratio(players: Sequence[Player]) -> CountryWinRatio:
    # Insertion order is first-seen order; it decides ties below.
    totals: Dict[str, Tuple[int, int]] = {}
    for player in players:
        wins, total = totals.get(player.country.code, (0, 0))
        results = player.data.last
        totals[player.country.code] = (wins + sum(results), total + len(results))

    best_country = ""
    best_ratio = 0.0
    for country, (wins, total) in totals.items():
        if total == 0:
            continue
        ratio = wins / total
        if ratio > best_ratio:
            best_country = country
            best_ratio = ratio

    return CountryWinRatio(country=best_country, win_ratio=round_half_away(best_ratio, 4))


def average_bmi(players: Sequence[Player]) -> float:
    if not players:
        return 0.0
    total = sum(bmi(player.data.weight, player.data.height) for player in players)
    return round_half_away(total / len(players), 2)


def median_height(players: Sequence[Player]) -> float:
    if not players:
        return 0.0
    heights = sorted(player.data.height for player in players)
    mid = len(heights) // 2
    if len(heights) % 2 == 0:
        return (heights[mid - 1] + heights[mid]) / 2
    return float(heights[mid])


def calculate_statistics(players: Sequence[Player]) -> Statistics:
    """Compute win-ratio leader, average BMI and median height.

    Empty input yields zero-valued results rather than an error.
    """

    return Statistics(
        country_with_highest_win_ratio=country_with_highest_win_ratio(players),
        average_bmi=average_bmi(players),
        median_height=median_height(players),
    )
