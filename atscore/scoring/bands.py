from __future__ import annotations

import math

from atscore.schemas.engine import MatchBand

# (minimum score, band, interview probability), evaluated high to low.
MATCH_BANDS: tuple[tuple[float, MatchBand, str], ...] = (
    (90, "Excellent Match", "85-100%"),
    (80, "Very Good Match", "70-84%"),
    # 65 rather than 70: a 68 must read "Good Match" / "55-69%".
    (65, "Good Match", "55-69%"),
    (60, "Fair Match", "35-54%"),
    (50, "Below Average", "20-34%"),
    (40, "Poor Match", "8-19%"),
    (30, "Very Poor", "3-7%"),
    (20, "Inadequate", "1-2%"),
    (0, "Minimal Match", "0-0.5%"),
)


def _band_entry(score: float) -> tuple[float, MatchBand, str]:
    if not math.isfinite(score):
        score = 0.0
    for entry in MATCH_BANDS:
        if score >= entry[0]:
            return entry
    return MATCH_BANDS[-1]


def get_match_band(score: float) -> MatchBand:
    return _band_entry(score)[1]


def get_interview_probability(score: float) -> str:
    return _band_entry(score)[2]


def band_rank(band: MatchBand) -> int:
    """0 for the best band, increasing as bands get worse."""
    for index, entry in enumerate(MATCH_BANDS):
        if entry[1] == band:
            return index
    raise ValueError(f"Unknown match band: {band}")


def get_critical_metric_status(percentage: float) -> str:
    if percentage >= 80:
        return "excellent"
    if percentage >= 60:
        return "good"
    if percentage >= 40:
        return "fair"
    return "poor"
