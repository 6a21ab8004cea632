"""Level thresholds and computation.

Floors are cumulative XP totals. The mobile and web clients render the same
table for the progress bar, so keep them in sync with GET /api/v1/levels.
"""

from __future__ import annotations

LEVEL_THRESHOLDS: list[dict] = [
    {"level": 1, "title": "Tape Rookie", "xp": 0},
    {"level": 2, "title": "Size Scout", "xp": 150},
    {"level": 3, "title": "Measure Keeper", "xp": 400},
    {"level": 4, "title": "Fit Finder", "xp": 800},
    {"level": 5, "title": "Closet Cartographer", "xp": 1400},
    {"level": 6, "title": "Seam Specialist", "xp": 2200},
    {"level": 7, "title": "Tailor's Eye", "xp": 3200},
    {"level": 8, "title": "Gift Whisperer", "xp": 4400},
    {"level": 9, "title": "Fit Oracle", "xp": 5800},
    {"level": 10, "title": "Size Legend", "xp": 7400},
]

MAX_LEVEL: int = LEVEL_THRESHOLDS[-1]["level"]


def _threshold_for(total_xp: int) -> int:
    """Index of the highest threshold whose floor is <= total_xp."""
    index = 0
    for i, threshold in enumerate(LEVEL_THRESHOLDS):
        if total_xp >= threshold["xp"]:
            index = i
    return index


def level_for(total_xp: int) -> int:
    """Level for a cumulative XP total. Negative totals stay at level 1."""
    return LEVEL_THRESHOLDS[_threshold_for(total_xp)]["level"]


def next_threshold(level: int) -> dict | None:
    for threshold in LEVEL_THRESHOLDS:
        if threshold["level"] == level + 1:
            return threshold
    return None


def progress_to_next_level(total_xp: int) -> float:
    """Fraction of the way from the current floor to the next one, clamped to [0, 1]."""
    current = LEVEL_THRESHOLDS[_threshold_for(total_xp)]
    upcoming = next_threshold(current["level"])
    if upcoming is None:
        return 1.0
    span = upcoming["xp"] - current["xp"]
    return min(1.0, max(0.0, (total_xp - current["xp"]) / span))


def compute_level(total_xp: int) -> dict:
    """Full level info for progress-bar rendering."""
    current = LEVEL_THRESHOLDS[_threshold_for(total_xp)]
    upcoming = next_threshold(current["level"])

    xp_into_level = max(0, total_xp - current["xp"])
    if upcoming is None:
        # Max level: report a full bar
        xp_for_level = max(1, xp_into_level)
    else:
        xp_for_level = upcoming["xp"] - current["xp"]

    return {
        "level": current["level"],
        "title": current["title"],
        "current_floor": current["xp"],
        "next_level_xp": upcoming["xp"] if upcoming else None,
        "xp_into_level": xp_into_level,
        "xp_for_level": xp_for_level,
        "progress_to_next": progress_to_next_level(total_xp),
    }
