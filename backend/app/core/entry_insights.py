"""Entry Insights — pure mood statistics and closest-entry ranking over decrypted entries.

Invariants:
    - All functions are PURE: operate on plain dicts, never touch the DB or cipher
    - Mood percentages are integers that sum to exactly 100 (or all 0 with no entries)
    - Closest-entry candidates never include the entry being compared
    - A closest match must share the mood of the compared entry

Design Decisions:
    - Largest-remainder rounding for percentages: naive round() drifts to 99% or 101%
    - Rank ties resolved in favour of the later candidate (callers pass oldest-first),
      so the most recent of equally similar entries wins
    - References compared by item id, never by object identity or name
"""

import math
from collections.abc import Mapping, Sequence

from app.core.domain_types import (
    Mood,
    CLOSEST_MOOD_WEIGHT, CLOSEST_EMOTION_WEIGHT,
    CLOSEST_TAG_WEIGHT, CLOSEST_ACTIVITY_WEIGHT,
)

_MOOD_STAT_KEYS: dict[Mood, str] = {
    Mood.HIGH_ENERGY_UNPLEASANT: "high_energy_unpleasant",
    Mood.LOW_ENERGY_UNPLEASANT: "low_energy_unpleasant",
    Mood.HIGH_ENERGY_PLEASANT: "high_energy_pleasant",
    Mood.LOW_ENERGY_PLEASANT: "low_energy_pleasant",
}


def percent_round(counts: Sequence[int]) -> list[int]:
    """Integer percentages summing to 100 via the largest-remainder method."""
    total = sum(counts)
    if total == 0:
        return [0 for _ in counts]
    raw = [c * 100 / total for c in counts]
    floors = [math.floor(r) for r in raw]
    shortfall = 100 - sum(floors)
    by_remainder = sorted(
        range(len(raw)), key=lambda i: (raw[i] - floors[i]), reverse=True,
    )
    for i in by_remainder[:shortfall]:
        floors[i] += 1
    return floors


def _ref_ids(refs: Sequence[Mapping] | None) -> set[str]:
    return {str(r["id"]) for r in refs or () if r.get("id")}


# --- Stats ------------------------------------------------------------------

def compute_mood_stats(entries: Sequence[Mapping]) -> dict:
    """Mood distribution as percentage strings plus the dominant mood."""
    counts = {mood: 0 for mood in Mood}
    for entry in entries:
        mood = Mood.parse(entry.get("mood", ""))
        if mood is not None:
            counts[mood] += 1

    ordered = list(Mood)
    values = [counts[m] for m in ordered]
    percents = percent_round(values)

    stats: dict = {
        _MOOD_STAT_KEYS[m]: f"{p}%" for m, p in zip(ordered, percents)
    }
    if any(values):
        top = values.index(max(values))
        stats["highest_mood"] = {
            "mood": ordered[top].value, "stat": f"{percents[top]}%",
        }
    else:
        stats["highest_mood"] = {"mood": "", "stat": ""}
    return stats


def compute_activity_counts(
    entries: Sequence[Mapping], activities: Sequence[Mapping],
) -> list[dict]:
    """Per-activity count of entries referencing it, in catalog order."""
    counts = {str(a["id"]): 0 for a in activities}
    for entry in entries:
        for ref_id in _ref_ids(entry.get("activities")):
            if ref_id in counts:
                counts[ref_id] += 1
    return [
        {
            "activity_id": str(a["id"]),
            "activity_name": a["name"],
            "activity_type": a["type"],
            "count": counts[str(a["id"])],
        }
        for a in activities
    ]


def compute_entry_stats(
    entries: Sequence[Mapping], activities: Sequence[Mapping],
) -> dict:
    """Full stats payload for a window of entries."""
    return {
        "entry_count": len(entries),
        "mood_stats": compute_mood_stats(entries),
        "activity_stats": compute_activity_counts(entries, activities),
    }


# --- Closest entry ----------------------------------------------------------

def similarity_rank(candidate: Mapping, target: Mapping) -> int:
    """Weighted similarity: mood 4, emotion 3, shared tag 2, shared activity 1."""
    rank = 0
    if candidate.get("mood") == target.get("mood"):
        rank += CLOSEST_MOOD_WEIGHT
    if candidate.get("emotion") == target.get("emotion"):
        rank += CLOSEST_EMOTION_WEIGHT
    if _ref_ids(candidate.get("tags")) & _ref_ids(target.get("tags")):
        rank += CLOSEST_TAG_WEIGHT
    if _ref_ids(candidate.get("activities")) & _ref_ids(target.get("activities")):
        rank += CLOSEST_ACTIVITY_WEIGHT
    return rank


def find_closest_entry(
    target: Mapping, candidates: Sequence[Mapping],
) -> Mapping | None:
    """Best-ranked candidate sharing the target's mood, None when there is none."""
    closest = None
    closest_rank = -1
    for candidate in candidates:
        if str(candidate.get("id")) == str(target.get("id")):
            continue
        if candidate.get("mood") != target.get("mood"):
            continue
        rank = similarity_rank(candidate, target)
        if rank >= closest_rank:
            closest, closest_rank = candidate, rank
    return closest
