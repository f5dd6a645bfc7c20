"""
stats.py — Read-side aggregates.
Pure functions over records the caller already loaded (and is allowed to see).
Empty input gives zero-valued results, never an error.
"""

import math
from datetime import datetime

from dates import window_days
from models.goal import Goal, GOAL_STATUSES
from models.mood import MOOD_VALUES, SLEEP_QUALITIES

TOP_N = 5
RECENT_TREND_SIZE = 7
UPCOMING_DEADLINE_DAYS = 7


def round_half_up(value: float, digits: int = 0) -> float | int:
    scale = 10 ** digits
    rounded = math.floor(value * scale + 0.5) / scale
    return int(rounded) if digits == 0 else rounded


def percent(part: int, whole: int) -> int:
    return round_half_up(part / whole * 100) if whole > 0 else 0


def goal_progress_view(goal: Goal, now: datetime) -> dict:
    return {
        "progress_percentage": goal.progress_percentage,
        "days_remaining": goal.days_remaining(now),
    }


def habit_summary(habits: list, completed_entries: list, period: str | None) -> dict:
    days = window_days(period)
    # sorted() is stable, so equal streaks keep their incoming order
    ranked = sorted(habits, key=lambda h: h.current_streak or 0, reverse=True)
    return {
        "total_habits": len(habits),
        "total_completions": len(completed_entries),
        "completion_rate": percent(len(completed_entries), len(habits) * days),
        "top_habits": [
            {"id": h.id, "name": h.name, "streak": h.current_streak or 0}
            for h in ranked[:TOP_N]
        ],
    }


def mood_summary(moods: list) -> dict:
    """`moods` is expected newest first; the trend takes the head of the list."""
    distribution = {m: 0 for m in MOOD_VALUES}
    sleep_quality = {q: 0 for q in SLEEP_QUALITIES}
    total_energy = total_stress = total_sleep = 0

    for m in moods:
        distribution[m.mood] += 1
        total_energy += m.energy or 0
        total_stress += m.stress or 0
        if m.sleep_hours:
            total_sleep += m.sleep_hours
        if m.sleep_quality:
            sleep_quality[m.sleep_quality] += 1

    count = len(moods)

    def avg(total):
        return round_half_up(total / count, 1) if count else 0

    return {
        "total_entries": count,
        "mood_distribution": distribution,
        "average_energy": avg(total_energy),
        "average_stress": avg(total_stress),
        "average_sleep_hours": avg(total_sleep),
        "sleep_quality_distribution": sleep_quality,
        "recent_trend": [
            {"day": m.day.isoformat(), "mood": m.mood, "energy": m.energy, "stress": m.stress}
            for m in moods[:RECENT_TREND_SIZE]
        ],
    }


def goal_summary(goals: list, now: datetime) -> dict:
    by_status = {s: 0 for s in GOAL_STATUSES}
    for g in goals:
        if g.status in by_status:
            by_status[g.status] += 1

    total = len(goals)
    upcoming = [
        g for g in goals
        if g.status == "active" and g.days_remaining(now) <= UPCOMING_DEADLINE_DAYS
    ]
    upcoming.sort(key=lambda g: g.days_remaining(now))

    return {
        "total": total,
        **by_status,
        "completion_rate": percent(by_status["completed"], total),
        "average_progress": round_half_up(sum(g.progress_percentage for g in goals) / total) if total else 0,
        "upcoming_deadlines": [
            {
                "id": g.id,
                "title": g.title,
                "days_remaining": g.days_remaining(now),
                "progress_percentage": g.progress_percentage,
            }
            for g in upcoming[:TOP_N]
        ],
    }
