from datetime import date, datetime, timezone

import pytest

from dates import window_days, window_start
from models.goal import Goal
from models.habit import Habit
from models.mood import MoodEntry
from services import stats
from services.goal_service import GoalService
from services.mood_service import MoodService

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def goal(current, target, deadline=datetime(2024, 6, 20, tzinfo=timezone.utc), status="active", **kw):
    return Goal(title=kw.get("title", "g"), current_value=current, target_value=target, deadline=deadline,
                status=status, id=kw.get("id"))


@pytest.mark.parametrize("current,target,expected", [
    (0, 10, 0),
    (5, 10, 50),
    (1, 3, 33),
    (2, 3, 67),
    (1, 8, 13),  # 12.5 rounds up
    (10, 10, 100),
    (25, 10, 100),
    (5, 0, 0),
    (5, None, 0),
])
def test_progress_percentage(current, target, expected):
    assert goal(current, target).progress_percentage == expected


@pytest.mark.parametrize("deadline,expected", [
    (datetime(2024, 6, 20, 12, 0, tzinfo=timezone.utc), 5),
    (datetime(2024, 6, 15, 12, 0, 1, tzinfo=timezone.utc), 1),  # any fraction counts as a day
    (datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc), 0),
    (datetime(2024, 6, 1, tzinfo=timezone.utc), 0),
    (datetime(2024, 6, 16, 12, 0), 1),  # naive values are read as UTC
])
def test_days_remaining(deadline, expected):
    assert goal(0, 1, deadline=deadline).days_remaining(NOW) == expected


def test_goal_progress_view_is_recomputed_from_stored_fields():
    g = goal(3, 4)
    assert stats.goal_progress_view(g, NOW) == {"progress_percentage": 75, "days_remaining": 5}
    g.current_value = 4
    assert stats.goal_progress_view(g, NOW)["progress_percentage"] == 100


@pytest.mark.parametrize("period,days", [("week", 7), ("month", 30), ("year", 365), ("decade", 7), (None, 7)])
def test_window_lookback(period, days):
    assert window_days(period) == days
    assert (NOW.date() - window_start(period, NOW)).days == days


def test_habit_summary_ranks_by_streak_keeping_insertion_order_on_ties():
    habits = [
        Habit(id=i, name=name, current_streak=streak)
        for i, (name, streak) in enumerate([("a", 1), ("b", 4), ("c", 4), ("d", 0), ("e", 2), ("f", 4)], 1)
    ]
    summary = stats.habit_summary(habits, completed_entries=[object()] * 7, period="week")

    assert summary["total_habits"] == 6
    assert summary["total_completions"] == 7
    assert summary["completion_rate"] == 17  # 7 / (6 * 7)
    assert [h["name"] for h in summary["top_habits"]] == ["b", "c", "f", "e", "a"]


def test_empty_collections_give_zeroes():
    assert stats.habit_summary([], [], "month") == {
        "total_habits": 0, "total_completions": 0, "completion_rate": 0, "top_habits": [],
    }
    goals = stats.goal_summary([], NOW)
    assert goals["total"] == 0
    assert goals["completion_rate"] == 0
    assert goals["average_progress"] == 0
    assert goals["upcoming_deadlines"] == []


def test_mood_stats_for_month_with_no_entries(db, make_user):
    user = make_user()
    summary = MoodService.get_stats(db, user.id, NOW, "month")

    assert summary["total_entries"] == 0
    assert summary["average_energy"] == 0
    assert summary["average_stress"] == 0
    assert summary["average_sleep_hours"] == 0
    assert set(summary["mood_distribution"].values()) == {0}
    assert set(summary["sleep_quality_distribution"].values()) == {0}
    assert summary["recent_trend"] == []


def test_mood_stats_aggregate_within_window(db, make_user):
    user = make_user()
    other = make_user()
    rows = [
        (date(2024, 6, 14), "good", 6, 3, 7.5, "good"),
        (date(2024, 6, 13), "good", 7, 4, 8.0, "excellent"),
        (date(2024, 6, 12), "poor", 3, 8, None, None),
        (date(2024, 5, 1), "terrible", 1, 10, 4.0, "poor"),  # outside the week
    ]
    for day, mood, energy, stress, sleep, quality in rows:
        db.add(MoodEntry(user_id=user.id, day=day, mood=mood, energy=energy, stress=stress,
                         sleep_hours=sleep, sleep_quality=quality))
    db.add(MoodEntry(user_id=other.id, day=date(2024, 6, 14), mood="excellent", energy=10, stress=1))
    db.commit()

    summary = MoodService.get_stats(db, user.id, NOW, "week")

    assert summary["total_entries"] == 3
    assert summary["mood_distribution"] == {"excellent": 0, "good": 2, "okay": 0, "poor": 1, "terrible": 0}
    assert summary["average_energy"] == 5.3
    assert summary["average_stress"] == 5.0
    assert summary["average_sleep_hours"] == 5.2  # 15.5 / 3
    assert summary["sleep_quality_distribution"]["excellent"] == 1
    assert [t["day"] for t in summary["recent_trend"]] == ["2024-06-14", "2024-06-13", "2024-06-12"]


def test_goal_stats_counts_rates_and_deadlines(db, make_user):
    user = make_user()
    specs = [
        ("soon", 5, 10, datetime(2024, 6, 18, tzinfo=timezone.utc), "active"),
        ("sooner", 0, 10, datetime(2024, 6, 16, tzinfo=timezone.utc), "active"),
        ("later", 2, 10, datetime(2024, 9, 1, tzinfo=timezone.utc), "active"),
        ("done", 10, 10, datetime(2024, 6, 17, tzinfo=timezone.utc), "completed"),
        ("paused", 1, 4, datetime(2024, 6, 17, tzinfo=timezone.utc), "paused"),
    ]
    for title, current, target, deadline, status in specs:
        db.add(Goal(user_id=user.id, title=title, current_value=current, target_value=target,
                    deadline=deadline, status=status))
    db.commit()

    summary = GoalService.get_stats(db, user.id, NOW)

    assert summary["total"] == 5
    assert summary["active"] == 3
    assert summary["completed"] == 1
    assert summary["paused"] == 1
    assert summary["cancelled"] == 0
    assert summary["completion_rate"] == 20
    assert summary["average_progress"] == 39  # (50 + 0 + 20 + 100 + 25) / 5
    assert [g["title"] for g in summary["upcoming_deadlines"]] == ["sooner", "soon"]
