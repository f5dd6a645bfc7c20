from datetime import date, datetime, timezone

from models.habit import Habit
from models.habit_entry import HabitEntry
from models.mood import MoodEntry
from services import daily_entry
from services.daily_entry import upsert_daily_entry


def at(y, m, d, hour=12):
    return datetime(y, m, d, hour, tzinfo=timezone.utc)


def test_same_day_upsert_keeps_one_entry_with_last_patch(db, make_user):
    user = make_user()
    owner = {"user_id": user.id}

    first, created = upsert_daily_entry(db, MoodEntry, owner, at(2024, 1, 1, 8), {"mood": "good", "energy": 4})
    assert created
    second, created = upsert_daily_entry(db, MoodEntry, owner, at(2024, 1, 1, 22), {"mood": "poor"})
    assert not created

    assert first.id == second.id
    assert db.query(MoodEntry).count() == 1
    assert second.mood == "poor"
    # fields not in the second patch survive the merge
    assert second.energy == 4
    assert second.day == date(2024, 1, 1)


def test_next_day_creates_a_distinct_entry(db, make_user):
    user = make_user()
    owner = {"user_id": user.id}

    upsert_daily_entry(db, MoodEntry, owner, at(2024, 1, 1), {"mood": "good"})
    upsert_daily_entry(db, MoodEntry, owner, at(2024, 1, 1, 23), {"mood": "okay"})
    third, created = upsert_daily_entry(db, MoodEntry, owner, at(2024, 1, 2, 0), {"mood": "excellent"})

    assert created
    assert db.query(MoodEntry).count() == 2
    assert third.day == date(2024, 1, 2)


def test_owner_key_includes_habit(db, make_user):
    user = make_user()
    run = Habit(user_id=user.id, name="Run")
    read = Habit(user_id=user.id, name="Read")
    db.add_all([run, read])
    db.commit()

    upsert_daily_entry(db, HabitEntry, {"user_id": user.id, "habit_id": run.id}, at(2024, 1, 1), {"completed": True})
    upsert_daily_entry(db, HabitEntry, {"user_id": user.id, "habit_id": read.id}, at(2024, 1, 1), {"completed": False})

    assert db.query(HabitEntry).count() == 2


def test_patch_cannot_move_entry_to_another_owner_or_day(db, make_user):
    user = make_user()
    other = make_user()
    entry, _ = upsert_daily_entry(db, MoodEntry, {"user_id": user.id}, at(2024, 1, 1),
                                  {"mood": "good", "user_id": other.id, "day": date(2023, 1, 1)})
    assert entry.user_id == user.id
    assert entry.day == date(2024, 1, 1)


def test_lost_creation_race_merges_into_winner(db, make_user, monkeypatch):
    user = make_user()

    # another request already created today's entry
    db.add(MoodEntry(user_id=user.id, day=date(2024, 1, 1), mood="good", energy=7))
    db.commit()

    real_find = daily_entry.find_daily_entry
    calls = {"n": 0}

    def stale_find(*args, **kwargs):
        # first lookup happened before the winner committed
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return real_find(*args, **kwargs)

    monkeypatch.setattr(daily_entry, "find_daily_entry", stale_find)

    entry, created = upsert_daily_entry(db, MoodEntry, {"user_id": user.id}, at(2024, 1, 1), {"mood": "terrible"})

    assert not created
    assert db.query(MoodEntry).count() == 1
    assert entry.mood == "terrible"
    assert entry.energy == 7
