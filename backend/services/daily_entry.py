"""
daily_entry.py — One entry per owner per calendar day.
Shared by mood logging (owner = user) and habit logging (owner = user + habit).
Relies on the table's unique constraint over (owner..., day): when two first
writes of the day race, the loser's insert fails, and it falls back to
updating the row the winner created.
"""

import logging
from datetime import date, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dates import day_bounds
from errors import ConflictError

logger = logging.getLogger(__name__)

PROTECTED_FIELDS = {"id", "day", "user_id", "habit_id", "created_at", "updated_at"}


def find_daily_entry(db: Session, model, owner: dict, day: date):
    start, end = day_bounds(day)
    return (
        db.query(model)
        .filter_by(**owner)
        .filter(model.day >= start, model.day < end)
        .first()
    )


def _merge(entry, patch: dict) -> None:
    for k, v in patch.items():
        if k in PROTECTED_FIELDS:
            continue
        setattr(entry, k, v)


def upsert_daily_entry(db: Session, model, owner: dict, day: date | datetime, patch: dict):
    """
    Find-or-create the entry for `owner` on `day`, merging `patch` into it.
    Returns (entry, created). Last write wins on fields set more than once a day.
    """
    start, _ = day_bounds(day)

    entry = find_daily_entry(db, model, owner, start)
    if entry is not None:
        _merge(entry, patch)
        db.commit()
        db.refresh(entry)
        logger.debug("Updated %s %s for %s on %s", model.__name__, entry.id, owner, start)
        return entry, False

    entry = model(**owner, day=start)
    _merge(entry, patch)
    db.add(entry)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        entry = find_daily_entry(db, model, owner, start)
        if entry is None:
            # constraint violation that was not a same-day duplicate
            raise ConflictError(f"Could not store {model.__name__} for {start}")
        logger.info("Concurrent first write for %s %s on %s; merged into entry %s",
                    model.__name__, owner, start, entry.id)
        _merge(entry, patch)
        db.commit()
        db.refresh(entry)
        return entry, False

    db.refresh(entry)
    logger.info("Created %s %s for %s on %s", model.__name__, entry.id, owner, start)
    return entry, True
