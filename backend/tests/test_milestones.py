from datetime import datetime, timezone

import pytest

from errors import ValidationError
from models.goal import Goal, GoalMilestone
from services.milestones import apply_progress

NOW = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def make_goal(target=12, milestones=(6, 12), status="active"):
    return Goal(
        title="Read 12 books",
        target_value=target,
        current_value=0,
        status=status,
        deadline=datetime(2024, 12, 31, tzinfo=timezone.utc),
        milestones=[GoalMilestone(title=f"{m} books", target_value=m, completed=False) for m in milestones],
    )


def test_milestones_flip_as_progress_accumulates():
    goal = make_goal()

    apply_progress(goal, 3, NOW)
    assert goal.current_value == 3
    assert [m.completed for m in goal.milestones] == [False, False]

    apply_progress(goal, 3, NOW)
    assert goal.current_value == 6
    assert [m.completed for m in goal.milestones] == [True, False]
    assert goal.milestones[0].completed_at == NOW
    assert goal.status == "active"

    apply_progress(goal, 6, NOW, notes="finished")
    assert goal.current_value == 12
    assert goal.status == "completed"
    assert [m.completed for m in goal.milestones] == [True, True]
    assert [p.value for p in goal.progress] == [3, 3, 6]
    assert goal.progress[-1].notes == "finished"


def test_single_jump_completes_every_milestone_it_passes():
    goal = make_goal(target=10, milestones=(2, 5, 8))
    apply_progress(goal, 9, NOW)
    assert [m.completed for m in goal.milestones] == [True, True, True]
    assert goal.status == "active"


def test_completion_happens_once_and_never_reverts():
    goal = make_goal(target=5, milestones=())
    transitions = 0
    previous = goal.status
    for delta in [2, 2, 1, 0, 4]:
        apply_progress(goal, delta, NOW)
        if goal.status != previous:
            transitions += 1
            previous = goal.status

    assert goal.current_value == 9
    assert goal.status == "completed"
    assert transitions == 1


def test_completed_milestone_keeps_its_original_timestamp():
    goal = make_goal(target=20, milestones=(5,))
    apply_progress(goal, 5, NOW)
    later = datetime(2024, 4, 1, tzinfo=timezone.utc)
    apply_progress(goal, 5, later)
    assert goal.milestones[0].completed_at == NOW


@pytest.mark.parametrize("status", ["paused", "cancelled"])
def test_non_active_goal_is_not_auto_completed(status):
    goal = make_goal(target=1, milestones=(), status=status)
    apply_progress(goal, 3, NOW)
    assert goal.status == status
    assert goal.current_value == 3


def test_goal_without_target_never_completes():
    goal = make_goal(target=None, milestones=())
    apply_progress(goal, 100, NOW)
    assert goal.status == "active"
    assert goal.progress_percentage == 0


@pytest.mark.parametrize("delta", [-1, 1.5, "3", None, True])
def test_bad_delta_is_rejected_without_mutation(delta):
    goal = make_goal()
    with pytest.raises(ValidationError):
        apply_progress(goal, delta, NOW)
    assert goal.current_value == 0
    assert list(goal.progress) == []
