"""Tests for the Goal model and forest helpers."""

import pytest

from makerAgent.models import Goal, GoalStatus, attach_goal, dump_forest, find_goal, load_forest


def test_new_goal_defaults():
    goal = Goal(description="Ship v1")

    assert goal.status == GoalStatus.PENDING
    assert goal.sub_goals == []
    assert goal.id
    assert goal.created_at <= goal.updated_at


def test_ids_are_unique():
    assert Goal(description="a").id != Goal(description="a").id


def test_setters_bump_updated_at():
    goal = Goal(description="Ship v1")
    before = goal.updated_at

    goal.set_status("IN_PROGRESS")
    assert goal.status == GoalStatus.IN_PROGRESS
    assert goal.updated_at >= before

    goal.set_description("Ship v2")
    assert goal.description == "Ship v2"


def test_set_status_rejects_unknown_value():
    goal = Goal(description="x")
    with pytest.raises(ValueError):
        goal.set_status("DONE")


def test_add_sub_goal_keeps_order():
    parent = Goal(description="parent")
    first, second = Goal(description="first"), Goal(description="second")

    parent.add_sub_goal(first)
    parent.add_sub_goal(second)

    assert [child.description for child in parent.sub_goals] == ["first", "second"]


def test_add_sub_goal_rejects_cycles():
    parent = Goal(description="parent")
    child = Goal(description="child")
    parent.add_sub_goal(child)

    with pytest.raises(ValueError):
        child.add_sub_goal(parent)
    with pytest.raises(ValueError):
        parent.add_sub_goal(parent)


def test_add_sub_goal_rejects_second_parent_in_same_tree():
    root = Goal(description="root")
    a, b = Goal(description="a"), Goal(description="b")
    root.add_sub_goal(a)
    root.add_sub_goal(b)
    shared = Goal(description="shared")
    a.add_sub_goal(shared)

    with pytest.raises(ValueError):
        root.add_sub_goal(shared)


def test_find_goal():
    root = Goal(description="root")
    child = Goal(description="child")
    grandchild = Goal(description="grandchild")
    root.add_sub_goal(child)
    child.add_sub_goal(grandchild)
    forest = [root, Goal(description="other")]

    assert find_goal(forest, grandchild.id) is grandchild
    assert find_goal(forest, "missing") is None


def test_attach_goal_checks_the_whole_forest():
    first, second = Goal(description="first"), Goal(description="second")
    shared = Goal(description="shared")
    first.add_sub_goal(shared)
    forest = [first, second]

    with pytest.raises(ValueError):
        attach_goal(forest, shared, parent_id=second.id)
    with pytest.raises(ValueError):
        attach_goal(forest, second)
    assert second.sub_goals == []
    assert len(forest) == 2


def test_attach_goal_as_root_or_child():
    root = Goal(description="root")
    forest = [root]
    child, other = Goal(description="child"), Goal(description="other")

    attach_goal(forest, child, parent_id=root.id)
    attach_goal(forest, other)

    assert root.sub_goals == [child]
    assert forest == [root, other]
    with pytest.raises(KeyError):
        attach_goal(forest, Goal(description="orphan"), parent_id="missing")


def test_forest_json_round_trip():
    root = Goal(description="root", status=GoalStatus.IN_PROGRESS)
    root.add_sub_goal(Goal(description="leaf", status=GoalStatus.FAILED))

    restored = load_forest(dump_forest([root]))

    assert len(restored) == 1
    assert restored[0].id == root.id
    assert restored[0].status == GoalStatus.IN_PROGRESS
    assert restored[0].sub_goals[0].description == "leaf"
    assert restored[0].sub_goals[0].status == GoalStatus.FAILED
    assert restored[0].created_at == root.created_at
