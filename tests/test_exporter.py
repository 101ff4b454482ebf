"""Tests for goal and log document rendering."""

from makerAgent.goals import (
    export_goals,
    export_logs,
    import_goals,
    parse_goal_document,
    parse_log_document,
    render_goal_document,
)
from makerAgent.goals.exporter import render_goal_line
from makerAgent.models import Goal, GoalStatus


def _forest():
    root = Goal(description="Ship v1", status=GoalStatus.IN_PROGRESS)
    backend = Goal(description="Backend")
    backend.add_sub_goal(Goal(description="Auth", status=GoalStatus.COMPLETED))
    backend.add_sub_goal(Goal(description="Billing", status=GoalStatus.FAILED))
    root.add_sub_goal(backend)
    root.add_sub_goal(Goal(description="Frontend"))
    return [root, Goal(description="Docs")]


def _shape(goals):
    return [(g.description, g.status, _shape(g.sub_goals)) for g in goals]


def test_render_goal_line_format():
    goal = Goal(description="Auth", status=GoalStatus.COMPLETED)

    assert render_goal_line(goal, depth=2) == "    - ✅ **[COMPLETED]** Auth"
    assert render_goal_line(goal, include_ids=True).endswith(f"(id: {goal.id})")


def test_render_then_parse_keeps_shape_and_status():
    forest = _forest()

    assert _shape(parse_goal_document(render_goal_document(forest))) == _shape(forest)


def test_render_empty_forest():
    assert render_goal_document([]) == ""


def test_export_goals_writes_importable_file(tmp_path, store, project):
    store.set_goals(project, _forest())
    path = tmp_path / "goals.md"

    count = export_goals(store, project, path)

    assert count == 6
    assert _shape(import_goals(path)) == _shape(store.get_goals(project))


def test_export_logs_is_parseable(tmp_path, action_log):
    action_log.log("USER", "hello")
    action_log.log("AGENT", "line one\nline two")
    path = tmp_path / "log.md"

    assert export_logs(action_log, path) == 2

    parsed = parse_log_document(path.read_text(encoding="utf-8"))
    original = action_log.get_entries()
    assert [(e.role, e.content, e.timestamp) for e in parsed] == [
        (e.role, e.content, e.timestamp) for e in original
    ]
