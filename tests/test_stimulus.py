"""Tests for the goal stimulus report."""

from makerAgent.goals import (
    ALL_COMPLETE_MESSAGE,
    NO_GOALS_MESSAGE,
    collect_stimulus_items,
    get_goal_stimulus,
    parse_goal_document,
    rank_stimulus_items,
    render_stimulus,
)
from makerAgent.goals.stimulus import (
    FAILED_HEADER,
    IN_PROGRESS_HEADER,
    PENDING_HEADER,
    TRUNCATION_MARKER,
    StimulusItem,
)
from makerAgent.models import Goal, GoalStatus

SHIP_V1 = """\
- Ship v1
  - Backend
    - [COMPLETED] Auth
    - Billing
  - Frontend
"""


def test_collect_skips_completed_and_builds_paths():
    items = collect_stimulus_items(parse_goal_document(SHIP_V1))

    assert items == [
        StimulusItem(GoalStatus.PENDING, "Ship v1 > Backend > Billing"),
        StimulusItem(GoalStatus.PENDING, "Ship v1 > Frontend"),
    ]


def test_goal_with_all_children_completed_is_a_leaf():
    forest = parse_goal_document("- [IN_PROGRESS] Release\n  - [COMPLETED] Tag\n  - [COMPLETED] Notes\n")

    assert collect_stimulus_items(forest) == [StimulusItem(GoalStatus.IN_PROGRESS, "Release")]


def test_completed_subtree_is_not_descended():
    forest = parse_goal_document("- [COMPLETED] Old\n  - [FAILED] Hidden\n- New\n")

    assert [i.path for i in collect_stimulus_items(forest)] == ["New"]


def test_rank_is_stable_within_status():
    items = [
        StimulusItem(GoalStatus.PENDING, "p1"),
        StimulusItem(GoalStatus.FAILED, "f1"),
        StimulusItem(GoalStatus.IN_PROGRESS, "i1"),
        StimulusItem(GoalStatus.PENDING, "p2"),
        StimulusItem(GoalStatus.FAILED, "f2"),
    ]

    assert [i.path for i in rank_stimulus_items(items)] == ["f1", "f2", "i1", "p1", "p2"]


def test_report_for_example_document():
    report = render_stimulus(parse_goal_document(SHIP_V1))

    assert report == (
        "GOAL STIMULUS REPORT:\n"
        "\n"
        f"{PENDING_HEADER}\n"
        "- Ship v1 > Backend > Billing\n"
        "- Ship v1 > Frontend\n"
    )
    assert "Auth" not in report
    assert FAILED_HEADER not in report


def test_sections_in_fixed_order():
    forest = parse_goal_document("- later\n- [IN_PROGRESS] now\n- [FAILED] broken\n")

    report = render_stimulus(forest)

    assert report.index(FAILED_HEADER) < report.index(IN_PROGRESS_HEADER) < report.index(PENDING_HEADER)
    assert "! broken" in report
    assert "> now" in report
    assert "- later" in report


def test_pending_section_is_capped():
    forest = [Goal(description=f"task {n}") for n in range(7)]

    lines = render_stimulus(forest).splitlines()

    assert [line for line in lines if line.startswith("- ")] == [f"- task {n}" for n in range(5)]
    assert lines[-1] == TRUNCATION_MARKER


def test_failed_and_in_progress_are_never_capped():
    forest = [Goal(description=f"f{n}", status=GoalStatus.FAILED) for n in range(8)]

    report = render_stimulus(forest)

    assert report.count("! f") == 8
    assert TRUNCATION_MARKER not in report


def test_exactly_limit_pending_has_no_marker():
    forest = [Goal(description=f"t{n}") for n in range(5)]

    assert TRUNCATION_MARKER not in render_stimulus(forest)


def test_sentinels():
    assert render_stimulus([]) == NO_GOALS_MESSAGE
    done = parse_goal_document("- [COMPLETED] a\n  - [COMPLETED] b\n")
    assert render_stimulus(done) == ALL_COMPLETE_MESSAGE


def test_get_goal_stimulus_reads_store(store, project):
    store.set_goals(project, parse_goal_document(SHIP_V1))

    report = get_goal_stimulus(store, project, pending_limit=1)

    assert "- Ship v1 > Backend > Billing" in report
    assert "Frontend" not in report
    assert TRUNCATION_MARKER in report
