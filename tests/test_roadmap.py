from datetime import date

import pytest

from career_compass.core.errors import UpstreamDegradedError
from career_compass.models.domain import DevelopmentStep
from career_compass.services import roadmap as rm
from career_compass.services.roadmap import RoadmapBuilder

from conftest import FailingNarrative, StubNarrative, make_profile, make_role


def _wide_role():
    ids = [
        ("PROGRAMMING", "CRITICAL"), ("MATH_SKILLS", "CRITICAL"), ("EMPATHY", "HIGH"), ("LEADERSHIP", "HIGH"),
        ("CREATIVITY", "MEDIUM"), ("TEAMWORK", "MEDIUM"), ("STAMINA", "LOW"), ("PERSUASION", "LOW"),
        ("INNOVATION", "MEDIUM"), ("DATA_ANALYSIS", "HIGH"),
    ]
    return make_role("WIDE", *[(cid, 6, imp, 1) for cid, imp in ids])


def _step(priority):
    return DevelopmentStep(
        id="s", competency_id="MATH_SKILLS", competency_name="Mathematics", current_level=1,
        target_level=5, priority=priority, timeline="3-4 months",
    )


@pytest.mark.parametrize(
    "current,gaps,expected",
    [(60.0, 3, 75.0), (90.0, 4, 95.0), (50.0, 10, 80.0), (95.0, 0, 100.0), (100.0, 0, 100.0), (97.0, 1, 95.0), (99.7, 1, 95.0)],
)
def test_projected_score(current, gaps, expected):
    assert rm.projected_score(current, gaps) == expected


@pytest.mark.parametrize(
    "priorities,expected",
    [
        (["MEDIUM"], "3-6 months"),
        (["CRITICAL", "CRITICAL", "HIGH"], "6-12 months"),
        (["CRITICAL"] * 6, "12-18 months"),
        (["CRITICAL"] * 7, "18-24 months"),
        ([], "3-6 months"),
    ],
)
def test_completion_time(priorities, expected):
    assert rm.completion_time([_step(p) for p in priorities]) == expected


def test_parse_prefers_json_array_and_keeps_strings_only():
    text = 'Sure! Here they are:\n["Join a robotics club", 42, "Read one paper a week"]\nGood luck'
    assert rm.parse_narrative_response(text) == ["Join a robotics club", "Read one paper a week"]


def test_parse_falls_back_to_lines():
    text = "1. First thing\n- second\n\nshort\nThis line is definitely longer than twenty"
    assert rm.parse_narrative_response(text) == ["First thing", "second", "This line is definitely longer than twenty"]


def test_parse_caps_lines_and_handles_garbage():
    text = "\n".join(f"* tip {i}" for i in range(12))
    assert len(rm.parse_narrative_response(text)) == 8
    assert rm.parse_narrative_response("[not json]") == []
    assert rm.parse_narrative_response("") == []


def test_add_months_clamps_day():
    assert rm.add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert rm.add_months(date(2025, 11, 15), 3) == date(2026, 2, 15)


def test_milestones_small_gap_single_target(fixed_today):
    builder = RoadmapBuilder(narrative=StubNarrative(), today=fixed_today)
    role = make_role("R", ("MATH_SKILLS", 7, "HIGH", 1))
    gap = builder.steps(rm.matching.score(make_profile(MATH_SKILLS=5), role).gaps)[0]
    (milestone,) = gap.milestones
    assert milestone.target_date == "2025-03-31"
    assert milestone.description == "Raise Mathematics to level 7"
    assert len(milestone.success_criteria) == 3


def test_milestones_large_gap_midpoint_and_target(fixed_today):
    builder = RoadmapBuilder(narrative=StubNarrative(), today=fixed_today)
    role = make_role("R", ("MATH_SKILLS", 8, "HIGH", 1))
    step = builder.steps(rm.matching.score(make_profile(MATH_SKILLS=3), role).gaps)[0]
    mid, target = step.milestones
    assert mid.description == "Raise Mathematics to level 6"
    assert mid.target_date == "2025-04-30"
    assert target.description == "Raise Mathematics to level 8"
    assert target.target_date == "2025-07-31"


def test_build_caps_steps_at_eight_sorted_by_priority(fixed_today):
    builder = RoadmapBuilder(narrative=StubNarrative(), today=fixed_today)
    roadmap = builder.build("p1", make_profile(), _wide_role())

    order = {"CRITICAL": 0, "HIGH": 1, "MEDIUM": 2, "LOW": 3}
    assert len(roadmap.steps) == 8
    assert [order[s.priority] for s in roadmap.steps] == sorted(order[s.priority] for s in roadmap.steps)
    assert roadmap.current_match_score == 0.0
    assert roadmap.projected_match_score == 30.0
    assert roadmap.status == "ACTIVE"


def test_build_uses_tables_and_generic_fallbacks(fixed_today):
    builder = RoadmapBuilder(narrative=StubNarrative(), today=fixed_today)
    roadmap = builder.build("p1", make_profile(), _wide_role())
    by_id = {s.competency_id: s for s in roadmap.steps}

    assert by_id["PROGRAMMING"].resources[0].url == "https://cs50.harvard.edu/"
    assert by_id["EMPATHY"].strategies[0] == "Practice active listening"
    assert by_id["TEAMWORK"].strategies[0] == "Practice Teamwork regularly"
    assert by_id["TEAMWORK"].resources[0].title == "Teamwork Development Course"


def test_build_with_narrative_uses_parsed_items_and_temperatures(fixed_today):
    stub = StubNarrative()
    builder = RoadmapBuilder(narrative=stub, today=fixed_today)
    role = make_role("R", ("MATH_SKILLS", 8, "CRITICAL", 1))

    roadmap = builder.build("p1", make_profile(MATH_SKILLS=4), role, custom_goals=["Win the math olympiad"], person_name="Pat")

    assert roadmap.recommendations == ["First tip", "Second tip"]
    assert roadmap.motivational_notes == ["First tip", "Second tip"]
    assert roadmap.custom_goals == ["Win the math olympiad"]
    (rec_prompt, rec_temp), (mot_prompt, mot_temp) = stub.calls
    assert (rec_temp, mot_temp) == (0.7, 0.8)
    assert "Pat" in rec_prompt and "Win the math olympiad" in rec_prompt
    assert "Mathematics" in rec_prompt


@pytest.mark.parametrize("exc", [TimeoutError("slow"), UpstreamDegradedError("down"), ValueError("bad")])
def test_build_falls_back_when_narrative_fails(fixed_today, exc):
    builder = RoadmapBuilder(narrative=FailingNarrative(exc), today=fixed_today)
    role = make_role("R", ("MATH_SKILLS", 8, "CRITICAL", 1), ("EMPATHY", 5, "LOW", 1))

    roadmap = builder.build("p1", make_profile(MATH_SKILLS=4, EMPATHY=9), role, custom_goals=["Learn Rust"])

    assert roadmap.recommendations[:6] == rm.default_recommendations("R")
    assert roadmap.recommendations[-1] == "Personal goal: Learn Rust"
    notes = roadmap.motivational_notes
    assert notes[2] == "Your current abilities show a strong fit with your target role!"
    assert notes[3] == "Your talent in Empathy will make you stand out."
    assert len(notes) == 5


def test_unparseable_narrative_uses_fallback(fixed_today):
    builder = RoadmapBuilder(narrative=StubNarrative("ok"), today=fixed_today)
    role = make_role("R", ("MATH_SKILLS", 8, "CRITICAL", 1))
    roadmap = builder.build("p1", make_profile(MATH_SKILLS=2), role)
    assert roadmap.recommendations == rm.default_recommendations("R")
    assert roadmap.motivational_notes[2] == "Your development journey starts right now, and that's exciting!"
    assert len(roadmap.motivational_notes) == 4


def test_no_gaps_projects_ten_more_capped_at_100(fixed_today):
    builder = RoadmapBuilder(narrative=StubNarrative(), today=fixed_today)
    role = make_role("R", ("MATH_SKILLS", 5, "CRITICAL", 1))
    roadmap = builder.build("p1", make_profile(MATH_SKILLS=9), role)
    assert roadmap.steps == []
    assert roadmap.current_match_score == 100.0
    assert roadmap.projected_match_score == 100.0
    assert roadmap.estimated_completion_time == "3-6 months"


def test_projection_stays_at_95_while_a_gap_remains(fixed_today):
    builder = RoadmapBuilder(narrative=StubNarrative(), today=fixed_today)
    role = make_role("R", ("MATH_SKILLS", 10, "HIGH", 1), ("PROGRAMMING", 5, "HIGH", 30))
    roadmap = builder.build("p1", make_profile(MATH_SKILLS=9, PROGRAMMING=5), role)
    assert len(roadmap.steps) == 1
    assert roadmap.current_match_score == 99.7
    assert roadmap.projected_match_score == 95.0
