import pytest

from career_compass.services.gaps import analyze_gaps, estimate_development_time, identify_strengths

from conftest import make_profile, make_role


@pytest.mark.parametrize(
    "gap,importance,expected",
    [
        (1, "CRITICAL", "2-3 months (intensive)"),
        (3, "CRITICAL", "4-6 months (regular)"),
        (4, "CRITICAL", "6-12 months (long-term)"),
        (2, "HIGH", "3-4 months"),
        (4, "HIGH", "5-8 months"),
        (5, "HIGH", "9-12 months"),
        (3, "MEDIUM", "3-6 months"),
        (4, "MEDIUM", "6-12 months"),
        (1, "LOW", "6-12 months (low priority)"),
        (1, "UNKNOWN", "6-12 months (low priority)"),
    ],
)
def test_estimate_development_time(gap, importance, expected):
    assert estimate_development_time(gap, importance) == expected


def test_gaps_sorted_by_importance_then_size():
    role = make_role(
        "R",
        ("EMPATHY", 6, "LOW", 1),
        ("MATH_SKILLS", 7, "HIGH", 1),
        ("PROGRAMMING", 9, "CRITICAL", 1),
        ("TEAMWORK", 9, "HIGH", 1),
        ("LEADERSHIP", 5, "CRITICAL", 1),
        ("CREATIVITY", 4, "MEDIUM", 1),
    )
    profile = make_profile(EMPATHY=2, MATH_SKILLS=6, PROGRAMMING=5, TEAMWORK=3, LEADERSHIP=4, CREATIVITY=8)

    gaps = analyze_gaps(profile, role)

    assert [g.competency_id for g in gaps] == ["PROGRAMMING", "LEADERSHIP", "TEAMWORK", "MATH_SKILLS", "EMPATHY"]
    assert all(g.gap > 0 for g in gaps)
    assert gaps[0].gap == 4 and gaps[0].estimated_development_time == "6-12 months (long-term)"
    assert gaps[0].category == "TECHNICAL"


def test_met_requirements_produce_no_gap():
    role = make_role("R", ("MATH_SKILLS", 5, "CRITICAL", 1))
    assert analyze_gaps(make_profile(MATH_SKILLS=5), role) == []


def test_absent_competency_has_current_level_zero():
    role = make_role("R", ("STAMINA", 3, "MEDIUM", 1))
    (gap,) = analyze_gaps(make_profile(), role)
    assert gap.current_level == 0
    assert gap.gap == 3


def test_strengths_need_margin_or_high_level():
    role = make_role(
        "R",
        ("MATH_SKILLS", 5, "HIGH", 1),      # 7: margin of 2
        ("EMPATHY", 5, "HIGH", 1),          # 6: margin of 1 only
        ("TEAMWORK", 8, "HIGH", 1),         # 8: at level 8
        ("LEADERSHIP", 9, "HIGH", 1),       # 8: below minimum
    )
    profile = make_profile(MATH_SKILLS=7, EMPATHY=6, TEAMWORK=8, LEADERSHIP=8)
    assert identify_strengths(profile, role) == ["Mathematics", "Teamwork"]
