"""Roadmap builder: turns ranked gaps into a staged development plan.

Steps, milestones, projected score and completion time are deterministic.
Recommendations and motivational notes are requested from a narrative
generator; any failure or unusable response falls back to fixed text, so a
roadmap is always produced.
"""
from __future__ import annotations

import calendar
import json
import logging
import math
import re
from datetime import date
from typing import Callable, Dict, List, Optional, Sequence
from uuid import uuid4

from career_compass.core.errors import UpstreamDegradedError
from career_compass.models.domain import (
    CareerRoadmap,
    CompetencyProfile,
    DevelopmentStep,
    Gap,
    MatchResult,
    Milestone,
    Resource,
    RoleProfile,
    utc_now_iso,
)
from career_compass.services import matching
from career_compass.services.gaps import IMPORTANCE_ORDER
from career_compass.services.narrative import NarrativeGenerator, NullNarrativeGenerator

logger = logging.getLogger(__name__)

MAX_STEPS = 8
MAX_PARSED_LINES = 8

RECOMMENDATIONS_TEMPERATURE = 0.7
MOTIVATION_TEMPERATURE = 0.8

MOTIVATION_SYSTEM_PROMPT = (
    "You are an empathetic and supportive career counselor. You motivate students."
)

STRATEGIES: Dict[str, List[str]] = {
    "MATH_SKILLS": [
        "Solve math problems for 30 minutes every day",
        "Take online math courses (Khan Academy, Coursera)",
        "Ask your math teacher for extra practice material",
        "Join math clubs or competitions",
    ],
    "SCIENCE_SKILLS": [
        "Take an active part in lab work",
        "Read science magazines and articles",
        "Enter science fairs and competitions",
        "Watch science experiment videos and try them yourself",
    ],
    "PROGRAMMING": [
        "Start an online programming course (freeCodeCamp, Codecademy)",
        "Build a small project every week",
        "Contribute to open source projects on GitHub",
        "Join programming communities",
    ],
    "EMPATHY": [
        "Practice active listening",
        "Try to understand different points of view",
        "Take part in volunteer work",
        "Read books on emotional intelligence",
    ],
    "LEADERSHIP": [
        "Take on a leadership role in a school club",
        "Coordinate group projects",
        "Read leadership books and case studies",
        "Join a mentorship program",
    ],
    "VERBAL_COMMUNICATION": [
        "Take a presentation skills course",
        "Join a debate club",
        "Practice public speaking",
        "Listen to podcasts and TED talks",
    ],
    "CREATIVITY": [
        "Take creative writing or art classes",
        "Do brainstorming exercises",
        "Explore different art forms",
        "Attend creativity workshops",
    ],
}

RESOURCES: Dict[str, List[Resource]] = {
    "MATH_SKILLS": [
        Resource(type="COURSE", title="Khan Academy Math", description="Comprehensive online math course",
                 url="https://www.khanacademy.org/math", duration="Flexible"),
        Resource(type="BOOK", title="Preparing for Math Olympiads", description="Problem solving techniques"),
        Resource(type="PRACTICE", title="Daily Problem Solving", description="30 minutes of practice a day"),
    ],
    "PROGRAMMING": [
        Resource(type="COURSE", title="CS50: Introduction to Computer Science",
                 description="Harvard's free programming course", url="https://cs50.harvard.edu/"),
        Resource(type="COURSE", title="freeCodeCamp", description="Interactive programming lessons",
                 url="https://www.freecodecamp.org/"),
        Resource(type="PRACTICE", title="Daily Coding Practice", description="Daily problems on HackerRank or LeetCode"),
    ],
    "EMPATHY": [
        Resource(type="BOOK", title="Emotional Intelligence", description="Daniel Goleman"),
        Resource(type="ACTIVITY", title="Volunteering", description="Take part in community service projects"),
        Resource(type="WORKSHOP", title="Active Listening Workshop", description="Build communication skills"),
    ],
    "LEADERSHIP": [
        Resource(type="BOOK", title="The 7 Habits of Highly Effective People", description="Stephen Covey"),
        Resource(type="MENTORSHIP", title="Leadership Mentorship", description="Get guidance from an experienced leader"),
        Resource(type="ACTIVITY", title="Club Leadership", description="Take an active role in a school club"),
    ],
}


def default_strategies(name: str) -> List[str]:
    return [
        f"Practice {name} regularly",
        "Join related courses and training",
        "Get support from experienced mentors",
        "Work on real projects",
    ]


def default_resources(name: str) -> List[Resource]:
    return [
        Resource(type="COURSE", title=f"{name} Development Course", description="Foundation and advanced training"),
        Resource(type="PRACTICE", title="Regular Practice", description="Weekly practice exercises"),
        Resource(type="MENTORSHIP", title="Mentorship", description="Support from an expert in the field"),
    ]


def default_recommendations(role_name: str) -> List[str]:
    return [
        f"Develop the skills required for {role_name} regularly",
        "Look for internships or volunteering opportunities in the field",
        "Network with professionals and find a mentor",
        "Complete online courses and earn certificates",
        "Build personal projects and grow a portfolio",
        "Follow books and industry publications in the field",
    ]


def default_motivational_notes(match: MatchResult) -> List[str]:
    notes = [
        "Every great achievement starts with small steps. You're on the right path!",
        "Your strengths are the building blocks that will get you to this goal.",
    ]
    if match.match_score >= 70:
        notes.append("Your current abilities show a strong fit with your target role!")
    else:
        notes.append("Your development journey starts right now, and that's exciting!")
    if match.strengths:
        notes.append(f"Your talent in {match.strengths[0]} will make you stand out.")
    notes.append("Passion and determination are stronger than talent.")
    return notes


_ARRAY_RE = re.compile(r"\[[\s\S]*\]")
_BULLET_RE = re.compile(r"^[\d\-\*•]")
_MARKER_RE = re.compile(r"^[\d\-\*•\.\)]+\s*")


# PUBLIC_INTERFACE
def parse_narrative_response(text: str) -> List[str]:
    """Pull a list of items out of free text.

    A JSON array anywhere in the text wins (string items only). Otherwise
    bulleted or numbered lines, and any line longer than 20 characters, are
    kept with their markers stripped, up to eight.
    """
    if not text:
        return []
    found = _ARRAY_RE.search(text)
    if found:
        try:
            data = json.loads(found.group(0))
        except ValueError:
            data = None
        if isinstance(data, list):
            return [item for item in data if isinstance(item, str)]
    lines = [line.strip() for line in text.splitlines()]
    kept = [line for line in lines if line and (_BULLET_RE.match(line) or len(line) > 20)]
    return [_MARKER_RE.sub("", line) for line in kept][:MAX_PARSED_LINES]


# PUBLIC_INTERFACE
def projected_score(current: float, gap_count: int) -> float:
    """Score expected once the plan is done; capped at 95 while gaps remain."""
    if gap_count == 0:
        projected = min(current + 10, 100)
    else:
        projected = min(math.floor(current + min(30, 5 * gap_count) + 0.5), 95)
    return float(projected)


# PUBLIC_INTERFACE
def completion_time(steps: Sequence[DevelopmentStep]) -> str:
    """Bucketed overall duration: three months per critical step, two per high, one otherwise."""
    critical = sum(1 for s in steps if s.priority == "CRITICAL")
    high = sum(1 for s in steps if s.priority == "HIGH")
    months = critical * 3 + high * 2 + (len(steps) - critical - high)
    if months <= 6:
        return "3-6 months"
    if months <= 12:
        return "6-12 months"
    if months <= 18:
        return "12-18 months"
    return "18-24 months"


def add_months(start: date, months: int) -> date:
    """Calendar month arithmetic, clamping the day to the end of the month."""
    index = start.month - 1 + months
    year = start.year + index // 12
    month = index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


class RoadmapBuilder:
    """Build CareerRoadmaps. The narrative generator and clock are injected."""

    def __init__(
        self,
        narrative: Optional[NarrativeGenerator] = None,
        today: Callable[[], date] = date.today,
        now_iso: Callable[[], str] = utc_now_iso,
    ):
        self.narrative = narrative or NullNarrativeGenerator()
        self.today = today
        self.now_iso = now_iso

    def milestones(self, gap: Gap) -> List[Milestone]:
        start = self.today()
        current, target = gap.current_level, gap.required_level
        if target - current <= 2:
            return [
                Milestone(
                    description=f"Raise {gap.competency_name} to level {target}",
                    target_date=add_months(start, 2).isoformat(),
                    success_criteria=[
                        "Apply core concepts",
                        "Work independently",
                        "Complete a project/assignment successfully",
                    ],
                )
            ]
        mid = math.ceil((current + target) / 2)
        return [
            Milestone(
                description=f"Raise {gap.competency_name} to level {mid}",
                target_date=add_months(start, 3).isoformat(),
                success_criteria=["Acquire the core skills", "Apply them under guidance"],
            ),
            Milestone(
                description=f"Raise {gap.competency_name} to level {target}",
                target_date=add_months(start, 6).isoformat(),
                success_criteria=[
                    "Acquire advanced skills",
                    "Work independently and effectively",
                    "Reach the level of teaching others",
                ],
            ),
        ]

    def steps(self, gaps: Sequence[Gap]) -> List[DevelopmentStep]:
        steps = [
            DevelopmentStep(
                id=str(uuid4()),
                competency_id=gap.competency_id,
                competency_name=gap.competency_name,
                current_level=gap.current_level,
                target_level=gap.required_level,
                priority=gap.importance,
                timeline=gap.estimated_development_time,
                strategies=list(STRATEGIES.get(gap.competency_id) or default_strategies(gap.competency_name)),
                resources=[r.model_copy() for r in RESOURCES.get(gap.competency_id) or default_resources(gap.competency_name)],
                milestones=self.milestones(gap),
            )
            for gap in list(gaps)[:MAX_STEPS]
        ]
        steps.sort(key=lambda s: IMPORTANCE_ORDER.get(s.priority, len(IMPORTANCE_ORDER)))
        return steps

    def _narrate(self, prompt: str, temperature: float, system: Optional[str] = None) -> List[str]:
        try:
            items = parse_narrative_response(self.narrative.complete(prompt, temperature, system=system))
        except UpstreamDegradedError as exc:
            logger.warning("Narrative generator degraded: %s", exc.detail)
            return []
        except Exception as exc:
            logger.warning("Narrative generator failed: %s", type(exc).__name__)
            return []
        if not items:
            logger.warning("Narrative response could not be parsed; using fallback text")
        return items

    def recommendations(
        self,
        person_name: str,
        role: RoleProfile,
        match: MatchResult,
        steps: Sequence[DevelopmentStep],
        custom_goals: Sequence[str] = (),
    ) -> List[str]:
        gap_names = ", ".join(g.competency_name for g in match.gaps[:5]) or "None identified"
        prompt = (
            "Create personalized career recommendations for a student.\n\n"
            f"Student: {person_name}\n"
            f"Target role: {role.name}\n"
            f"Current match score: {match.match_score:.1f}/100\n\n"
            f"Strengths: {', '.join(match.strengths) or 'Being identified'}\n"
            f"Areas to develop: {gap_names}\n\n"
            f"{len(steps)} development steps are planned.\n"
        )
        if custom_goals:
            prompt += f"The student's own goals: {'; '.join(custom_goals)}\n"
        prompt += (
            "\nPlease give the student:\n"
            "1. Short-term (3-6 months) recommendations\n"
            "2. Mid-term (6-12 months) recommendations\n"
            "3. Long-term (1-2 years) strategies\n"
            "4. Extra opportunities and resources\n\n"
            "Be specific, actionable and motivating. Return 6-8 recommendations as a JSON array of strings."
        )
        items = self._narrate(prompt, RECOMMENDATIONS_TEMPERATURE)
        if items:
            return items
        return default_recommendations(role.name) + [f"Personal goal: {g}" for g in custom_goals]

    def motivational_notes(self, person_name: str, role: RoleProfile, match: MatchResult) -> List[str]:
        prompt = (
            f"The student {person_name} is aiming for the role of {role.name}.\n\n"
            f"Current match score: {match.match_score:.1f}/100\n"
            f"Strengths: {', '.join(match.strengths) or 'Still developing'}\n\n"
            "For this student write:\n"
            "1. Motivating and encouraging messages\n"
            "2. Personal notes highlighting their strengths\n"
            "3. Positive perspectives on reaching the goal\n"
            "4. Inspiring anecdotes or examples\n\n"
            "Return 4-6 motivational insights as a JSON array of strings. Keep them short and strong."
        )
        items = self._narrate(prompt, MOTIVATION_TEMPERATURE, system=MOTIVATION_SYSTEM_PROMPT)
        return items or default_motivational_notes(match)

    # PUBLIC_INTERFACE
    def build(
        self,
        person_id: str,
        profile: CompetencyProfile,
        role: RoleProfile,
        custom_goals: Optional[Sequence[str]] = None,
        person_name: Optional[str] = None,
    ) -> CareerRoadmap:
        """Build a new ACTIVE roadmap for a person towards a role (not persisted)."""
        goals = [g.strip() for g in (custom_goals or []) if g and g.strip()]
        match = matching.score(profile, role)
        steps = self.steps(match.gaps)
        name = person_name or person_id
        now = self.now_iso()
        roadmap = CareerRoadmap(
            id=str(uuid4()),
            person_id=person_id,
            target_role_id=role.id,
            target_role_name=role.name,
            current_match_score=match.match_score,
            projected_match_score=projected_score(match.match_score, len(match.gaps)),
            estimated_completion_time=completion_time(steps),
            steps=steps,
            recommendations=self.recommendations(name, role, match, steps, goals),
            motivational_notes=self.motivational_notes(name, role, match),
            custom_goals=goals,
            status="ACTIVE",
            created_at=now,
            updated_at=now,
        )
        logger.info(
            "Built roadmap %s for %s -> %s (%d steps, %.1f -> %.1f)",
            roadmap.id, person_id, role.id, len(steps),
            roadmap.current_match_score, roadmap.projected_match_score,
        )
        return roadmap
