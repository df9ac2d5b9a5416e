"""Static competency taxonomy.

Every competency the extractor can emit and every requirement in the role
catalog refers to one of these ids.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from career_compass.models.domain import Competency

_DEFINITIONS = [
    # Academic
    ("MATH_SKILLS", "Mathematics", "ACADEMIC", "Problem solving, numerical analysis and mathematical reasoning"),
    ("SCIENCE_SKILLS", "Science", "ACADEMIC", "Scientific thinking, experiment design and analysis"),
    ("LANGUAGE_SKILLS", "Language", "ACADEMIC", "Reading, writing and language use"),
    ("RESEARCH_SKILLS", "Research", "ACADEMIC", "Gathering, analysing and synthesising information"),
    ("CRITICAL_THINKING", "Critical Thinking", "ACADEMIC", "Analytical and logical reasoning"),
    # Social-emotional
    ("EMPATHY", "Empathy", "SOCIAL_EMOTIONAL", "Understanding and sharing the feelings of others"),
    ("TEAMWORK", "Teamwork", "SOCIAL_EMOTIONAL", "Working effectively within a group"),
    ("EMOTIONAL_REGULATION", "Emotional Regulation", "SOCIAL_EMOTIONAL", "Managing one's own emotions"),
    ("CONFLICT_RESOLUTION", "Conflict Resolution", "SOCIAL_EMOTIONAL", "Resolving and mediating conflicts"),
    # Communication
    ("VERBAL_COMMUNICATION", "Verbal Communication", "COMMUNICATION", "Speaking and presenting effectively"),
    ("WRITTEN_COMMUNICATION", "Written Communication", "COMMUNICATION", "Writing and reporting effectively"),
    ("ACTIVE_LISTENING", "Active Listening", "COMMUNICATION", "Listening carefully and understanding"),
    ("PERSUASION", "Persuasion", "COMMUNICATION", "Influencing and convincing others"),
    # Leadership
    ("LEADERSHIP", "Leadership", "LEADERSHIP", "Guiding and directing a group"),
    ("DECISION_MAKING", "Decision Making", "LEADERSHIP", "Making sound and timely decisions"),
    ("STRATEGIC_THINKING", "Strategic Thinking", "LEADERSHIP", "Long-term planning and vision"),
    # Technical
    ("PROGRAMMING", "Programming", "TECHNICAL", "Writing code and building software"),
    ("DATA_ANALYSIS", "Data Analysis", "TECHNICAL", "Processing and analysing data"),
    ("TECHNICAL_DRAWING", "Technical Drawing", "TECHNICAL", "Technical and engineering drawings"),
    ("LABORATORY_SKILLS", "Laboratory Skills", "TECHNICAL", "Using laboratory equipment"),
    # Creative
    ("CREATIVITY", "Creativity", "CREATIVE", "Producing original ideas"),
    ("ARTISTIC_ABILITY", "Artistic Ability", "CREATIVE", "Visual and artistic expression"),
    ("DESIGN_THINKING", "Design Thinking", "CREATIVE", "User-centred design"),
    ("INNOVATION", "Innovation", "CREATIVE", "Developing new solutions and approaches"),
    # Physical
    ("PHYSICAL_COORDINATION", "Physical Coordination", "PHYSICAL", "Hand-eye coordination and motor skills"),
    ("STAMINA", "Stamina", "PHYSICAL", "Physical endurance and fitness"),
    ("MANUAL_DEXTERITY", "Manual Dexterity", "PHYSICAL", "Precise handwork"),
]

COMPETENCIES: Dict[str, Competency] = {
    cid: Competency(id=cid, name=name, category=category, description=desc)  # type: ignore[arg-type]
    for cid, name, category, desc in _DEFINITIONS
}


# PUBLIC_INTERFACE
def get_competency(competency_id: str) -> Optional[Competency]:
    """Return the competency definition, or None for unknown ids."""
    return COMPETENCIES.get(competency_id)


# PUBLIC_INTERFACE
def competency_name(competency_id: str) -> str:
    """Display name for a competency; unknown ids are shown as-is."""
    comp = COMPETENCIES.get(competency_id)
    return comp.name if comp else competency_id


# PUBLIC_INTERFACE
def list_competencies(category: Optional[str] = None) -> List[Competency]:
    """List competencies, optionally restricted to one category."""
    items = list(COMPETENCIES.values())
    if category:
        items = [c for c in items if c.category == category.upper()]
    return items
