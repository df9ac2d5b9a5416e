"""Career guidance service: composes stores, extractor, matching and roadmap builder."""
from __future__ import annotations

import logging
from collections import Counter
from typing import List, Optional, Sequence

from career_compass.core.errors import InputValidationError, NotFoundError
from career_compass.db.stores import (
    AnalysisHistoryStore,
    CompetencyProfileStore,
    ProfileStore,
    RoadmapStore,
    RoleCatalog,
)
from career_compass.models.domain import (
    CareerAnalysis,
    CareerRoadmap,
    CompetencyProfile,
    CompetencyStats,
    MatchResult,
    RoadmapUpdate,
    RoleProfile,
    utc_now_iso,
)
from career_compass.services import extractor, matching
from career_compass.services.roadmap import RoadmapBuilder

logger = logging.getLogger(__name__)

TOP_MATCHES = 10
HEADLINE_ITEMS = 5


class CareerGuidanceService:
    """Entry point for profile, analysis and roadmap operations on one person."""

    def __init__(
        self,
        profiles: ProfileStore,
        roles: RoleCatalog,
        competencies: CompetencyProfileStore,
        roadmaps: RoadmapStore,
        history: AnalysisHistoryStore,
        builder: Optional[RoadmapBuilder] = None,
        rank_workers: int = 1,
    ):
        self.profiles = profiles
        self.roles = roles
        self.competencies = competencies
        self.roadmaps = roadmaps
        self.history = history
        self.builder = builder or RoadmapBuilder()
        self.rank_workers = rank_workers

    # --- people and competency profiles ---

    def _person_name(self, person_id: str) -> str:
        records = self.profiles.get_raw_records(person_id)
        if records is None:
            raise NotFoundError(f"Person not found: {person_id}")
        return records.person_name or person_id

    # PUBLIC_INTERFACE
    def get_profile(self, person_id: str) -> CompetencyProfile:
        """Return the stored profile, extracting and storing it on first use."""
        entries = self.competencies.get(person_id)
        if not entries:
            extracted = extractor.deduplicate(extractor.extract(person_id, self.profiles))
            if extracted:
                self.competencies.upsert_many(extracted)
                logger.info("Created competency profile for %s (%d entries)", person_id, len(extracted))
            entries = self.competencies.get(person_id)
        return CompetencyProfile(person_id=person_id, entries=entries)

    # PUBLIC_INTERFACE
    def refresh_profile(self, person_id: str) -> CompetencyProfile:
        """Re-extract the profile and replace the stored one atomically.

        An extraction that yields nothing leaves the stored profile untouched.
        """
        extracted = extractor.deduplicate(extractor.extract(person_id, self.profiles))
        if extracted:
            self.competencies.replace_all(person_id, extracted)
            logger.info("Refreshed competency profile for %s (%d entries)", person_id, len(extracted))
        else:
            logger.info("Refresh for %s produced no entries; keeping stored profile", person_id)
        return CompetencyProfile(person_id=person_id, entries=self.competencies.get(person_id))

    # PUBLIC_INTERFACE
    def competency_stats(self, person_id: str) -> CompetencyStats:
        entries = self.get_profile(person_id).entries
        if not entries:
            return CompetencyStats(total=0, by_category={}, average_level=0.0)
        average = sum(e.current_level for e in entries) / len(entries)
        return CompetencyStats(
            total=len(entries),
            by_category=dict(Counter(e.category for e in entries)),
            average_level=matching.round1(average),
        )

    # --- role catalog ---

    # PUBLIC_INTERFACE
    def list_roles(self, category: Optional[str] = None, search: Optional[str] = None) -> List[RoleProfile]:
        items = self.roles.by_category(category) if category else self.roles.all()
        if search:
            ids = {r.id for r in self.roles.search(search)}
            items = [r for r in items if r.id in ids]
        return items

    # PUBLIC_INTERFACE
    def get_role(self, role_id: str) -> RoleProfile:
        role = self.roles.get_by_id(role_id)
        if role is None:
            raise NotFoundError(f"Role not found: {role_id}")
        return role

    # --- analysis ---

    # PUBLIC_INTERFACE
    def analyze(self, person_id: str, role_id: Optional[str] = None) -> CareerAnalysis:
        """Score one role, or rank the whole catalog, and record the analysis."""
        name = self._person_name(person_id)
        profile = self.get_profile(person_id)
        target: Optional[MatchResult] = None
        if role_id:
            target = matching.score(profile, self.get_role(role_id))
            top = [target]
        else:
            top = matching.rank(profile, self.roles.all(), limit=TOP_MATCHES, workers=self.rank_workers)
        best = top[0] if top else None
        analysis = CareerAnalysis(
            person_id=person_id,
            person_name=name,
            analyzed_at=utc_now_iso(),
            top_matches=top,
            target_match=target,
            overall_compatibility=matching.overall_compatibility(top),
            primary_strengths=best.strengths[:HEADLINE_ITEMS] if best else [],
            critical_gaps=[g for g in best.gaps if g.importance == "CRITICAL"][:HEADLINE_ITEMS] if best else [],
        )
        self.history.save(analysis)
        return analysis

    # PUBLIC_INTERFACE
    def analysis_history(self, person_id: str, limit: int = 10) -> List[CareerAnalysis]:
        return self.history.list(person_id, limit)

    # PUBLIC_INTERFACE
    def latest_analysis(self, person_id: str) -> Optional[CareerAnalysis]:
        items = self.history.list(person_id, 1)
        return items[0] if items else None

    # PUBLIC_INTERFACE
    def compare_roles(self, person_id: str, role_ids: Sequence[str]) -> List[MatchResult]:
        """Score the given roles for a person, best first."""
        ids = list(dict.fromkeys(i for i in role_ids if i))
        if not ids:
            raise InputValidationError("role_ids must not be empty")
        roles = self.roles.get_many(ids)
        missing = sorted(set(ids) - {r.id for r in roles})
        if missing:
            raise NotFoundError(f"Role not found: {', '.join(missing)}")
        self._person_name(person_id)
        return matching.compare(self.get_profile(person_id), roles)

    # --- roadmaps ---

    # PUBLIC_INTERFACE
    def generate_roadmap(
        self, person_id: str, role_id: str, custom_goals: Optional[Sequence[str]] = None
    ) -> CareerRoadmap:
        """Build a roadmap and make it the person's only ACTIVE one."""
        name = self._person_name(person_id)
        role = self.get_role(role_id)
        profile = self.get_profile(person_id)
        roadmap = self.builder.build(person_id, profile, role, custom_goals=custom_goals, person_name=name)
        return self.roadmaps.replace_active(roadmap)

    # PUBLIC_INTERFACE
    def active_roadmap(self, person_id: str) -> CareerRoadmap:
        roadmap = self.roadmaps.get_active(person_id)
        if roadmap is None:
            raise NotFoundError(f"No active roadmap for {person_id}")
        return roadmap

    def list_roadmaps(self, person_id: str) -> List[CareerRoadmap]:
        return self.roadmaps.list_for_person(person_id)

    def get_roadmap(self, roadmap_id: str) -> CareerRoadmap:
        roadmap = self.roadmaps.get(roadmap_id)
        if roadmap is None:
            raise NotFoundError(f"Roadmap not found: {roadmap_id}")
        return roadmap

    def update_roadmap(self, roadmap_id: str, partial: RoadmapUpdate) -> CareerRoadmap:
        return self.roadmaps.update(roadmap_id, partial)

    def complete_roadmap(self, roadmap_id: str) -> CareerRoadmap:
        return self.roadmaps.update(roadmap_id, RoadmapUpdate(status="COMPLETED"))

    def delete_roadmap(self, roadmap_id: str) -> None:
        if not self.roadmaps.delete(roadmap_id):
            raise NotFoundError(f"Roadmap not found: {roadmap_id}")
