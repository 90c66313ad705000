"""Business logic services."""

from draft_compass.services.archetype_service import (
    BUILTIN_ARCHETYPES,
    TAG_TO_COMP_ROLES,
    ArchetypeService,
    archetype_from_payload,
    get_composition_roles,
)
from draft_compass.services.win_rate_provider import ImportedWinRateProvider, WinRateProvider
from draft_compass.services.pick_recommendation_engine import PickRecommendationEngine
from draft_compass.services.substitution_advisor import SubstitutionAdvisor
from draft_compass.services.team_evaluation_service import TeamEvaluationService
from draft_compass.services.op_pick_finder import OpPickFinder
from draft_compass.services.draft_service import DraftPreferences, DraftService

__all__ = [
    "BUILTIN_ARCHETYPES",
    "TAG_TO_COMP_ROLES",
    "ArchetypeService",
    "archetype_from_payload",
    "get_composition_roles",
    "ImportedWinRateProvider",
    "WinRateProvider",
    "PickRecommendationEngine",
    "SubstitutionAdvisor",
    "TeamEvaluationService",
    "OpPickFinder",
    "DraftPreferences",
    "DraftService",
]
