"""Inter-stage Pydantic contracts for the matching pipeline."""

from models.schemas.candidate_profile import (
    AvailabilityType,
    CandidateProfile,
    IkigaiResponses,
    IntentType,
    ProficiencyLevel,
    Skill,
)
from models.schemas.candidate_summary import IkigaiSummary, MatchCandidateSummary
from models.schemas.match_judgment import MatchJudgment, ScoringEnvelope

__all__ = [
    "AvailabilityType",
    "CandidateProfile",
    "IkigaiResponses",
    "IntentType",
    "ProficiencyLevel",
    "Skill",
    "IkigaiSummary",
    "MatchCandidateSummary",
    "MatchJudgment",
    "ScoringEnvelope",
]
