"""Stage 4: join judgments back onto profiles, dedupe, threshold, sort."""

import logging

from models.responses import ProfileSnapshot, RankedMatch, SkillSnapshot
from models.schemas.candidate_profile import CandidateProfile
from models.schemas.match_judgment import MatchJudgment
from services.pipeline.tiers import INCLUSION_THRESHOLD, tier_for

logger = logging.getLogger(__name__)

SNAPSHOT_SKILLS = 3


def profile_snapshot(profile: CandidateProfile) -> ProfileSnapshot:
    """Caller-facing subset of a profile. No email, no Ikigai text."""
    return ProfileSnapshot(
        id=profile.id,
        full_name=profile.full_name,
        avatar_url=profile.avatar_url,
        bio=profile.bio,
        location=profile.location,
        current_intent=[i.value for i in profile.current_intent],
        availability=profile.availability.value if profile.availability else None,
        skills=[
            SkillSnapshot(
                skill_name=s.skill_name,
                proficiency=s.proficiency.value,
                years_of_experience=s.years_of_experience,
            )
            for s in profile.skills[:SNAPSHOT_SKILLS]
        ],
    )


def assemble(
    judgments: list[MatchJudgment],
    candidate_pool: list[CandidateProfile],
) -> list[RankedMatch]:
    """Ranked matches: score descending, ties in pool order.

    Judgments for ids missing from the pool are dropped, duplicates keep the
    highest score (first seen on equal scores), and anything under the
    inclusion threshold is removed.
    """
    profiles = {p.id: p for p in candidate_pool}
    position = {p.id: i for i, p in enumerate(candidate_pool)}

    best: dict[str, MatchJudgment] = {}
    for judgment in judgments:
        if judgment.profile_id not in profiles:
            continue
        current = best.get(judgment.profile_id)
        if current is None or judgment.score > current.score:
            best[judgment.profile_id] = judgment

    kept = [j for j in best.values() if j.score >= INCLUSION_THRESHOLD]
    kept.sort(key=lambda j: (-j.score, position[j.profile_id]))

    dropped = len(judgments) - len(kept)
    if dropped:
        logger.debug("Assembly dropped %d of %d judgments", dropped, len(judgments))

    return [
        RankedMatch(
            profile_id=j.profile_id,
            score=j.score,
            explanation=j.explanation,
            top_attributes=list(j.top_attributes),
            tier=tier_for(j.score).value,
            profile=profile_snapshot(profiles[j.profile_id]),
        )
        for j in kept
    ]
