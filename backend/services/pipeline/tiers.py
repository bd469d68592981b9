"""Score tiers and the hard inclusion threshold."""

from enum import Enum

from models.responses import MatchTiers, RankedMatch

INCLUSION_THRESHOLD = 50
PERFECT_MIN = 90
STRONG_MIN = 70


class ScoreTier(str, Enum):
    PERFECT = "perfect"
    STRONG = "strong"
    POTENTIAL = "potential"


def tier_for(score: int) -> ScoreTier | None:
    """None means below the inclusion threshold (dropped)."""
    if score >= PERFECT_MIN:
        return ScoreTier.PERFECT
    if score >= STRONG_MIN:
        return ScoreTier.STRONG
    if score >= INCLUSION_THRESHOLD:
        return ScoreTier.POTENTIAL
    return None


def partition(raw: list[RankedMatch]) -> MatchTiers:
    """Split `raw` into disjoint tiers, keeping its order within each."""
    tiers = MatchTiers()
    for match in raw:
        tier = tier_for(match.score)
        if tier is None:
            raise ValueError(f"match {match.profile_id} is below the inclusion threshold")
        getattr(tiers, tier.value).append(match)
    return tiers
