from pydantic import BaseModel


class SkillSnapshot(BaseModel):
    skill_name: str
    proficiency: str
    years_of_experience: int | None = None


class ProfileSnapshot(BaseModel):
    """Trimmed profile returned to the caller alongside a match."""
    id: str
    full_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    location: str | None = None
    current_intent: list[str] = []
    availability: str | None = None
    skills: list[SkillSnapshot] = []  # first 3 only


class RankedMatch(BaseModel):
    profile_id: str
    score: int
    explanation: str
    top_attributes: list[str] = []
    tier: str = ""  # perfect | strong | potential
    profile: ProfileSnapshot


class MatchTiers(BaseModel):
    perfect: list[RankedMatch] = []
    strong: list[RankedMatch] = []
    potential: list[RankedMatch] = []


class RankedMatches(BaseModel):
    """Pipeline result: `raw` is sorted, `tiers` partitions it."""
    raw: list[RankedMatch] = []
    tiers: MatchTiers = MatchTiers()


class MatchResponse(BaseModel):
    matches: list[RankedMatch] = []
    tiers: MatchTiers = MatchTiers()


class ErrorResponse(BaseModel):
    matches: list[RankedMatch] = []
    error: str
    error_type: str
    retryable: bool = False


class RecommendationsResponse(BaseModel):
    profiles: list[ProfileSnapshot] = []
