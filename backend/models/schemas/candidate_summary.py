"""Bounded candidate view sent to the scoring backend."""

from pydantic import BaseModel


class IkigaiSummary(BaseModel):
    what_you_love: str | None = None
    what_youre_good_at: str | None = None
    what_world_needs: str | None = None
    what_you_can_be_paid_for: str | None = None
    career_aspirations: str | None = None
    purpose_statement: str | None = None


class MatchCandidateSummary(BaseModel):
    """Fixed field set: no contact info, no URLs, no portfolio content.

    Every key is always present so the scorer sees a uniform schema.
    """
    id: str
    name: str | None = None
    bio: str | None = None
    location: str | None = None
    intent: list[str] = []
    availability: str | None = None
    background: str | None = None
    ikigai: IkigaiSummary = IkigaiSummary()
    skills: str = ""  # "Python (expert, 5y), Go (advanced)"
    portfolio_count: int = 0
