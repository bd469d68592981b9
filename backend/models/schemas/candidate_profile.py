"""Candidate profile as read from the profile store (read-only input)."""

from enum import Enum

from pydantic import BaseModel


class IntentType(str, Enum):
    COFOUNDER = "cofounder"
    TEAM_MEMBER = "team_member"
    CLIENT = "client"
    MENTOR = "mentor"
    ADVISOR = "advisor"
    INVESTOR = "investor"


class AvailabilityType(str, Enum):
    FULL_TIME = "full_time"
    PART_TIME = "part_time"
    FLEXIBLE = "flexible"
    WEEKENDS = "weekends"


class ProficiencyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class Skill(BaseModel):
    skill_name: str
    proficiency: ProficiencyLevel = ProficiencyLevel.BEGINNER
    years_of_experience: int | None = None


class IkigaiResponses(BaseModel):
    """The four Ikigai reflections plus the two optional follow-ups."""
    what_you_love: str | None = None
    what_youre_good_at: str | None = None
    what_world_needs: str | None = None
    what_you_can_be_paid_for: str | None = None
    career_aspirations: str | None = None
    purpose_statement: str | None = None


class CandidateProfile(BaseModel):
    id: str
    full_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    location: str | None = None
    current_intent: list[IntentType] = []
    availability: AvailabilityType | None = None
    professional_background: str | None = None
    ikigai: IkigaiResponses | None = None
    skills: list[Skill] = []  # ordered as stored
    portfolio_count: int = 0

    # Never forwarded to the scorer or the caller
    email: str | None = None
    is_searchable: bool = False
