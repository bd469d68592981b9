"""Shared test configuration, pytest markers and builders."""

import pytest

from models.schemas.candidate_profile import (
    AvailabilityType,
    CandidateProfile,
    IkigaiResponses,
    IntentType,
    ProficiencyLevel,
    Skill,
)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: talks to real Gemini / Supabase (needs credentials)"
    )


class FakeScoringBackend:
    """Stands in for gemini_client.generate_json.

    Each call consumes the next scripted response; the last one repeats.
    Exceptions in the script are raised instead of returned.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[tuple[str, str, float | None]] = []

    async def __call__(self, system_instruction, contents, timeout=None):
        self.calls.append((system_instruction, contents, timeout))
        if len(self.responses) > 1:
            response = self.responses.pop(0)
        else:
            response = self.responses[0]
        if isinstance(response, BaseException):
            raise response
        return response


def build_profile(profile_id: str, **overrides) -> CandidateProfile:
    fields = dict(
        id=profile_id,
        full_name=f"Person {profile_id}",
        avatar_url=f"https://cdn.example.com/{profile_id}.png",
        bio="Builder of climate software.",
        location="Berlin",
        current_intent=[IntentType.COFOUNDER],
        availability=AvailabilityType.FULL_TIME,
        professional_background="10 years in backend engineering.",
        ikigai=IkigaiResponses(
            what_you_love="Clean energy",
            what_youre_good_at="Distributed systems",
            what_world_needs="Decarbonization",
            what_you_can_be_paid_for="Platform engineering",
        ),
        skills=[
            Skill(skill_name="Python", proficiency=ProficiencyLevel.EXPERT, years_of_experience=8),
            Skill(skill_name="Go", proficiency=ProficiencyLevel.ADVANCED, years_of_experience=4),
            Skill(skill_name="Kubernetes", proficiency=ProficiencyLevel.ADVANCED),
            Skill(skill_name="React", proficiency=ProficiencyLevel.INTERMEDIATE),
        ],
        portfolio_count=2,
        email=f"{profile_id}@example.com",
        is_searchable=True,
    )
    fields.update(overrides)
    return CandidateProfile(**fields)


def judgment(profile_id: str, score, explanation: str = "Good fit.", attrs=None) -> dict:
    return {
        "profile_id": profile_id,
        "score": score,
        "explanation": explanation,
        "top_attributes": attrs if attrs is not None else ["Python", "Climate", "Cofounder"],
    }


@pytest.fixture
def make_profile():
    return build_profile


@pytest.fixture
def make_judgment():
    return judgment


@pytest.fixture
def scoring_backend():
    return FakeScoringBackend
