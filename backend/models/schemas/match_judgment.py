"""Scorer output contract: one judgment per candidate, untrusted until validated."""

import math
from typing import Any

from pydantic import BaseModel, field_validator

MAX_TOP_ATTRIBUTES = 3


class MatchJudgment(BaseModel):
    """A validated (candidate, score, explanation, attributes) tuple."""
    profile_id: str
    score: int  # 0-100
    explanation: str
    top_attributes: list[str] = []

    @field_validator("profile_id", mode="before")
    @classmethod
    def _check_profile_id(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("profile_id must be a non-empty string")
        return v.strip()

    @field_validator("score", mode="before")
    @classmethod
    def _check_score(cls, v: Any) -> int:
        # bool is an int subclass; strings are not numeric here
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("score must be numeric")
        if not math.isfinite(v) or not 0 <= v <= 100:
            raise ValueError("score must be within 0-100")
        if isinstance(v, float) and not v.is_integer():
            raise ValueError("score must be an integer")
        return int(v)

    @field_validator("explanation", mode="before")
    @classmethod
    def _check_explanation(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("explanation must be a non-empty string")
        return v.strip()

    @field_validator("top_attributes", mode="before")
    @classmethod
    def _sanitize_attributes(cls, v: Any) -> list[str]:
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError("top_attributes must be a list")
        labels = [a.strip() for a in v if isinstance(a, str) and a.strip()]
        return labels[:MAX_TOP_ATTRIBUTES]


class ScoringEnvelope(BaseModel):
    """Top-level document shape: {"matches": [...]}.

    Items stay untyped here so one bad judgment never invalidates the batch.
    """
    matches: list[Any]
