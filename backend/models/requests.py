from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MatchRequest(BaseModel):
    # Untyped on purpose: type, emptiness and length are checked by the
    # pipeline so they come back as a validation_failure payload, not a 422.
    model_config = ConfigDict(populate_by_name=True)

    query: Any = Field("", description="Free-text description of the desired collaborator")
    user_id: Any = Field("", alias="userId", description="Requesting user's id")
