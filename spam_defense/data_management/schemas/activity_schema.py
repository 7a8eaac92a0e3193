"""Closed set of activity kinds inspected by the engine.

Activity is a tagged union discriminated on ``type``. Adding a kind means
adding a model here AND an arm in ActivityShapeScorer; there is no default.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter


class CreateActivity(BaseModel):
    """A note being posted."""

    type: Literal["create"] = "create"
    mentioned_users_count: int = Field(0, ge=0)
    text: Optional[str] = None

    model_config = {"frozen": True}


class LikeActivity(BaseModel):
    """A reaction to an existing note."""

    type: Literal["like"] = "like"
    target_renote_count: int = Field(0, ge=0, description="Renotes of the reacted note")

    model_config = {"frozen": True}


Activity = Annotated[Union[CreateActivity, LikeActivity], Field(discriminator="type")]

activity_adapter: TypeAdapter = TypeAdapter(Activity)


def parse_activity(data: dict) -> Union[CreateActivity, LikeActivity]:
    """Validate a raw dict (e.g. from a queue payload) into an activity model."""
    return activity_adapter.validate_python(data)
