"""Federated instance record schema."""

from typing import Optional

from pydantic import AwareDatetime, BaseModel, Field


class InstanceRecord(BaseModel):
    """What the local server knows about a remote host.

    A host that has never been observed is represented with
    followers_count=0 and first_retrieved_at set to the lookup time.
    """

    host: str = Field(..., min_length=1)
    followers_count: int = Field(0, ge=0, description="Local accounts followed from this host")
    first_retrieved_at: AwareDatetime
    description: Optional[str] = None

    model_config = {"frozen": True}
