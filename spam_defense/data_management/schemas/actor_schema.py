"""Actor and profile snapshot schemas.

An Actor is the minimal identity carried by an incoming activity. The
ActorProfileSnapshot is what the profile provider resolves it to; it is
fetched fresh for every evaluation and never cached by the engine.
"""

from typing import Optional

from pydantic import AwareDatetime, BaseModel, Field


class Actor(BaseModel):
    """Account that performed an activity.

    host is None for locally-hosted accounts, which are exempt from every
    remote heuristic.
    """

    id: str = Field(..., min_length=1, description="Actor identifier")
    host: Optional[str] = Field(None, description="Owning server, None when local")

    model_config = {"frozen": True}

    @property
    def is_local(self) -> bool:
        return self.host is None


class ActorProfileSnapshot(BaseModel):
    """Profile attributes of a remote actor at evaluation time."""

    name: Optional[str] = Field(None, description="Display name")
    username: str = Field(..., description="Account handle without host")
    host: Optional[str] = None
    avatar_url: Optional[str] = None
    description: Optional[str] = Field(None, description="Profile bio")
    followers_count: int = Field(0, ge=0, description="Followers known to the local server")
    created_at: AwareDatetime = Field(..., description="First time the account was observed")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "name": "spammer01",
                    "username": "spammer01",
                    "host": "spam.example",
                    "avatar_url": "https://spam.example/identicon/spammer01",
                    "description": "",
                    "followers_count": 0,
                    "created_at": "2024-02-15T09:00:00Z",
                }
            ]
        },
    }
