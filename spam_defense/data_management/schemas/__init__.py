"""Schema package for spam defense data contracts.

All models are frozen pydantic models:
- Actor / ActorProfileSnapshot: who performed the activity
- InstanceRecord: what is known about the origin server
- CreateActivity / LikeActivity: the closed activity union
- UserScore / ScoreBreakdown: scorer outputs for audit logging

Usage:
    from spam_defense.data_management.schemas import Actor, CreateActivity
    actor = Actor(id="9abc", host="spam.example")
    activity = CreateActivity(mentioned_users_count=3)
"""

from spam_defense.data_management.schemas.actor_schema import (
    Actor,
    ActorProfileSnapshot,
)
from spam_defense.data_management.schemas.instance_schema import InstanceRecord
from spam_defense.data_management.schemas.activity_schema import (
    Activity,
    CreateActivity,
    LikeActivity,
    parse_activity,
)
from spam_defense.data_management.schemas.breakdown_schema import (
    InstanceScore,
    ScoreBreakdown,
    UserScore,
)

__all__ = [
    # Actor
    "Actor",
    "ActorProfileSnapshot",
    # Instance
    "InstanceRecord",
    # Activity
    "Activity",
    "CreateActivity",
    "LikeActivity",
    "parse_activity",
    # Scores
    "UserScore",
    "InstanceScore",
    "ScoreBreakdown",
]
