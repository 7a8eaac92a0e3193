"""Score breakdown produced for every evaluation.

Used for audit logging only; never persisted by the engine.
"""

from typing import Optional

from pydantic import BaseModel, Field, model_validator


class UserScore(BaseModel):
    """Result of the user reputation scorer, carrying identity for the audit line."""

    score: int = Field(0, ge=0)
    name: Optional[str] = None
    username: Optional[str] = None
    host: Optional[str] = None
    fetch_failed: bool = False

    model_config = {"frozen": True}


class InstanceScore(BaseModel):
    """Result of the instance reputation scorer."""

    score: int = Field(0, ge=0)
    host: Optional[str] = None
    trusted: bool = Field(False, description="Host is on the allow-list")
    fetch_failed: bool = False

    model_config = {"frozen": True}


class ScoreBreakdown(BaseModel):
    """Per-signal scores and the resulting verdict.

    total is always user_score + instance_score + activity_score.
    """

    user_score: int = Field(0, ge=0)
    instance_score: int = Field(0, ge=0)
    activity_score: int = Field(0, ge=0)
    total: int = Field(0, ge=0)
    verdict: bool = False
    local_exempt: bool = Field(False, description="Actor is local; no heuristics applied")
    short_circuited: bool = Field(
        False, description="Instance and activity scoring skipped after a zero user score"
    )
    fetch_failures: list[str] = Field(
        default_factory=list, description="Lookups that failed open ('profile', 'instance')"
    )

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "user_score": 40,
                    "instance_score": 30,
                    "activity_score": 0,
                    "total": 70,
                    "verdict": True,
                    "local_exempt": False,
                    "short_circuited": False,
                    "fetch_failures": [],
                }
            ]
        },
    }

    @model_validator(mode="after")
    def _check_additive(self) -> "ScoreBreakdown":
        expected = self.user_score + self.instance_score + self.activity_score
        if self.total != expected:
            raise ValueError(f"total {self.total} != sum of sub-scores {expected}")
        return self

    @classmethod
    def compose(
        cls,
        user_score: int,
        instance_score: int,
        activity_score: int,
        threshold: int,
        **flags,
    ) -> "ScoreBreakdown":
        """Sum the sub-scores and apply the threshold (spam when total > threshold)."""
        total = user_score + instance_score + activity_score
        return cls(
            user_score=user_score,
            instance_score=instance_score,
            activity_score=activity_score,
            total=total,
            verdict=total > threshold,
            **flags,
        )
