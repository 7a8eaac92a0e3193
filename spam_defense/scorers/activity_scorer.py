"""Activity shape scoring: pure, synchronous, closed over the activity union."""

from typing import Dict, Optional

from spam_defense.config.defaults import (
    LOW_VISIBILITY_LIKE_SCORE,
    LOW_VISIBILITY_RENOTE_LIMIT,
    MENTION_SCORE_CAP,
    MENTION_SCORE_TIERS,
)
from spam_defense.data_management.schemas import CreateActivity, LikeActivity
from spam_defense.utils.errors import UnsupportedActivityKind


class ActivityShapeScorer:
    """
    Scores the shape of a single activity.

    - create: mention fan-out step function {0: 0, 1: 5, 2: 10, 3+: 20}
    - like: +5 when the reacted note has at most 5 renotes

    Any other activity raises UnsupportedActivityKind.
    """

    def __init__(
        self,
        mention_tiers: Optional[Dict[int, int]] = None,
        mention_cap: int = MENTION_SCORE_CAP,
        renote_limit: int = LOW_VISIBILITY_RENOTE_LIMIT,
        like_score: int = LOW_VISIBILITY_LIKE_SCORE,
    ):
        self.mention_tiers = mention_tiers or MENTION_SCORE_TIERS
        self.mention_cap = mention_cap
        self.renote_limit = renote_limit
        self.like_score = like_score

    def score(self, activity: object) -> int:
        if isinstance(activity, CreateActivity):
            return self._score_mentions(activity.mentioned_users_count)
        if isinstance(activity, LikeActivity):
            return self._score_like(activity.target_renote_count)
        raise UnsupportedActivityKind(activity)

    def _score_mentions(self, count: int) -> int:
        if count < 0:
            raise ValueError(f"mentioned_users_count must be non-negative, got {count}")
        return self.mention_tiers.get(count, self.mention_cap)

    def _score_like(self, renote_count: int) -> int:
        # reacting to low-visibility notes is more suspicious than to popular ones
        if renote_count <= self.renote_limit:
            return self.like_score
        return 0


__all__ = ["ActivityShapeScorer"]
