"""Scoring components for spam-likeness decisions.

- UserReputationScorer: profile plausibility of remote actors
- InstanceReputationScorer: trustworthiness of the origin server
- ActivityShapeScorer: mention fan-out and reaction target popularity
- ScoreAggregator: additive total compared against the threshold
"""

from spam_defense.scorers.activity_scorer import ActivityShapeScorer
from spam_defense.scorers.instance_scorer import InstanceReputationScorer
from spam_defense.scorers.user_scorer import UserReputationScorer
from spam_defense.scorers.aggregator import (
    Evaluation,
    ScoreAggregator,
    build_aggregator,
)

__all__ = [
    "ActivityShapeScorer",
    "InstanceReputationScorer",
    "UserReputationScorer",
    "ScoreAggregator",
    "Evaluation",
    "build_aggregator",
]
