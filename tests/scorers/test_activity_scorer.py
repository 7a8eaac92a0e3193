"""Tests for ActivityShapeScorer."""

import pytest

from spam_defense.data_management.schemas import CreateActivity, LikeActivity
from spam_defense.scorers.activity_scorer import ActivityShapeScorer
from spam_defense.utils.errors import UnsupportedActivityKind


@pytest.fixture
def scorer() -> ActivityShapeScorer:
    return ActivityShapeScorer()


class TestCreate:
    @pytest.mark.parametrize(
        ("mentions", "expected"),
        [(0, 0), (1, 5), (2, 10), (3, 20), (4, 20), (50, 20), (10_000, 20)],
    )
    def test_mention_step_function(self, scorer: ActivityShapeScorer, mentions: int, expected: int) -> None:
        assert scorer.score(CreateActivity(mentioned_users_count=mentions)) == expected

    def test_text_does_not_affect_score(self, scorer: ActivityShapeScorer) -> None:
        activity = CreateActivity(mentioned_users_count=1, text="buy now " * 100)
        assert scorer.score(activity) == 5


class TestLike:
    @pytest.mark.parametrize(("renotes", "expected"), [(0, 5), (3, 5), (5, 5), (6, 0), (500, 0)])
    def test_renote_boundary(self, scorer: ActivityShapeScorer, renotes: int, expected: int) -> None:
        assert scorer.score(LikeActivity(target_renote_count=renotes)) == expected


class TestUnsupported:
    def test_unknown_object_raises(self, scorer: ActivityShapeScorer) -> None:
        with pytest.raises(UnsupportedActivityKind):
            scorer.score({"type": "create", "mentioned_users_count": 1})

    def test_error_names_kind(self, scorer: ActivityShapeScorer) -> None:
        class Announce:
            type = "announce"

        with pytest.raises(UnsupportedActivityKind, match="announce"):
            scorer.score(Announce())
