"""Tests for ScoreAggregator decisions.

Tests cover:
- Local actor exemption
- Additivity and threshold boundary
- Host derived from the actor
- Concurrent lookups (unconditional mode) vs. short-circuit mode
- Fatal errors (unsupported activity, fail-closed lookups)
- Fail-open bookkeeping in the breakdown
- Consolidated audit event
- Batch evaluation
"""

import asyncio
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from spam_defense.config.settings import EngineConfig
from spam_defense.data_management.schemas import (
    Actor,
    CreateActivity,
    InstanceScore,
    LikeActivity,
    UserScore,
)
from spam_defense.scorers.activity_scorer import ActivityShapeScorer
from spam_defense.scorers.aggregator import ScoreAggregator
from spam_defense.utils.errors import FetchUnavailable, UnsupportedActivityKind

REMOTE_ACTOR = Actor(id="9remote", host="remote.example")
LOCAL_ACTOR = Actor(id="9local")


class RecordingSink:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def info(self, event: str, **fields: Any) -> None:
        self.events.append((event, fields))


def _user_scorer(score: int = 0, fetch_failed: bool = False) -> MagicMock:
    scorer = MagicMock()
    scorer.score = AsyncMock(
        return_value=UserScore(score=score, username="u", host="remote.example", fetch_failed=fetch_failed)
    )
    return scorer


def _instance_scorer(score: int = 0, fetch_failed: bool = False) -> MagicMock:
    scorer = MagicMock()
    scorer.score_detailed = AsyncMock(
        return_value=InstanceScore(score=score, host="remote.example", fetch_failed=fetch_failed)
    )
    return scorer


def _aggregator(
    user: int = 0,
    instance: int = 0,
    config: EngineConfig | None = None,
    sink: RecordingSink | None = None,
    **kwargs: Any,
) -> ScoreAggregator:
    return ScoreAggregator(
        kwargs.get("user_scorer") or _user_scorer(user),
        kwargs.get("instance_scorer") or _instance_scorer(instance),
        ActivityShapeScorer(),
        config=config or EngineConfig(),
        audit_sink=sink,
    )


class TestLocalExemption:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "activity",
        [CreateActivity(mentioned_users_count=5), LikeActivity(target_renote_count=0)],
    )
    async def test_local_actor_never_spam(self, activity) -> None:
        aggregator = _aggregator(user=40, instance=30)
        verdict, breakdown = await aggregator.evaluate(LOCAL_ACTOR, activity)
        assert verdict is False
        assert breakdown.total == 0
        assert breakdown.local_exempt is True
        aggregator.user_scorer.score.assert_not_called()
        aggregator.instance_scorer.score_detailed.assert_not_called()


class TestAdditivity:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("user", "instance", "mentions"),
        [(0, 0, 0), (5, 0, 1), (40, 30, 0), (15, 20, 3), (0, 30, 2)],
    )
    async def test_total_is_sum(self, user: int, instance: int, mentions: int) -> None:
        _, breakdown = await _aggregator(user, instance).evaluate(
            REMOTE_ACTOR, CreateActivity(mentioned_users_count=mentions)
        )
        assert breakdown.total == breakdown.user_score + breakdown.instance_score + breakdown.activity_score
        assert (breakdown.user_score, breakdown.instance_score) == (user, instance)

    @pytest.mark.asyncio
    async def test_total_equal_threshold_not_spam(self) -> None:
        verdict, breakdown = await _aggregator(30, 20).evaluate(REMOTE_ACTOR, CreateActivity())
        assert breakdown.total == 50
        assert verdict is False

    @pytest.mark.asyncio
    async def test_total_threshold_plus_one_is_spam(self) -> None:
        verdict, breakdown = await _aggregator(26, 20).evaluate(
            REMOTE_ACTOR, LikeActivity(target_renote_count=0)
        )
        assert breakdown.total == 51
        assert verdict is True

    @pytest.mark.asyncio
    async def test_custom_threshold(self) -> None:
        config = EngineConfig(threshold=10)
        verdict, _ = await _aggregator(5, 5, config=config).evaluate(
            REMOTE_ACTOR, CreateActivity(mentioned_users_count=1)
        )
        assert verdict is True

    def test_evaluate_sync(self) -> None:
        verdict, breakdown = _aggregator(40, 30).evaluate_sync(REMOTE_ACTOR, CreateActivity())
        assert verdict is True
        assert breakdown.total == 70

    @pytest.mark.asyncio
    async def test_is_spamlike(self) -> None:
        assert await _aggregator(40, 30).is_spamlike(REMOTE_ACTOR, CreateActivity()) is True


class TestHostDerivation:
    @pytest.mark.asyncio
    async def test_instance_scored_with_actor_host(self) -> None:
        aggregator = _aggregator(5, 0)
        await aggregator.evaluate(Actor(id="9x", host="other.example"), CreateActivity())
        aggregator.instance_scorer.score_detailed.assert_awaited_once_with("other.example")


class TestShortCircuit:
    @pytest.mark.asyncio
    async def test_unconditional_by_default(self) -> None:
        aggregator = _aggregator(0, 30)
        verdict, breakdown = await aggregator.evaluate(
            REMOTE_ACTOR, LikeActivity(target_renote_count=3)
        )
        assert breakdown.instance_score == 30
        assert breakdown.activity_score == 5
        assert breakdown.short_circuited is False
        aggregator.instance_scorer.score_detailed.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_short_circuit_skips_instance_lookup(self) -> None:
        config = EngineConfig(short_circuit_on_trusted_user=True)
        aggregator = _aggregator(0, 30, config=config)
        verdict, breakdown = await aggregator.evaluate(
            REMOTE_ACTOR, LikeActivity(target_renote_count=3)
        )
        assert verdict is False
        assert breakdown.total == 0
        assert breakdown.activity_score == 0
        assert breakdown.short_circuited is True
        aggregator.instance_scorer.score_detailed.assert_not_called()

    @pytest.mark.asyncio
    async def test_short_circuit_inactive_when_user_scores(self) -> None:
        config = EngineConfig(short_circuit_on_trusted_user=True)
        aggregator = _aggregator(40, 30, config=config)
        verdict, breakdown = await aggregator.evaluate(REMOTE_ACTOR, CreateActivity())
        assert breakdown.total == 70
        assert breakdown.short_circuited is False
        assert verdict is True


class TestErrors:
    @pytest.mark.asyncio
    async def test_unsupported_activity_raises_before_lookups(self) -> None:
        aggregator = _aggregator(40, 30)
        with pytest.raises(UnsupportedActivityKind):
            await aggregator.evaluate(REMOTE_ACTOR, object())
        aggregator.user_scorer.score.assert_not_called()
        aggregator.instance_scorer.score_detailed.assert_not_called()

    @pytest.mark.asyncio
    async def test_fail_closed_error_reaches_caller(self) -> None:
        user_scorer = MagicMock()
        user_scorer.score = AsyncMock(side_effect=FetchUnavailable("profile", "9remote", "down"))
        aggregator = _aggregator(user_scorer=user_scorer, config=EngineConfig(fail_open=False))
        with pytest.raises(FetchUnavailable):
            await aggregator.evaluate(REMOTE_ACTOR, CreateActivity())

    @pytest.mark.asyncio
    async def test_fail_open_failures_recorded(self) -> None:
        aggregator = _aggregator(
            user_scorer=_user_scorer(0, fetch_failed=True),
            instance_scorer=_instance_scorer(0, fetch_failed=True),
        )
        verdict, breakdown = await aggregator.evaluate(
            REMOTE_ACTOR, CreateActivity(mentioned_users_count=3)
        )
        assert verdict is False
        assert breakdown.total == 20
        assert breakdown.fetch_failures == ["profile", "instance"]


class TestAudit:
    @pytest.mark.asyncio
    async def test_consolidated_audit_event(self) -> None:
        sink = RecordingSink()
        await _aggregator(40, 30, sink=sink).evaluate(REMOTE_ACTOR, CreateActivity())
        event, fields = sink.events[-1]
        assert event == "spam_check_evaluated"
        assert fields["actor_id"] == "9remote"
        assert fields["host"] == "remote.example"
        assert fields["total"] == 70
        assert fields["verdict"] is True

    @pytest.mark.asyncio
    async def test_local_actor_audited(self) -> None:
        sink = RecordingSink()
        await _aggregator(sink=sink).evaluate(LOCAL_ACTOR, CreateActivity())
        event, fields = sink.events[-1]
        assert event == "spam_check_evaluated"
        assert fields["host"] is None
        assert fields["total"] == 0

    @pytest.mark.asyncio
    async def test_failing_sink_does_not_change_verdict(self) -> None:
        sink = MagicMock()
        sink.info.side_effect = RuntimeError("transport down")
        verdict, breakdown = await _aggregator(40, 30, sink=sink).evaluate(
            REMOTE_ACTOR, CreateActivity()
        )
        assert verdict is True
        assert breakdown.total == 70


class TestBatch:
    @pytest.mark.asyncio
    async def test_results_in_input_order(self) -> None:
        aggregator = _aggregator(40, 30)
        items = [
            (LOCAL_ACTOR, CreateActivity(mentioned_users_count=5)),
            (REMOTE_ACTOR, CreateActivity()),
            (REMOTE_ACTOR, CreateActivity(mentioned_users_count=3)),
        ]
        results = await aggregator.evaluate_many(items, concurrency=2)
        assert [breakdown.total for _, breakdown in results] == [0, 70, 90]
        assert [verdict for verdict, _ in results] == [False, True, True]

    @pytest.mark.asyncio
    async def test_empty_batch(self) -> None:
        assert await _aggregator().evaluate_many([]) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("concurrency", [0, -1])
    async def test_non_positive_concurrency_rejected(self, concurrency: int) -> None:
        aggregator = _aggregator(40, 30)
        with pytest.raises(ValueError, match="concurrency"):
            await asyncio.wait_for(
                aggregator.evaluate_many([(REMOTE_ACTOR, CreateActivity())], concurrency=concurrency),
                timeout=1,
            )
