"""Spam-likeness decision combining user, instance and activity signals.

Evaluation flow per (actor, activity):
1. Local actors are exempt: total 0, verdict False, no lookups
2. Activity shape is scored first so an unsupported kind fails before any lookup
3. User and instance scorers run concurrently (host is always the actor's)
4. total = user + instance + activity; verdict = total > threshold
5. One consolidated audit event per evaluation

Short-circuit: with config.short_circuit_on_trusted_user the user score is
computed alone first and, when it is 0, the instance lookup is skipped and
the instance and activity scores are reported as 0. This only saves work on
established actors; it is off by default, so all three signals count.

Usage:
    from spam_defense.scorers import build_aggregator

    aggregator = build_aggregator(profile_store, instance_store)
    verdict, breakdown = await aggregator.evaluate(actor, CreateActivity(mentioned_users_count=3))
"""

import asyncio
from typing import Optional, Sequence

from spam_defense.config.logging import get_logger
from spam_defense.config.settings import EngineConfig, load_config
from spam_defense.data_management.providers import (
    ActorProfileProvider,
    AuditLogSink,
    InstanceReputationProvider,
)
from spam_defense.data_management.schemas import (
    Activity,
    Actor,
    InstanceScore,
    ScoreBreakdown,
    UserScore,
)
from spam_defense.scorers.activity_scorer import ActivityShapeScorer
from spam_defense.scorers.base import Clock, safe_audit
from spam_defense.scorers.instance_scorer import InstanceReputationScorer
from spam_defense.scorers.user_scorer import UserReputationScorer
from spam_defense.utils.logging import StructlogAuditSink
from spam_defense.utils.script_detection import ScriptPredicate

Evaluation = tuple[bool, ScoreBreakdown]


class ScoreAggregator:
    """Sums sub-scores, applies the threshold and audits the result."""

    def __init__(
        self,
        user_scorer: UserReputationScorer,
        instance_scorer: InstanceReputationScorer,
        activity_scorer: Optional[ActivityShapeScorer] = None,
        config: Optional[EngineConfig] = None,
        audit_sink: Optional[AuditLogSink] = None,
    ) -> None:
        self.user_scorer = user_scorer
        self.instance_scorer = instance_scorer
        self.activity_scorer = activity_scorer or ActivityShapeScorer()
        self.config = config or EngineConfig()
        self.audit_sink = audit_sink
        self._logger = get_logger("ScoreAggregator")

    @property
    def threshold(self) -> int:
        return self.config.threshold

    async def evaluate(self, actor: Actor, activity: Activity) -> Evaluation:
        """
        Decide whether activity by actor is spam-like.

        Returns:
            (verdict, breakdown) where verdict is breakdown.total > threshold

        Raises:
            UnsupportedActivityKind: For activities outside the closed union
            FetchUnavailable: Only when config.fail_open is False
        """
        if actor.host is None:
            breakdown = ScoreBreakdown.compose(0, 0, 0, self.threshold, local_exempt=True)
            self._audit(actor, breakdown)
            return breakdown.verdict, breakdown

        activity_score = self.activity_scorer.score(activity)

        if self.config.short_circuit_on_trusted_user:
            user = await self.user_scorer.score(actor)
            if user.score == 0:
                breakdown = ScoreBreakdown.compose(
                    0,
                    0,
                    0,
                    self.threshold,
                    short_circuited=True,
                    fetch_failures=self._failures(user, None),
                )
                self._audit(actor, breakdown)
                return breakdown.verdict, breakdown
            instance = await self.instance_scorer.score_detailed(actor.host)
        else:
            user, instance = await asyncio.gather(
                self.user_scorer.score(actor),
                self.instance_scorer.score_detailed(actor.host),
            )

        breakdown = ScoreBreakdown.compose(
            user.score,
            instance.score,
            activity_score,
            self.threshold,
            fetch_failures=self._failures(user, instance),
        )
        self._audit(actor, breakdown)
        return breakdown.verdict, breakdown

    async def is_spamlike(self, actor: Actor, activity: Activity) -> bool:
        verdict, _ = await self.evaluate(actor, activity)
        return verdict

    def evaluate_sync(self, actor: Actor, activity: Activity) -> Evaluation:
        """Blocking wrapper for callers without a running event loop."""
        return asyncio.run(self.evaluate(actor, activity))

    async def evaluate_many(
        self,
        items: Sequence[tuple[Actor, Activity]],
        concurrency: int = 10,
    ) -> list[Evaluation]:
        """
        Evaluate several (actor, activity) pairs with bounded concurrency.

        Results are returned in input order. Errors that evaluate() would
        raise propagate from here as well.

        Raises:
            ValueError: If concurrency is less than 1
        """
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        semaphore = asyncio.Semaphore(concurrency)

        async def evaluate_with_semaphore(actor: Actor, activity: Activity) -> Evaluation:
            async with semaphore:
                return await self.evaluate(actor, activity)

        return list(
            await asyncio.gather(
                *[evaluate_with_semaphore(actor, activity) for actor, activity in items]
            )
        )

    @staticmethod
    def _failures(user: UserScore, instance: Optional[InstanceScore]) -> list[str]:
        failures = []
        if user.fetch_failed:
            failures.append("profile")
        if instance is not None and instance.fetch_failed:
            failures.append("instance")
        return failures

    def _audit(self, actor: Actor, breakdown: ScoreBreakdown) -> None:
        safe_audit(
            self.audit_sink,
            "spam_check_evaluated",
            actor_id=actor.id,
            host=actor.host,
            user_score=breakdown.user_score,
            instance_score=breakdown.instance_score,
            activity_score=breakdown.activity_score,
            total=breakdown.total,
            threshold=self.threshold,
            verdict=breakdown.verdict,
            short_circuited=breakdown.short_circuited,
            fetch_failures=breakdown.fetch_failures,
        )


def build_aggregator(
    profile_provider: ActorProfileProvider,
    instance_provider: InstanceReputationProvider,
    config: Optional[EngineConfig] = None,
    audit_sink: Optional[AuditLogSink] = None,
    clock: Optional[Clock] = None,
    script_predicate: Optional[ScriptPredicate] = None,
) -> ScoreAggregator:
    """
    Wire the three scorers around shared config and audit sink.

    Args:
        profile_provider: Actor profile lookups
        instance_provider: Instance record lookups
        config: EngineConfig (loaded from the environment if None)
        audit_sink: Audit output (structlog if None)
        clock: Source of "now" for freshness checks
        script_predicate: Overrides the predicate named by config.target_script
    """
    config = config or load_config()
    audit_sink = audit_sink or StructlogAuditSink()

    user_scorer = UserReputationScorer(profile_provider, config, audit_sink, clock=clock)
    instance_scorer = InstanceReputationScorer(
        instance_provider,
        config,
        audit_sink,
        clock=clock,
        script_predicate=script_predicate,
    )
    return ScoreAggregator(
        user_scorer,
        instance_scorer,
        ActivityShapeScorer(),
        config=config,
        audit_sink=audit_sink,
    )


__all__ = ["ScoreAggregator", "build_aggregator", "Evaluation"]
