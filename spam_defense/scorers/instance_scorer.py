"""Instance reputation scoring for the origin server of an activity.

Priority order:
1. Local origin (host is None): 0, no lookup
2. Allow-listed host: 0, no lookup (hard override)
3. Host with inbound followers: 0
4. Otherwise the sum of:
   - first retrieved inside the recent window: +5
   - first retrieved after the spam era start: +5
   - description without any character of the target script: +20
"""

from typing import Dict, Optional

from spam_defense.config.defaults import INSTANCE_SCORE_WEIGHTS
from spam_defense.config.logging import get_logger
from spam_defense.config.settings import EngineConfig
from spam_defense.data_management.providers import AuditLogSink, InstanceReputationProvider
from spam_defense.data_management.schemas import InstanceRecord, InstanceScore
from spam_defense.scorers.base import Clock, bounded_fetch, safe_audit, utc_now
from spam_defense.utils.errors import FetchUnavailable
from spam_defense.utils.script_detection import ScriptPredicate, get_script_predicate


class InstanceReputationScorer:
    """
    Scores how trustworthy the origin server looks.

    Usage:
        scorer = InstanceReputationScorer(instance_store, config)
        score = await scorer.score("spam.example")

    Attributes:
        instance_provider: Resolves hosts to InstanceRecord
        config: Shared EngineConfig
        script_predicate: "Does this text contain the local script?"
        weights: Score per signal name
    """

    def __init__(
        self,
        instance_provider: InstanceReputationProvider,
        config: Optional[EngineConfig] = None,
        audit_sink: Optional[AuditLogSink] = None,
        clock: Optional[Clock] = None,
        script_predicate: Optional[ScriptPredicate] = None,
        weights: Optional[Dict[str, int]] = None,
    ):
        self.instance_provider = instance_provider
        self.config = config or EngineConfig()
        self.audit_sink = audit_sink
        self.script_predicate = script_predicate or get_script_predicate(self.config.target_script)
        self.weights = weights or INSTANCE_SCORE_WEIGHTS
        self._clock = clock or utc_now
        self._logger = get_logger("InstanceReputationScorer")

    async def score(self, host: Optional[str]) -> int:
        return (await self.score_detailed(host)).score

    async def score_detailed(self, host: Optional[str]) -> InstanceScore:
        """
        Score host, reporting whether it was trusted or its lookup failed.

        Raises:
            FetchUnavailable: Only when config.fail_open is False
        """
        if host is None:
            return InstanceScore(score=0)

        if self.config.is_trusted(host):
            self._logger.debug(f"Trusted host {host}, skipping lookup")
            return InstanceScore(score=0, host=host, trusted=True)

        try:
            record = await bounded_fetch(
                self.instance_provider.fetch(host),
                "instance",
                host,
                self.config.fetch_timeout,
            )
        except FetchUnavailable as e:
            if not self.config.fail_open:
                raise
            self._logger.bind(host=host).error("Instance lookup failed, scoring 0: {}", e)
            return InstanceScore(score=0, host=host, fetch_failed=True)

        score = self.score_record(record)
        safe_audit(self.audit_sink, "instance_scored", host=record.host, score=score)
        return InstanceScore(score=score, host=record.host)

    def score_record(self, record: InstanceRecord) -> int:
        """Score an already-fetched record (pure)."""
        if record.followers_count > 0:
            return 0

        signals = self.signals(record)
        score = sum(self.weights[name] for name, hit in signals.items() if hit)
        self._logger.debug("Instance signals for {}", record.host, signals=signals, score=score)
        return score

    def signals(self, record: InstanceRecord) -> Dict[str, bool]:
        first_seen = record.first_retrieved_at
        return {
            "recently_observed": self._clock() - first_seen < self.config.recent_window,
            "after_spam_era": first_seen > self.config.spam_era_start,
            "no_local_script": not self.script_predicate(record.description or ""),
        }


__all__ = ["InstanceReputationScorer"]
