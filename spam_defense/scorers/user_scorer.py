"""User reputation scoring for remote actors.

Flat, non-exclusive bonuses for profiles that look freshly generated:

| Signal              | Condition                                          | Score |
|---------------------|----------------------------------------------------|-------|
| recently_observed   | now - created_at < recent_window                   | +5    |
| no_avatar           | avatar_url missing or a generated placeholder      | +15   |
| no_display_name     | name missing or equal to username                  | +10   |
| no_description      | description missing or empty                       | +10   |

Local actors and remote actors with at least one follower always score 0.
"""

from typing import Dict, Optional

from spam_defense.config.defaults import USER_SCORE_WEIGHTS
from spam_defense.config.logging import get_logger
from spam_defense.config.settings import EngineConfig
from spam_defense.data_management.providers import ActorProfileProvider, AuditLogSink
from spam_defense.data_management.schemas import Actor, ActorProfileSnapshot, UserScore
from spam_defense.scorers.base import Clock, bounded_fetch, safe_audit, utc_now
from spam_defense.utils.errors import FetchUnavailable


class UserReputationScorer:
    """
    Scores how plausible a remote actor's profile looks.

    Usage:
        scorer = UserReputationScorer(profile_store, config)
        result = await scorer.score(actor)

    Attributes:
        profile_provider: Resolves actor ids to ActorProfileSnapshot
        config: Shared EngineConfig
        weights: Score per signal name
    """

    def __init__(
        self,
        profile_provider: ActorProfileProvider,
        config: Optional[EngineConfig] = None,
        audit_sink: Optional[AuditLogSink] = None,
        clock: Optional[Clock] = None,
        weights: Optional[Dict[str, int]] = None,
    ):
        self.profile_provider = profile_provider
        self.config = config or EngineConfig()
        self.audit_sink = audit_sink
        self.weights = weights or USER_SCORE_WEIGHTS
        self._clock = clock or utc_now
        self._logger = get_logger("UserReputationScorer")

    async def score(self, actor: Actor) -> UserScore:
        """
        Fetch the actor's profile and score it.

        Raises:
            FetchUnavailable: Only when config.fail_open is False
        """
        if actor.host is None:
            return UserScore(score=0)

        try:
            profile = await bounded_fetch(
                self.profile_provider.fetch(actor.id),
                "profile",
                actor.id,
                self.config.fetch_timeout,
            )
        except FetchUnavailable as e:
            if not self.config.fail_open:
                raise
            self._logger.bind(actor_id=actor.id, host=actor.host).error("Profile lookup failed, scoring 0: {}", e)
            return UserScore(score=0, host=actor.host, fetch_failed=True)

        result = self.score_profile(profile)
        safe_audit(
            self.audit_sink,
            "user_scored",
            actor_id=actor.id,
            name=result.name,
            username=result.username,
            host=result.host,
            score=result.score,
        )
        return result

    def score_profile(self, profile: ActorProfileSnapshot) -> UserScore:
        """Score an already-fetched profile (pure)."""
        if profile.followers_count > 0:
            score = 0
        else:
            signals = self.signals(profile)
            score = sum(self.weights[name] for name, hit in signals.items() if hit)
            self._logger.debug("User signals for {}", profile.username, signals=signals, score=score)

        return UserScore(
            score=score,
            name=profile.name,
            username=profile.username,
            host=profile.host,
        )

    def signals(self, profile: ActorProfileSnapshot) -> Dict[str, bool]:
        """Evaluate each signal against the current snapshot."""
        return {
            "recently_observed": self._clock() - profile.created_at < self.config.recent_window,
            "no_avatar": self._has_placeholder_avatar(profile.avatar_url),
            "no_display_name": not profile.name or profile.name == profile.username,
            "no_description": not profile.description,
        }

    def _has_placeholder_avatar(self, avatar_url: Optional[str]) -> bool:
        if not avatar_url:
            return True
        return any(marker in avatar_url for marker in self.config.placeholder_avatar_markers)


__all__ = ["UserReputationScorer"]
