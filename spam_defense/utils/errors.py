"""Exception taxonomy for the spam defense engine.

Only FetchUnavailable is ever absorbed by the engine (fail-open policy).
UnsupportedActivityKind and ConfigInvalid always reach the caller.
"""

from typing import Any, Optional


class SpamDefenseError(Exception):
    """Base class for every error raised by spam_defense."""


class FetchUnavailable(SpamDefenseError):
    """A profile or instance lookup failed, timed out, or found nothing.

    Attributes:
        source: Which lookup failed ("profile" or "instance").
        key: The actor id or host that was being fetched.
    """

    def __init__(self, source: str, key: Optional[str], reason: str = "") -> None:
        self.source = source
        self.key = key
        self.reason = reason
        message = f"{source} lookup for {key!r} unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ActorNotFound(FetchUnavailable):
    """Raised by profile providers when the actor id is unknown."""

    def __init__(self, actor_id: str) -> None:
        super().__init__("profile", actor_id, "actor not found")


class UnsupportedActivityKind(SpamDefenseError):
    """The activity is not one of the modelled kinds."""

    def __init__(self, activity: Any) -> None:
        self.activity = activity
        kind = getattr(activity, "type", type(activity).__name__)
        super().__init__(f"unsupported activity kind: {kind!r}")


class ConfigInvalid(SpamDefenseError):
    """Configuration could not be loaded or failed validation."""


__all__ = [
    "SpamDefenseError",
    "FetchUnavailable",
    "ActorNotFound",
    "UnsupportedActivityKind",
    "ConfigInvalid",
]
