"""Collaborator contracts consumed by the scorers.

These are implemented elsewhere (user/instance services of the host
application); ProfileStore and InstanceStore are in-memory reference
implementations used in development and tests.
"""

from typing import Any, Protocol, runtime_checkable

from spam_defense.data_management.schemas import ActorProfileSnapshot, InstanceRecord


@runtime_checkable
class ActorProfileProvider(Protocol):
    """Resolves a remote actor id to its current profile."""

    async def fetch(self, actor_id: str) -> ActorProfileSnapshot:
        """Raises ActorNotFound when the actor is unknown."""
        ...


@runtime_checkable
class InstanceReputationProvider(Protocol):
    """Resolves a host to its federation record.

    Never-seen hosts yield a record with followers_count=0 and
    first_retrieved_at=now rather than an error.
    """

    async def fetch(self, host: str) -> InstanceRecord:
        ...


@runtime_checkable
class AuditLogSink(Protocol):
    """Fire-and-forget structured audit output."""

    def info(self, event: str, **fields: Any) -> None:
        ...


__all__ = ["ActorProfileProvider", "InstanceReputationProvider", "AuditLogSink"]
