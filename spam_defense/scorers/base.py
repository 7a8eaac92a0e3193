"""Helpers shared by the fetching scorers: bounded lookups and audit emission."""

import asyncio
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional, TypeVar

from spam_defense.config.logging import get_logger
from spam_defense.data_management.providers import AuditLogSink
from spam_defense.utils.errors import FetchUnavailable

T = TypeVar("T")

Clock = Callable[[], datetime]

_logger = get_logger("scorers")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


async def bounded_fetch(
    awaitable: Awaitable[T],
    source: str,
    key: Optional[str],
    timeout: float,
) -> T:
    """
    Await a provider lookup with a timeout and no retries.

    Args:
        awaitable: The provider call (e.g. provider.fetch(actor_id))
        source: "profile" or "instance", for error reporting
        key: Actor id or host being fetched
        timeout: Seconds before the lookup is abandoned

    Returns:
        The provider result

    Raises:
        FetchUnavailable: On timeout or any provider error
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except FetchUnavailable:
        raise
    except asyncio.TimeoutError as e:
        raise FetchUnavailable(source, key, f"timed out after {timeout}s") from e
    except Exception as e:
        raise FetchUnavailable(source, key, f"{type(e).__name__}: {e}") from e


def safe_audit(sink: Optional[AuditLogSink], event: str, **fields: Any) -> None:
    """Emit an audit event; sink failures are reported and never propagate."""
    if sink is None:
        return
    try:
        sink.info(event, **fields)
    except Exception as e:
        _logger.warning(f"Audit sink failed for {event}: {e}")


__all__ = ["Clock", "utc_now", "bounded_fetch", "safe_audit"]
