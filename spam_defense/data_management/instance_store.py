"""In-memory federation registry.

Reference InstanceReputationProvider. fetch() registers hosts it has never
seen, stamping first_retrieved_at with the lookup time, so a brand-new host
is scored as maximally new instead of failing.

Usage:
    from spam_defense.data_management.instance_store import InstanceStore

    store = InstanceStore()
    record = await store.fetch("unknown.example")  # registered now
"""

import asyncio
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

import structlog
from pydantic import ValidationError

from spam_defense.data_management.schemas import InstanceRecord


class InstanceStore:
    """Instance records keyed by lowercase host."""

    def __init__(
        self,
        seed_path: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """Initialize InstanceStore.

        Args:
            seed_path: Optional JSON file ({host: record dict}) to pre-load.
            clock: Source of "now" for newly registered hosts.
        """
        self._instances: dict[str, InstanceRecord] = {}
        self._lock = asyncio.Lock()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._seed_path = Path(seed_path) if seed_path else None
        self._logger = structlog.get_logger().bind(component="InstanceStore")

        if self._seed_path:
            self._load_from_file()

    async def save_instance(self, record: InstanceRecord) -> None:
        async with self._lock:
            self._instances[record.host.lower()] = record

    async def get_instance(self, host: str) -> Optional[InstanceRecord]:
        """Lookup without registering."""
        async with self._lock:
            return self._instances.get(host.lower())

    async def fetch(self, host: str) -> InstanceRecord:
        """Return the record for host, registering it if unseen."""
        key = host.lower()
        async with self._lock:
            record = self._instances.get(key)
            if record is None:
                record = InstanceRecord(
                    host=key,
                    followers_count=0,
                    first_retrieved_at=self._clock(),
                )
                self._instances[key] = record
                self._logger.info("instance_registered", host=key)
            return record

    async def record_follower(self, host: str) -> InstanceRecord:
        """Increment the follower count of host (registering it if needed)."""
        record = await self.fetch(host)
        async with self._lock:
            updated = record.model_copy(update={"followers_count": record.followers_count + 1})
            self._instances[updated.host.lower()] = updated
        return updated

    def __len__(self) -> int:
        return len(self._instances)

    def _load_from_file(self) -> None:
        """Load seed records from JSON (synchronous)."""
        if not self._seed_path or not self._seed_path.exists():
            return

        try:
            with open(self._seed_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._instances = {
                host.lower(): InstanceRecord.model_validate({"host": host, **raw})
                for host, raw in data.items()
            }
            self._logger.info("instances_loaded", path=str(self._seed_path), count=len(self._instances))
        except (OSError, ValueError, ValidationError) as e:
            self._logger.error("instance_seed_failed", path=str(self._seed_path), error=str(e))
            self._instances = {}
