"""In-memory actor profile registry.

Reference ActorProfileProvider:
- O(1) lookup by actor id
- Thread-safe operations with asyncio locks
- Optional JSON seed file ({actor_id: profile dict})

Usage:
    from spam_defense.data_management.profile_store import ProfileStore

    store = ProfileStore()
    await store.save_profile("9abc", snapshot)
    profile = await store.fetch("9abc")
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import structlog
from pydantic import ValidationError

from spam_defense.data_management.schemas import ActorProfileSnapshot
from spam_defense.utils.errors import ActorNotFound


class ProfileStore:
    """Profiles keyed by actor id."""

    def __init__(self, seed_path: Optional[str] = None) -> None:
        """Initialize ProfileStore.

        Args:
            seed_path: Optional JSON file to pre-load profiles from.
        """
        self._profiles: dict[str, ActorProfileSnapshot] = {}
        self._lock = asyncio.Lock()
        self._seed_path = Path(seed_path) if seed_path else None
        self._logger = structlog.get_logger().bind(component="ProfileStore")

        if self._seed_path:
            self._load_from_file()

    async def save_profile(self, actor_id: str, profile: ActorProfileSnapshot) -> None:
        async with self._lock:
            self._profiles[actor_id] = profile
            self._logger.debug("profile_saved", actor_id=actor_id, username=profile.username)

    async def fetch(self, actor_id: str) -> ActorProfileSnapshot:
        """Return the stored profile.

        Raises:
            ActorNotFound: If no profile is stored for actor_id.
        """
        async with self._lock:
            profile = self._profiles.get(actor_id)
        if profile is None:
            raise ActorNotFound(actor_id)
        return profile

    async def remove_profile(self, actor_id: str) -> bool:
        async with self._lock:
            return self._profiles.pop(actor_id, None) is not None

    def __len__(self) -> int:
        return len(self._profiles)

    def _load_from_file(self) -> None:
        """Load seed profiles from JSON (synchronous)."""
        if not self._seed_path or not self._seed_path.exists():
            return

        try:
            with open(self._seed_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._profiles = {
                actor_id: ActorProfileSnapshot.model_validate(raw)
                for actor_id, raw in data.items()
            }
            self._logger.info("profiles_loaded", path=str(self._seed_path), count=len(self._profiles))
        except (OSError, ValueError, ValidationError) as e:
            self._logger.error("profile_seed_failed", path=str(self._seed_path), error=str(e))
            self._profiles = {}
