"""Data management package for spam defense.

Provides schemas, collaborator contracts and reference providers:
- ProfileStore: in-memory ActorProfileProvider
- InstanceStore: in-memory InstanceReputationProvider (fetch-or-register)
"""

from spam_defense.data_management.profile_store import ProfileStore
from spam_defense.data_management.instance_store import InstanceStore

__all__ = [
    "ProfileStore",
    "InstanceStore",
]
