"""Default scoring constants for the spam defense engine.

Score weights (flat bonuses, non-exclusive within a scorer):

User profile (remote actors without followers):
1. No custom avatar: +15
2. No display name, or display name equal to username: +10
3. No bio: +10
4. Account first observed inside the recent window: +5

Origin instance (hosts without inbound followers):
1. Description lacks any character of the target script: +20
2. First retrieved inside the recent window: +5
3. First retrieved after the spam era started: +5

Activity shape:
- Note creation: mention fan-out tiers (0 / 1 / 2 / 3+)
- Reaction: target note with few renotes
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, FrozenSet, Tuple

# Verdict is spam when total score is strictly greater than this
DEFAULT_THRESHOLD: int = 50

DEFAULT_RECENT_WINDOW: timedelta = timedelta(days=4)

# Hosts exempt from instance scoring
DEFAULT_TRUSTED_HOSTS: FrozenSet[str] = frozenset(
    {
        "misskey.io",
        "fedibird.com",
        "mkkey.net",
    }
)

# Start of the February 2024 spam wave
DEFAULT_SPAM_ERA_START: datetime = datetime(2024, 2, 10, tzinfo=timezone.utc)

DEFAULT_FETCH_TIMEOUT_SECONDS: float = 5.0

DEFAULT_TARGET_SCRIPT: str = "japanese"

# Substrings of generated avatar URLs (Misskey serves identicons for users without one)
PLACEHOLDER_AVATAR_MARKERS: Tuple[str, ...] = ("identicon",)

USER_SCORE_WEIGHTS: Dict[str, int] = {
    "recently_observed": 5,
    "no_avatar": 15,
    "no_display_name": 10,
    "no_description": 10,
}

INSTANCE_SCORE_WEIGHTS: Dict[str, int] = {
    "recently_observed": 5,
    "after_spam_era": 5,
    "no_local_script": 20,
}

# Mention count -> score; counts above the last key use MENTION_SCORE_CAP
MENTION_SCORE_TIERS: Dict[int, int] = {
    0: 0,
    1: 5,
    2: 10,
}
MENTION_SCORE_CAP: int = 20

# Reactions to notes with at most this many renotes score LOW_VISIBILITY_LIKE_SCORE
LOW_VISIBILITY_RENOTE_LIMIT: int = 5
LOW_VISIBILITY_LIKE_SCORE: int = 5

# Shared by the loguru and structlog outputs
DEFAULT_LOG_LEVEL: str = "INFO"
DEFAULT_LOG_FORMAT: str = "json"
LOG_LEVELS: Tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS: Tuple[str, ...] = ("json", "console")
