"""Constants for the MeetStream bridge client."""

from __future__ import annotations

VERSION = "0.4.0"

# Configuration keys (environment)
ENV_API_KEY = "MEETSTREAM_API_KEY"
ENV_BASE_URL = "MEETSTREAM_BASE_URL"
ENV_TIMEOUT = "MEETSTREAM_TIMEOUT"
ENV_CONCURRENCY = "MEETSTREAM_CONCURRENCY"

DEFAULT_BASE_URL = "https://api.meetstream.ai"
DEFAULT_USER_AGENT = f"meetstream-bridge/{VERSION}"

# Keys issued by the platform carry this prefix. Anything else is accepted
# but logged, since the upstream may have changed its format.
API_KEY_PREFIX = "ms_"
API_KEY_VISIBLE_CHARS = 8

# Every network call is bounded. A stalled endpoint becomes an error outcome.
DEFAULT_REQUEST_TIMEOUT = 8.0
MIN_REQUEST_TIMEOUT = 5.0
MAX_REQUEST_TIMEOUT = 10.0

# Sweep requests run in parallel batches of this size
DEFAULT_MAX_CONCURRENCY = 5
MAX_CONCURRENCY_LIMIT = 20

# Number of sessions returned by the "recent" listing
DEFAULT_RECENT_LIMIT = 15

# Nested container objects are walked at most this deep during extraction
MAX_EXTRACTION_DEPTH = 4

# Upstream status vocabularies mapped onto SessionStatus
LIVE_STATUSES = frozenset(
    {
        "active",
        "live",
        "running",
        "in_progress",
        "ongoing",
        "joining",
        "joined",
        "in_call",
        "in_meeting",
        "recording",
    }
)
COMPLETED_STATUSES = frozenset(
    {
        "completed",
        "complete",
        "done",
        "finished",
        "ended",
        "stopped",
        "left",
        "processed",
        "transcribed",
    }
)

# Object keys probed for nested session records
DEFAULT_CONTAINER_KEYS = ("bots", "meetings", "sessions", "results", "data", "items")
