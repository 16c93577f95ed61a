"""Process-wide signalling and leaderboard state. In-memory only; nothing survives a restart."""

from app.config import get_settings
from services.connection_hub import ConnectionHub
from services.leaderboard_hub import LeaderboardHub
from services.role_tracker import RoleTracker
from services.session_registry import SessionRegistry
from services.signalling import SignallingHandler

_settings = get_settings()

registry = SessionRegistry()
role_tracker = RoleTracker()
signalling = SignallingHandler(registry, role_tracker)
connection_hub = ConnectionHub(outbox_size=_settings.outbox_size)
leaderboard_hub = LeaderboardHub(size=_settings.leaderboard_size)


def reset() -> None:
    """Drop all sessions, roles and boards. Used by tests."""
    registry.clear()
    role_tracker.reset()
    leaderboard_hub.clear()
