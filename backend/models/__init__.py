from .leaderboard import ScoreEntry
from .session import GameSession, Occupied, Role, Slot

__all__ = [
    "GameSession",
    "Occupied",
    "Role",
    "Slot",
    "ScoreEntry",
]
