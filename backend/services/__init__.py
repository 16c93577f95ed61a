from .store import connection_hub, leaderboard_hub, registry, role_tracker, signalling

__all__ = ["registry", "role_tracker", "signalling", "connection_hub", "leaderboard_hub"]
