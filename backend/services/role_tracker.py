from __future__ import annotations

from typing import NamedTuple

from models.session import Role


class Association(NamedTuple):
    code: str
    role: Role


class RoleTracker:
    """
    Side-table from connection id to the (session code, role) it represents.

    Lets the disconnect path find the right Session slot without scanning every
    session or tagging transport objects.
    """

    def __init__(self) -> None:
        self._roles: dict[str, Association] = {}

    def assign(self, connection_id: str, code: str, role: Role) -> None:
        self._roles[connection_id] = Association(code, role)

    def get(self, connection_id: str) -> Association | None:
        return self._roles.get(connection_id)

    def clear(self, connection_id: str) -> Association | None:
        return self._roles.pop(connection_id, None)

    def reset(self) -> None:
        self._roles.clear()

    def __len__(self) -> int:
        return len(self._roles)
