from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class Slot(str, Enum):
    P1 = "p1"
    P2 = "p2"


class Role(str, Enum):
    HOST = "host"
    P1 = "p1"
    P2 = "p2"

    @property
    def slot(self) -> Slot | None:
        if self is Role.HOST:
            return None
        return Slot(self.value)


@dataclass(frozen=True)
class Occupied:
    """A filled player slot. An empty slot is ``None``, so it can never be ready."""

    connection_id: str
    ready: bool = False


@dataclass
class GameSession:
    code: str
    host: str | None = None                 # connection id
    players: dict[Slot, Occupied | None] = field(
        default_factory=lambda: {Slot.P1: None, Slot.P2: None}
    )
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    both_ready_announced: bool = False

    def present(self) -> dict[str, bool]:
        return {slot.value: occupant is not None for slot, occupant in self.players.items()}

    def ready(self) -> dict[str, bool]:
        return {
            slot.value: occupant is not None and occupant.ready
            for slot, occupant in self.players.items()
        }

    def open_slot(self) -> Slot | None:
        for slot in (Slot.P1, Slot.P2):
            if self.players[slot] is None:
                return slot
        return None

    def slot_of(self, connection_id: str) -> Slot | None:
        for slot, occupant in self.players.items():
            if occupant is not None and occupant.connection_id == connection_id:
                return slot
        return None

    @property
    def all_ready(self) -> bool:
        return all(self.ready().values())

    def is_empty(self) -> bool:
        return self.host is None and all(o is None for o in self.players.values())

    def snapshot(self) -> dict[str, object]:
        return {"code": self.code, "present": self.present(), "ready": self.ready()}
