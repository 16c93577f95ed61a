"""Wire payloads for the signalling WebSocket at ``/ws``."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, TypeAdapter, field_validator

from .session import Slot


def normalize_code(code: str) -> str:
    return code.strip().upper()


class _Inbound(BaseModel):
    model_config = ConfigDict(extra="ignore")


class _CodeMessage(_Inbound):
    # A missing code behaves like an unknown one.
    code: str = ""

    @field_validator("code", mode="before")
    @classmethod
    def _normalize(cls, value: object) -> object:
        if isinstance(value, str):
            return normalize_code(value)
        return value


class CreateSession(_Inbound):
    type: Literal["create_session"]


class Join(_CodeMessage):
    type: Literal["join"]


class Ready(_CodeMessage):
    type: Literal["ready"]


class Direction(BaseModel):
    # Extra keys ride along to the host untouched.
    model_config = ConfigDict(extra="allow")

    x: StrictInt
    y: StrictInt


class Dir(_CodeMessage):
    type: Literal["dir"]
    player: Slot
    dir: Direction


InboundMessage = Annotated[
    Union[CreateSession, Join, Ready, Dir],
    Field(discriminator="type"),
]

inbound_adapter: TypeAdapter[InboundMessage] = TypeAdapter(InboundMessage)

KNOWN_TYPES = frozenset({"create_session", "join", "ready", "dir"})


# --- outbound ---


def session_created(code: str) -> dict[str, object]:
    return {"type": "session_created", "code": code}


def joined(code: str, slot: Slot) -> dict[str, object]:
    return {"type": "joined", "code": code, "as": slot.value}


def error(reason: str) -> dict[str, object]:
    return {"type": "error", "error": reason}


def status(snapshot: dict[str, object]) -> dict[str, object]:
    return {"type": "status", **snapshot}


def both_ready() -> dict[str, object]:
    return {"type": "both_ready"}


def forwarded_dir(player: Slot, direction: Direction) -> dict[str, object]:
    return {"type": "dir", "player": player.value, "dir": direction.model_dump()}
