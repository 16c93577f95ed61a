from dataclasses import dataclass


@dataclass
class ScoreEntry:
    name: str
    score: int

    def to_payload(self) -> dict[str, object]:
        return {"name": self.name, "score": self.score}
