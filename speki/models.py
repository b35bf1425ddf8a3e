"""Card record data classes and their plain-dict form used in card files."""

import enum
import uuid
from dataclasses import dataclass, field
from datetime import timedelta

SECONDS_PER_DAY = 86400


class Grade(enum.Enum):
    # no recall, not even after seeing the answer
    NONE = "none"
    # no recall, but the answer was familiar once shown
    LATE = "late"
    # struggled, got it right or partly right
    SOME = "some"
    # no hesitation
    PERFECT = "perfect"

    @classmethod
    def parse(cls, text: str) -> "Grade":
        """Accept "1".."4" (worst to best) or a grade name."""
        text = text.strip().lower()
        by_number = {"1": cls.NONE, "2": cls.LATE, "3": cls.SOME, "4": cls.PERFECT}
        if text in by_number:
            return by_number[text]
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"Unknown grade: {text!r}") from None


@dataclass
class Review:
    timestamp: int
    grade: Grade
    time_spent: int = 0

    def to_dict(self) -> dict:
        return {
            "timestamp": int(self.timestamp),
            "grade": self.grade.value,
            "time_spent": int(self.time_spent),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Review":
        return cls(
            timestamp=int(data["timestamp"]),
            grade=Grade(data["grade"]),
            time_spent=int(data.get("time_spent", 0)),
        )


@dataclass
class AudioSource:
    local_name: str | None = None
    url_backup: str | None = None

    def to_dict(self) -> dict:
        return {"local_name": self.local_name, "url_backup": self.url_backup}

    @classmethod
    def from_dict(cls, data: dict | None) -> "AudioSource | None":
        if not data:
            return None
        return cls(local_name=data.get("local_name"), url_backup=data.get("url_backup"))

    @classmethod
    def from_parts(cls, local_name: str | None, url_backup: str | None) -> "AudioSource | None":
        if not local_name and not url_backup:
            return None
        return cls(local_name=local_name or None, url_backup=url_backup or None)


@dataclass
class Side:
    text: str = ""
    audio: AudioSource | None = None

    def to_dict(self) -> dict:
        d = {"text": self.text}
        if self.audio is not None:
            d["audio"] = self.audio.to_dict()
        return d

    @classmethod
    def from_dict(cls, data: dict) -> "Side":
        return cls(text=str(data["text"]), audio=AudioSource.from_dict(data.get("audio")))


def new_card_id() -> str:
    return str(uuid.uuid4())


@dataclass
class Meta:
    id: str = field(default_factory=new_card_id)
    dependencies: list[str] = field(default_factory=list)
    dependents: list[str] = field(default_factory=list)
    suspended: bool = False
    finished: bool = True
    stability: timedelta | None = None
    tags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "dependencies": list(self.dependencies),
            "dependents": list(self.dependents),
            "suspended": self.suspended,
            "finished": self.finished,
        }
        if self.stability is not None:
            d["stability"] = self.stability.total_seconds() / SECONDS_PER_DAY
        d["tags"] = list(self.tags)
        return d

    @classmethod
    def from_dict(cls, data: dict) -> "Meta":
        stability = data.get("stability")
        return cls(
            id=str(data["id"]),
            dependencies=[str(x) for x in data.get("dependencies") or []],
            dependents=[str(x) for x in data.get("dependents") or []],
            suspended=bool(data.get("suspended", False)),
            finished=bool(data.get("finished", True)),
            stability=None if stability is None else timedelta(days=float(stability)),
            tags=[str(t) for t in data.get("tags") or []],
        )


@dataclass
class Card:
    front: Side
    back: Side
    meta: Meta = field(default_factory=Meta)
    history: list[Review] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.meta.id

    @classmethod
    def new(cls, front: str, back: str, tags: list[str] | None = None,
            finished: bool = True) -> "Card":
        meta = Meta(finished=finished, tags=list(tags or []))
        return cls(front=Side(text=front), back=Side(text=back), meta=meta)

    def last_review(self) -> Review | None:
        return self.history[-1] if self.history else None

    def to_dict(self) -> dict:
        return {
            "front": self.front.to_dict(),
            "back": self.back.to_dict(),
            "meta": self.meta.to_dict(),
            "history": [r.to_dict() for r in self.history],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Card":
        return cls(
            front=Side.from_dict(data["front"]),
            back=Side.from_dict(data["back"]),
            meta=Meta.from_dict(data["meta"]),
            history=[Review.from_dict(r) for r in data.get("history") or []],
        )
