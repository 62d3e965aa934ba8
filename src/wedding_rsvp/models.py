"""Data models for the RSVP lookup and wizard."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class EventKind(str, Enum):
    """The two independently invitable sub-events."""

    CEREMONY = "ceremony"
    CELEBRATION = "celebration"


class Decision(str, Enum):
    """Attendance decision. An unset decision is ``None``."""

    YES = "yes"
    NO = "no"


def parse_pipe_list(value: object) -> List[str]:
    """Split a pipe separated string into a list.

    Empty values such as ``""`` or ``None`` return an empty list.
    ``pandas`` often provides ``float('nan')`` for missing values which is
    also treated as empty.
    """
    if value is None:
        return []
    if isinstance(value, float) and math.isnan(value):
        return []
    text = str(value).strip()
    if not text or text.lower() == "nan":
        return []
    return [part.strip() for part in text.split("|") if part.strip()]


def parse_bool(value: object) -> bool:
    """Parse common truthy strings into bool."""
    return str(value).strip().lower() in ("true", "1", "yes")


def parse_text(value: object) -> str:
    """Return ``value`` as a stripped string, treating ``None``/NaN as empty."""
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    text = str(value).strip()
    return "" if text.lower() == "nan" else text


def parse_decision(value: object) -> Optional[Decision]:
    """Parse ``yes``/``no`` into a :class:`Decision`; anything else is unset."""
    text = parse_text(value).lower()
    if text == Decision.YES.value:
        return Decision.YES
    if text == Decision.NO.value:
        return Decision.NO
    return None


@dataclass(frozen=True)
class Member:
    """One invited individual belonging to a party."""

    id: str
    first_name: str
    last_name: str
    email: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass
class Answer:
    """A member's RSVP responses for one party's invitation."""

    member_id: str
    first_name: str
    last_name: str
    email: str = ""
    ceremony: Optional[Decision] = None
    celebration: Optional[Decision] = None
    meal: Optional[str] = None
    ceremony_note: str = ""
    celebration_note: str = ""
    dietary_notes: str = ""

    @classmethod
    def seed(cls, member: Member) -> "Answer":
        """Fresh answer with identity copied from ``member`` and nothing decided."""
        return cls(
            member_id=member.id,
            first_name=member.first_name,
            last_name=member.last_name,
            email=member.email,
        )

    def decision(self, event: EventKind) -> Optional[Decision]:
        return self.ceremony if event is EventKind.CEREMONY else self.celebration


@dataclass(frozen=True)
class Party:
    """The searchable and invitable unit.

    Submission fields stay empty until the party has sent its RSVP.
    """

    id: str
    members: Tuple[Member, ...] = ()
    label: str = ""
    ceremony: bool = False
    celebration: bool = False
    confirmation_code: Optional[str] = None
    submitted_at: Optional[float] = None
    responses: Tuple[Answer, ...] = field(default=(), compare=False)
    search_index: Tuple[str, ...] = field(default=(), compare=False)

    @property
    def submitted(self) -> bool:
        return bool(self.confirmation_code)
