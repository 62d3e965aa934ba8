"""Party directory and RSVP submission collaborators."""
from __future__ import annotations

import logging
import random
import string
import time
from collections import OrderedDict
from dataclasses import dataclass, replace
from typing import Callable, Iterable, List, Mapping, Optional, Protocol

from .models import Answer, Party

log = logging.getLogger(__name__)

CODE_ALPHABET = string.digits + string.ascii_uppercase
CODE_LENGTH = 6


@dataclass(frozen=True)
class InvitationFlags:
    ceremony: bool
    celebration: bool

    @classmethod
    def of(cls, party: Party) -> "InvitationFlags":
        return cls(ceremony=party.ceremony, celebration=party.celebration)


def generate_confirmation_code(rng: Optional[random.Random] = None) -> str:
    """Six uppercase base-36 characters."""
    rng = rng or random.SystemRandom()
    return "".join(rng.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


class PartyStore(Protocol):
    """What the wizard needs from the document store."""

    def fetch_all_parties(self) -> List[Party]:
        ...

    def fetch_party_by_id(self, party_id: str) -> Optional[Party]:
        ...

    def fetch_party_by_confirmation_code(self, code: str) -> Optional[Party]:
        ...

    def submit_answers(
        self, party_id: str, flags: InvitationFlags, answers: Mapping[str, Answer]
    ) -> str:
        ...


class InMemoryPartyStore:
    """Keyed party documents held in memory.

    Submission merges the RSVP fields into the stored party and leaves label
    and members alone. A second submission for the same party overwrites the
    first.
    """

    def __init__(
        self,
        parties: Iterable[Party] = (),
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._parties: "OrderedDict[str, Party]" = OrderedDict()
        self._rng = rng
        self._clock = clock
        for party in parties:
            self.add_party(party)

    def add_party(self, party: Party) -> None:
        if party.id in self._parties:
            raise ValueError(f"Duplicate party id: {party.id}")
        self._parties[party.id] = party

    def fetch_all_parties(self) -> List[Party]:
        return list(self._parties.values())

    def fetch_party_by_id(self, party_id: str) -> Optional[Party]:
        return self._parties.get(party_id)

    def fetch_party_by_confirmation_code(self, code: str) -> Optional[Party]:
        code = (code or "").strip().upper()
        if not code:
            return None
        for party in self._parties.values():
            if party.confirmation_code == code:
                return party
        return None

    def submit_answers(
        self, party_id: str, flags: InvitationFlags, answers: Mapping[str, Answer]
    ) -> str:
        code = generate_confirmation_code(self._rng)
        existing = self._parties.get(party_id) or Party(id=party_id)
        self._parties[party_id] = replace(
            existing,
            ceremony=flags.ceremony,
            celebration=flags.celebration,
            confirmation_code=code,
            submitted_at=self._clock(),
            responses=tuple(replace(a) for a in answers.values()),
        )
        log.info("stored RSVP for party %s (%d guests)", party_id, len(answers))
        return code

