"""Organizer side helpers for adding a party to the directory."""
from __future__ import annotations

import random
import string
from typing import Iterable, List, Optional

from .models import Member, Party, parse_text
from .search import build_search_index

LABEL_TEMPLATES = [
    "Bride's family – {Custom}",
    "Groom's family – {Custom}",
    "Bride's friends – {Custom}",
    "Groom's friends – {Custom}",
    "Coworkers – {Custom}",
    "Neighbors – {Custom}",
    "Other – {Custom}",
]


def format_label(template: str, custom: str) -> str:
    """Fill one of :data:`LABEL_TEMPLATES`; blank custom text becomes ``Group``."""
    if template not in LABEL_TEMPLATES:
        raise ValueError(f"Unknown label template: {template}")
    return template.replace("{Custom}", custom.strip() or "Group")


def member_ids(count: int) -> List[str]:
    """Sequential member ids: ``g-001``, ``g-002``, ..."""
    return [f"g-{i:03d}" for i in range(1, count + 1)]


def new_party_id(rng: Optional[random.Random] = None) -> str:
    rng = rng or random.SystemRandom()
    alphabet = string.ascii_lowercase + string.digits
    return "pty-" + "".join(rng.choice(alphabet) for _ in range(6))


def create_party(
    members: Iterable[dict],
    label: str = "",
    ceremony: bool = False,
    celebration: bool = False,
    party_id: Optional[str] = None,
) -> Party:
    """Build a new party from raw member rows.

    Rows without both a first and last name are dropped. Raises ``ValueError``
    when nothing is left. The party carries a token index of its label and
    member names.
    """
    valid = []
    for row in members:
        first = parse_text(row.get("first_name"))
        last = parse_text(row.get("last_name"))
        if first and last:
            valid.append((first, last, parse_text(row.get("email"))))
    if not valid:
        raise ValueError("At least one member with first and last name is required")

    label = label.strip()
    party_members = tuple(
        Member(id=mid, first_name=first, last_name=last, email=email)
        for mid, (first, last, email) in zip(member_ids(len(valid)), valid)
    )
    return Party(
        id=party_id or new_party_id(),
        label=label,
        members=party_members,
        ceremony=ceremony,
        celebration=celebration,
        search_index=build_search_index(label, party_members),
    )
