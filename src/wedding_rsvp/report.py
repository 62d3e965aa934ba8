"""Organizer view: aggregate RSVP totals across the directory."""
from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List

import pandas as pd

from .models import Decision, Party

INVITATION_FILTERS = ("all", "ceremony", "celebration", "both", "none")
SUBMISSION_FILTERS = ("all", "submitted", "pending")

RESPONSE_COLUMNS = [
    "party_id", "label", "member_id", "first_name", "last_name", "email",
    "invited_ceremony", "invited_celebration", "submitted", "confirmation_code",
    "ceremony", "celebration", "meal", "dietary_notes", "ceremony_note", "celebration_note",
]


def party_summary(party: Party) -> Dict[str, object]:
    """Attendance and meal counts for one submitted party."""
    guests = party.responses
    return {
        "ceremony_attending": sum(1 for g in guests if g.ceremony is Decision.YES),
        "celebration_attending": sum(1 for g in guests if g.celebration is Decision.YES),
        "total_guests": len(guests),
        "meals": dict(Counter(g.meal for g in guests if g.meal)),
    }


def compute_totals(parties: Iterable[Party]) -> Dict[str, object]:
    """Directory wide totals. Only submitted parties contribute answers."""
    parties = list(parties)
    submitted = [p for p in parties if p.submitted]
    guests = [g for p in submitted for g in p.responses]

    def invited_members(ceremony: bool, celebration: bool) -> int:
        return sum(len(p.members) for p in parties if p.ceremony == ceremony and p.celebration == celebration)

    return {
        "total_parties": len(parties),
        "submitted_parties": len(submitted),
        "total_members": sum(len(p.members) for p in parties),
        "total_guests": len(guests),
        "ceremony_attending": sum(1 for g in guests if g.ceremony is Decision.YES),
        "celebration_attending": sum(1 for g in guests if g.celebration is Decision.YES),
        "not_attending": sum(1 for g in guests if g.ceremony is Decision.NO and g.celebration is Decision.NO),
        "meal_counts": dict(Counter(g.meal for g in guests if g.meal)),
        "dietary_restrictions": sum(1 for g in guests if g.dietary_notes.strip()),
        "response_rate": round(len(submitted) / len(parties) * 100, 1) if parties else 0.0,
        "members_invited_both": invited_members(True, True),
        "members_invited_ceremony_only": invited_members(True, False),
        "members_invited_celebration_only": invited_members(False, True),
    }


def _invitation_matches(party: Party, invitation: str) -> bool:
    if invitation == "ceremony":
        return party.ceremony and not party.celebration
    if invitation == "celebration":
        return party.celebration and not party.ceremony
    if invitation == "both":
        return party.ceremony and party.celebration
    if invitation == "none":
        return not party.ceremony and not party.celebration
    return True


def filter_parties(
    parties: Iterable[Party],
    text: str = "",
    invitation: str = "all",
    submission: str = "all",
) -> List[Party]:
    """Organizer filters, sorted by label.

    Unlike guest search this is a plain substring match over the label and
    the joined member names.
    """
    if invitation not in INVITATION_FILTERS:
        raise ValueError(f"Unknown invitation filter: {invitation}")
    if submission not in SUBMISSION_FILTERS:
        raise ValueError(f"Unknown submission filter: {submission}")

    needle = text.strip().lower()
    out = []
    for party in parties:
        if needle:
            names = " ".join(m.full_name for m in party.members).lower()
            if needle not in party.label.lower() and needle not in names:
                continue
        if not _invitation_matches(party, invitation):
            continue
        if submission == "submitted" and not party.submitted:
            continue
        if submission == "pending" and party.submitted:
            continue
        out.append(party)
    return sorted(out, key=lambda p: p.label)


def responses_frame(parties: Iterable[Party]) -> pd.DataFrame:
    """One row per invited member with whatever the party submitted."""
    rows = []
    for party in parties:
        stored = {r.member_id: r for r in party.responses}
        for member in party.members:
            answer = stored.get(member.id)
            rows.append({
                "party_id": party.id,
                "label": party.label,
                "member_id": member.id,
                "first_name": member.first_name,
                "last_name": member.last_name,
                "email": member.email,
                "invited_ceremony": party.ceremony,
                "invited_celebration": party.celebration,
                "submitted": party.submitted,
                "confirmation_code": party.confirmation_code or "",
                "ceremony": answer.ceremony.value if answer and answer.ceremony else "",
                "celebration": answer.celebration.value if answer and answer.celebration else "",
                "meal": (answer.meal or "") if answer else "",
                "dietary_notes": answer.dietary_notes if answer else "",
                "ceremony_note": answer.ceremony_note if answer else "",
                "celebration_note": answer.celebration_note if answer else "",
            })
    return pd.DataFrame(rows, columns=RESPONSE_COLUMNS)
