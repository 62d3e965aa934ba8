"""CSV loading utilities for the guest directory."""
from __future__ import annotations

from pathlib import Path
from typing import IO, Any, Dict, List, Tuple

import pandas as pd

from .models import Answer, Member, Party, parse_bool, parse_decision, parse_text
from .search import build_search_index

PARTY_COLUMNS = ["id", "ceremony", "celebration"]
MEMBER_COLUMNS = ["id", "party_id", "first_name", "last_name"]
# Optional members.csv columns holding a submitted party's answers.
RESPONSE_COLUMNS = ["ceremony", "celebration", "meal", "dietary_notes", "ceremony_note", "celebration_note"]


def _require_columns(df: pd.DataFrame, required: List[str], file_label: str) -> None:
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise ValueError(f"{file_label}: missing columns: {', '.join(missing)}")


def _member_from_row(row: pd.Series) -> Member:
    return Member(
        id=parse_text(row["id"]),
        first_name=parse_text(row["first_name"]),
        last_name=parse_text(row["last_name"]),
        email=parse_text(row.get("email", "")),
    )


def load_members(path: Path | str | IO[Any]) -> Dict[str, List[Member]]:
    """Load ``members.csv`` grouped by party id, keeping file order."""
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    _require_columns(df, MEMBER_COLUMNS, "members.csv")
    by_party: Dict[str, List[Member]] = {}
    for _, row in df.iterrows():
        party_id = parse_text(row["party_id"])
        member = _member_from_row(row)
        members = by_party.setdefault(party_id, [])
        if any(m.id == member.id for m in members):
            raise ValueError(f"Duplicate member id {member.id} in party {party_id}")
        members.append(member)
    return by_party


def load_responses(path: Path | str | IO[Any]) -> Dict[str, List[Answer]]:
    """Stored answers from the optional response columns of ``members.csv``.

    Returns an empty mapping when the file has none of those columns.
    Decisions other than ``yes``/``no`` are read as unset.
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    _require_columns(df, MEMBER_COLUMNS, "members.csv")
    if not any(col in df.columns for col in RESPONSE_COLUMNS):
        return {}
    by_party: Dict[str, List[Answer]] = {}
    for _, row in df.iterrows():
        answer = Answer.seed(_member_from_row(row))
        answer.ceremony = parse_decision(row.get("ceremony", ""))
        answer.celebration = parse_decision(row.get("celebration", ""))
        answer.meal = parse_text(row.get("meal", "")) or None
        answer.dietary_notes = parse_text(row.get("dietary_notes", ""))
        answer.ceremony_note = parse_text(row.get("ceremony_note", ""))
        answer.celebration_note = parse_text(row.get("celebration_note", ""))
        by_party.setdefault(parse_text(row["party_id"]), []).append(answer)
    return by_party


def load_parties(
    path: Path | str | IO[Any],
    members: Dict[str, List[Member]] | None = None,
    responses: Dict[str, List[Answer]] | None = None,
) -> List[Party]:
    """Load ``parties.csv``.

    If ``members`` is given every member must belong to a listed party.
    ``responses`` are attached only to parties that carry a confirmation code.
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    _require_columns(df, PARTY_COLUMNS, "parties.csv")
    members = members or {}
    responses = responses or {}
    parties: List[Party] = []
    seen = set()
    for _, row in df.iterrows():
        party_id = parse_text(row["id"])
        if party_id in seen:
            raise ValueError(f"Duplicate party id: {party_id}")
        seen.add(party_id)
        label = parse_text(row.get("label", ""))
        party_members = tuple(members.get(party_id, []))
        code = parse_text(row.get("confirmation_code", "")).upper() or None
        parties.append(
            Party(
                id=party_id,
                label=label,
                members=party_members,
                ceremony=parse_bool(row["ceremony"]),
                celebration=parse_bool(row["celebration"]),
                confirmation_code=code,
                responses=tuple(responses.get(party_id, [])) if code else (),
                search_index=build_search_index(label, party_members),
            )
        )

    unknown = sorted(set(members) - seen)
    if unknown:
        raise ValueError(f"Members reference unknown party: {', '.join(unknown)}")
    return parties


def load_directory(parties_path: Path | str, members_path: Path | str) -> Tuple[Party, ...]:
    """Convenience wrapper returning every party with its members and stored answers."""
    members = load_members(members_path)
    responses = load_responses(members_path)
    return tuple(load_parties(parties_path, members, responses))
