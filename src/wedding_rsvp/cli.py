"""Command line interface for the RSVP lookup engine."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from .config import load_settings
from .csv_loader import load_directory
from .planner import plan
from .report import compute_totals
from .search import rank_parties
from .store import InMemoryPartyStore
from .wizard import WizardController


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Wedding RSVP lookup")
    parser.add_argument("--parties", help="Path to parties.csv (default from RSVP_PARTIES_CSV)")
    parser.add_argument("--members", help="Path to members.csv (default from RSVP_MEMBERS_CSV)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("search", help="Rank parties matching a name.")
    p.add_argument("query")

    p = sub.add_parser("steps", help="Show the wizard steps for a party.")
    p.add_argument("party_id")

    sub.add_parser("report", help="Print organizer totals.")

    p = sub.add_parser("lookup", help="Find a party by confirmation code.")
    p.add_argument("code")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point used by ``python -m wedding_rsvp.cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = load_settings()
        logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
        parties = load_directory(args.parties or settings.parties_csv, args.members or settings.members_csv)
    except (OSError, ValueError) as e:
        print(f"Input error: {e}", file=sys.stderr)
        return 1
    store = InMemoryPartyStore(parties)

    if args.command == "search":
        for r in rank_parties(args.query, store.fetch_all_parties()):
            print(f"{r.party.id},{r.score},{r.party.label}")
        return 0

    if args.command == "steps":
        wizard = WizardController(store, settings.meal_policy())
        party = wizard.open_party(args.party_id)
        if party is None:
            print(wizard.error, file=sys.stderr)
            return 1
        for step in plan(party, wizard.answers, settings.meal_policy()):
            print(f"{step.number},{step.kind.value},{step.label}")
        return 0

    if args.command == "report":
        totals = compute_totals(store.fetch_all_parties())
        print(f"[REPORT] parties={totals['total_parties']} submitted={totals['submitted_parties']} "
              f"rate={totals['response_rate']}%")
        print(f"[REPORT] ceremony={totals['ceremony_attending']} celebration={totals['celebration_attending']} "
              f"not_attending={totals['not_attending']}")
        for meal, count in sorted(totals["meal_counts"].items()):
            print(f"[REPORT] meal {meal}={count}")
        return 0

    wizard = WizardController(store, settings.meal_policy())
    party = wizard.open_confirmation(args.code)
    if party is None:
        print(wizard.error, file=sys.stderr)
        return 1
    print(f"{party.id},{party.confirmation_code},{party.label}")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
