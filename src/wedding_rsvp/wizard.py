"""RSVP wizard controller.

Phases run ``SEARCHING -> ANSWERING -> CONFIRMING -> SUBMITTED``. Which
answering screens exist is decided by :func:`wedding_rsvp.planner.plan`;
the controller only tracks where the guest is and gates movement on the
current step being complete.

Collaborator failures never escape: they are logged, stored on
``controller.error`` and leave the state unchanged.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from .errors import IOFailure, NotFound, RsvpError, SearchCancelled, ValidationBlocked
from .models import Answer, Decision, EventKind, Party
from .planner import (
    DEFAULT_POLICY,
    MealPolicy,
    StepKind,
    WizardStep,
    invitation_for,
    meal_event_for,
    plan,
)
from .search import CancellationToken, search_parties
from .store import InvitationFlags, PartyStore

log = logging.getLogger(__name__)


class Phase(str, Enum):
    SEARCHING = "searching"
    ANSWERING = "answering"
    CONFIRMING = "confirming"
    SUBMITTED = "submitted"


@dataclass(frozen=True)
class SearchTicket:
    """Handle for one search request. Only the latest ticket may publish results."""

    generation: int
    query: str
    token: CancellationToken


def seed_answers(party: Party) -> Dict[str, Answer]:
    return {m.id: Answer.seed(m) for m in party.members}


def submitted_answers(party: Party) -> Dict[str, Answer]:
    """Stored responses keyed by member id, seeded for any member without one."""
    stored = {r.member_id: r for r in party.responses}
    return {
        m.id: replace(stored[m.id]) if m.id in stored else Answer.seed(m)
        for m in party.members
    }


class WizardController:
    """Per-session wizard state for one guest."""

    def __init__(self, store: PartyStore, policy: MealPolicy = DEFAULT_POLICY) -> None:
        self.store = store
        self.policy = policy
        self.party: Optional[Party] = None
        self.answers: Dict[str, Answer] = {}
        self.phase = Phase.SEARCHING
        self.step_number = 1
        self.confirmation_code: Optional[str] = None
        self.error: Optional[RsvpError] = None
        self.search_results: List[Party] = []
        self._search_generation = 0
        self._search_token: Optional[CancellationToken] = None
        self._submitting = False

    # ----------------------------- derived state -----------------------------
    def steps(self) -> List[WizardStep]:
        return plan(self.party, self.answers, self.policy)

    @property
    def current_step(self) -> WizardStep:
        return self.steps()[self.step_number - 1]

    @property
    def read_only(self) -> bool:
        return self.phase is Phase.SUBMITTED

    @property
    def can_advance(self) -> bool:
        return self.phase is Phase.ANSWERING and self.current_step.complete

    @property
    def can_retreat(self) -> bool:
        return self.phase in (Phase.ANSWERING, Phase.CONFIRMING)

    @property
    def can_submit(self) -> bool:
        return self.phase is Phase.CONFIRMING and not self._submitting

    @property
    def search_in_flight(self) -> bool:
        return self._search_token is not None

    @property
    def submitting(self) -> bool:
        return self._submitting

    def _fail(self, err: RsvpError, exc: Optional[BaseException] = None) -> None:
        if exc is not None:
            log.warning("%s (%s: %s)", err, type(exc).__name__, exc)
        self.error = err

    # ----------------------------- search -----------------------------
    def begin_search(self, query: str) -> SearchTicket:
        """Start a search, superseding any search still in flight."""
        if self._search_token is not None:
            self._search_token.cancel()
        self._search_generation += 1
        self._search_token = CancellationToken()
        return SearchTicket(self._search_generation, query, self._search_token)

    def _is_latest(self, ticket: SearchTicket) -> bool:
        return ticket.generation == self._search_generation

    def finish_search(self, ticket: SearchTicket) -> Optional[List[Party]]:
        """Run ``ticket``'s search and publish the results.

        Returns ``None`` when the ticket was superseded or the directory could
        not be read; ``search_results`` is left untouched in both cases.
        """
        try:
            ticket.token.raise_if_cancelled()
            if ticket.query.strip():
                results = search_parties(ticket.query, self.store.fetch_all_parties(), ticket.token)
            else:
                results = []
        except SearchCancelled:
            log.debug("dropped superseded search %r", ticket.query)
            return None
        except Exception as exc:
            if not self._is_latest(ticket):
                return None
            self._search_token = None
            self._fail(IOFailure("Search failed. Please try again."), exc)
            return None

        if not self._is_latest(ticket):
            log.debug("dropped stale search %r", ticket.query)
            return None
        self._search_token = None
        self.search_results = results
        self.error = None
        return results

    def search(self, query: str) -> Optional[List[Party]]:
        return self.finish_search(self.begin_search(query))

    # ----------------------------- party selection -----------------------------
    def select_party(self, party: Party) -> None:
        """Choose ``party`` and seed one answer per member.

        A party that already carries a confirmation code opens straight into
        the read-only submitted view.
        """
        if self.phase is Phase.SUBMITTED and self.party is not None and self.party.id == party.id:
            return
        if self.phase is not Phase.SEARCHING:
            raise ValidationBlocked("A party is already selected.")

        self.party = party
        self.error = None
        self.search_results = []
        if party.submitted:
            self.answers = submitted_answers(party)
            self.confirmation_code = party.confirmation_code
            self.phase = Phase.SUBMITTED
            self.step_number = len(self.steps())
            log.info("party %s already submitted, showing confirmation", party.id)
            return

        self.answers = seed_answers(party)
        steps = self.steps()
        if steps[1].kind is StepKind.CONFIRM:
            self.phase = Phase.CONFIRMING
        else:
            self.phase = Phase.ANSWERING
        self.step_number = 2
        log.info("selected party %s with %d members", party.id, len(party.members))

    def open_party(self, party_id: str) -> Optional[Party]:
        """Direct-link entry: load a party by id and select it."""
        if self.phase is not Phase.SEARCHING:
            raise ValidationBlocked("A party is already selected.")
        try:
            party = self.store.fetch_party_by_id(party_id)
        except Exception as exc:
            self._fail(IOFailure("Failed to load party. Please try searching manually."), exc)
            return None
        if party is None:
            self._fail(NotFound("Party not found. Please search for your invitation."))
            return None
        self.select_party(party)
        return party

    def open_confirmation(self, code: str) -> Optional[Party]:
        """Post-submission lookup by confirmation code."""
        if self.phase is not Phase.SEARCHING:
            raise ValidationBlocked("A party is already selected.")
        try:
            party = self.store.fetch_party_by_confirmation_code(code)
        except Exception as exc:
            self._fail(IOFailure("Failed to look up your RSVP. Please try again."), exc)
            return None
        if party is None:
            self._fail(NotFound(f"No RSVP found for confirmation code {code!r}."))
            return None
        self.select_party(party)
        return party

    def reset(self) -> None:
        """Drop the selected party and every answer."""
        self.party = None
        self.answers = {}
        self.phase = Phase.SEARCHING
        self.step_number = 1
        self.confirmation_code = None
        self.error = None

    # ----------------------------- navigation -----------------------------
    def advance(self) -> WizardStep:
        if self.phase is not Phase.ANSWERING:
            raise ValidationBlocked("There is no next step.")
        if not self.current_step.complete:
            raise ValidationBlocked("Please answer for every guest before continuing.")
        self.step_number += 1
        if self.current_step.kind is StepKind.CONFIRM:
            self.phase = Phase.CONFIRMING
        self.error = None
        return self.current_step

    def retreat(self) -> WizardStep:
        """Go back one step; going back past the first answering step starts over."""
        if not self.can_retreat:
            raise ValidationBlocked("Cannot go back from here.")
        if self.step_number <= 2:
            log.info("restarting search, discarding answers for party %s", self.party.id if self.party else None)
            self.reset()
        else:
            self.step_number -= 1
            self.phase = Phase.ANSWERING
            self.error = None
        return self.current_step

    # ----------------------------- answers -----------------------------
    def _answer(self, member_id: str) -> Answer:
        if self.phase is not Phase.ANSWERING:
            raise ValidationBlocked("Answers can only be changed while answering.")
        return self.answers[member_id]

    def _meal_event(self) -> Optional[EventKind]:
        return meal_event_for(invitation_for(self.party), self.policy)

    def _checked(
        self, event: EventKind, decision: Union[Decision, str, None]
    ) -> Tuple[EventKind, Optional[Decision]]:
        event = EventKind(event)
        if not getattr(self.party, event.value):
            raise ValidationBlocked(f"This invitation does not include the {event.value}.")
        return event, Decision(decision) if decision is not None else None

    def _apply(self, answer: Answer, event: EventKind, decision: Optional[Decision]) -> None:
        if event is EventKind.CEREMONY:
            answer.ceremony = decision
        else:
            answer.celebration = decision
        if event is self.policy.meal_event and decision is not Decision.YES:
            answer.meal = None

    def set_decision(
        self, member_id: str, event: EventKind, decision: Union[Decision, str, None]
    ) -> None:
        answer = self._answer(member_id)
        self._apply(answer, *self._checked(event, decision))

    def set_attendance(
        self,
        member_id: str,
        ceremony: Union[Decision, str, None],
        celebration: Union[Decision, str, None],
    ) -> None:
        """Set both decisions at once; nothing changes if either is rejected."""
        answer = self._answer(member_id)
        changes = [
            self._checked(EventKind.CEREMONY, ceremony),
            self._checked(EventKind.CELEBRATION, celebration),
        ]
        for event, decision in changes:
            self._apply(answer, event, decision)

    def set_meal(self, member_id: str, meal: Optional[str]) -> None:
        answer = self._answer(member_id)
        if meal is None:
            answer.meal = None
            return
        meal_event = self._meal_event()
        if meal_event is None or answer.decision(meal_event) is not Decision.YES:
            raise ValidationBlocked("No meal choice is needed for this guest.")
        if meal not in self.policy.options:
            raise ValidationBlocked(f"Unknown meal choice: {meal}")
        answer.meal = meal

    def set_note(self, member_id: str, event: EventKind, text: str) -> None:
        answer = self._answer(member_id)
        if EventKind(event) is EventKind.CEREMONY:
            answer.ceremony_note = text
        else:
            answer.celebration_note = text

    def set_dietary_notes(self, member_id: str, text: str) -> None:
        self._answer(member_id).dietary_notes = text

    # ----------------------------- submission -----------------------------
    def submit(self) -> Optional[str]:
        """Hand the answers to the store; returns the confirmation code."""
        if not self.can_submit:
            raise ValidationBlocked("Nothing to submit yet.")
        self._submitting = True
        try:
            code = self.store.submit_answers(self.party.id, InvitationFlags.of(self.party), self.answers)
        except Exception as exc:
            self._fail(IOFailure("Failed to submit RSVP. Please try again."), exc)
            return None
        finally:
            self._submitting = False

        self.confirmation_code = code
        self.party = replace(self.party, confirmation_code=code)
        self.phase = Phase.SUBMITTED
        self.error = None
        log.info("party %s submitted, confirmation %s", self.party.id, code)
        return code
