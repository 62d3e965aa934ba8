"""Derive the ordered RSVP wizard steps for a party.

Steps are never stored. Every call to :func:`plan` rebuilds them from the
party's invitation flags and the current answers, so the same inputs always
give the same sequence.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Mapping, Optional, Tuple, Union

from .models import Answer, Decision, EventKind, Party

DEFAULT_MEAL_OPTIONS = ("chicken", "veal")


class StepKind(str, Enum):
    FIND = "find"
    ATTENDANCE = "attendance"  # both events plus meal on one screen
    EVENT = "event"  # a single event
    CONFIRM = "confirm"


@dataclass(frozen=True)
class BothEvents:
    pass


@dataclass(frozen=True)
class SingleEvent:
    event: EventKind


@dataclass(frozen=True)
class NoEvents:
    pass


Invitation = Union[BothEvents, SingleEvent, NoEvents]


@dataclass(frozen=True)
class MealPolicy:
    """Which event carries the meal and where the meal question is asked.

    ``meal_event`` is the event whose "yes" requires a meal choice.
    ``on_single_event`` asks for the meal on a single-event invitation too,
    but only when that single event is ``meal_event``.
    """

    meal_event: EventKind = EventKind.CEREMONY
    options: Tuple[str, ...] = DEFAULT_MEAL_OPTIONS
    on_single_event: bool = False


DEFAULT_POLICY = MealPolicy()


@dataclass(frozen=True)
class WizardStep:
    """One screen of the wizard. ``number`` is 1-based."""

    number: int
    kind: StepKind
    label: str
    complete: bool
    events: Tuple[EventKind, ...] = ()
    collects_meal: bool = False


def invitation_for(party: Party) -> Invitation:
    if party.ceremony and party.celebration:
        return BothEvents()
    if party.ceremony:
        return SingleEvent(EventKind.CEREMONY)
    if party.celebration:
        return SingleEvent(EventKind.CELEBRATION)
    return NoEvents()


def meal_event_for(invitation: Invitation, policy: MealPolicy = DEFAULT_POLICY) -> Optional[EventKind]:
    """The event whose "yes" asks for a meal, or ``None`` if no meal is asked."""
    if isinstance(invitation, BothEvents):
        return policy.meal_event
    if isinstance(invitation, SingleEvent):
        if policy.on_single_event and invitation.event is policy.meal_event:
            return invitation.event
    return None


def meal_required(answer: Answer, meal_event: Optional[EventKind]) -> bool:
    return meal_event is not None and answer.decision(meal_event) is Decision.YES


def _answers_complete(
    party: Party,
    answers: Mapping[str, Answer],
    events: Tuple[EventKind, ...],
    meal_event: Optional[EventKind],
) -> bool:
    for member in party.members:
        answer = answers.get(member.id)
        if answer is None:
            return False
        if any(answer.decision(event) is None for event in events):
            return False
        if meal_required(answer, meal_event) and not answer.meal:
            return False
    return True


def _answering_steps(
    party: Party, answers: Mapping[str, Answer], policy: MealPolicy
) -> List[Tuple[StepKind, str, Tuple[EventKind, ...], Optional[EventKind]]]:
    invitation = invitation_for(party)
    meal_event = meal_event_for(invitation, policy)
    if isinstance(invitation, BothEvents):
        return [(StepKind.ATTENDANCE, "RSVP", (EventKind.CEREMONY, EventKind.CELEBRATION), meal_event)]
    if isinstance(invitation, SingleEvent):
        label = f"{invitation.event.value.capitalize()} RSVP"
        return [(StepKind.EVENT, label, (invitation.event,), meal_event)]
    return []


def plan(
    party: Optional[Party],
    answers: Mapping[str, Answer],
    policy: MealPolicy = DEFAULT_POLICY,
) -> List[WizardStep]:
    """Ordered wizard steps for ``party`` given the current ``answers``.

    Without a party only the "find invitation" step exists.
    """
    if party is None:
        return [WizardStep(number=1, kind=StepKind.FIND, label="Find Invitation", complete=False)]

    steps = [WizardStep(number=1, kind=StepKind.FIND, label="Find Invitation", complete=True)]
    for kind, label, events, meal_event in _answering_steps(party, answers, policy):
        steps.append(
            WizardStep(
                number=len(steps) + 1,
                kind=kind,
                label=label,
                complete=_answers_complete(party, answers, events, meal_event),
                events=events,
                collects_meal=meal_event is not None,
            )
        )
    steps.append(WizardStep(number=len(steps) + 1, kind=StepKind.CONFIRM, label="Confirmation", complete=True))
    return steps
