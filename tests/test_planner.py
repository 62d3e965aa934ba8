"""Tests for the wizard step planner."""
import pathlib
import sys

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from wedding_rsvp.models import Answer, Decision, EventKind, Member, Party
from wedding_rsvp.planner import (
    BothEvents,
    MealPolicy,
    NoEvents,
    SingleEvent,
    StepKind,
    invitation_for,
    plan,
)


MEMBERS = (Member("m1", "Ana", "Ruiz"), Member("m2", "Ben", "Ruiz"))


def seeded(party):
    return {m.id: Answer.seed(m) for m in party.members}


def test_no_party_has_only_find_step():
    steps = plan(None, {})
    assert len(steps) == 1
    assert steps[0].kind is StepKind.FIND
    assert not steps[0].complete


def test_invitation_variants():
    assert invitation_for(Party("p", MEMBERS, ceremony=True, celebration=True)) == BothEvents()
    assert invitation_for(Party("p", MEMBERS, ceremony=True)) == SingleEvent(EventKind.CEREMONY)
    assert invitation_for(Party("p", MEMBERS, celebration=True)) == SingleEvent(EventKind.CELEBRATION)
    assert invitation_for(Party("p", MEMBERS)) == NoEvents()


def test_both_events_steps_and_meal_rule():
    party = Party("p", MEMBERS, ceremony=True, celebration=True)
    answers = seeded(party)
    steps = plan(party, answers)
    assert [s.kind for s in steps] == [StepKind.FIND, StepKind.ATTENDANCE, StepKind.CONFIRM]
    assert [s.number for s in steps] == [1, 2, 3]
    assert steps[0].complete and steps[2].complete
    assert not steps[1].complete
    assert steps[1].collects_meal

    answers["m1"].ceremony = Decision.YES
    answers["m1"].celebration = Decision.YES
    answers["m2"].ceremony = Decision.NO
    answers["m2"].celebration = Decision.YES
    assert not plan(party, answers)[1].complete

    answers["m1"].meal = "veal"
    assert plan(party, answers)[1].complete


def test_single_event_only_needs_that_decision():
    party = Party("p", MEMBERS, celebration=True)
    answers = seeded(party)
    steps = plan(party, answers)
    assert [s.kind for s in steps] == [StepKind.FIND, StepKind.EVENT, StepKind.CONFIRM]
    assert steps[1].label == "Celebration RSVP"
    assert steps[1].events == (EventKind.CELEBRATION,)
    assert not steps[1].collects_meal

    for answer in answers.values():
        answer.celebration = Decision.YES
    assert plan(party, answers)[1].complete


def test_single_event_meal_policy():
    policy = MealPolicy(on_single_event=True)
    ceremony_only = Party("p", MEMBERS, ceremony=True)
    answers = seeded(ceremony_only)
    answers["m1"].ceremony = Decision.YES
    answers["m2"].ceremony = Decision.NO
    step = plan(ceremony_only, answers, policy)[1]
    assert step.collects_meal
    assert not step.complete
    answers["m1"].meal = "chicken"
    assert plan(ceremony_only, answers, policy)[1].complete

    # the meal never attaches to the event that does not carry it
    celebration_only = Party("q", MEMBERS, celebration=True)
    assert not plan(celebration_only, seeded(celebration_only), policy)[1].collects_meal


def test_no_events_goes_straight_to_confirmation():
    party = Party("p", MEMBERS)
    steps = plan(party, seeded(party))
    assert [s.kind for s in steps] == [StepKind.FIND, StepKind.CONFIRM]


def test_missing_answer_is_incomplete():
    party = Party("p", MEMBERS, celebration=True)
    answers = {"m1": Answer.seed(MEMBERS[0])}
    answers["m1"].celebration = Decision.NO
    assert not plan(party, answers)[1].complete


def test_plan_is_deterministic():
    party = Party("p", MEMBERS, ceremony=True, celebration=True)
    answers = seeded(party)
    answers["m1"].ceremony = Decision.YES
    assert plan(party, answers) == plan(party, answers)
