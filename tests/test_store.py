import pathlib
import random
import re
import sys

import pytest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from wedding_rsvp.models import Answer, Decision, Member, Party
from wedding_rsvp.store import InMemoryPartyStore, InvitationFlags, generate_confirmation_code


PARTY = Party("p1", (Member("m1", "Sam", "Ito"),), label="Ito", ceremony=True)


def test_confirmation_code_format():
    rng = random.Random(3)
    for _ in range(20):
        assert re.fullmatch(r"[0-9A-Z]{6}", generate_confirmation_code(rng))


def test_submit_merges_without_clobbering():
    store = InMemoryPartyStore([PARTY], rng=random.Random(0), clock=lambda: 1234.0)
    answer = Answer.seed(PARTY.members[0])
    answer.ceremony = Decision.YES
    code = store.submit_answers("p1", InvitationFlags.of(PARTY), {"m1": answer})

    stored = store.fetch_party_by_id("p1")
    assert stored.label == "Ito"
    assert stored.members == PARTY.members
    assert stored.confirmation_code == code
    assert stored.submitted_at == 1234.0
    assert stored.responses[0].ceremony is Decision.YES

    # later edits to the wizard's answer do not leak into the stored copy
    answer.ceremony = Decision.NO
    assert stored.responses[0].ceremony is Decision.YES


def test_lookup_by_code():
    store = InMemoryPartyStore([PARTY])
    code = store.submit_answers("p1", InvitationFlags.of(PARTY), {})
    assert store.fetch_party_by_confirmation_code(code.lower()).id == "p1"
    assert store.fetch_party_by_confirmation_code("") is None
    assert store.fetch_party_by_confirmation_code("NOPE00") is None


def test_duplicate_party_rejected():
    with pytest.raises(ValueError):
        InMemoryPartyStore([PARTY, PARTY])
