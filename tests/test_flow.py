import pathlib
import sys

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from wedding_rsvp import cli, csv_loader
from wedding_rsvp.models import Decision, EventKind
from wedding_rsvp.planner import StepKind
from wedding_rsvp.report import compute_totals
from wedding_rsvp.store import InMemoryPartyStore
from wedding_rsvp.wizard import Phase, WizardController

DATA_DIR = pathlib.Path(__file__).parent / "data"
PARTIES_CSV = DATA_DIR / "parties.csv"
MEMBERS_CSV = DATA_DIR / "members.csv"


def test_load_directory():
    parties = csv_loader.load_directory(PARTIES_CSV, MEMBERS_CSV)
    assert [p.id for p in parties] == ["pty-smith", "pty-doe", "pty-garcia", "pty-lee"]
    smith = parties[0]
    assert smith.label == "Smith Family"
    assert [m.full_name for m in smith.members] == ["John Smith", "Jane Smith"]
    assert smith.ceremony and smith.celebration
    assert parties[1].label == ""
    assert parties[3].confirmation_code == "K3X9QZ"
    assert smith.search_index == ("family", "jane", "john", "smith")


def test_load_directory_attaches_stored_answers():
    parties = csv_loader.load_directory(PARTIES_CSV, MEMBERS_CSV)
    assert parties[0].responses == ()
    (answer,) = parties[3].responses
    assert answer.member_id == "g-001"
    assert answer.ceremony is Decision.YES
    assert answer.celebration is Decision.NO
    assert answer.meal == "veal"
    assert answer.dietary_notes == "no shellfish"


def test_full_flow():
    store = InMemoryPartyStore(csv_loader.load_directory(PARTIES_CSV, MEMBERS_CSV))
    wizard = WizardController(store)

    results = wizard.search("garcia")
    assert [p.id for p in results] == ["pty-garcia"]

    wizard.select_party(results[0])
    assert wizard.current_step.kind is StepKind.EVENT
    assert wizard.current_step.label == "Ceremony RSVP"
    wizard.set_decision("g-001", EventKind.CEREMONY, Decision.YES)
    assert not wizard.can_advance
    wizard.set_decision("g-002", EventKind.CEREMONY, Decision.NO)
    wizard.advance()
    assert wizard.phase is Phase.CONFIRMING

    code = wizard.submit()
    assert store.fetch_party_by_confirmation_code(code).id == "pty-garcia"

    totals = compute_totals(store.fetch_all_parties())
    assert totals["submitted_parties"] == 2
    assert totals["response_rate"] == 50.0
    assert totals["ceremony_attending"] == 2
    assert totals["meal_counts"] == {"veal": 1}


def run_cli(capsys, *args):
    status = cli.main(["--parties", str(PARTIES_CSV), "--members", str(MEMBERS_CSV), *args])
    out, err = capsys.readouterr()
    return status, out.splitlines(), err


def test_cli_search(capsys):
    status, lines, _ = run_cli(capsys, "search", "Smith")
    assert status == 0
    assert lines == ["pty-smith,500,Smith Family"]


def test_cli_steps(capsys):
    status, lines, _ = run_cli(capsys, "steps", "pty-doe")
    assert status == 0
    assert lines == ["1,find,Find Invitation", "2,event,Celebration RSVP", "3,confirm,Confirmation"]

    status, _, err = run_cli(capsys, "steps", "pty-missing")
    assert status == 1
    assert "not found" in err


def test_cli_lookup_and_report(capsys):
    status, lines, _ = run_cli(capsys, "lookup", "k3x9qz")
    assert status == 0
    assert lines == ["pty-lee,K3X9QZ,Coworkers – Lee"]

    status, lines, _ = run_cli(capsys, "report")
    assert status == 0
    assert lines[0] == "[REPORT] parties=4 submitted=1 rate=25.0%"
    assert lines[1] == "[REPORT] ceremony=1 celebration=0 not_attending=0"
    assert lines[2] == "[REPORT] meal veal=1"


def test_cli_rejects_bad_settings(capsys, monkeypatch):
    monkeypatch.setenv("RSVP_MEAL_EVENT", "brunch")
    status, lines, err = run_cli(capsys, "search", "Smith")
    assert status == 1
    assert lines == []
    assert "RSVP_MEAL_EVENT" in err
