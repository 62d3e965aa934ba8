"""Wedding RSVP party lookup and wizard package."""
from .models import Answer, Decision, EventKind, Member, Party
from .authoring import create_party
from .errors import IOFailure, NotFound, RsvpError, SearchCancelled, ValidationBlocked
from .search import rank_parties, score_party, search_parties, tokenize
from .planner import MealPolicy, WizardStep, plan
from .store import InMemoryPartyStore, PartyStore
from .wizard import Phase, WizardController
from .csv_loader import load_directory

__all__ = [
    "Answer",
    "Decision",
    "EventKind",
    "Member",
    "Party",
    "create_party",
    "RsvpError",
    "NotFound",
    "ValidationBlocked",
    "IOFailure",
    "SearchCancelled",
    "tokenize",
    "score_party",
    "rank_parties",
    "search_parties",
    "MealPolicy",
    "WizardStep",
    "plan",
    "PartyStore",
    "InMemoryPartyStore",
    "Phase",
    "WizardController",
    "load_directory",
]
