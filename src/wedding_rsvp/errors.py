"""Error taxonomy shared by the lookup engine and the wizard."""
from __future__ import annotations


class RsvpError(Exception):
    """Base class. ``str(err)`` is suitable for showing to a guest."""


class NotFound(RsvpError):
    """No party for a given id or confirmation code."""


class ValidationBlocked(RsvpError):
    """A transition was requested while its precondition does not hold."""


class IOFailure(RsvpError):
    """A directory or submission collaborator failed."""


class SearchCancelled(RsvpError):
    """A search was superseded by a newer request."""
