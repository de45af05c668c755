from __future__ import annotations


class TimeclockError(Exception):
    """Base class for every failure the timeclock core reports."""


class InvalidInput(TimeclockError):
    """Malformed command or argument, rejected before the store is touched."""


class InvalidFeatureVector(InvalidInput):
    pass


class InvalidWindow(InvalidInput):
    pass


class AuthenticationError(TimeclockError):
    pass


class NoEnrolledIdentities(AuthenticationError):
    pass


class NoMatch(AuthenticationError):
    pass


class NotPunchedIn(TimeclockError):
    pass


class DuplicateSubject(TimeclockError):
    pass


class SubjectNotFound(TimeclockError):
    pass


class StoreUnavailable(TimeclockError):
    """Raised for any failure talking to the event or identity store."""
