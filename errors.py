# errors.py
# Failure taxonomy for reminder scheduling. None of these is fatal to the app.


class ReminderError(Exception):
    """Base class for reminder scheduling failures."""


class PermissionDenied(ReminderError):
    """The user has not granted notification capability."""


class CollaboratorUnavailable(ReminderError):
    """A bill source, budget source or notification sink call failed."""


class InvalidBillData(ReminderError):
    """A bill or budget record cannot produce a notification."""
