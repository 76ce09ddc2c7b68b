"""Exceptions raised by the contact service and its collaborators."""

from typing import Dict


class ContactAppError(Exception):
    """Base class for every error the application raises on purpose."""


class ValidationFailed(ContactAppError):
    def __init__(self, errors: Dict[str, str]):
        super().__init__("Validation failed: " + ", ".join(sorted(errors)))
        self.errors = errors


class NotFound(ContactAppError):
    def __init__(self, submission_id: int):
        super().__init__(f"Submission {submission_id} not found")
        self.submission_id = submission_id


class StorageUnavailable(ContactAppError):
    """The backing store could not be written."""


class UpstreamUnavailable(ContactAppError):
    """The text-generation provider is unconfigured or unreachable."""
