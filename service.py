"""
Submission service: validation, id assignment and status changes.

Every operation reloads the full collection from the store, mutates it in
memory and writes it back under a single lock, so the store stays the only
copy of the data.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping

from database import SubmissionStore
from errors import NotFound, ValidationFailed
from schemas import Status, Submission
from validation import validate_contact

log = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SubmissionService:
    def __init__(self, store: SubmissionStore, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.clock = clock
        self._lock = threading.Lock()

    def create(self, fields: Mapping[str, Any]) -> Submission:
        """Validate ``fields`` and persist a new submission with status ``new``."""
        errors = validate_contact(fields)
        if errors:
            raise ValidationFailed(errors)

        with self._lock:
            submissions = self.store.load()
            new_id = max((s.id for s in submissions), default=0) + 1
            submission = Submission(
                id=new_id,
                name=fields["name"],
                email=fields["email"],
                subject=fields["subject"],
                message=fields["message"],
                status=Status.NEW,
                created_at=self.clock(),
            )
            submissions.append(submission)
            self.store.save(submissions)

        log.info("Created submission %s (%s)", submission.id, submission.subject.value)
        return submission

    def list(self) -> List[Submission]:
        """All submissions, newest first."""
        with self._lock:
            submissions = self.store.load()
        return sorted(submissions, key=lambda s: (s.created_at, s.id), reverse=True)

    def resolve(self, submission_id: int) -> Submission:
        with self._lock:
            submissions = self.store.load()
            for submission in submissions:
                if submission.id == submission_id:
                    break
            else:
                raise NotFound(submission_id)
            # Resolving twice is allowed and leaves the record unchanged.
            submission.status = Status.RESOLVED
            self.store.save(submissions)

        log.info("Resolved submission %s", submission_id)
        return submission

    def delete(self, submission_id: int) -> None:
        with self._lock:
            submissions = self.store.load()
            remaining = [s for s in submissions if s.id != submission_id]
            if len(remaining) == len(submissions):
                raise NotFound(submission_id)
            self.store.save(remaining)

        log.info("Deleted submission %s", submission_id)
