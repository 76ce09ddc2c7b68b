"""
Submission storage.

The whole collection is the unit of read and write: callers load every
submission, mutate the list in memory and save it back. Any object with
``load()`` and ``save()`` can stand in for the JSON file, which keeps the
service independent of the backing medium.
"""

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Protocol, Union

from pydantic import ValidationError

from errors import StorageUnavailable
from schemas import Submission, SubmissionCollection

log = logging.getLogger(__name__)


class SubmissionStore(Protocol):
    def load(self) -> List[Submission]:
        ...

    def save(self, submissions: List[Submission]) -> None:
        ...


class JsonFileStore:
    """Keeps every submission in one JSON document on disk."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> List[Submission]:
        """Return all stored submissions.

        A missing file is an empty store. A file that exists but cannot be
        parsed is moved aside (never deleted) and the store starts empty.
        """
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_bytes()
        except OSError:
            log.exception("Could not read %s, treating store as empty", self.path)
            return []
        try:
            return SubmissionCollection.model_validate(json.loads(raw)).submissions
        except (ValueError, ValidationError) as e:
            reason = str(e)[:80]
        quarantined = self._quarantine()
        if quarantined is None:
            log.error("Store %s is corrupt (%s) and stays in place; starting empty", self.path, reason)
        else:
            log.warning(
                "Store %s is corrupt (%s); moved to %s and starting empty",
                self.path, reason, quarantined,
            )
        return []

    def save(self, submissions: List[Submission]) -> None:
        """Replace the stored collection with ``submissions``."""
        payload = {"submissions": [s.to_json() for s in submissions]}
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            log.exception("Could not write %s", self.path)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageUnavailable(f"could not write {self.path}") from e

    def describe(self) -> str:
        return str(self.path)

    def _quarantine(self) -> Optional[Path]:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        target = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        try:
            os.replace(self.path, target)
        except OSError:
            log.exception("Could not move aside %s", self.path)
            return None
        return target


class InMemoryStore:
    """Process-local store, mostly useful for tests and embedding."""

    def __init__(self, submissions: Optional[List[Submission]] = None):
        self._submissions = [s.model_copy() for s in submissions or []]

    def load(self) -> List[Submission]:
        return [s.model_copy() for s in self._submissions]

    def save(self, submissions: List[Submission]) -> None:
        self._submissions = [s.model_copy() for s in submissions]

    def describe(self) -> str:
        return "memory"
