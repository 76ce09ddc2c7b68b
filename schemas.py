"""
Schemas for the Contact App

The persisted collection is a single JSON document keyed by "submissions";
each entry maps to the Submission model below. Request bodies are kept
loose on purpose so that validation.py produces the field error messages
rather than the framework.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a trailing Z."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Subject(str, Enum):
    GENERAL_INQUIRY = "General Inquiry"
    TECHNICAL_SUPPORT = "Technical Support"
    FEEDBACK = "Feedback"
    PARTNERSHIP = "Partnership"
    OTHER = "Other"


class Status(str, Enum):
    NEW = "new"
    RESOLVED = "resolved"


class Submission(BaseModel):
    """
    A contact form inquiry as stored
    Collection key: "submissions"
    """
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., description="Auto-incremented identifier", ge=1)
    name: str = Field(..., description="Full name of the person inquiring")
    email: str = Field(..., description="Contact email")
    subject: Subject = Field(..., description="Selected inquiry subject")
    message: str = Field(..., description="Inquiry message")
    status: Status = Field(Status.NEW, description="Handling status")
    created_at: datetime = Field(..., alias="createdAt", description="Creation time, UTC")

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, value: datetime) -> datetime:
        # Stored precision is milliseconds; naive times are taken as UTC.
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        return value.replace(microsecond=value.microsecond // 1000 * 1000)

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return format_timestamp(value)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class SubmissionCollection(BaseModel):
    submissions: List[Submission] = Field(default_factory=list)


class ContactForm(BaseModel):
    """Body of POST /api/contact. Values of any JSON type reach the field rules."""
    model_config = ConfigDict(extra="ignore")

    name: Any = None
    email: Any = None
    subject: Any = None
    message: Any = None


class AiReplyRequest(BaseModel):
    """Body of POST /api/ai-reply. Forwarded as-is, no validation rules apply."""
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = ""
    subject: Optional[str] = ""
    message: Optional[str] = ""


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str = ""
    password: str = ""
