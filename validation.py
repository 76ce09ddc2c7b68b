"""
Field validation rules for the contact form.

Each rule takes the raw submitted value and returns None when the value is
acceptable, otherwise a human readable error message. The same rules back
the pre-submission check and the server-side check, so they must stay free
of side effects.
"""

import re
from typing import Any, Callable, Dict, Mapping, Optional

from schemas import Subject

SUBJECTS = tuple(subject.value for subject in Subject)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

NAME_MIN_LENGTH = 2
MESSAGE_MIN_LENGTH = 10

NAME_ERROR = "Name must be at least 2 characters."
EMAIL_ERROR = "Invalid email format."
SUBJECT_ERROR = "Invalid subject selection."
MESSAGE_ERROR = "Message must be at least 10 characters."


def _stripped_length(value: Any) -> int:
    if not isinstance(value, str):
        return 0
    return len(value.strip())


def validate_name(value: Any) -> Optional[str]:
    if _stripped_length(value) < NAME_MIN_LENGTH:
        return NAME_ERROR
    return None


def validate_email(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not EMAIL_RE.fullmatch(value):
        return EMAIL_ERROR
    return None


def validate_subject(value: Any) -> Optional[str]:
    if not isinstance(value, str) or value not in SUBJECTS:
        return SUBJECT_ERROR
    return None


def validate_message(value: Any) -> Optional[str]:
    if _stripped_length(value) < MESSAGE_MIN_LENGTH:
        return MESSAGE_ERROR
    return None


RULES: Dict[str, Callable[[Any], Optional[str]]] = {
    "name": validate_name,
    "email": validate_email,
    "subject": validate_subject,
    "message": validate_message,
}


def validate_field(field: str, value: Any) -> Optional[str]:
    """Run the rule registered for ``field``. Unknown fields always pass."""
    rule = RULES.get(field)
    if rule is None:
        return None
    return rule(value)


def validate_contact(fields: Mapping[str, Any]) -> Dict[str, str]:
    """Validate all four contact fields, returning a field -> message map."""
    errors: Dict[str, str] = {}
    for field, rule in RULES.items():
        error = rule(fields.get(field))
        if error:
            errors[field] = error
    return errors
