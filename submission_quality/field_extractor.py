"""
Field Extraction for Form Architect.

Locates semantically typed fields in free-form submissions:
- Email address
- Contact name
- Phone, message, company and contact-preference fields

Forms have no fixed schema, so fields are recognised by case-insensitive
substring matches on the field name. Submissions are iterated in insertion
order and the first qualifying field wins.
"""

import logging
import re
from enum import Enum
from typing import Any, Dict, List, Tuple, Union

logger = logging.getLogger(__name__)

FieldValue = Union[str, List[str]]
Submission = Dict[str, FieldValue]


class FieldRole(Enum):
    """Semantic roles recognised by field-name keywords."""
    EMAIL = ("email",)
    NAME = ("name",)
    PHONE = ("phone", "tel", "mobile")
    MESSAGE = ("message", "comment", "description", "details")
    COMPANY = ("company", "organization", "business")
    SUBJECT = ("subject",)
    CONTACT_PREFERENCE = ("prefer", "contact", "reach", "best_time", "availability")

    @property
    def keywords(self) -> Tuple[str, ...]:
        return self.value


# Exact field names checked before the substring fallback
PREFERRED_NAME_FIELDS = ("name", "full_name", "first_name", "your_name", "fname")

EMAIL_PATTERN = re.compile(
    r'^[A-Za-z0-9._%+-]+@[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*\.[A-Za-z]{2,}$'
)


def matches_role(field_name: str, role: FieldRole) -> bool:
    """Check whether a field name contains any keyword of a role."""
    name = field_name.lower()
    return any(keyword in name for keyword in role.keywords)


def is_valid_email(value: Any) -> bool:
    """Check a value has the ``local@domain.tld`` shape."""
    if not isinstance(value, str) or not value:
        return False
    return EMAIL_PATTERN.match(value) is not None


def email_domain(email: str) -> str:
    """Return the lowercased domain after the last ``@``."""
    if not email or "@" not in email:
        return ""
    return email.rsplit("@", 1)[1].lower()


def email_local_part(email: str) -> str:
    """Return the part before the first ``@``."""
    if not email or "@" not in email:
        return ""
    return email.split("@", 1)[0]


def extract_email(submission: Submission) -> str:
    """
    Extract the submitter's email address.

    A string field whose name contains "email" is returned as-is, valid or
    not. Only when no such field exists are the remaining values scanned for
    something that looks like an address.

    Args:
        submission: Field name to value mapping

    Returns:
        Email address or empty string
    """
    for key, value in submission.items():
        if "email" in str(key).lower() and isinstance(value, str):
            return value

    for value in submission.values():
        if isinstance(value, str) and is_valid_email(value):
            return value

    return ""


def extract_name(submission: Submission) -> str:
    """
    Extract the submitter's name.

    Args:
        submission: Field name to value mapping

    Returns:
        Trimmed name or empty string
    """
    for field_name in PREFERRED_NAME_FIELDS:
        value = submission.get(field_name)
        if isinstance(value, str) and value.strip():
            return value.strip()

    for key, value in submission.items():
        if matches_role(str(key), FieldRole.NAME) and isinstance(value, str) and value.strip():
            return value.strip()

    return ""


def has_field(submission: Submission, role: FieldRole, min_length: int) -> bool:
    """
    Check for a role field holding a string longer than ``min_length``.

    The length is measured after trimming. Lists and other non-string values
    never qualify.
    """
    for key, value in submission.items():
        if not matches_role(str(key), role):
            continue
        if isinstance(value, str) and len(value.strip()) > min_length:
            return True
    return False


def has_filled_field(submission: Submission, role: FieldRole) -> bool:
    """Check for a role field with any non-empty value."""
    for key, value in submission.items():
        if matches_role(str(key), role) and _is_filled(value):
            return True
    return False


def has_selection(submission: Submission) -> bool:
    """Check whether any checkbox or multi-select value was chosen."""
    return any(isinstance(value, list) and len(value) > 0 for value in submission.values())


def flatten_text(submission: Submission) -> str:
    """Join every value into one string, lists joined with commas."""
    parts = []
    for value in submission.values():
        if isinstance(value, list):
            parts.append(", ".join(str(item) for item in value))
        elif isinstance(value, (str, int, float)) and not isinstance(value, bool):
            parts.append(str(value))
        else:
            parts.append("")
    return " ".join(parts)


def string_text(submission: Submission) -> str:
    """Join only the scalar string values, ignoring lists."""
    return " ".join(value for value in submission.values() if isinstance(value, str))


def _is_filled(value: Any) -> bool:
    if isinstance(value, (str, list)):
        return len(value) > 0
    return bool(value)
