# app/utils/validators.py
"""
Identifier format validation for registration inputs.
"""

import re

from app.core.exceptions import InvalidIdFormatError

USER_ID_PATTERN = re.compile(r'^usr_[a-z0-9]{12}$')
EVENT_ID_PATTERN = re.compile(r'^evt_[a-z0-9]{12}$')
REGISTRATION_ID_PATTERN = re.compile(r'^reg_[a-z0-9]{12}$')


def validate_user_id(user_id: str) -> str:
    """
    Validate user_id format.

    Expected format: usr_[12 alphanumeric chars]

    Raises:
        InvalidIdFormatError: If the id is missing or malformed
    """
    if not user_id or not USER_ID_PATTERN.match(user_id):
        raise InvalidIdFormatError("user_id", user_id)
    return user_id


def validate_event_id(event_id: str) -> str:
    """
    Validate event_id format.

    Expected format: evt_[12 alphanumeric chars]

    Raises:
        InvalidIdFormatError: If the id is missing or malformed
    """
    if not event_id or not EVENT_ID_PATTERN.match(event_id):
        raise InvalidIdFormatError("event_id", event_id)
    return event_id


def is_registration_id(registration_id: str) -> bool:
    """Cheap format check so malformed path ids short-circuit to 404."""
    return bool(registration_id) and bool(REGISTRATION_ID_PATTERN.match(registration_id))
