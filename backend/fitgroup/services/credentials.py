"""
FitGroup Backend — Credential Checks
====================================

What:  The single place where a supplied password is compared with a stored one.
Why:   Participant passwords are stored as opaque strings and compared by exact
       match. Keeping every comparison behind this module means hashing can be
       introduced later without touching the lifecycle services.
How:   secrets.compare_digest gives exact-match semantics in constant time.
"""

import secrets
from typing import Optional

from fitgroup.exceptions import AuthorizationError
from fitgroup.models import Participant


def password_matches(stored: str, supplied: Optional[str]) -> bool:
    """Exact string comparison; a missing password never matches."""
    if supplied is None:
        return False
    return secrets.compare_digest(stored.encode("utf-8"), supplied.encode("utf-8"))


def verify_participant_password(participant: Participant, supplied: Optional[str]) -> None:
    """
    Raise AuthorizationError unless `supplied` matches the participant's password.

    Used for owner-gated group mutations and for leaving a group.
    """
    if not password_matches(participant.password, supplied):
        raise AuthorizationError(
            message="Wrong password",
            context={"participant_id": participant.id},
        )
