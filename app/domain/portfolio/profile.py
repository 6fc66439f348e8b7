"""
Domain service: Profile editing.

Pure functions over an Account's public profile. Fields left as None
are not touched. Username uniqueness across accounts is enforced by the
repository, which raises UsernameTakenError.
"""

import re
from dataclasses import replace
from typing import Optional

from app.domain.portfolio.entities import Account
from app.domain.portfolio.errors import ValidationError

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{3,20}$")


def normalize_username(username: str) -> str:
    """Trim and lowercase a username.

    Raises:
        ValidationError: If the trimmed value is not 3-20 letters,
            digits, underscores or hyphens.
    """
    clean = username.strip()
    if not USERNAME_PATTERN.match(clean):
        raise ValidationError(
            "username", "must be 3-20 chars (letters, numbers, _ or -)"
        )
    return clean.lower()


def update_profile(
    state: Account,
    name: Optional[str] = None,
    username: Optional[str] = None,
    bio: Optional[str] = None,
) -> Account:
    """Return the account with the given profile fields replaced.

    Name and bio are stored trimmed. The returned account is ``state``
    itself when nothing changes.
    """
    changes = {}
    if name is not None:
        changes["name"] = name.strip()
    if bio is not None:
        changes["bio"] = bio.strip()
    if username is not None:
        changes["username"] = normalize_username(username)

    profile = replace(state.profile, **changes)
    if profile == state.profile:
        return state
    return replace(state, profile=profile)
