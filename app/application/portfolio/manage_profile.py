"""
Use cases: Read and edit a user's public profile.

Input: GetProfileQuery / UpdateProfileCommand
Output: ProfileResult
Side effects: Update persists the edited profile.
Failure cases: AccountNotFoundError, ValidationError, UsernameTakenError,
    ConcurrentUpdateError.
"""

import logging

from app.application.portfolio.account_updater import AccountUpdater
from app.application.portfolio.dtos import (
    GetProfileQuery,
    ProfileResult,
    UpdateProfileCommand,
)
from app.domain.portfolio.entities import Account
from app.domain.portfolio.profile import update_profile

logger = logging.getLogger(__name__)


def _to_profile_result(account: Account) -> ProfileResult:
    return ProfileResult(
        user_id=account.user_id,
        name=account.profile.name,
        username=account.profile.username,
        bio=account.profile.bio,
        created_at=account.created_at,
    )


class GetProfileUseCase:
    """Returns the profile of a user."""

    def __init__(self, updater: AccountUpdater) -> None:
        self._updater = updater

    def execute(self, query: GetProfileQuery) -> ProfileResult:
        return _to_profile_result(self._updater.load(query.user_id))


class UpdateProfileUseCase:
    """Applies a partial profile edit. Fields left as None are kept."""

    def __init__(self, updater: AccountUpdater) -> None:
        self._updater = updater

    def execute(self, command: UpdateProfileCommand) -> ProfileResult:
        """Run the update-profile use case.

        Raises:
            ValidationError: If the username is malformed.
            UsernameTakenError: If another account holds the username.
        """
        account = self._updater.apply(
            command.user_id,
            lambda state: update_profile(
                state,
                name=command.name,
                username=command.username,
                bio=command.bio,
            ),
        )
        logger.info("Updated profile for user=%s", command.user_id)
        return _to_profile_result(account)
