"""
Progress Persister

Writes profile fields and the user's recorded step back to the store.
"""

from typing import Dict

from rvs_onboarding.exceptions import ProgressWriteError, StoreError
from rvs_onboarding.logging_config import get_logger
from rvs_onboarding.models import profile_update_payload
from rvs_onboarding.store.base import OnboardingStore

logger = get_logger(__name__)


class ProgressPersister:
    """Saves wizard progress for one user at a time."""

    def __init__(self, store: OnboardingStore):
        self.store = store

    def commit_step(self, user_id: int, profile_fields: Dict[str, str], next_step: int) -> None:
        """Save all profile fields, then record the next step.

        Empty strings are stored as null. Both writes refresh updated_at.

        Args:
            user_id: User being onboarded
            profile_fields: Current wizard field values
            next_step: Step to record (3 after page 2, 4 on completion)

        Raises:
            ProgressWriteError: If either write failed; the flags say which
                one reached the store
        """
        profile_result = self.store.update_profile(user_id, profile_update_payload(profile_fields))
        if not profile_result.ok:
            raise ProgressWriteError(
                "Could not save your details",
                profile_saved=False,
                step_saved=False,
                details=profile_result.error,
            )

        step_result = self.store.update_step(user_id, next_step)
        if not step_result.ok:
            raise ProgressWriteError(
                "Your details were saved but your progress was not",
                profile_saved=True,
                step_saved=False,
                details=step_result.error,
            )

        logger.debug("User %s saved profile and moved to step %s", user_id, next_step)

    def rewind(self, user_id: int, step: int = 2) -> None:
        """Record a step regression without touching the profile.

        Raises:
            StoreError: If the write failed
        """
        result = self.store.update_step(user_id, step)
        if not result.ok:
            raise StoreError(
                "Could not save your progress",
                operation=result.operation,
                table=result.table,
                details=result.error,
            )
        logger.debug("User %s rewound to step %s", user_id, step)
