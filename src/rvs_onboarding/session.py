"""
Session Resume Service

Reconciles the device-local remembered user id with stored progress, and
identifies (or creates) the account on step 1.
"""

import json
from pathlib import Path
from typing import Optional

from rvs_onboarding.exceptions import StoreError, ValidationError
from rvs_onboarding.logging_config import get_logger
from rvs_onboarding.models import OnboardingUser, UserProfile, empty_fields
from rvs_onboarding.state import WizardState
from rvs_onboarding.store.base import OnboardingStore
from rvs_onboarding.validators import validate_credentials

logger = get_logger(__name__)

PROFILE_NOT_LOADED = "Could not load your saved details. They will be loaded again before anything is saved."


class RememberedIdentifier:
    """Last-used user id, kept in a small JSON file on this device."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def get(self) -> Optional[int]:
        """Return the remembered id, or None if absent or unreadable."""
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text())
            return int(data["user_id"])
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, OSError):
            logger.warning("Ignoring unreadable session file %s", self.path)
            return None

    def remember(self, user_id: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"user_id": user_id}))

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


class SessionResumeService:
    """Builds the initial wizard state for this device."""

    def __init__(self, store: OnboardingStore, remembered: RememberedIdentifier):
        self.store = store
        self.remembered = remembered

    def resume(self, state: WizardState) -> WizardState:
        """Restore the remembered user's step and profile fields.

        A remembered id that no longer matches a user is cleared and the
        wizard starts at step 1. A lookup failure also starts at step 1 but
        keeps the id, since the user may still exist.
        """
        user_id = self.remembered.get()
        if user_id is None:
            return state

        result = self.store.get_user_by_id(user_id)
        if not result.ok:
            state.error = "Could not restore your previous session. Please sign in again."
            return state

        if result.data is None:
            logger.info("Remembered user %s not found, starting fresh", user_id)
            self.remembered.clear()
            return state

        user = OnboardingUser(**result.data)
        state.user_id = user.id
        state.email = user.email
        state.enter_progress(user.current_step)

        if not state.done:
            self.load_profile(state)
        return state

    def load_profile(self, state: WizardState, keep_edits: bool = False) -> bool:
        """Fill wizard fields from the stored profile.

        A user without a profile row gets an empty one. If the profile
        cannot be read (or created), ``state.profile_loaded`` is cleared and
        ``state.error`` says so; the engine refuses to save until a later
        call succeeds.

        Args:
            state: Session to fill
            keep_edits: Keep non-empty values already typed into the fields

        Returns:
            True if the fields now reflect the stored profile
        """
        result = self.store.get_profile(state.user_id)
        stored = empty_fields()
        if result.ok and result.data is None:
            logger.warning("User %s has no profile, creating one", state.user_id)
            result = self.store.create_profile(state.user_id)
        elif result.ok:
            stored = UserProfile(**result.data).field_values()

        if not result.ok:
            logger.warning("Profile for user %s not loaded", state.user_id)
            state.profile_loaded = False
            state.error = PROFILE_NOT_LOADED
            return False

        if keep_edits:
            stored.update({name: value for name, value in state.fields.items() if value})
        state.fields = stored
        state.profile_loaded = True
        return True

    def identify(self, state: WizardState, email: str, password: str) -> None:
        """Find the account by email, or create it with an empty profile.

        An existing account is resumed without checking the password, and
        its stored profile is loaded as on a resume.

        Raises:
            ValidationError: If email or password is empty (no store call is made)
            StoreError: If the lookup or account creation failed
        """
        valid, message = validate_credentials(email, password)
        if not valid:
            raise ValidationError(message, field="email" if not email else "password")

        state.email = email
        state.password = password

        existing = self.store.get_user_by_email(email).unwrap()
        if existing:
            user = OnboardingUser(**existing)
            state.user_id = user.id
            self.remembered.remember(user.id)
            state.enter_progress(user.current_step)
            if not state.done:
                self.load_profile(state)
            logger.info("Resuming user %s at %s", user.id, state.phase)
            return

        created = self.store.create_user(email, password, 2)
        if not created.ok:
            raise StoreError(
                created.error or "Could not create your account",
                operation="create_user",
                table=created.table,
            )
        user = OnboardingUser(**created.data)
        self.remembered.remember(user.id)

        self.store.create_profile(user.id).unwrap()

        state.user_id = user.id
        state.fields = empty_fields()
        state.profile_loaded = True
        state.step = 2
        logger.info("Created user %s", user.id)
