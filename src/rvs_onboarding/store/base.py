"""
RVS Onboarding Store Base Classes

Result type and abstract interface shared by all store backends.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from rvs_onboarding.exceptions import StoreError
from rvs_onboarding.logging_config import get_logger

logger = get_logger(__name__)

CONFIG_TABLE = "rvs_onboarding_config"
USERS_TABLE = "rvs_users"
PROFILES_TABLE = "rvs_user_profiles"


def utc_now() -> str:
    """Timestamp used for created_at/updated_at columns."""
    return datetime.now(timezone.utc).isoformat()


@dataclass
class StoreResult:
    """Outcome of one store call.

    A lookup that finds nothing is a success with ``data=None``.
    """
    ok: bool
    data: Any = None
    error: Optional[str] = None
    operation: str = ""
    table: str = ""

    @classmethod
    def success(cls, data: Any = None, operation: str = "", table: str = "") -> "StoreResult":
        return cls(True, data, None, operation, table)

    @classmethod
    def failure(cls, error: str, operation: str = "", table: str = "") -> "StoreResult":
        logger.error("Store %s on %s failed: %s", operation or "call", table or "?", error)
        return cls(False, None, error, operation, table)

    def unwrap(self) -> Any:
        """Return data or raise StoreError for a failed call."""
        if not self.ok:
            raise StoreError(
                f"Could not {self.operation.replace('_', ' ') or 'reach the store'}",
                operation=self.operation,
                table=self.table,
                details=self.error
            )
        return self.data


class OnboardingStore(ABC):
    """Relational collaborator holding configuration, users and profiles.

    Rows are returned as plain dicts keyed by column name.
    """

    @abstractmethod
    def load_config(self) -> StoreResult:
        """All rows of rvs_onboarding_config (component_name, page_number)."""

    @abstractmethod
    def save_config(self, component_name: str, page_number: int) -> StoreResult:
        """Write one assignment with a fresh updated_at."""

    @abstractmethod
    def get_user_by_id(self, user_id: int) -> StoreResult:
        """User row (id, email, current_step) or None."""

    @abstractmethod
    def get_user_by_email(self, email: str) -> StoreResult:
        """User row (id, email, current_step) or None."""

    @abstractmethod
    def create_user(self, email: str, password: str, current_step: int) -> StoreResult:
        """Insert a user; data is the new row including its id."""

    @abstractmethod
    def create_profile(self, user_id: int) -> StoreResult:
        """Insert an empty profile for the user."""

    @abstractmethod
    def get_profile(self, user_id: int) -> StoreResult:
        """Profile row or None."""

    @abstractmethod
    def update_profile(self, user_id: int, fields: Dict[str, Optional[str]]) -> StoreResult:
        """Update profile columns with a fresh updated_at."""

    @abstractmethod
    def update_step(self, user_id: int, current_step: int) -> StoreResult:
        """Update the user's current_step with a fresh updated_at."""

    @abstractmethod
    def list_users(self) -> StoreResult:
        """Users with their profile, newest first.

        Each row carries an ``rvs_user_profiles`` key holding the profile
        dict, a one-element list, or None.
        """

    def close(self) -> None:
        """Release backend resources."""
