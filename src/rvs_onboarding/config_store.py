"""
Configuration Store

Reads the page assignment of each form component and commits admin changes.
"""

from typing import List, Sequence

from pydantic import ValidationError as SchemaError

from rvs_onboarding.exceptions import ConfigCommitError, ValidationError
from rvs_onboarding.logging_config import get_logger
from rvs_onboarding.models import (
    COMPONENTS,
    DEFAULT_PAGE,
    ComponentAssignment,
    ComponentName,
)
from rvs_onboarding.store.base import OnboardingStore
from rvs_onboarding.validators import validate_layout

logger = get_logger(__name__)


class ConfigurationStore:
    """Page assignments persisted in rvs_onboarding_config."""

    def __init__(self, store: OnboardingStore):
        self.store = store

    def load(self) -> List[ComponentAssignment]:
        """Load one assignment per known component.

        Components without a row default to page 2. Rows naming an unknown
        component or an invalid page are skipped.

        Raises:
            StoreError: If the configuration cannot be read
        """
        rows = self.store.load_config().unwrap() or []

        found = {}
        for row in rows:
            try:
                assignment = ComponentAssignment(**row)
            except SchemaError as e:
                logger.warning("Ignoring configuration row %s: %s", row, e.errors()[0]["msg"])
                continue
            found[assignment.component_name] = assignment

        return [
            found.get(name) or ComponentAssignment(component_name=name, page_number=DEFAULT_PAGE)
            for name in COMPONENTS
        ]

    def save(self, component_name: ComponentName, page_number: int) -> bool:
        """Write one assignment. Returns True on success."""
        result = self.store.save_config(ComponentName(component_name).value, page_number)
        return result.ok

    def commit(self, assignments: Sequence[ComponentAssignment]) -> List[str]:
        """Write every assignment in the working set, one call per component.

        There is no cross-component transaction: a failure partway leaves
        the earlier writes in place.

        Returns:
            Names of the components written

        Raises:
            ValidationError: If the set would leave a page empty (nothing is written)
            ConfigCommitError: If any write failed
        """
        valid, message = validate_layout(assignments)
        if not valid:
            raise ValidationError(message, field="layout")

        written: List[str] = []
        failed: List[str] = []
        for assignment in assignments:
            name = assignment.component_name.value
            if self.save(assignment.component_name, assignment.page_number):
                written.append(name)
            else:
                failed.append(name)

        if failed:
            raise ConfigCommitError(
                f"Configuration partially saved ({len(written)} of {len(written) + len(failed)})",
                written=written,
                failed=failed,
            )

        logger.info("Committed onboarding layout: %s", {
            a.component_name.value: a.page_number for a in assignments
        })
        return written
