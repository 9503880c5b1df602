"""
Admin layout editor.

Holds a working copy of the page layout; changes stay in memory until
commit() writes every assignment back.
"""

from typing import Dict, List, Union

from rvs_onboarding.config_store import ConfigurationStore
from rvs_onboarding.models import (
    DEFAULT_PAGE,
    PAGE_NUMBERS,
    ComponentAssignment,
    ComponentName,
)
from rvs_onboarding.store.base import OnboardingStore
from rvs_onboarding.validators import AssignmentProposal, propose_assignment


class AdminSession:
    """Working set of assignments being edited by an administrator."""

    def __init__(self, store: OnboardingStore):
        self.config = ConfigurationStore(store)
        self.assignments: List[ComponentAssignment] = []
        self.saving = False
        self.saved = False

    def load(self) -> List[ComponentAssignment]:
        self.assignments = self.config.load()
        self.saved = False
        return self.assignments

    def page_of(self, component: Union[ComponentName, str]) -> int:
        name = ComponentName(component)
        for assignment in self.assignments:
            if assignment.component_name == name:
                return assignment.page_number
        return DEFAULT_PAGE

    def set_page(self, component: Union[ComponentName, str], page: int) -> AssignmentProposal:
        """Move a component; a move that empties a page keeps the previous layout."""
        proposal = propose_assignment(self.assignments, component, page)
        self.assignments = list(proposal.assignments)
        self.saved = False
        return proposal

    def grouped(self) -> Dict[int, List[ComponentName]]:
        """Components currently on each page."""
        groups: Dict[int, List[ComponentName]] = {page: [] for page in PAGE_NUMBERS}
        for assignment in self.assignments:
            groups[assignment.page_number].append(assignment.component_name)
        return groups

    def commit(self) -> List[str]:
        """Write the whole working set.

        Raises:
            ValidationError: If a page would be empty
            ConfigCommitError: If some writes failed
        """
        self.saving = True
        try:
            written = self.config.commit(self.assignments)
        finally:
            self.saving = False
        self.saved = True
        return written
