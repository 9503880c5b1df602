"""
RVS Onboarding Validators

Input validation for account identification and the page-layout rule.
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Sequence, Tuple, Union

from rvs_onboarding.logging_config import get_logger
from rvs_onboarding.models import PAGE_NUMBERS, ComponentAssignment, ComponentName

logger = get_logger(__name__)


def validate_credentials(email: str, password: str) -> Tuple[bool, str]:
    """Check that both identification inputs are present.

    Args:
        email: Submitted email
        password: Submitted password

    Returns:
        Tuple of (is_valid, message)
    """
    if not email or not password:
        return False, "Email and password are required."
    return True, "Credentials provided"


def validate_birthdate(value: str) -> Tuple[bool, str]:
    """Validate an optional ISO birthdate (YYYY-MM-DD)."""
    if not value:
        return True, "No birthdate given"
    try:
        date.fromisoformat(value)
    except ValueError:
        return False, "Birthdate should be in format YYYY-MM-DD"
    return True, "Valid birthdate"


def page_counts(assignments: Sequence[ComponentAssignment]) -> dict:
    """Number of components on each page."""
    counts = {page: 0 for page in PAGE_NUMBERS}
    for assignment in assignments:
        counts[assignment.page_number] = counts.get(assignment.page_number, 0) + 1
    return counts


def validate_layout(assignments: Sequence[ComponentAssignment]) -> Tuple[bool, str]:
    """Check that no wizard page is left without components.

    Returns:
        Tuple of (is_valid, message)
    """
    counts = page_counts(assignments)
    empty = [page for page in PAGE_NUMBERS if counts[page] == 0]
    if empty:
        pages = " and ".join(f"page {page}" for page in empty)
        return False, f"Each page needs at least one component; {pages} would be empty"
    return True, "Valid layout"


@dataclass(frozen=True)
class AssignmentProposal:
    """Result of proposing a page change.

    When rejected, ``assignments`` is the unchanged input set.
    """
    assignments: Tuple[ComponentAssignment, ...]
    accepted: bool
    message: str = ""

    @property
    def rejected(self) -> bool:
        return not self.accepted


def propose_assignment(
    current: Sequence[ComponentAssignment],
    component_name: Union[ComponentName, str],
    new_page: int,
) -> AssignmentProposal:
    """Move one component to another page, in memory only.

    Args:
        current: Working set of assignments
        component_name: Component to move
        new_page: Target page (2 or 3)

    Returns:
        AssignmentProposal with the candidate set, or the prior set if the
        move would leave a page empty
    """
    name = ComponentName(component_name)
    previous = tuple(current)

    if new_page not in PAGE_NUMBERS:
        return AssignmentProposal(previous, False, f"Page must be one of {PAGE_NUMBERS}")

    candidate: List[ComponentAssignment] = [
        a.on_page(new_page) if a.component_name == name else a
        for a in previous
    ]

    valid, message = validate_layout(candidate)
    if not valid:
        logger.info("Rejected moving %s to page %s: %s", name.value, new_page, message)
        return AssignmentProposal(previous, False, message)

    return AssignmentProposal(tuple(candidate), True, message)
