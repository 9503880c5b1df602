"""
Wizard session state.

One record per wizard session, passed by reference to the step engine.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from rvs_onboarding.models import DONE_STEP, ComponentAssignment, empty_fields


@dataclass
class WizardState:
    """In-memory state of one onboarding session."""
    step: int = 1
    done: bool = False
    user_id: Optional[int] = None
    email: str = ""
    password: str = ""
    fields: Dict[str, str] = field(default_factory=empty_fields)
    profile_loaded: bool = True  # False until a stored profile could be read
    assignments: List[ComponentAssignment] = field(default_factory=list)  # snapshot from load
    loading: bool = False
    error: str = ""

    @property
    def phase(self) -> str:
        """Step number as text, or 'done'."""
        return "done" if self.done else str(self.step)

    def enter_progress(self, current_step: int) -> None:
        """Jump to where a stored user left off.

        Step 4 or later is terminal; anything before step 2 lands on step 2.
        """
        if current_step >= DONE_STEP:
            self.done = True
        else:
            self.step = max(current_step, 2)

