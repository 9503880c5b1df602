"""
Step Engine

Drives one onboarding session through steps 1-3 and the done state.

    1 --identify--> 2 --advance--> 3 --complete--> done
    1 <---back----- 2 <---back---- 3

Advancing and completing save the profile before the step moves. Going
back from step 3 records step 2 in the store right away; going back from
step 2 is local only.
"""

from contextlib import contextmanager
from typing import Dict, List, Optional, Sequence

from rvs_onboarding.config_store import ConfigurationStore
from rvs_onboarding.exceptions import BusyError, OnboardingError, StoreError, TransitionError
from rvs_onboarding.logging_config import get_logger
from rvs_onboarding.models import (
    COMPONENT_FIELDS,
    COMPONENTS,
    DONE_STEP,
    PROFILE_FIELDS,
    ComponentAssignment,
    ComponentName,
)
from rvs_onboarding.persister import ProgressPersister
from rvs_onboarding.session import PROFILE_NOT_LOADED, RememberedIdentifier, SessionResumeService
from rvs_onboarding.state import WizardState
from rvs_onboarding.store.base import PROFILES_TABLE, OnboardingStore

logger = get_logger(__name__)


def fields_for_step(assignments: Sequence[ComponentAssignment], step: int) -> List[ComponentName]:
    """Components assigned to a step, in canonical render order."""
    on_step = {a.component_name for a in assignments if a.page_number == step}
    return [name for name in COMPONENTS if name in on_step]


class StepEngine:
    """Step state machine for one wizard session.

    Action methods return True when the transition happened. A failed
    action leaves the step unchanged and puts a user-facing message in
    ``state.error``.
    """

    def __init__(
        self,
        store: OnboardingStore,
        remembered: RememberedIdentifier,
        state: Optional[WizardState] = None,
    ):
        self.store = store
        self.remembered = remembered
        self.state = state or WizardState()
        self.config = ConfigurationStore(store)
        self.sessions = SessionResumeService(store, remembered)
        self.persister = ProgressPersister(store)

    def load(self) -> WizardState:
        """Snapshot the layout and resume any remembered user.

        Raises:
            StoreError: If the layout cannot be read
        """
        self.state.assignments = self.config.load()
        self.sessions.resume(self.state)
        logger.debug("Session loaded at %s", self.state.phase)
        return self.state

    def components_for_step(self, step: Optional[int] = None) -> List[ComponentName]:
        """Components to render on a step (default: the current one)."""
        return fields_for_step(self.state.assignments, self.state.step if step is None else step)

    def component_values(self, component: ComponentName) -> Dict[str, str]:
        """Current values of the profile fields a component edits."""
        return {name: self.state.fields.get(name, "") for name in COMPONENT_FIELDS[component]}

    def set_field(self, name: str, value: str) -> None:
        """Change callback for profile inputs."""
        if name not in PROFILE_FIELDS:
            raise KeyError(f"Unknown profile field: {name}")
        self.state.fields[name] = value

    @contextmanager
    def _action(self, action: str):
        """Run one user action with the busy flag set.

        Raises:
            BusyError: If another action is still running
        """
        if self.state.loading:
            logger.warning("Ignoring '%s' while another action is running", action)
            raise BusyError(action=action)
        self.state.loading = True
        self.state.error = ""
        try:
            yield
        finally:
            self.state.loading = False

    def _run(self, action: str, func) -> bool:
        with self._action(action):
            try:
                func()
            except OnboardingError as e:
                self.state.error = e.message
                logger.debug("Action '%s' not applied: %s", action, e)
                return False
        return True

    def _require(self, action: str, step: int) -> None:
        if self.state.done or self.state.step != step:
            raise TransitionError(
                f"'{action}' is not available at step {self.state.phase}",
                action=action,
                step=self.state.phase,
            )

    def _ensure_profile(self) -> None:
        """Retry a profile read that failed earlier, so a save never blanks stored fields.

        Raises:
            StoreError: If the profile still cannot be read
        """
        if self.state.profile_loaded:
            return
        if not self.sessions.load_profile(self.state, keep_edits=True):
            raise StoreError(
                PROFILE_NOT_LOADED,
                operation="get_profile",
                table=PROFILES_TABLE,
            )

    def identify(self, email: str, password: str) -> bool:
        """Step 1: find or create the account and move to its step."""
        def run():
            self._require("identify", 1)
            self.sessions.identify(self.state, email, password)

        return self._run("identify", run)

    def advance(self) -> bool:
        """Step 2 -> 3, saving the profile first."""
        def run():
            self._require("advance", 2)
            self._ensure_profile()
            self.persister.commit_step(self.state.user_id, self.state.fields, 3)
            self.state.step = 3

        return self._run("advance", run)

    def back(self) -> bool:
        """Step 3 -> 2 (recorded in the store) or step 2 -> 1 (local)."""
        def run():
            if not self.state.done and self.state.step == 3:
                self.persister.rewind(self.state.user_id, 2)
                self.state.step = 2
            elif not self.state.done and self.state.step == 2:
                self.state.step = 1
            else:
                raise TransitionError(
                    f"'back' is not available at step {self.state.phase}",
                    action="back",
                    step=self.state.phase,
                )

        return self._run("back", run)

    def complete(self) -> bool:
        """Step 3 -> done, saving the profile and forgetting this device's user."""
        def run():
            self._require("complete", 3)
            self._ensure_profile()
            self.persister.commit_step(self.state.user_id, self.state.fields, DONE_STEP)
            self.state.done = True
            self.remembered.clear()
            logger.info("User %s completed onboarding", self.state.user_id)

        return self._run("complete", run)
