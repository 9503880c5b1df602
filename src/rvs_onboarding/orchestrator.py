"""
RVS Onboarding Wizard Orchestrator

Runs the step engine interactively in the terminal.
"""

import signal
import sys
from typing import Optional

from rich.console import Console

from rvs_onboarding.engine import StepEngine
from rvs_onboarding.logging_config import get_logger
from rvs_onboarding.ui import WizardUI

logger = get_logger(__name__)


class WizardOrchestrator:
    """Terminal front end for one onboarding session."""

    def __init__(self, engine: StepEngine, console: Optional[Console] = None):
        self.engine = engine
        self.console = console or Console()
        self.ui = WizardUI(self.console)

    def _handle_interrupt(self, signum, frame):
        """Handle Ctrl+C gracefully."""
        self.console.print("\n")
        self.ui.print_warning("Onboarding interrupted.")
        self.console.print("[yellow]Progress up to the last completed step is saved.[/yellow]")
        self.console.print("[cyan]  Run 'rvs-onboard start' to continue.[/cyan]")
        sys.exit(130)  # Standard exit code for SIGINT

    def run(self) -> bool:
        """Run the wizard until completion or until the user quits.

        Returns:
            True if onboarding is complete
        """
        signal.signal(signal.SIGINT, self._handle_interrupt)

        state = self.engine.load()
        self.ui.print_header()

        if state.user_id and not state.done:
            self.ui.print_info(f"Welcome back, {state.email}. Resuming at step {state.step}.")

        while not state.done:
            self.ui.print_step_header(state.step)
            if state.error:
                self.ui.print_error(state.error)

            if state.step == 1:
                self._identification_step()
                continue

            if not self._form_step():
                self.ui.print_info(
                    "Progress up to the last completed step is saved. "
                    "Run 'rvs-onboard start' to continue."
                )
                return False

        self.ui.show_completion_panel(state.email)
        return True

    def _identification_step(self):
        email = self.ui.prompt_text("Email", default=self.engine.state.email)
        password = self.ui.prompt_password("Password")
        self.engine.identify(email, password)

    def _form_step(self) -> bool:
        """Collect this step's components and run the chosen action.

        Returns:
            False if the user chose to quit
        """
        step = self.engine.state.step
        for component in self.engine.components_for_step():
            values = self.ui.prompt_component(component, self.engine.component_values(component))
            for name, value in values.items():
                self.engine.set_field(name, value)

        forward = "next" if step == 2 else "complete"
        action = self.ui.prompt_choice("Action", [forward, "back", "quit"], default=forward)

        if action == "quit":
            return False
        if action == "back":
            self.engine.back()
        elif step == 2:
            self.engine.advance()
        else:
            self.engine.complete()
        return True
