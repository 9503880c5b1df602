"""
RVS Onboarding Terminal UI

Reusable UI components for the onboarding wizard using rich library.
"""

from typing import Callable, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from rvs_onboarding.models import (
    COMPONENT_LABELS,
    ComponentName,
    UserListingRow,
)
from rvs_onboarding.validators import validate_birthdate

# Prompt text for each profile field
FIELD_PROMPTS = {
    "about_me": "Tell us about yourself",
    "street_address": "Street Address",
    "city": "City",
    "state": "State",
    "zip": "Zip Code",
    "birthdate": "Birthdate (YYYY-MM-DD)",
}

STEP_TITLES = {
    1: ("Create Your Account", "Get started by entering your email and password."),
    2: ("Tell Us More", "Help us get to know you better."),
    3: ("Almost Done", "Just a few more details and you're all set."),
}

TOTAL_STEPS = 3


class WizardUI:
    """UI components for the onboarding wizard."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def print_header(self, title: str = "Onboarding"):
        """Print the wizard header."""
        self.console.print()
        self.console.print(Panel(
            f"[bold blue]{title}[/bold blue]",
            border_style="blue",
            padding=(0, 2)
        ))
        self.console.print()

    def stepper_line(self, step: int) -> str:
        """Progress markers: check for finished steps, bold for the current one."""
        parts = []
        for s in range(1, TOTAL_STEPS + 1):
            if s < step:
                parts.append("[green]✓[/green]")
            elif s == step:
                parts.append(f"[bold cyan]({s})[/bold cyan]")
            else:
                parts.append(f"[dim]{s}[/dim]")
        return " ── ".join(parts)

    def print_step_header(self, step: int):
        """Print the stepper and the title of a step."""
        title, description = STEP_TITLES[step]
        self.console.print()
        self.console.print(self.stepper_line(step))
        self.console.print(f"[dim]Step {step} of {TOTAL_STEPS}[/dim]")
        self.console.print()
        self.console.print(f"[bold]{title}[/bold]")
        self.console.print(f"[dim]{description}[/dim]")
        self.console.print()

    def print_error(self, message: str):
        """Print an error message."""
        self.console.print(f"[red]✗[/red] {message}")

    def print_warning(self, message: str):
        """Print a warning message."""
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    def print_info(self, message: str):
        """Print an info message."""
        self.console.print(f"[blue]ℹ[/blue] {message}")

    def prompt_text(
        self,
        prompt: str,
        default: str = "",
        required: bool = False,
        validator: Optional[Callable[[str], bool]] = None,
        error_message: str = "Invalid input"
    ) -> str:
        """Prompt for text input."""
        while True:
            value = Prompt.ask(prompt, default=default if default else None, console=self.console)
            value = value or ""

            if required and not value:
                self.print_error("This field is required")
                continue

            if validator and value and not validator(value):
                self.print_error(error_message)
                continue

            return value

    def prompt_password(self, prompt: str) -> str:
        """Prompt for password input."""
        return Prompt.ask(prompt, password=True, console=self.console) or ""

    def prompt_choice(self, prompt: str, choices: List[str], default: Optional[str] = None) -> str:
        """Prompt for one of a few actions."""
        return Prompt.ask(prompt, choices=choices, default=default, console=self.console)

    def prompt_component(self, component: ComponentName, values: Dict[str, str]) -> Dict[str, str]:
        """Ask for the fields of one form component, keeping current values as defaults."""
        self.console.print(f"[bold cyan]{COMPONENT_LABELS[component]}[/bold cyan]")
        updated = {}
        for name, current in values.items():
            if name == "birthdate":
                updated[name] = self.prompt_text(
                    FIELD_PROMPTS[name],
                    default=current,
                    validator=lambda v: validate_birthdate(v)[0],
                    error_message="Birthdate should be in format YYYY-MM-DD",
                )
            else:
                updated[name] = self.prompt_text(FIELD_PROMPTS[name], default=current)
        self.console.print()
        return updated

    def show_completion_panel(self, email: str):
        """Show the terminal onboarding-complete panel."""
        self.console.print()
        self.console.print(Panel(
            f"[bold green]Onboarding Complete![/bold green]\n\n"
            f"Thanks for signing up, {email}.",
            border_style="green",
            padding=(1, 2)
        ))
        self.console.print("[dim]View all users with: rvs-onboard data[/dim]")

    def show_layout(self, groups: Dict[int, List[ComponentName]]):
        """Show which components are on page 2 and page 3."""
        table = Table(title="Onboarding Layout", border_style="blue")
        for page in groups:
            table.add_column(f"Page {page}", style="cyan")
        depth = max((len(names) for names in groups.values()), default=0)
        for i in range(depth):
            table.add_row(*[
                COMPONENT_LABELS[names[i]] if i < len(names) else ""
                for names in groups.values()
            ])
        self.console.print(table)

    def show_listing(self, rows: List[UserListingRow]):
        """Show the user data table."""
        count = len(rows)
        table = Table(
            title=f"User Data ({count} user{'s' if count != 1 else ''} registered)",
            border_style="blue",
        )
        table.add_column("ID", justify="right")
        table.add_column("Email", style="white")
        table.add_column("Step")
        table.add_column("About Me", max_width=30, overflow="ellipsis")
        table.add_column("Address", max_width=30, overflow="ellipsis")
        table.add_column("Birthdate")
        table.add_column("Created", style="dim")

        for row in rows:
            status_style = "green" if row.status == "Done" else "yellow"
            table.add_row(
                str(row.id),
                row.email,
                f"[{status_style}]{row.status}[/{status_style}]",
                row.about_me or "—",
                row.address or "—",
                row.birthdate or "—",
                (row.created_at or "")[:10] or "—",
            )
        self.console.print(table)
