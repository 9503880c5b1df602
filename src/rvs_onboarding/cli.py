"""
RVS Onboarding Command Line Interface

Main entry point for the rvs-onboard CLI.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from rvs_onboarding.exceptions import OnboardingError, get_error_code
from rvs_onboarding.logging_config import setup_logging
from rvs_onboarding.models import COMPONENT_LABELS, COMPONENTS, PAGE_NUMBERS, ComponentName
from rvs_onboarding.settings import Settings, load_settings

console = Console()


def _fail(error: OnboardingError):
    """Print an error with its remediation and exit with its code."""
    console.print(f"[red]Error:[/red] {error.message}")
    if error.details:
        console.print(f"[dim]{error.details}[/dim]")
    if error.remediation:
        console.print(f"[blue]To fix:[/blue] {error.remediation}")
    sys.exit(get_error_code(error))


def _open_store(settings: Settings):
    from rvs_onboarding.store import create_store
    return create_store(settings)


@click.group()
@click.version_option(package_name="rvs-onboarding")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Path to config.yaml")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.pass_context
def main(ctx, config_path: Optional[str], verbose: bool):
    """RVS Onboarding: configurable multi-step user onboarding"""
    ctx.ensure_object(dict)
    try:
        settings = load_settings(Path(config_path) if config_path else None)
    except OnboardingError as e:
        _fail(e)
    setup_logging(
        level=logging.DEBUG if (verbose or settings.debug) else None,
        log_file=settings.log_file,
    )
    ctx.obj["settings"] = settings


@main.command()
@click.pass_context
def start(ctx):
    """Start or resume the onboarding wizard on this device."""
    from rvs_onboarding.engine import StepEngine
    from rvs_onboarding.orchestrator import WizardOrchestrator
    from rvs_onboarding.session import RememberedIdentifier

    settings = ctx.obj["settings"]
    try:
        store = _open_store(settings)
        engine = StepEngine(store, RememberedIdentifier(settings.session_file))
        wizard = WizardOrchestrator(engine, console=console)
        success = wizard.run()
    except OnboardingError as e:
        _fail(e)
    store.close()
    sys.exit(0 if success else 1)


@main.command()
@click.pass_context
def forget(ctx):
    """Forget the user remembered on this device."""
    from rvs_onboarding.session import RememberedIdentifier

    remembered = RememberedIdentifier(ctx.obj["settings"].session_file)
    user_id = remembered.get()
    remembered.clear()
    if user_id is None:
        console.print("[dim]No remembered user on this device.[/dim]")
    else:
        console.print(f"[green]✓[/green] Forgot user {user_id}")


@main.command("init-db")
@click.pass_context
def init_db(ctx):
    """Create the local SQLite tables and seed the default layout."""
    from rvs_onboarding.store import SQLiteStore

    settings = ctx.obj["settings"]
    if settings.backend != "sqlite":
        console.print("[yellow]init-db only applies to the sqlite backend.[/yellow]")
        sys.exit(1)
    store = SQLiteStore(settings.database_path)
    store.initialize()
    store.close()
    console.print(f"[green]✓[/green] Database ready at {settings.database_path}")


@main.command()
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def data(ctx, json_output: bool):
    """List all users and their onboarding progress."""
    from rvs_onboarding.listing import list_onboarding_rows
    from rvs_onboarding.ui import WizardUI

    try:
        store = _open_store(ctx.obj["settings"])
        rows = list_onboarding_rows(store)
    except OnboardingError as e:
        _fail(e)
    store.close()

    if json_output:
        click.echo(json.dumps([row.to_dict() for row in rows], indent=2))
    elif not rows:
        console.print("[dim]No users yet. Complete the onboarding to see data here.[/dim]")
    else:
        WizardUI(console).show_listing(rows)


@main.group()
def admin():
    """Onboarding layout administration."""
    pass


@admin.command()
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def show(ctx, json_output: bool):
    """Show which components are on page 2 and page 3."""
    from rvs_onboarding.admin import AdminSession
    from rvs_onboarding.ui import WizardUI

    try:
        store = _open_store(ctx.obj["settings"])
        session = AdminSession(store)
        session.load()
    except OnboardingError as e:
        _fail(e)
    store.close()

    groups = session.grouped()
    if json_output:
        click.echo(json.dumps({str(page): [n.value for n in names] for page, names in groups.items()}))
    else:
        WizardUI(console).show_layout(groups)


@admin.command("set")
@click.argument("component", type=click.Choice([c.value for c in COMPONENTS]))
@click.argument("page", type=click.Choice([str(p) for p in PAGE_NUMBERS]))
@click.pass_context
def set_page(ctx, component: str, page: str):
    """Move COMPONENT to PAGE and save the layout.

    Each page must keep at least one component; a move that would empty
    a page is ignored.
    """
    from rvs_onboarding.admin import AdminSession

    try:
        store = _open_store(ctx.obj["settings"])
        session = AdminSession(store)
        session.load()
        label = COMPONENT_LABELS[ComponentName(component)]
        before = session.page_of(component)

        proposal = session.set_page(component, int(page))
        if proposal.rejected:
            console.print(f"[yellow]⚠[/yellow] {label} stays on page {before}: {proposal.message}")
            store.close()
            return

        session.commit()
    except OnboardingError as e:
        _fail(e)
    store.close()
    console.print(f"[green]✓[/green] {label}: page {before} → page {page}")


if __name__ == "__main__":
    main()
