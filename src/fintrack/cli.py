"""Flask CLI commands for FinTrack."""

from __future__ import annotations

import click

from .errors import FinTrackError
from .models.enums import Role


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("fintrack-create-user")
    @click.option("--email", prompt=True, help="Login email")
    @click.option("--firstname", prompt=True)
    @click.option("--lastname", prompt=True)
    @click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
    @click.option("--role", type=click.Choice(Role.values()), default=Role.USER.value, show_default=True)
    def fintrack_create_user(email: str, firstname: str, lastname: str, password: str, role: str) -> None:
        """Create a user account."""

        from .context import get_context
        from .services import auth

        try:
            user = auth.register_user(
                get_context().user_repo,
                firstname=firstname,
                lastname=lastname,
                email=email,
                password=password,
                role=role,
            )
        except FinTrackError as exc:
            raise click.ClickException(exc.message) from exc
        click.echo(f"Created {user.role} {user.email} (id={user.id})")

    @app.cli.command("fintrack-seed")
    @click.option("--demo", is_flag=True, default=False, help="Run demo data seed")
    def fintrack_seed(demo: bool) -> None:
        """Seed application data (demo)."""

        if not demo:
            click.echo("No action specified. Use --demo to seed demo data.")
            return

        # Import here to avoid circular imports at module import time
        from .context import get_context
        from .services.admin_tasks import DEMO_EMAIL, DEMO_PASSWORD, run_demo_seed

        click.echo("Seeding demo data...")
        summary = run_demo_seed(get_context())
        click.echo(
            f"Demo seed completed: {summary.accounts} accounts, {summary.categories} categories, "
            f"{summary.budgets} budgets, {summary.transactions} transactions."
        )
        click.echo(f"Sign in as {DEMO_EMAIL} / {DEMO_PASSWORD}")
