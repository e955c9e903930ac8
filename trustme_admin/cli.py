# ---------------------------- cli.py ----------------------------
import click

from .gateway import get_gateway
from .services.auth import seed_admin


def register_commands(app):
    @app.cli.command("seed-admin")
    def seed_admin_command():
        """Create the configured admin account if it does not exist yet."""
        admin, created = seed_admin(get_gateway())
        if created:
            click.echo(f"Admin user seeded: {admin.username} ({admin.admin_id})")
        else:
            click.echo(f"Admin user already exists: {admin.username}")
