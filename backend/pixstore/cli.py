# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/pixstore/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# Store bootstrap/repair:
# - python -m flask store init
#   Idempotent bootstrap: creates the owner and admin accounts and the default PIX key.
# - python -m flask store reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
#   List all users with role and active status.
# - python -m flask users create --username alice --password "secret1" --role admin
#   Create a user (prompts if options are omitted).
# - python -m flask users set-role alice user
#   Change a user's role (owner accounts can't be changed).
#
# Maintenance:
# - python -m flask maintenance cleanup-sessions --retention-days 30
#   Delete expired/revoked session tokens older than the retention window.
# - python -m flask maintenance cleanup-logs --retention-days 365
#   Delete activity log rows older than the retention window.

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .models.auth import ROLE_ADMIN, ROLE_USER
from .services import bootstrap_service, maintenance_service, session_service, user_service
from .services.auth_service import create_user, get_user_by_username, PasswordValidationError
from .validation import ConflictError, ValidationError


@click.group('store')
def store_group():
    """Store bootstrap and repair commands."""


@store_group.command('init')
@with_appcontext
def init_store():
    """
    Initialize the store: owner account, admin account and PIX key.

    Values come from OWNER_USERNAME/OWNER_PASSWORD, ADMIN_USERNAME/ADMIN_PASSWORD
    and DEFAULT_PIX_KEY. Existing rows are left untouched.

    SECURITY: Change the default passwords before going live!
    """
    click.echo("START Initializing store...")

    summary = bootstrap_service.initialize_store()
    cfg = current_app.config

    if summary["owner_created"]:
        click.echo(f"PASS Created owner account: {cfg['OWNER_USERNAME']}")
    else:
        click.echo(f"PASS Owner account already exists: {cfg['OWNER_USERNAME']}")

    if summary["admin_created"]:
        click.echo(f"PASS Created admin account: {cfg['ADMIN_USERNAME']}")
    else:
        click.echo(f"PASS Admin account already exists: {cfg['ADMIN_USERNAME']}")

    if summary["pix_key_created"]:
        click.echo("PASS Set default PIX key")
    else:
        click.echo("PASS PIX key already configured")

    click.echo("DONE Store initialized.")


@store_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask store init' to initialize.")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with their roles."""
    users = user_service.list_users()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*70)
    click.echo(f"{'ID':<5} {'Username':<30} {'Role':<10} {'Active'}")
    click.echo("="*70)

    for user in users:
        active_str = "Yes" if user.is_active else "No"
        click.echo(f"{user.id:<5} {user.username:<30} {user.role:<10} {active_str}")

    click.echo("="*70 + "\n")


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice([ROLE_ADMIN, ROLE_USER]), default=ROLE_USER, show_default=True, help='Role')
@with_appcontext
def create_user_cli(username, password, role):
    """Create a user. Owners are only created by `store init`."""
    try:
        user = create_user(username, password, role=role)
    except PasswordValidationError as e:
        click.echo(f"FAIL Password validation failed: {str(e)}")
        return
    except (ValidationError, ConflictError) as e:
        click.echo(f"FAIL {str(e)}")
        return

    click.echo(f"PASS Created user: {user.username} (ID: {user.id}) with role '{user.role}'")
    click.echo("SECURITY Password securely hashed with bcrypt")


@users_group.command('set-role')
@click.argument('username')
@click.argument('role', type=click.Choice([ROLE_ADMIN, ROLE_USER]))
@with_appcontext
def set_role_cli(username, role):
    """Promote or demote a user."""
    user = get_user_by_username(username)
    if user is None:
        click.echo(f"FAIL User '{username}' not found")
        return

    try:
        user, previous = user_service.set_role(user.id, role)
    except ValidationError as e:
        click.echo(f"FAIL {str(e)}")
        return

    click.echo(f"PASS {user.username}: {previous} -> {user.role}")


@click.group('maintenance')
def maintenance_group():
    """Maintenance commands."""


@maintenance_group.command('cleanup-sessions')
@click.option('--retention-days', type=int, default=30, show_default=True)
@with_appcontext
def cleanup_sessions_cli(retention_days):
    """Delete expired or revoked session tokens."""
    deleted = session_service.cleanup_expired_sessions(retention_days=retention_days)
    click.echo(f"Deleted {deleted} sessions older than {retention_days} days.")


@maintenance_group.command('cleanup-logs')
@click.option('--retention-days', type=int, default=365, show_default=True)
@with_appcontext
def cleanup_logs_cli(retention_days):
    """
    Cleanup old activity log rows.

    Default retention: 365 days.
    """
    deleted = maintenance_service.cleanup_activity_logs(retention_days=retention_days)
    click.echo(f"Deleted {deleted} activity logs older than {retention_days} days.")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(store_group)
    app.cli.add_command(users_group)
    app.cli.add_command(maintenance_group)
