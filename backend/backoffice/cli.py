# Overview: Flask CLI command groups for bootstrap, user management, and maintenance.

# backend/backoffice/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Idempotent bootstrap: creates tables and the default admin, supervisor and staff accounts.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Users:
# - python -m flask users list
#   List all users with their roles.
# - python -m flask users create --email ali@store.com --name "Ali" --password "secret123" --role staff
#   Create a user (prompts if options are omitted).
# - python -m flask users set-password --email ali@store.com
#   Reset a password and revoke the user's sessions.
#
# Maintenance:
# - python -m flask transactions clear --yes
#   Delete the whole audit trail.
# - python -m flask sessions cleanup --retention-days 30
#   Delete expired/revoked sessions older than the retention window.

import click
from flask.cli import with_appcontext

from .extensions import db
from .errors import ApiError
from .models import User, ROLES, ROLE_ADMIN, ROLE_SUPERVISOR, ROLE_STAFF
from .services import session_service, transaction_service, users_service
from .services.auth_service import hash_password
from .validation import check_password, enforce_rules_user

# Default accounts created by `system init`. CHANGE THESE PASSWORDS IN PRODUCTION.
DEFAULT_USERS = [
    ("admin@store.com", "admin", "System Administrator", ROLE_ADMIN, "admin123"),
    ("supervisor@store.com", "supervisor", "Supervisor", ROLE_SUPERVISOR, "super123"),
    ("staff@store.com", "staff", "Staff Member", ROLE_STAFF, "staff123"),
]


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Create all tables and the default accounts (one per role).

    Existing accounts are left untouched, so the command is safe to re-run.
    """
    click.echo("START Initializing back-office database...")
    db.create_all()
    click.echo("PASS Tables ready")

    click.echo("\nUSERS Creating default users...")
    for email, username, name, role, password in DEFAULT_USERS:
        if users_service.get_user_by_email(email):
            click.echo(f"WARN  User '{email}' already exists, skipping...")
            continue
        users_service.create_user(
            patch={
                "email": email,
                "username": username,
                "name": name,
                "role": role,
                "password_hash": password,
            },
            actor="System",
        )
        click.echo(f"PASS Created user: {email} with role '{role}'")

    click.echo("\n" + "=" * 60)
    click.echo("DONE Back-office initialized")
    click.echo("=" * 60)
    click.echo("\nDefault Credentials (CHANGE IN PRODUCTION!):")
    for email, _, _, role, password in DEFAULT_USERS:
        click.echo(f"   {role:<10} -> {email:<22} / {password}")
    click.echo("")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Confirm destructive reset')
@with_appcontext
def reset_db(yes):
    """DEV/TEST only: drop and recreate every table."""
    if not yes:
        click.echo("FAIL Refusing to reset without --yes")
        raise SystemExit(1)
    db.drop_all()
    db.create_all()
    click.echo("PASS Database reset (all data deleted)")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('list')
@with_appcontext
def list_users_cli():
    """List all users with their roles."""
    users = db.session.query(User).order_by(User.id.asc()).all()
    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "=" * 80)
    click.echo(f"{'ID':<5} {'Email':<32} {'Name':<28} {'Role'}")
    click.echo("=" * 80)
    for u in users:
        click.echo(f"{u.id:<5} {u.email:<32} {u.name[:27]:<28} {u.role}")
    click.echo("=" * 80 + "\n")


@users_group.command('create')
@click.option('--email', prompt=True, help='Email address (login)')
@click.option('--name', prompt=True, help='Display name')
@click.option('--username', default=None, help='Optional username')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice(list(ROLES)), default=ROLE_STAFF, show_default=True, help='Role')
@with_appcontext
def create_user_cli(email, name, username, password, role):
    """Create a user."""
    patch = {
        "email": email.strip(),
        "name": name.strip(),
        "username": username,
        "role": role,
        "password_hash": password,
    }
    try:
        enforce_rules_user(patch)
        users_service.create_user(patch=patch, actor="System")
    except ApiError as e:
        click.echo(f"FAIL Failed to create user: {e.message}")
        raise SystemExit(1)

    click.echo(f"PASS Created user: {email} with role '{role}'")


@users_group.command('set-password')
@click.option('--email', prompt=True, help='Email address of the account')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='New password')
@with_appcontext
def set_password_cli(email, password):
    """Reset a password and revoke every session of the account."""
    user = users_service.get_user_by_email(email.strip())
    if not user:
        click.echo(f"FAIL No user with email '{email}'")
        raise SystemExit(1)
    try:
        check_password(password)
    except ApiError as e:
        click.echo(f"FAIL {e.message}")
        raise SystemExit(1)

    user.password_hash = hash_password(password)
    revoked = session_service.revoke_all_user_sessions(user.id, reason="Password reset from CLI")
    db.session.commit()
    click.echo(f"PASS Password updated for {email} ({revoked} session(s) revoked)")


@click.group('transactions')
def transactions_group():
    """Audit trail maintenance."""


@transactions_group.command('clear')
@click.option('--yes', is_flag=True, help='Confirm deleting the whole audit trail')
@with_appcontext
def clear_transactions_cli(yes):
    if not yes:
        click.echo("FAIL Refusing to clear the audit trail without --yes")
        raise SystemExit(1)
    deleted = transaction_service.clear_transactions()
    click.echo(f"PASS Deleted {deleted} audit entries")


@click.group('sessions')
def sessions_group():
    """Session store maintenance."""


@sessions_group.command('cleanup')
@click.option('--retention-days', default=30, show_default=True, type=int)
@with_appcontext
def cleanup_sessions_cli(retention_days):
    deleted = session_service.cleanup_expired_sessions(older_than_days=retention_days)
    click.echo(f"PASS Deleted {deleted} expired or revoked sessions")


def register_commands(app):
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(transactions_group)
    app.cli.add_command(sessions_group)
