# Overview: Flask CLI command groups for bootstrap, user management, and maintenance.

# backend/royalcare/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Use: flask --app wsgi <group> <command> [options]
#
# System bootstrap:
# - flask --app wsgi system init-db
#   Create all tables (idempotent). Use `flask db upgrade` for migrated databases.
#
# Users (the credential store):
# - flask --app wsgi users create --username admin --password "..." --role admin
# - flask --app wsgi users create --username nurse1 --password "..." --department ICU
# - flask --app wsgi users list
#
# Maintenance:
# - flask --app wsgi maintenance purge-orphan-uploads [--dry-run]
#   Delete files in UPLOAD_FOLDER that no device references.

import click
from flask.cli import with_appcontext

from .errors import ValidationError
from .extensions import db
from .models import User, ROLES, ROLE_USER
from .services.auth_service import create_user
from .services import maintenance_service


@click.group('system')
def system_group():
    """System bootstrap commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("PASS Database tables created")


@click.group('users')
def users_group():
    """User (credential store) management."""


@users_group.command('create')
@click.option('--username', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--role', type=click.Choice(ROLES), default=ROLE_USER, show_default=True)
@click.option('--department', default=None, help='Department scope for non-admin users')
@with_appcontext
def create_user_command(username, password, role, department):
    """Create a user with a bcrypt-hashed password."""
    try:
        user = create_user(username=username, password=password, role=role, department=department)
    except ValidationError as e:
        raise click.ClickException(e.message)
    click.echo(f"PASS Created user: {user.username} (ID: {user.id}) role={user.role} department={user.department or '-'}")


@users_group.command('list')
@with_appcontext
def list_users_command():
    """List all users."""
    users = db.session.query(User).order_by(User.id.asc()).all()
    if not users:
        click.echo("No users found")
        return
    for user in users:
        status = "active" if user.is_active else "inactive"
        click.echo(f"{user.id:>4}  {user.username:<24} {user.role:<6} {user.department or '-':<20} {status}")


@click.group('maintenance')
def maintenance_group():
    """Housekeeping commands."""


@maintenance_group.command('purge-orphan-uploads')
@click.option('--dry-run', is_flag=True, help='Only list the files that would be deleted')
@with_appcontext
def purge_orphan_uploads(dry_run):
    """Delete uploaded files that no device references."""
    orphans = maintenance_service.purge_orphan_uploads(dry_run=dry_run)
    verb = "Would delete" if dry_run else "Deleted"
    for name in orphans:
        click.echo(f"  {name}")
    click.echo(f"{verb} {len(orphans)} orphaned upload(s)")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(maintenance_group)
