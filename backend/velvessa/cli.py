# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/velvessa/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Create the snapshot table and write every collection (seeded defaults on first run).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask system keys
#   List snapshot keys with their sizes and last write time.
#
# Team management:
# - python -m flask users list [--status Pending]
#   List team members with role and approval status.
# - python -m flask users approve admin@example.com
#   Approve a pending registration (also: --reject).
#
# Stock inspection:
# - python -m flask stock low
#   List items at or below their low-stock threshold.
#
# Collections:
# - python -m flask payments remind-all
#   Send a balance reminder SMS for every unpaid order.

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import SMS_SENT, KeyValueEntry, UserStatus
from .services import notification_service, session_service, stock_service
from .services.state_service import DomainState


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Idempotent bootstrap.

    Creates the snapshot table if needed, then writes every collection.
    Collections that were never stored are written from the seed data
    (default admin, two stock items, two customers, one order).
    """
    click.echo("START Initializing Velvessa console...")
    db.create_all()
    click.echo("PASS Snapshot table ready")

    state = DomainState()
    state.persist_all()

    for key in sorted(e.key for e in db.session.query(KeyValueEntry).all()):
        click.echo(f"PASS Stored {key}")
    click.echo(f"PASS {len(state.users)} users, {len(state.stock)} stock items, "
               f"{len(state.customers)} customers, {len(state.orders)} orders")


@system_group.command('reset-db')
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

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to initialize.")


@system_group.command('keys')
@with_appcontext
def list_keys():
    """List stored snapshots."""
    entries = db.session.query(KeyValueEntry).order_by(KeyValueEntry.key).all()
    if not entries:
        click.echo("No snapshots stored. Run 'python -m flask system init'.")
        return

    click.echo(f"{'Key':<16} {'Bytes':>8}  {'Updated'}")
    for entry in entries:
        data = entry.to_dict()
        click.echo(f"{data['key']:<16} {data['size_bytes']:>8}  {data['updated_at']}")


@click.group('users')
def users_group():
    """Team inspection and approval commands."""


@users_group.command('list')
@click.option('--status', type=click.Choice([s.value for s in UserStatus]), help='Filter by approval status')
@with_appcontext
def list_users(status):
    """List team members with their roles."""
    users = DomainState().users
    if status:
        users = [u for u in users if u.status.value == status]

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*90)
    click.echo(f"{'ID':<18} {'Name':<22} {'Email':<28} {'Role':<10} {'Status'}")
    click.echo("="*90)
    for user in users:
        click.echo(f"{user.id:<18} {user.name:<22} {user.email:<28} {user.role.value:<10} {user.status.value}")
    click.echo("="*90 + "\n")


@users_group.command('approve')
@click.argument('email')
@click.option('--reject', is_flag=True, help='Reject instead of approve')
@with_appcontext
def approve_user(email, reject):
    """Approve (or reject) a registration by email."""
    state = DomainState()
    user = next((u for u in state.users if u.email == email), None)
    if user is None:
        click.echo(f"FAIL No user registered as '{email}'")
        return

    status = UserStatus.REJECTED if reject else UserStatus.APPROVED
    session_service.update_user_status(state, user.id, status)
    click.echo(f"PASS {user.email} is now {status.value}")


@click.group('stock')
def stock_group():
    """Stock inspection commands."""


@stock_group.command('low')
@with_appcontext
def low_stock():
    """List items at or below their threshold."""
    items = stock_service.low_stock_items(DomainState())
    if not items:
        click.echo("PASS No low-stock items")
        return

    for item in items:
        click.echo(f"WARN {item.sku:<12} {item.name:<30} qty={item.quantity} threshold={item.low_stock_threshold}")


@click.group('payments')
def payments_group():
    """Collections commands."""


@payments_group.command('remind-all')
@with_appcontext
def remind_all():
    """Send a balance reminder for every unpaid order."""
    state = DomainState()
    gateway = notification_service.gateway_from_config()
    entries = notification_service.send_all_reminders(state, gateway)
    failed = sum(1 for e in entries if e.status != SMS_SENT)
    click.echo(f"PASS Sent {len(entries) - failed} reminders ({failed} failed)")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(stock_group)
    app.cli.add_command(payments_group)
