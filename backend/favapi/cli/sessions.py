"""Flask CLI commands for session store maintenance."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from favapi.core.container import get_container

LOGGER = logging.getLogger(__name__)


@click.group("sessions")
def sessions_cli() -> None:
    """Manage stored session tokens."""


@sessions_cli.command("purge")
@with_appcontext
def purge_command() -> None:
    """Delete session rows whose expiry has passed."""
    deleted = get_container().auth_service.purge_expired_sessions()
    LOGGER.info("sessions.purged count=%s", deleted)
    click.echo(f"Purged {deleted} expired session(s).")


@sessions_cli.command("revoke")
@click.argument("client_id", type=int)
@with_appcontext
def revoke_command(client_id: int) -> None:
    """Revoke every live session of CLIENT_ID."""
    revoked = get_container().auth_service.revoke_all_sessions(client_id)
    click.echo(f"Revoked {revoked} session(s) for client {client_id}.")
