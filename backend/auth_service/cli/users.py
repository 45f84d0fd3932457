"""Flask CLI commands for operator-side account management."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from auth_service.api.deps import get_credential_service
from auth_service.services._shared.errors import ServiceError

LOGGER = logging.getLogger(__name__)


@click.group("users")
def users_cli() -> None:
    """Manage credential accounts."""


@users_cli.command("register")
@click.argument("username")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Raw password; prompted for when omitted.",
)
@click.option(
    "--role",
    "roles",
    multiple=True,
    help="Role to grant. Repeat for several roles.",
)
@with_appcontext
def register_user(username: str, password: str, roles: tuple[str, ...]) -> None:
    """Register USERNAME with the given password and roles."""
    service = get_credential_service()
    try:
        service.register(username, password, roles or None)
    except ServiceError as exc:
        raise click.ClickException(exc.reason) from exc
    LOGGER.info("cli.users.register username_len=%s roles=%s", len(username), len(roles))
    click.echo("User Successfully Added")
