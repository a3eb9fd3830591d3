"""
Command-line helpers for issuing and inspecting codes and tokens.

Use the same secrets as the running service, e.g.:

.. code-block:: bash

   $ CODE_SECRET=foo TOKEN_SECRET=bar TOKEN_PADDING=baz \
       violet-auth generate-token --user-id u1 --app-id a1 --state 1
   9f3c...&1b7a...

"""

import json
import logging
import sys

import click

from . import config, passwords, tokens
from .app_logging import setup_logger
from .exceptions import AuthError


def _fail(error: AuthError) -> None:
    click.echo(error.kind.value, err=True)
    sys.exit(1)


@click.group()
@click.option('--verbose', is_flag=True, help='Log debug messages as JSON.')
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Issue and read Violet authorization codes and tokens."""
    setup_logger(logging.DEBUG if verbose else logging.WARNING)
    ctx.obj = config.load_secrets()


@main.command('generate-code')
@click.option('--user-id', prompt='User ID')
@click.option('--app-id', prompt='Application ID')
@click.pass_obj
def generate_code(keys: config.AuthSecrets, user_id: str,
                  app_id: str) -> None:
    """Issue an authorization code."""
    click.echo(tokens.generate_code(user_id, app_id, keys))


@main.command('read-code')
@click.argument('code')
@click.option('--duration', type=int, default=None,
              help='Validity window in milliseconds.')
@click.pass_obj
def read_code(keys: config.AuthSecrets, code: str, duration: int) -> None:
    """Validate an authorization code and print its claims."""
    try:
        claims = tokens.read_code(code, keys, duration)
    except AuthError as e:
        _fail(e)
    click.echo(json.dumps(claims._asdict()))


@main.command('generate-token')
@click.option('--user-id', prompt='User ID')
@click.option('--app-id', prompt='Application ID')
@click.option('--state', prompt='State', type=int, default=1)
@click.pass_obj
def generate_token(keys: config.AuthSecrets, user_id: str, app_id: str,
                   state: int) -> None:
    """Issue a MAC token."""
    click.echo(tokens.generate_token(user_id, app_id, state, keys))


@main.command('read-token')
@click.argument('token')
@click.option('--duration', type=int, default=None,
              help='Validity window in milliseconds.')
@click.pass_obj
def read_token(keys: config.AuthSecrets, token: str, duration: int) -> None:
    """Validate a MAC token and print its claims."""
    try:
        claims = tokens.read_token(token, keys, duration)
    except AuthError as e:
        _fail(e)
    click.echo(json.dumps(claims._asdict()))


@main.command('open-id')
@click.argument('user_id')
@click.argument('app_id')
def open_id(user_id: str, app_id: str) -> None:
    """Print the identifier of a user as seen by an application."""
    click.echo(tokens.generate_open_id(user_id, app_id))


@main.command('hash-password')
@click.argument('password')
@click.option('--salt', default=None, help='Reuse an existing salt.')
def hash_password(password: str, salt: str) -> None:
    """Generate a verifier from a client-side password digest."""
    verifier = passwords.hash_password(password, salt)
    click.echo(json.dumps(verifier._asdict()))


if __name__ == '__main__':
    main()
