"""Configuration for the authorization and verification core."""

import os
import secrets
from typing import Any, Mapping, NamedTuple, Optional

#################### Code & token secrets ####################
CODE_SECRET = os.environ.get('CODE_SECRET', secrets.token_urlsafe(16))
"""Secret used to encrypt authorization codes."""

TOKEN_SECRET = os.environ.get('TOKEN_SECRET', secrets.token_urlsafe(16))
"""Secret used to encrypt the payload of MAC tokens."""

TOKEN_PADDING = os.environ.get('TOKEN_PADDING', secrets.token_urlsafe(16))
"""Value appended to the encrypted token payload before it is signed."""

CODE_DURATION = os.environ.get('CODE_DURATION', '600000')
"""Validity window of an authorization code, in milliseconds."""

TOKEN_DURATION = os.environ.get('TOKEN_DURATION', '1296000000')
"""Validity window of a MAC token, in milliseconds (15 days)."""


#################### Session store ####################
REDIS_HOST = os.environ.get('REDIS_HOST', 'localhost')
REDIS_PORT = os.environ.get('REDIS_PORT', '6379')
REDIS_DATABASE = os.environ.get('REDIS_DATABASE', '0')
REDIS_CLUSTER = os.environ.get('REDIS_CLUSTER', '0')

SESSION_SECRET = os.environ.get('SESSION_SECRET', secrets.token_urlsafe(16))
"""Secret used to sign session records in the key-value store."""

SESSION_DURATION = os.environ.get('SESSION_DURATION', '1296000')
"""Lifetime of a session record in the store, in seconds."""


#################### Verification codes ####################
PHONE_FIXED_CODE = os.environ.get('PHONE_FIXED_CODE')
"""
Fixed value for phone verification codes.

Useful while no SMS provider is wired up. When unset, phone codes are random
like email codes.
"""

EMAIL_FROM_CODE = os.environ.get('EMAIL_FROM_CODE', 'noreply@violet.local')
"""Sender address of verification code emails."""

SMTP_HOST = os.environ.get('SMTP_HOST', 'localhost')
SMTP_PORT = os.environ.get('SMTP_PORT', '25')

TIMEZONE = os.environ.get('TIMEZONE', 'Asia/Shanghai')
"""Timezone used to render timestamps in outgoing messages."""


class AuthSecrets(NamedTuple):
    """The three process-wide secrets used by the code/token protocol."""

    code_secret: str
    token_secret: str
    token_padding: str


def load_secrets(config: Optional[Mapping[str, Any]] = None) -> AuthSecrets:
    """
    Build the :class:`AuthSecrets` for this process.

    Parameters
    ----------
    config : mapping
        Configuration to read ``CODE_SECRET``, ``TOKEN_SECRET`` and
        ``TOKEN_PADDING`` from. Defaults to the values in this module.

    Returns
    -------
    :class:`AuthSecrets`

    """
    if config is None:
        config = globals()
    return AuthSecrets(code_secret=config['CODE_SECRET'],
                       token_secret=config['TOKEN_SECRET'],
                       token_padding=config['TOKEN_PADDING'])
