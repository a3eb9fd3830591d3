"""
Authorization codes and MAC tokens.

An authorization code binds a user to a third-party application for a short
while. It is the JSON document ``{"t": issued_at, "u": user_id, "a": app_id}``
encrypted with the code secret.

A MAC token wraps a code together with the application's ``state``. The JSON
document ``{"c": code, "s": state, "t": "MAC-Token"}`` is encrypted with the
token secret, and the ciphertext is signed by appending
``hash(ciphertext + token_padding)`` after an ``&``.

Neither artifact is stored anywhere. Validation is purely a matter of
decrypting and checking the embedded timestamp, so a captured code or token
can be replayed by anyone until it expires.
"""

import json
import logging
import math
import time
from typing import Any, Optional

from . import config, crypto
from .config import AuthSecrets
from .domain import CodeClaims, TokenClaims
from .exceptions import DecryptionFailed, ExpiredCode, InvalidCode, \
    InvalidToken

logger = logging.getLogger(__name__)

TOKEN_TYPE = 'MAC-Token'
SEPARATOR = '&'

# Largest magnitude of a valid epoch-millisecond timestamp.
_MAX_TIMESTAMP = 8.64e15


def _now() -> int:
    return int(time.time() * 1000)


def _dumps(data: dict) -> str:
    return json.dumps(data, separators=(',', ':'))


def _loads(data: str) -> Optional[dict]:
    try:
        payload = json.loads(data)
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def _is_timestamp(value: Any) -> bool:
    return isinstance(value, (int, float)) \
        and not isinstance(value, bool) \
        and math.isfinite(value) \
        and abs(value) <= _MAX_TIMESTAMP


def generate_open_id(user_id: str, app_id: str) -> str:
    """Stable identifier of a user as seen by one application."""
    return crypto.hash(user_id + app_id)


def generate_code(user_id: str, app_id: str, keys: AuthSecrets) -> str:
    """
    Issue an authorization code.

    Parameters
    ----------
    user_id : str
    app_id : str
    keys : :class:`.AuthSecrets`

    Returns
    -------
    str
        An opaque, hex-encoded code.

    """
    payload = {'t': _now(), 'u': user_id, 'a': app_id}
    return crypto.encrypt(_dumps(payload), keys.code_secret)


def read_code(code: str, keys: AuthSecrets,
              duration: Optional[int] = None) -> CodeClaims:
    """
    Validate an authorization code.

    Parameters
    ----------
    code : str
        A code issued by :func:`generate_code`.
    keys : :class:`.AuthSecrets`
    duration : int
        Validity window in milliseconds. Defaults to ``CODE_DURATION``.

    Returns
    -------
    :class:`.CodeClaims`

    Raises
    ------
    :class:`.InvalidCode`
        If the code cannot be decrypted or its content is incomplete.
    :class:`.ExpiredCode`
        If the code is older than ``duration``.

    """
    if duration is None:
        duration = int(config.CODE_DURATION)
    try:
        data = crypto.decrypt(code, keys.code_secret)
    except DecryptionFailed as e:
        logger.debug('Could not decrypt code: %s', e)
        raise InvalidCode('Could not decrypt code') from e
    payload = _loads(data)
    if payload is None or not all(payload.get(k) for k in ('t', 'u', 'a')):
        logger.debug('Code content is incomplete')
        raise InvalidCode('Malformed content')
    if not _is_timestamp(payload['t']):
        raise InvalidCode('Malformed timestamp')
    if _now() - payload['t'] >= duration:
        logger.debug('Code expired, issued at %s', payload['t'])
        raise ExpiredCode('Expired code')
    return CodeClaims(user_id=payload['u'], app_id=payload['a'])


def generate_token(user_id: str, app_id: str, state: Any,
                   keys: AuthSecrets) -> str:
    """
    Issue a MAC token.

    Parameters
    ----------
    user_id : str
    app_id : str
    state : Any
        JSON-serializable value returned as-is by :func:`read_token`.
    keys : :class:`.AuthSecrets`

    Returns
    -------
    str
        ``ciphertext&signature``, both hex-encoded.

    """
    payload = {'c': generate_code(user_id, app_id, keys), 's': state,
               't': TOKEN_TYPE}
    encrypted = crypto.encrypt(_dumps(payload), keys.token_secret)
    signature = crypto.hash(encrypted + keys.token_padding)
    return SEPARATOR.join([encrypted, signature])


def read_token(token: str, keys: AuthSecrets,
               duration: Optional[int] = None) -> TokenClaims:
    """
    Validate a MAC token.

    The signature is checked before anything is decrypted.

    Parameters
    ----------
    token : str
        A token issued by :func:`generate_token`.
    keys : :class:`.AuthSecrets`
    duration : int
        Validity window in milliseconds. Defaults to ``TOKEN_DURATION``.

    Returns
    -------
    :class:`.TokenClaims`

    Raises
    ------
    :class:`.InvalidToken`
        If the token is not signed with the configured padding, cannot be
        decrypted, or its content is incomplete.
    :class:`.InvalidCode`
        If the embedded code is corrupted.
    :class:`.ExpiredCode`
        If the embedded code is older than ``duration``.

    """
    if duration is None:
        duration = int(config.TOKEN_DURATION)
    # Tokens are hex and the separator; anything else cannot be hashed safely.
    if not token.isascii():
        raise InvalidToken('Malformed token')
    parts = token.split(SEPARATOR)
    if len(parts) != 2:
        raise InvalidToken('Malformed token')
    encrypted, signature = parts
    if not crypto.compare(crypto.hash(encrypted + keys.token_padding),
                          signature):
        logger.debug('Token signature does not match')
        raise InvalidToken('Invalid signature')
    try:
        data = crypto.decrypt(encrypted, keys.token_secret)
    except DecryptionFailed as e:
        logger.debug('Could not decrypt token: %s', e)
        raise InvalidToken('Could not decrypt token') from e
    payload = _loads(data)
    if payload is None or not payload.get('c') or not payload.get('t') \
            or payload.get('s') is None:
        logger.debug('Token content is incomplete')
        raise InvalidToken('Malformed content')
    if payload['t'] != TOKEN_TYPE:
        raise InvalidToken('Not a MAC token')
    if not isinstance(payload['c'], str):
        raise InvalidToken('Malformed content')
    claims = read_code(payload['c'], keys, duration)
    return TokenClaims(user_id=claims.user_id, app_id=claims.app_id,
                       state=payload['s'])
