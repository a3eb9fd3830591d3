"""
Password verifiers.

Clients never send a plaintext password: they send its SHA-512 digest. What
is stored server-side is ``hash(hash(digest) + salt)``, so a stored verifier
never equals a single digest of what the client sent.
"""

import logging
from typing import Optional

from . import crypto
from .domain import PasswordVerifier
from .exceptions import PasswordAuthenticationFailed

logger = logging.getLogger(__name__)

SALT_BITS = 260


def hash_password(password: str,
                  salt: Optional[str] = None) -> PasswordVerifier:
    """
    Generate a verifier for a password.

    Parameters
    ----------
    password : str
        The client-side digest of the password.
    salt : str
        Salt stored with an existing verifier. A fresh random salt is
        generated if not given, e.g. at registration or password reset.

    Returns
    -------
    :class:`.PasswordVerifier`

    """
    if salt is None:
        salt = crypto.rand(SALT_BITS)
    return PasswordVerifier(password=crypto.hash(crypto.hash(password) + salt),
                            salt=salt)


def check_password(password: str, verifier: PasswordVerifier) -> None:
    """
    Check a password against a stored verifier.

    Raises
    ------
    :class:`.PasswordAuthenticationFailed`
        If the password does not match.

    """
    candidate = hash_password(password, verifier.salt)
    if not crypto.compare(candidate.password, verifier.password):
        logger.debug('Password does not match verifier')
        raise PasswordAuthenticationFailed('Incorrect password')
