"""
Violet authorization and verification core.

This package issues and validates the artifacts that bind a user to a
third-party application, and manages the short-lived challenges that gate
sensitive account operations:

- :mod:`.crypto` provides the encryption, hashing and random primitives;
- :mod:`.passwords` turns a client-side password digest into a verifier;
- :mod:`.tokens` issues and reads authorization codes and MAC tokens;
- :mod:`.verify` runs the captcha, email code and phone code challenges;
- :mod:`.guards` checks login sessions and user levels;
- :mod:`.sessions` keeps session records in Redis.

Quick start
-----------

.. code-block:: python

   from violet_auth import config, tokens

   keys = config.load_secrets()
   code = tokens.generate_code(user_id, app_id, keys)
   ...
   claims = tokens.read_code(code, keys)

Secrets are loaded once and passed explicitly, so tests can use fixed ones.
"""

from .config import AuthSecrets, load_secrets
from .domain import Challenge, CodeClaims, PasswordVerifier, SessionRecord, \
    TokenClaims, UserSession, VerifyState
from .exceptions import AuthError, ErrorKind
