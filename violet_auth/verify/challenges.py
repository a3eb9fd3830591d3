"""
Email and phone verification codes.

A code is issued into the session's :class:`.VerifyState`, delivered to the
user out-of-band, and submitted back exactly once. The functions here are
pure: they take the current state and return the new one. When a check fails,
the raised :class:`.VerificationFailed` carries the state to write back in
its ``state`` attribute.

One asymmetry is deliberate: a wrong email code leaves the email challenge in
place, so the user may retry until it expires. A wrong phone code clears it.
"""

import logging
import secrets
import time
from typing import Optional, Tuple

from ..domain import Challenge, VerifyState
from ..exceptions import ChallengeExpired, CodeMismatch, OperatorMismatch, \
    RateLimited

logger = logging.getLogger(__name__)

RESEND_INTERVAL = 60 * 1000
"""Minimum time between two codes on the same channel, in milliseconds."""

EMAIL_CODE_DURATION = 600 * 1000
PHONE_CODE_DURATION = 300 * 1000


def _now() -> int:
    return int(time.time() * 1000)


def _random_code() -> str:
    return str(secrets.randbelow(900000) + 100000)


def _check_interval(challenge: Optional[Challenge], verify: VerifyState,
                    now: int) -> None:
    if challenge is not None and now - challenge.issued_at <= RESEND_INTERVAL:
        logger.debug('Code requested %s ms after the last one',
                     now - challenge.issued_at)
        raise RateLimited('A code was sent less than a minute ago',
                          state=verify)


def _is_live(challenge: Optional[Challenge], duration: int,
             now: int) -> bool:
    return challenge is not None and now - challenge.issued_at < duration


def get_email_code(verify: VerifyState, email: str, operator: str,
                   now: Optional[int] = None) -> Tuple[VerifyState, str]:
    """
    Issue an email verification code.

    Parameters
    ----------
    verify : :class:`.VerifyState`
    email : str
        Address the code will be sent to.
    operator : str
        Operation the code authorizes, e.g. ``register``.
    now : int
        Current epoch milliseconds.

    Returns
    -------
    tuple
        The new :class:`.VerifyState`, and the code to deliver.

    Raises
    ------
    :class:`.RateLimited`
        If the last email code was issued less than a minute ago.

    """
    now = _now() if now is None else now
    _check_interval(verify.email, verify, now)
    code = _random_code()
    challenge = Challenge(code=code, issued_at=now, operator=operator,
                          target=email)
    return verify._replace(email=challenge), code


def get_phone_code(verify: VerifyState, phone: str, operator: str,
                   now: Optional[int] = None,
                   fixed_code: Optional[str] = None) \
        -> Tuple[VerifyState, str]:
    """
    Issue a phone verification code.

    Works like :func:`get_email_code`. If ``fixed_code`` is given it is used
    instead of a random value.
    """
    now = _now() if now is None else now
    _check_interval(verify.phone, verify, now)
    code = fixed_code if fixed_code else _random_code()
    challenge = Challenge(code=code, issued_at=now, operator=operator,
                          target=phone)
    return verify._replace(phone=challenge), code


def check_email_code(verify: VerifyState, code: str, operator: str,
                     now: Optional[int] = None) -> VerifyState:
    """
    Check a submitted email code.

    Returns
    -------
    :class:`.VerifyState`
        The state with the email challenge cleared.

    Raises
    ------
    :class:`.ChallengeExpired`
        No code was issued, or it is older than ten minutes.
    :class:`.OperatorMismatch`
        The code was issued for another operation. The challenge is cleared.
    :class:`.CodeMismatch`
        The code is wrong. The challenge is kept.

    """
    now = _now() if now is None else now
    challenge = verify.email
    if not _is_live(challenge, EMAIL_CODE_DURATION, now):
        raise ChallengeExpired('No valid email code', state=verify)
    cleared = verify._replace(email=None)
    if challenge.operator != operator:
        raise OperatorMismatch('Code was issued for another operation',
                               state=cleared)
    if challenge.code != code:
        logger.debug('Incorrect email code')
        raise CodeMismatch('Incorrect email code', state=verify)
    return cleared


def check_phone_code(verify: VerifyState, code: str, operator: str,
                     now: Optional[int] = None) -> VerifyState:
    """
    Check a submitted phone code.

    Like :func:`check_email_code`, except that codes expire after five
    minutes and a wrong code also clears the challenge.
    """
    now = _now() if now is None else now
    challenge = verify.phone
    if not _is_live(challenge, PHONE_CODE_DURATION, now):
        raise ChallengeExpired('No valid phone code', state=verify)
    cleared = verify._replace(phone=None)
    if challenge.operator != operator:
        raise OperatorMismatch('Code was issued for another operation',
                               state=cleared)
    if challenge.code != code:
        logger.debug('Incorrect phone code')
        raise CodeMismatch('Incorrect phone code', state=cleared)
    return cleared
