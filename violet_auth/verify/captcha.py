"""
Image captcha.

A four-digit value is stored in the session's :class:`.VerifyState` and shown
to the user as a PNG image. Every check consumes the captcha, whatever its
outcome.
"""

import logging
import secrets
import time
from base64 import b64encode
from typing import Optional, Tuple

from captcha.image import ImageCaptcha

from ..domain import Challenge, VerifyState
from ..exceptions import CaptchaExpired, CaptchaMismatch

logger = logging.getLogger(__name__)

CAPTCHA_DURATION = 300 * 1000
"""Validity of a captcha, in milliseconds."""

DATA_URI_PREFIX = 'data:image/png;base64,'


def _now() -> int:
    return int(time.time() * 1000)


def _generate_value() -> str:
    return str(secrets.randbelow(9000) + 1000)


def render(value: str, font: Optional[str] = None) -> str:
    """
    Render a captcha value as a PNG data URI.

    Parameters
    ----------
    value : str
        The text to depict.
    font : str
        Path to a TrueType font. The fonts bundled with the ``captcha``
        package are used by default.

    Returns
    -------
    str

    """
    if font is not None:
        image = ImageCaptcha(fonts=[font])
    else:
        image = ImageCaptcha()
    data = image.generate(value)
    return DATA_URI_PREFIX + b64encode(data.getvalue()).decode('ascii')


def get_captcha(verify: VerifyState, now: Optional[int] = None,
                font: Optional[str] = None) -> Tuple[VerifyState, str]:
    """
    Issue a new captcha, replacing any previous one.

    Returns
    -------
    tuple
        The new :class:`.VerifyState`, and the captcha image as a data URI.

    """
    now = _now() if now is None else now
    value = _generate_value()
    challenge = Challenge(code=value, issued_at=now)
    return verify._replace(captcha=challenge), render(value, font=font)


def check_captcha(verify: VerifyState, value: str,
                  now: Optional[int] = None) -> VerifyState:
    """
    Check a submitted captcha value.

    Returns
    -------
    :class:`.VerifyState`
        The state with the captcha cleared.

    Raises
    ------
    :class:`.CaptchaExpired`
        No captcha was issued, or it is older than five minutes.
    :class:`.CaptchaMismatch`
        The value is wrong.

    """
    now = _now() if now is None else now
    challenge = verify.captcha
    cleared = verify._replace(captcha=None)
    if challenge is None or now - challenge.issued_at >= CAPTCHA_DURATION:
        raise CaptchaExpired('No valid captcha', state=cleared)
    if challenge.code != value:
        logger.debug('Incorrect value for this captcha')
        raise CaptchaMismatch('Incorrect value for this captcha',
                              state=cleared)
    return cleared
