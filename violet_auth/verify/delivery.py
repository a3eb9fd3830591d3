"""Delivery of verification codes by email and SMS."""

import logging
import os
import smtplib
from abc import ABC, abstractmethod
from datetime import datetime
from email.message import EmailMessage
from typing import Any, Mapping, Optional

from jinja2 import Template
from pytz import timezone

from .. import config
from ..domain import VerifyState
from ..exceptions import SendFailed
from .challenges import get_email_code, get_phone_code

logger = logging.getLogger(__name__)

TEMPLATE_PATH = os.path.join(os.path.dirname(os.path.dirname(__file__)),
                             'templates', 'code.html')

SUBJECTS = {
    'register': 'Violet registration code',
    'reset': 'Violet password reset code',
    'update': 'Violet account update code',
}
DEFAULT_SUBJECT = 'Violet verification code'


class Mailer(ABC):
    """Sends HTML email."""

    @abstractmethod
    def send_email(self, sender: str, to: str, subject: str, template: str,
                   variables: Mapping[str, Any]) -> bool:
        """Render ``template`` with ``variables`` and send it to ``to``."""


class SmsSender(ABC):
    """Sends templated text messages."""

    @abstractmethod
    def send_sms(self, phone: str, variables: Mapping[str, Any]) -> bool:
        """Send a text message to ``phone``."""


class SMTPMailer(Mailer):
    """Sends email through an SMTP relay, one connection per message."""

    def __init__(self, host: str = "", port: int = 0) -> None:
        self._host = host
        self._port = port

    def _new_connection(self) -> smtplib.SMTP:
        return smtplib.SMTP(host=self._host, port=self._port)

    def send_email(self, sender: str, to: str, subject: str, template: str,
                   variables: Mapping[str, Any]) -> bool:
        message = EmailMessage()
        message['From'] = sender
        message['To'] = to
        message['Subject'] = subject
        message.set_content(Template(template).render(**variables),
                            subtype='html')
        try:
            with self._new_connection() as conn:
                conn.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error('Failed to send email to %s: %s', to, e)
            return False
        return True


def get_mailer() -> SMTPMailer:
    """Get a mailer for the configured SMTP relay."""
    return SMTPMailer(config.SMTP_HOST, int(config.SMTP_PORT))


def _load_template() -> str:
    with open(TEMPLATE_PATH, encoding='utf-8') as f:
        return f.read()


def _timestamp() -> str:
    now = datetime.now(tz=timezone(config.TIMEZONE))
    return f'{now.year}/{now.month}/{now:%d %H:%M:%S}'


def send_email_code(verify: VerifyState, mailer: Mailer, email: str,
                    operator: str, name: Optional[str] = None,
                    now: Optional[int] = None,
                    sender: Optional[str] = None) -> VerifyState:
    """
    Issue an email code and send it.

    Parameters
    ----------
    verify : :class:`.VerifyState`
    mailer : :class:`Mailer`
    email : str
    operator : str
        Operation the code authorizes; selects the email subject.
    name : str
        Name to greet the user with.
    now : int
        Current epoch milliseconds.
    sender : str
        From address. Defaults to ``EMAIL_FROM_CODE``.

    Returns
    -------
    :class:`.VerifyState`
        State holding the new challenge.

    Raises
    ------
    :class:`.RateLimited`
    :class:`.SendFailed`
        The challenge is issued even so, and carried in ``state``.

    """
    verify, code = get_email_code(verify, email, operator, now=now)
    subject = SUBJECTS.get(operator, DEFAULT_SUBJECT)
    sent = mailer.send_email(sender or config.EMAIL_FROM_CODE, email,
                             subject, _load_template(),
                             {'code': code, 'name': name,
                              'time': _timestamp()})
    if not sent:
        raise SendFailed('Could not send email code', state=verify)
    logger.info('Sent %s code by email', operator)
    return verify


def send_phone_code(verify: VerifyState, sms: SmsSender, phone: str,
                    operator: str, name: Optional[str] = None,
                    now: Optional[int] = None,
                    fixed_code: Optional[str] = None) -> VerifyState:
    """
    Issue a phone code and send it.

    Works like :func:`send_email_code`.
    """
    verify, code = get_phone_code(verify, phone, operator, now=now,
                                  fixed_code=fixed_code)
    if not sms.send_sms(phone, {'code': code, 'name': name,
                                'operator': operator}):
        raise SendFailed('Could not send phone code', state=verify)
    logger.info('Sent %s code by SMS', operator)
    return verify
