"""Verification challenges bound to a session in the session store."""

import logging
from typing import Any, Callable, Optional

from .. import config
from ..domain import VerifyState
from ..exceptions import VerificationFailed
from ..sessions import SessionStore
from . import captcha, challenges, delivery

logger = logging.getLogger(__name__)


class Verifier(object):
    """
    Runs the verification state machine against one stored session.

    Each call loads the session record, applies one operation to its
    :class:`.VerifyState`, and saves the result. When the operation fails
    the state carried by the exception is saved before it is re-raised, so
    a consumed challenge stays consumed.
    """

    def __init__(self, store: SessionStore, session_id: str,
                 mailer: Optional[delivery.Mailer] = None,
                 sms: Optional[delivery.SmsSender] = None,
                 fixed_phone_code: Optional[str] = config.PHONE_FIXED_CODE) \
            -> None:
        self.store = store
        self.session_id = session_id
        self.mailer = mailer
        self.sms = sms
        self.fixed_phone_code = fixed_phone_code

    def _apply(self, operation: Callable[..., Any], *args: Any,
               **kwargs: Any) -> Any:
        record = self.store.load(self.session_id)
        try:
            result = operation(record.verify, *args, **kwargs)
        except VerificationFailed as e:
            if e.state is not None and e.state != record.verify:
                self.store.save(self.session_id,
                                record._replace(verify=e.state))
            raise
        if isinstance(result, VerifyState):
            verify, value = result, None
        else:
            verify, value = result
        self.store.save(self.session_id, record._replace(verify=verify))
        return value

    def get_captcha(self) -> str:
        """Issue a captcha and return its image as a data URI."""
        value: str = self._apply(captcha.get_captcha)
        return value

    def check_captcha(self, value: str) -> None:
        """Check and consume the captcha."""
        self._apply(captcha.check_captcha, value)

    def get_email_code(self, email: str, operator: str) -> str:
        """Issue an email code; the caller is responsible for sending it."""
        code: str = self._apply(challenges.get_email_code, email, operator)
        return code

    def get_phone_code(self, phone: str, operator: str) -> str:
        """Issue a phone code; the caller is responsible for sending it."""
        code: str = self._apply(challenges.get_phone_code, phone, operator,
                                fixed_code=self.fixed_phone_code)
        return code

    def check_email_code(self, code: str, operator: str) -> None:
        """Check the email code issued for ``operator``."""
        self._apply(challenges.check_email_code, code, operator)

    def check_phone_code(self, code: str, operator: str) -> None:
        """Check the phone code issued for ``operator``."""
        self._apply(challenges.check_phone_code, code, operator)

    def send_email_code(self, email: str, operator: str,
                        name: Optional[str] = None) -> None:
        """Issue an email code and send it with the configured mailer."""
        if self.mailer is None:
            raise RuntimeError('No mailer configured')
        self._apply(delivery.send_email_code, self.mailer, email, operator,
                    name=name)

    def send_phone_code(self, phone: str, operator: str,
                        name: Optional[str] = None) -> None:
        """Issue a phone code and send it with the configured SMS sender."""
        if self.sms is None:
            raise RuntimeError('No SMS sender configured')
        self._apply(delivery.send_phone_code, self.sms, phone, operator,
                    name=name, fixed_code=self.fixed_phone_code)
