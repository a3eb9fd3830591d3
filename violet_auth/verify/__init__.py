"""
Session-bound verification challenges.

Sensitive account operations are gated on a captcha, an email code or a
phone code. Each channel holds at most one :class:`.Challenge` in the
session's :class:`.VerifyState`:

- :mod:`.captcha` issues and checks image captchas;
- :mod:`.challenges` issues and checks email and phone codes;
- :mod:`.delivery` sends codes through a mailer or SMS service;
- :class:`.Verifier` runs all of the above against the session store.

The functions in the first three modules never touch the session store
themselves; callers pass the current state in and persist what comes back.
"""

from .captcha import check_captcha, get_captcha
from .challenges import check_email_code, check_phone_code, get_email_code, \
    get_phone_code
from .delivery import Mailer, SMTPMailer, SmsSender, send_email_code, \
    send_phone_code
from .verifier import Verifier
