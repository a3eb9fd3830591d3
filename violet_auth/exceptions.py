"""Exceptions."""

from enum import Enum
from http import HTTPStatus
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Every failure a caller of this package can observe."""

    INVALID_CODE = 'invalid_code'
    TIMEOUT_CODE = 'timeout_code'
    INVALID_TOKEN = 'invalid_token'
    TIMEOUT_TOKEN = 'timeout_token'
    ERROR_CAPTCHA = 'error_captcha'
    TIMEOUT_CAPTCHA = 'timeout_captcha'
    ERROR_OPERATOR = 'error_operator'
    ERROR_CODE = 'error_code'
    LIMIT_TIME = 'limit_time'
    SEND_FAIL = 'send_fail'
    ERROR_PASSWORD = 'error_password'
    PERMISSION_DENY = 'permission_deny'


class AuthError(RuntimeError):
    """A named, per-request failure."""

    kind: ErrorKind
    status: int = HTTPStatus.BAD_REQUEST

    def __init__(self, message: Optional[str] = None) -> None:
        super(AuthError, self).__init__(message or self.kind.value)


class InvalidCode(AuthError):
    """An authorization code is forged, corrupted or incomplete."""

    kind = ErrorKind.INVALID_CODE


class ExpiredCode(AuthError):
    """An authorization code or verification code has expired."""

    kind = ErrorKind.TIMEOUT_CODE


class InvalidToken(AuthError):
    """A token or login session is missing, forged or corrupted."""

    kind = ErrorKind.INVALID_TOKEN
    status = HTTPStatus.UNAUTHORIZED


class ExpiredToken(AuthError):
    """A login session has been idle for too long."""

    kind = ErrorKind.TIMEOUT_TOKEN
    status = HTTPStatus.UNAUTHORIZED


class PasswordAuthenticationFailed(AuthError):
    """Password is not correct."""

    kind = ErrorKind.ERROR_PASSWORD


class PermissionDenied(AuthError):
    """The user level does not allow this operation."""

    kind = ErrorKind.PERMISSION_DENY
    status = HTTPStatus.FORBIDDEN


class VerificationFailed(AuthError):
    """
    A verification challenge could not be issued or was not satisfied.

    ``state`` holds the verification state that must be written back to the
    session, e.g. with the consumed challenge already cleared.
    """

    def __init__(self, message: Optional[str] = None,
                 state: Any = None) -> None:
        super(VerificationFailed, self).__init__(message)
        self.state = state


class CaptchaMismatch(VerificationFailed):
    """The submitted captcha does not match the challenge."""

    kind = ErrorKind.ERROR_CAPTCHA


class CaptchaExpired(VerificationFailed):
    """No captcha was issued, or it is older than five minutes."""

    kind = ErrorKind.TIMEOUT_CAPTCHA


class ChallengeExpired(VerificationFailed, ExpiredCode):
    """No email/phone code was issued, or it has expired."""

    kind = ErrorKind.TIMEOUT_CODE


class OperatorMismatch(VerificationFailed):
    """The challenge was issued for a different operation."""

    kind = ErrorKind.ERROR_OPERATOR


class CodeMismatch(VerificationFailed):
    """The submitted email/phone code does not match the challenge."""

    kind = ErrorKind.ERROR_CODE


class RateLimited(VerificationFailed):
    """A new challenge was requested less than a minute after the last."""

    kind = ErrorKind.LIMIT_TIME


class SendFailed(VerificationFailed):
    """The mailer or SMS service could not deliver the code."""

    kind = ErrorKind.SEND_FAIL


class DecryptionFailed(ValueError):
    """Ciphertext is malformed or was produced with a different key."""


class SessionStoreError(RuntimeError):
    """Base class for failures of the session store."""


class SessionCreationFailed(SessionStoreError):
    """Failed to write a session in the session store."""


class SessionDeletionFailed(SessionStoreError):
    """Failed to delete a session in the session store."""


class SessionCorrupted(SessionStoreError):
    """A stored session record does not carry a valid signature."""
