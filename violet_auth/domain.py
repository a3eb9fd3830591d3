"""Defines the records exchanged by the authorization and verification core."""

from functools import partial
from typing import Any, Callable, NamedTuple, Optional, Union, get_args, \
    get_origin


class CodeClaims(NamedTuple):
    """Identity carried by an authorization code."""

    user_id: str
    """The user who granted the authorization."""

    app_id: str
    """The third-party application that was authorized."""


class TokenClaims(NamedTuple):
    """Identity carried by a MAC token."""

    user_id: str
    app_id: str
    state: Any
    """Opaque value supplied by the application when the token was issued."""


class PasswordVerifier(NamedTuple):
    """The stored form of a password."""

    password: str
    """``hash(hash(password) + salt)``."""

    salt: str


class Challenge(NamedTuple):
    """An issued verification challenge for one channel."""

    code: str
    """The value the user is expected to submit."""

    issued_at: int
    """Epoch milliseconds at which the challenge was issued."""

    operator: Optional[str] = None
    """
    Operation the challenge was issued for (e.g. ``register``).

    Not used by the captcha channel.
    """

    target: Optional[str] = None
    """Email address or phone number the code was sent to."""


class VerifyState(NamedTuple):
    """Verification challenges held in a session, one per channel."""

    captcha: Optional[Challenge] = None
    email: Optional[Challenge] = None
    phone: Optional[Challenge] = None


class UserSession(NamedTuple):
    """Login state held in a session."""

    user_id: Optional[str] = None
    remember: bool = False
    """Whether the user asked to stay logged in."""

    last_seen: Optional[int] = None
    """Epoch milliseconds of the last authenticated request."""


class SessionRecord(NamedTuple):
    """Everything this package keeps in the session store for one session."""

    user: UserSession = UserSession()
    verify: VerifyState = VerifyState()


def to_dict(obj: tuple) -> dict:
    """
    Cast a record, and every record nested in it, to plain ``dict``.

    Lists are walked so that records inside them are cast as well. Anything
    without ``_asdict`` is left as it is, which is how the session store gets
    a JSON-ready payload out of a :class:`SessionRecord`.

    Parameters
    ----------
    obj : tuple
        A NamedTuple instance. Anything else yields an empty ``dict``.

    Returns
    -------
    dict

    """
    if not hasattr(obj, '_asdict'):  # NamedTuple-generated classes have this.
        return {}
    data = obj._asdict()  # type: ignore
    _data = {}

    def _cast(obj: Any) -> Any:
        if hasattr(obj, '_asdict'):
            obj = to_dict(obj)
        elif isinstance(obj, list):
            obj = [_cast(o) for o in obj]
        return obj

    for key, value in data.items():
        _data[key] = _cast(value)
    return _data


def from_dict(cls: type, data: dict) -> Any:
    """
    Generate a NamedTuple instance from a dict, with recursion.

    This is the inverse of :func:`to_dict`. Keys that ``cls`` does not define
    are ignored, and missing keys take the field defaults.

    Parameters
    ----------
    cls: type
        Any NamedTuple class.

    data: dict
        Data with which to instantiate ``cls`` and its children.

    Returns
    -------
    NamedTuple
        An instance of ``cls``.
    """
    _data = {}
    for field, field_type in cls.__annotations__.items():
        if field not in data:
            continue
        value = data[field]
        if type(value) is dict:
            target_type = _get_cast_type_for_dict(field_type)
            if target_type:
                value = target_type(value)
        _data[field] = value
    return cls(**_data)


def _is_a_namedtuple(field_type: Any) -> bool:
    """Determine whether or not a field type is a NamedTuple class."""
    return hasattr(field_type, '_fields')


def _get_cast_type_for_dict(field_type: Any) -> Optional[Callable]:
    """
    Determine the NamedTuple target type for a ``dict`` value.

    Returns ``None`` if a suitable target cannot be determined.
    """
    if _is_a_namedtuple(field_type):
        return partial(from_dict, field_type)

    # Optional[...] is a Union; there may be a NamedTuple hiding in there.
    if get_origin(field_type) is Union:
        for s_type in get_args(field_type):
            if s_type is dict:
                return None
            if _is_a_namedtuple(s_type):
                return partial(from_dict, s_type)
    return None
