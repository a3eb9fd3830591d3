"""Tests for :mod:`violet_auth.domain`."""

from typing import NamedTuple, Optional
from unittest import TestCase

from .. import domain


class TestDictCoercion(TestCase):
    """Tests for :func:`domain.from_dict` and :func:`domain.to_dict`."""

    def test_minimal_class(self):
        """A minimal NamedTuple class is used, with no child tuple types."""
        class Simple(NamedTuple):
            foo: str

        simple = Simple(foo='bar')
        self.assertEqual(simple,
                         domain.from_dict(Simple, domain.to_dict(simple)))

    def test_class_with_optional_children(self):
        """Optional child NamedTuples are restored, or left as ``None``."""
        class ChildClass(NamedTuple):
            foo: str
            bat: dict

        class ParentClass(NamedTuple):
            baz: Optional[ChildClass] = None

        parent = ParentClass(baz=ChildClass(foo='bar', bat={'qw': 'er'}))
        self.assertEqual(parent,
                         domain.from_dict(ParentClass, domain.to_dict(parent)))

        parent = ParentClass(baz=None)
        self.assertEqual(parent,
                         domain.from_dict(ParentClass, domain.to_dict(parent)))

    def test_session_record(self):
        """A full session record survives coercion to dict and back."""
        record = domain.SessionRecord(
            user=domain.UserSession(user_id='u1', remember=True,
                                    last_seen=1562345678901),
            verify=domain.VerifyState(
                captcha=domain.Challenge(code='1234', issued_at=1),
                email=domain.Challenge(code='123456', issued_at=2,
                                       operator='register',
                                       target='foo@bar.com'),
            )
        )
        data = domain.to_dict(record)
        self.assertEqual(data['verify']['email']['operator'], 'register')
        self.assertIsNone(data['verify']['phone'])
        self.assertEqual(domain.from_dict(domain.SessionRecord, data), record)

    def test_missing_and_extra_keys(self):
        """Missing keys take defaults and unknown keys are ignored."""
        record = domain.from_dict(domain.SessionRecord,
                                  {'user': {'user_id': 'u1'}, 'foo': 'bar'})
        self.assertEqual(record.user, domain.UserSession(user_id='u1'))
        self.assertEqual(record.verify, domain.VerifyState())
        self.assertEqual(domain.from_dict(domain.SessionRecord, {}),
                         domain.SessionRecord())

    def test_not_a_namedtuple(self):
        """Other objects produce an empty dict."""
        self.assertEqual(domain.to_dict(('a', 'b')), {})
