"""Tests for :class:`violet_auth.verify.Verifier` against a fake Redis."""

from unittest import TestCase, mock

import fakeredis

from .. import captcha, challenges, delivery
from ..verifier import Verifier
from ...domain import SessionRecord, UserSession
from ...exceptions import CaptchaMismatch, ChallengeExpired, CodeMismatch, \
    OperatorMismatch, RateLimited, SendFailed
from ...sessions import SessionStore


class TestVerifier(TestCase):
    """The verifier persists every state change in the session store."""

    def setUp(self):
        """A session that is already logged in."""
        redis = fakeredis.FakeStrictRedis()
        redis.flushall()
        self.store = SessionStore('localhost', 6379, 0, 'foosecret',
                                  connection=redis)
        self.user = UserSession(user_id='u1', remember=True)
        self.store.save('sess1', SessionRecord(user=self.user))
        self.mailer = mock.MagicMock(spec=delivery.Mailer)
        self.mailer.send_email.return_value = True
        self.verifier = Verifier(self.store, 'sess1', mailer=self.mailer,
                                 fixed_phone_code='123456')

    def test_email_code(self):
        """An email code is stored, checked and cleared."""
        code = self.verifier.get_email_code('foo@bar.com', 'register')
        record = self.store.load('sess1')
        self.assertEqual(record.verify.email.code, code)
        self.assertEqual(record.user, self.user, "Login state is untouched")

        self.verifier.check_email_code(code, 'register')
        self.assertIsNone(self.store.load('sess1').verify.email)
        with self.assertRaises(ChallengeExpired):
            self.verifier.check_email_code(code, 'register')

    def test_rate_limit(self):
        """Two email codes in a row are refused."""
        self.verifier.get_email_code('foo@bar.com', 'register')
        with self.assertRaises(RateLimited):
            self.verifier.get_email_code('foo@bar.com', 'register')

    def test_other_session(self):
        """Challenges are visible only in their own session."""
        code = self.verifier.get_email_code('foo@bar.com', 'register')
        other = Verifier(self.store, 'sess2')
        with self.assertRaises(ChallengeExpired):
            other.check_email_code(code, 'register')
        other.get_email_code('foo@bar.com', 'register')

    def test_failure_clears_stored_challenge(self):
        """The cleared state of a failed check is written back."""
        code = self.verifier.get_email_code('foo@bar.com', 'register')
        with self.assertRaises(OperatorMismatch):
            self.verifier.check_email_code(code, 'reset')
        self.assertIsNone(self.store.load('sess1').verify.email)

    def test_email_mismatch_keeps_challenge(self):
        """A wrong email code leaves the stored challenge in place."""
        code = self.verifier.get_email_code('foo@bar.com', 'register')
        wrong = '000000' if code != '000000' else '111111'
        with self.assertRaises(CodeMismatch):
            self.verifier.check_email_code(wrong, 'register')
        self.verifier.check_email_code(code, 'register')

    def test_phone_code(self):
        """Phone codes use the configured fixed value."""
        self.assertEqual(self.verifier.get_phone_code('13800000000',
                                                      'register'), '123456')
        with self.assertRaises(CodeMismatch):
            self.verifier.check_phone_code('654321', 'register')
        with self.assertRaises(ChallengeExpired):
            self.verifier.check_phone_code('123456', 'register')

    @mock.patch(f'{captcha.__name__}.render', return_value='data:foo')
    @mock.patch(f'{captcha.__name__}._generate_value', return_value='4321')
    def test_captcha(self, mock_value, mock_render):
        """A captcha is consumed by a wrong answer."""
        self.assertEqual(self.verifier.get_captcha(), 'data:foo')
        self.assertEqual(self.store.load('sess1').verify.captcha.code, '4321')
        with self.assertRaises(CaptchaMismatch):
            self.verifier.check_captcha('1234')
        self.assertIsNone(self.store.load('sess1').verify.captcha)

    def test_send_email_code(self):
        """The code is mailed and stored."""
        self.verifier.send_email_code('foo@bar.com', 'register', name='Foo')
        stored = self.store.load('sess1').verify.email
        variables = self.mailer.send_email.call_args[0][4]
        self.assertEqual(variables['code'], stored.code)

    def test_send_failure_still_issues(self):
        """A failed delivery still counts against the rate limit."""
        self.mailer.send_email.return_value = False
        with self.assertRaises(SendFailed):
            self.verifier.send_email_code('foo@bar.com', 'register')
        self.assertIsNotNone(self.store.load('sess1').verify.email)
        with self.assertRaises(RateLimited):
            self.verifier.send_email_code('foo@bar.com', 'register')

    def test_send_phone_code(self):
        """The phone code is sent with the configured SMS sender."""
        sms = mock.MagicMock(spec=delivery.SmsSender)
        sms.send_sms.return_value = True
        verifier = Verifier(self.store, 'sess1', sms=sms,
                            fixed_phone_code=None)
        verifier.send_phone_code('13800000000', 'register')
        stored = self.store.load('sess1').verify.phone
        self.assertEqual(sms.send_sms.call_args[0][1]['code'], stored.code)

    def test_no_mailer(self):
        """Sending without a mailer is a programming error."""
        verifier = Verifier(self.store, 'sess1')
        with self.assertRaises(RuntimeError):
            verifier.send_email_code('foo@bar.com', 'register')
        with self.assertRaises(RuntimeError):
            verifier.send_phone_code('13800000000', 'register')

    @mock.patch(f'{challenges.__name__}._now')
    def test_expiry_uses_wall_clock(self, mock_now):
        """Without an explicit time, the current time is used."""
        mock_now.return_value = 1562345678901
        code = self.verifier.get_email_code('foo@bar.com', 'register')
        mock_now.return_value = 1562345678901 + 11 * 60 * 1000
        with self.assertRaises(ChallengeExpired):
            self.verifier.check_email_code(code, 'register')
