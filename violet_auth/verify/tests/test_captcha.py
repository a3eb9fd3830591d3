"""Tests for :mod:`violet_auth.verify.captcha`."""

import io
from base64 import b64decode
from unittest import TestCase, mock

from PIL import Image

from .. import captcha
from ...domain import Challenge, VerifyState
from ...exceptions import CaptchaExpired, CaptchaMismatch, ErrorKind

NOW = 1562345678901


class TestGetCaptcha(TestCase):
    """Tests for :func:`captcha.get_captcha`."""

    def test_new_captcha(self):
        """Generate and render a new captcha."""
        verify, data_uri = captcha.get_captcha(VerifyState(), now=NOW)
        self.assertEqual(verify.captcha.issued_at, NOW)
        self.assertEqual(len(verify.captcha.code), 4)
        self.assertTrue(verify.captcha.code.isdigit())
        self.assertTrue(data_uri.startswith('data:image/png;base64,'))
        png = b64decode(data_uri[len('data:image/png;base64,'):])
        self.assertTrue(png.startswith(b'\x89PNG'), "Returns a PNG image")
        self.assertEqual(Image.open(io.BytesIO(png)).format, 'PNG')

    @mock.patch(f'{captcha.__name__}.render', return_value='data:')
    def test_replaces_previous(self, mock_render):
        """A new captcha replaces the last one, without rate limit."""
        verify = VerifyState(captcha=Challenge(code='0000', issued_at=NOW))
        verify, _ = captcha.get_captcha(verify, now=NOW + 1)
        self.assertEqual(verify.captcha.issued_at, NOW + 1)
        self.assertEqual(mock_render.call_args[0][0], verify.captcha.code)

    @mock.patch(f'{captcha.__name__}.render', return_value='data:')
    def test_leaves_other_channels(self, mock_render):
        """Only the captcha channel is touched."""
        email = Challenge(code='123456', issued_at=NOW, operator='register',
                          target='foo@bar.com')
        verify, _ = captcha.get_captcha(VerifyState(email=email), now=NOW)
        self.assertEqual(verify.email, email)


class TestCheckCaptcha(TestCase):
    """Tests for :func:`captcha.check_captcha`."""

    def setUp(self):
        """A captcha was issued."""
        self.verify = VerifyState(captcha=Challenge(code='4321',
                                                    issued_at=NOW))

    def test_correct(self):
        """The right value consumes the captcha."""
        verify = captcha.check_captcha(self.verify, '4321', now=NOW + 1000)
        self.assertIsNone(verify.captcha)
        with self.assertRaises(CaptchaExpired):
            captcha.check_captcha(verify, '4321', now=NOW + 2000)

    def test_incorrect(self):
        """A wrong value also consumes the captcha."""
        with self.assertRaises(CaptchaMismatch) as ctx:
            captcha.check_captcha(self.verify, '1234', now=NOW + 1000)
        self.assertEqual(ctx.exception.kind, ErrorKind.ERROR_CAPTCHA)
        self.assertIsNone(ctx.exception.state.captcha)
        with self.assertRaises(CaptchaExpired):
            captcha.check_captcha(ctx.exception.state, '4321', now=NOW + 2000)

    def test_expired(self):
        """A captcha is valid for less than five minutes."""
        self.assertIsNone(captcha.check_captcha(
            self.verify, '4321', now=NOW + 300 * 1000 - 1).captcha)
        with self.assertRaises(CaptchaExpired) as ctx:
            captcha.check_captcha(self.verify, '4321', now=NOW + 300 * 1000)
        self.assertEqual(ctx.exception.kind, ErrorKind.TIMEOUT_CAPTCHA)

    def test_not_issued(self):
        """No captcha was ever issued."""
        with self.assertRaises(CaptchaExpired):
            captcha.check_captcha(VerifyState(), '4321', now=NOW)
