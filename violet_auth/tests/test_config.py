"""Tests for :mod:`violet_auth.config` and :mod:`violet_auth.app_logging`."""

import io
import json
import logging
from unittest import TestCase

from .. import config
from ..app_logging import setup_logger


class TestLoadSecrets(TestCase):
    """Tests for :func:`config.load_secrets`."""

    def test_from_mapping(self):
        """Secrets are read from the given configuration."""
        keys = config.load_secrets({'CODE_SECRET': 'a', 'TOKEN_SECRET': 'b',
                                    'TOKEN_PADDING': 'c', 'OTHER': 'd'})
        self.assertEqual(keys, config.AuthSecrets('a', 'b', 'c'))

    def test_from_module(self):
        """By default the module-level values are used."""
        keys = config.load_secrets()
        self.assertEqual(keys.code_secret, config.CODE_SECRET)
        self.assertEqual(keys.token_secret, config.TOKEN_SECRET)
        self.assertEqual(keys.token_padding, config.TOKEN_PADDING)

    def test_immutable(self):
        """Secrets cannot be changed once loaded."""
        keys = config.load_secrets()
        with self.assertRaises(AttributeError):
            keys.code_secret = 'other'


class TestSetupLogger(TestCase):
    """Tests for :func:`app_logging.setup_logger`."""

    def test_json_output(self):
        """Records are written as JSON with renamed fields."""
        stream = io.StringIO()
        root = logging.getLogger()
        level = root.level
        handler = setup_logger(logging.DEBUG, stream=stream)
        try:
            logging.getLogger('violet_auth.test').debug('hello %s', 'world')
        finally:
            root.removeHandler(handler)
            root.setLevel(level)
        record = json.loads(stream.getvalue().strip().splitlines()[-1])
        self.assertEqual(record['message'], 'hello world')
        self.assertEqual(record['level'], 'DEBUG')
        self.assertEqual(record['name'], 'violet_auth.test')
        self.assertIn('timestamp', record)
