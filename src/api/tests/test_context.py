"""Tests for open_context: startup acquisition and shutdown release."""

import unittest
from unittest.mock import MagicMock, patch

from api.context import open_context
from adapter.hashing.bcrypt_hasher import BcryptPasswordHasher
from utils.settings import Settings


class TestOpenContext(unittest.TestCase):

    @patch('api.context.MongoUserRepository.ensure_indexes', return_value=True)
    @patch('api.context.MongoConnection')
    def test_builds_context_and_closes_connection(self, mock_conn_cls, mock_indexes):
        settings = Settings(mongo_url='mongodb://localhost', database_name='crawlly_test', bcrypt_rounds=5)
        mongo = mock_conn_cls.return_value

        with open_context(settings) as context:
            self.assertIs(context.settings, settings)
            self.assertIs(context.mongo, mongo)
            self.assertIsInstance(context.password_hasher, BcryptPasswordHasher)
            self.assertEqual(context.password_hasher.rounds, 5)
            mongo.close.assert_not_called()

        mock_conn_cls.assert_called_once_with('mongodb://localhost', 'crawlly_test')
        mock_indexes.assert_called_once_with()
        mongo.close.assert_called_once()

    @patch('api.context.MongoUserRepository.ensure_indexes')
    @patch('api.context.MongoConnection')
    def test_skips_indexes_when_mongodb_unavailable(self, mock_conn_cls, mock_indexes):
        mock_conn_cls.return_value.get_database.return_value = None

        with open_context(Settings()) as context:
            self.assertIsNone(context.user_repo())

        mock_indexes.assert_not_called()

    @patch('api.context.MongoUserRepository.ensure_indexes', return_value=True)
    @patch('api.context.MongoConnection')
    def test_closes_connection_on_error(self, mock_conn_cls, _mock_indexes):
        with self.assertRaises(RuntimeError):
            with open_context(Settings()):
                raise RuntimeError("boom")

        mock_conn_cls.return_value.close.assert_called_once()

    def test_invalid_bcrypt_rounds_fails_fast(self):
        with patch('api.context.MongoConnection', return_value=MagicMock()), \
                patch('api.context.MongoUserRepository.ensure_indexes', return_value=True):
            with self.assertRaises(ValueError):
                with open_context(Settings(bcrypt_rounds=2)):
                    pass
