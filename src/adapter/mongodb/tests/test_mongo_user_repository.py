"""Tests for MongoUserRepository against a mocked collection."""

import unittest
from unittest.mock import MagicMock, call
from datetime import datetime, timezone

from pymongo.errors import DuplicateKeyError, OperationFailure, PyMongoError

from adapter.mongodb import USERS_COLLECTION_NAME
from adapter.mongodb.user_repository import MongoUserRepository
from domain.model.errors import DuplicateError, NotFoundError, PersistenceError
from domain.model.user import User


def _mock_db():
    mock_collection = MagicMock()
    mock_db = MagicMock()
    mock_db.__getitem__.return_value = mock_collection
    return mock_db, mock_collection


def _user_doc(**overrides) -> dict:
    now = datetime(2026, 1, 23, 12, 0, 0, tzinfo=timezone.utc)
    doc = {
        '_id': 'user-1',
        'email': 'a@x.com',
        'name': 'A',
        'password_hash': '$2b$10$hashed',
        'api_key': 'crawlly_key-1',
        'is_active': True,
        'created_at': now,
        'updated_at': now,
    }
    doc.update(overrides)
    return doc


class TestMongoUserRepositoryReads(unittest.TestCase):

    def setUp(self):
        self.db, self.collection = _mock_db()
        self.repo = MongoUserRepository(self.db)

    def test_uses_users_collection(self):
        self.db.__getitem__.assert_called_with(USERS_COLLECTION_NAME)

    def test_get_by_email_found(self):
        self.collection.find_one.return_value = _user_doc()

        user = self.repo.get_by_email('a@x.com')

        self.assertIsInstance(user, User)
        self.assertEqual(user.id, 'user-1')
        self.assertEqual(user.api_key, 'crawlly_key-1')
        self.assertTrue(user.is_active)
        self.collection.find_one.assert_called_once_with({'email': 'a@x.com'})

    def test_get_by_email_not_found(self):
        self.collection.find_one.return_value = None
        self.assertIsNone(self.repo.get_by_email('nobody@x.com'))

    def test_get_by_id_queries_primary_key(self):
        self.collection.find_one.return_value = _user_doc()
        self.repo.get_by_id('user-1')
        self.collection.find_one.assert_called_once_with({'_id': 'user-1'})

    def test_get_by_api_key(self):
        self.collection.find_one.return_value = _user_doc(is_active=False)

        user = self.repo.get_by_api_key('crawlly_key-1')

        self.assertFalse(user.is_active)
        self.collection.find_one.assert_called_once_with({'api_key': 'crawlly_key-1'})

    def test_lookup_failure_raises_persistence_error(self):
        self.collection.find_one.side_effect = PyMongoError("connection reset")
        with self.assertRaises(PersistenceError):
            self.repo.get_by_email('a@x.com')

    def test_list_page_sorts_newest_first(self):
        cursor = MagicMock()
        cursor.sort.return_value = cursor
        cursor.skip.return_value = cursor
        cursor.limit.return_value = iter([_user_doc(), _user_doc(_id='user-2', email='b@x.com')])
        self.collection.find.return_value = cursor

        users = self.repo.list_page(offset=10, limit=5)

        self.assertEqual([u.id for u in users], ['user-1', 'user-2'])
        cursor.sort.assert_called_once_with('created_at', -1)
        cursor.skip.assert_called_once_with(10)
        cursor.limit.assert_called_once_with(5)

    def test_count(self):
        self.collection.count_documents.return_value = 7
        self.assertEqual(self.repo.count(), 7)


class TestMongoUserRepositoryWrites(unittest.TestCase):

    def setUp(self):
        self.db, self.collection = _mock_db()
        self.repo = MongoUserRepository(self.db)
        self.user = User.create(email='a@x.com', name='A', password_hash='$2b$10$hashed')

    def test_create_inserts_document(self):
        self.repo.create(self.user)

        doc = self.collection.insert_one.call_args[0][0]
        self.assertEqual(doc['_id'], self.user.id)
        self.assertEqual(doc['email'], 'a@x.com')
        self.assertEqual(doc['password_hash'], '$2b$10$hashed')
        self.assertEqual(doc['api_key'], self.user.api_key)
        self.assertTrue(doc['is_active'])

    def test_create_duplicate_key_raises_duplicate_error(self):
        self.collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key error")
        with self.assertRaises(DuplicateError):
            self.repo.create(self.user)

    def test_create_other_failure_raises_persistence_error(self):
        self.collection.insert_one.side_effect = PyMongoError("write concern")
        with self.assertRaises(PersistenceError):
            self.repo.create(self.user)

    def test_update_sets_mutable_fields(self):
        self.collection.update_one.return_value = MagicMock(matched_count=1)

        self.repo.update(self.user)

        query, update = self.collection.update_one.call_args[0]
        self.assertEqual(query, {'_id': self.user.id})
        self.assertNotIn('_id', update['$set'])
        self.assertNotIn('created_at', update['$set'])
        self.assertEqual(update['$set']['api_key'], self.user.api_key)

    def test_update_unknown_id_raises_not_found(self):
        self.collection.update_one.return_value = MagicMock(matched_count=0)
        with self.assertRaises(NotFoundError):
            self.repo.update(self.user)

    def test_update_duplicate_key_raises_duplicate_error(self):
        self.collection.update_one.side_effect = DuplicateKeyError("E11000")
        with self.assertRaises(DuplicateError):
            self.repo.update(self.user)

    def test_delete(self):
        self.collection.delete_one.return_value = MagicMock(deleted_count=1)
        self.repo.delete('user-1')
        self.collection.delete_one.assert_called_once_with({'_id': 'user-1'})

    def test_delete_unknown_id_raises_not_found(self):
        self.collection.delete_one.return_value = MagicMock(deleted_count=0)
        with self.assertRaises(NotFoundError):
            self.repo.delete('user-1')


class TestMongoUserRepositoryIndexes(unittest.TestCase):

    def setUp(self):
        db, self.collection = _mock_db()
        self.repo = MongoUserRepository(db)

    def test_ensure_indexes_creates_unique_email_and_api_key(self):
        self.assertTrue(self.repo.ensure_indexes())

        calls = {c.kwargs['name']: c for c in self.collection.create_index.call_args_list}
        self.assertEqual(calls['idx_users_email'].args[0], [('email', 1)])
        self.assertTrue(calls['idx_users_email'].kwargs.get('unique'))
        self.assertTrue(calls['idx_users_api_key'].kwargs.get('unique'))
        self.assertNotIn('unique', calls['idx_users_created_at'].kwargs)

    def test_non_unique_email_index_is_replaced(self):
        self.collection.create_index.side_effect = [
            OperationFailure("Index with name: idx_users_email already exists with different options"),
            None, None, None,
        ]
        self.collection.index_information.return_value = {
            '_id_': {'key': [('_id', 1)]},
            'idx_users_email': {'key': [('email', 1)]},
        }

        self.assertTrue(self.repo.ensure_indexes())

        self.collection.drop_index.assert_called_once_with('idx_users_email')
        self.assertEqual(
            self.collection.create_index.call_args_list[1],
            call([('email', 1)], name='idx_users_email', unique=True),
        )

    def test_same_keys_under_other_name_is_renamed(self):
        self.collection.create_index.side_effect = [
            OperationFailure("Index already exists with a different name: email_1", code=85),
            None, None, None,
        ]
        self.collection.index_information.return_value = {
            '_id_': {'key': [('_id', 1)]},
            'email_1': {'key': [('email', 1)], 'unique': True},
        }

        self.assertTrue(self.repo.ensure_indexes())

        self.collection.drop_index.assert_called_once_with('email_1')

    def test_unresolved_conflict_returns_false(self):
        self.collection.create_index.side_effect = OperationFailure("already exists")
        self.collection.index_information.return_value = {'_id_': {'key': [('_id', 1)]}}

        self.assertFalse(self.repo.ensure_indexes())
        self.collection.drop_index.assert_not_called()

    def test_other_errors_return_false_without_dropping(self):
        self.collection.create_index.side_effect = OperationFailure("not authorized", code=13)

        self.assertFalse(self.repo.ensure_indexes())
        self.collection.index_information.assert_not_called()
        self.collection.drop_index.assert_not_called()
