"""Unit tests for BcryptPasswordHasher."""

import unittest
from unittest.mock import patch

from adapter.hashing.bcrypt_hasher import DEFAULT_ROUNDS, BcryptPasswordHasher
from domain.model.errors import HashingError


class TestBcryptPasswordHasher(unittest.TestCase):

    def setUp(self):
        # Minimum cost keeps the suite fast
        self.hasher = BcryptPasswordHasher(rounds=4)

    def test_default_rounds(self):
        self.assertEqual(DEFAULT_ROUNDS, 10)
        self.assertEqual(BcryptPasswordHasher().rounds, 10)

    def test_rejects_out_of_range_rounds(self):
        with self.assertRaises(ValueError):
            BcryptPasswordHasher(rounds=3)
        with self.assertRaises(ValueError):
            BcryptPasswordHasher(rounds=32)

    def test_verify_matches_own_hash(self):
        for password in ('secret1', 'pässwörd-ünïcode', ' spaces ', 'x' * 72):
            with self.subTest(password=password):
                self.assertTrue(self.hasher.verify(password, self.hasher.hash(password)))

    def test_verify_rejects_other_password(self):
        digest = self.hasher.hash('secret1')
        self.assertFalse(self.hasher.verify('secret2', digest))
        self.assertFalse(self.hasher.verify('', digest))

    def test_hash_is_salted(self):
        first = self.hasher.hash('secret1')
        second = self.hasher.hash('secret1')

        self.assertNotEqual(first, second)
        self.assertTrue(self.hasher.verify('secret1', first))
        self.assertTrue(self.hasher.verify('secret1', second))

    def test_hash_is_not_plaintext(self):
        digest = self.hasher.hash('secret1')
        self.assertNotIn('secret1', digest)
        self.assertTrue(digest.startswith('$2b$04$'))

    def test_verify_tolerates_malformed_digest(self):
        for digest in ('', 'not-a-hash', '$2b$10$short', 'secret1'):
            with self.subTest(digest=digest):
                self.assertFalse(self.hasher.verify('secret1', digest))

    def test_cost_travels_in_digest(self):
        """A digest made at one cost still verifies under a hasher configured differently."""
        old_digest = BcryptPasswordHasher(rounds=5).hash('secret1')
        self.assertTrue(self.hasher.verify('secret1', old_digest))

    def test_hash_rejects_password_over_72_bytes(self):
        with self.assertRaises(HashingError):
            self.hasher.hash('a' * 72 + 'X')
        with self.assertRaises(HashingError):
            self.hasher.hash('\u00e9' * 37)  # 74 bytes in UTF-8

    def test_verify_does_not_match_on_shared_72_byte_prefix(self):
        digest = self.hasher.hash('a' * 72)

        self.assertTrue(self.hasher.verify('a' * 72, digest))
        self.assertFalse(self.hasher.verify('a' * 72 + 'Y', digest))

    @patch('adapter.hashing.bcrypt_hasher.bcrypt.hashpw', side_effect=ValueError("boom"))
    def test_hash_failure_raises_hashing_error(self, _mock_hashpw):
        with self.assertRaises(HashingError):
            self.hasher.hash('secret1')
