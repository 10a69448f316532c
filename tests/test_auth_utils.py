import unittest

from planhub.core.auth_utils import (
    generate_token,
    hash_password,
    hash_token,
    parse_iso,
    session_expiry,
    to_iso,
    utcnow,
    verify_password,
)


class AuthUtilsTests(unittest.TestCase):
    def test_password_hash_and_verify(self):
        encoded = hash_password("StrongPass123!")
        self.assertTrue(encoded.startswith("pbkdf2_sha256$"))
        self.assertTrue(verify_password("StrongPass123!", encoded))
        self.assertFalse(verify_password("WrongPassword", encoded))

    def test_verify_rejects_malformed_hashes(self):
        self.assertFalse(verify_password("x", ""))
        self.assertFalse(verify_password("x", "md5$1$salt$digest"))
        self.assertFalse(verify_password("x", "pbkdf2_sha256$many$salt$digest"))

    def test_empty_password_is_rejected(self):
        with self.assertRaises(ValueError):
            hash_password("")

    def test_token_hash_is_stable(self):
        token = generate_token()
        self.assertEqual(hash_token(token), hash_token(token))
        self.assertEqual(len(hash_token(token)), 64)

    def test_session_expiry_is_in_the_future(self):
        self.assertGreater(session_expiry(1), utcnow())

    def test_iso_roundtrip(self):
        now = utcnow()
        parsed = parse_iso(to_iso(now))
        self.assertLess(abs((parsed - now).total_seconds()), 1.0)
        self.assertEqual(parse_iso("2026-02-01T00:00:00Z").isoformat(), "2026-02-01T00:00:00+00:00")


if __name__ == "__main__":
    unittest.main()
