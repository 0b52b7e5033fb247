import unittest

from gdrivewatch.auth import AuthInfo


class TestAuthInfo(unittest.TestCase):
    def test_auth_info_valid_refresh_token(self) -> None:
        info = AuthInfo.from_refresh_token("cid", "secret", "rt")
        self.assertEqual(info.kind, "refresh_token")
        self.assertEqual(info.data["refresh_token"], "rt")

    def test_auth_info_valid_token_file(self) -> None:
        info = AuthInfo.from_token_file("/tmp/token.json")
        self.assertEqual(info.kind, "authorized_user")
        self.assertEqual(info.token_file, "/tmp/token.json")

    def test_auth_info_invalid_kind(self) -> None:
        with self.assertRaises(ValueError):
            AuthInfo(kind="service_account", data={})

    def test_auth_info_missing_keys(self) -> None:
        with self.assertRaises(ValueError):
            AuthInfo(kind="refresh_token", data={"client_id": "x", "client_secret": "y"})

    def test_auth_info_blank_value(self) -> None:
        with self.assertRaises(ValueError):
            AuthInfo.from_refresh_token("cid", "secret", "  ")


if __name__ == "__main__":
    unittest.main()
