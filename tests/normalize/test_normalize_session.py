import unittest

from docportal.normalize import normalize_user


class TestNormalizeUser(unittest.TestCase):
    def test_profile_shapes(self) -> None:
        self.assertEqual(normalize_user({"id": 1, "name": "A"}), {"id": 1, "name": "A"})
        self.assertEqual(normalize_user({"user": {"id": 2}}), {"id": 2})
        self.assertEqual(normalize_user([{"id": 3}, {"id": 4}]), {"id": 3})

    def test_unrecognized_is_none(self) -> None:
        for raw in (None, [], "ok", True, [None]):
            self.assertIsNone(normalize_user(raw), raw)


if __name__ == "__main__":
    unittest.main()
