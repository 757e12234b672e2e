import unittest
from datetime import datetime, timezone

from docportal.util.time import (
    from_epoch,
    now_utc,
    parse_rfc3339,
    parse_timestamp,
    to_epoch,
)


class TestUtilTime(unittest.TestCase):
    def test_now_utc_is_tz_aware(self) -> None:
        dt = now_utc()
        self.assertEqual(dt.tzinfo, timezone.utc)

    def test_parse_rfc3339_z(self) -> None:
        dt = parse_rfc3339("2025-01-01T12:34:56Z")
        self.assertEqual(dt, datetime(2025, 1, 1, 12, 34, 56, tzinfo=timezone.utc))

    def test_parse_rfc3339_offset_converts_to_utc(self) -> None:
        dt = parse_rfc3339("2025-01-01T12:34:56+09:00")
        self.assertEqual(dt.tzinfo, timezone.utc)
        self.assertEqual(dt, datetime(2025, 1, 1, 3, 34, 56, tzinfo=timezone.utc))

    def test_parse_rfc3339_naive_is_utc(self) -> None:
        dt = parse_rfc3339("2025-01-01 00:00:00")
        self.assertEqual(dt, datetime(2025, 1, 1, tzinfo=timezone.utc))

    def test_parse_rfc3339_rejects_garbage(self) -> None:
        with self.assertRaises(ValueError):
            parse_rfc3339("not-a-date")

    def test_epoch_round_trip(self) -> None:
        dt = from_epoch(1700000000)
        self.assertEqual(to_epoch(dt), 1700000000)

    def test_to_epoch_rejects_naive(self) -> None:
        with self.assertRaises(ValueError):
            to_epoch(datetime(2025, 1, 1))

    def test_parse_timestamp_variants(self) -> None:
        epoch = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
        self.assertEqual(parse_timestamp(1700000000), epoch)
        self.assertEqual(parse_timestamp("1700000000"), epoch)
        self.assertEqual(parse_timestamp("2023-11-14T22:13:20Z"), epoch)
        self.assertEqual(parse_timestamp(datetime(2023, 11, 14, 22, 13, 20)), epoch)

    def test_parse_timestamp_unparseable_is_none(self) -> None:
        self.assertIsNone(parse_timestamp("garbage"))
        self.assertIsNone(parse_timestamp(-5))
        self.assertIsNone(parse_timestamp(None))
        self.assertIsNone(parse_timestamp({"x": 1}))


if __name__ == "__main__":
    unittest.main()
