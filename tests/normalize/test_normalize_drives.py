import unittest
from datetime import datetime, timezone

from docportal.errors import UnrecognizedResponseError
from docportal.models import Drive
from docportal.normalize import normalize_drive, normalize_drives
from docportal.util.numbers import BYTES_PER_GB


class TestNormalizeDrive(unittest.TestCase):
    def test_gb_fields_win_over_bytes(self) -> None:
        d = normalize_drive(
            {
                "id": "C:",
                "total_gb": 100,
                "total_bytes": 5 * BYTES_PER_GB,
                "available_gb": "40.456",
            }
        )
        self.assertEqual(d.drive, "C:")
        self.assertEqual(d.total_gb, 100.0)
        self.assertEqual(d.free_gb, 40.46)
        self.assertEqual(d.used_gb, 59.54)

    def test_bytes_are_converted(self) -> None:
        d = normalize_drive(
            {
                "mount_point": "/data",
                "totalBytes": 10 * BYTES_PER_GB,
                "availableBytes": 4 * BYTES_PER_GB,
            }
        )
        self.assertEqual(d.drive, "/data")
        self.assertEqual(d.total_gb, 10.0)
        self.assertEqual(d.free_gb, 4.0)
        self.assertEqual(d.used_gb, 6.0)

    def test_explicit_used_wins(self) -> None:
        d = normalize_drive({"drive": "D:", "total_gb": 10, "free_gb": 4, "used_gb": 5})
        self.assertEqual(d.used_gb, 5.0)

    def test_missing_values_are_none_not_zero(self) -> None:
        d = normalize_drive({"label": "E:", "total_gb": "n/a"})
        self.assertIsNone(d.total_gb)
        self.assertIsNone(d.used_gb)
        self.assertIsNone(d.free_gb)
        self.assertIsNone(d.last_scan)

    def test_negative_values_are_none(self) -> None:
        d = normalize_drive({"drive": "F:", "total_gb": -1, "free_gb": 2})
        self.assertIsNone(d.total_gb)
        self.assertIsNone(d.used_gb)

    def test_used_never_negative(self) -> None:
        d = normalize_drive({"drive": "G:", "total_gb": 1, "free_gb": 2})
        self.assertEqual(d.used_gb, 0.0)

    def test_label_fallback(self) -> None:
        self.assertEqual(normalize_drive({"total_gb": 1}).drive, "Unknown")
        self.assertEqual(normalize_drive({"id": " ", "name": "Backup"}).drive, "Backup")

    def test_row_form(self) -> None:
        d = normalize_drive(["C:", 100, 40, 1700000000])
        self.assertEqual(d.drive, "C:")
        self.assertEqual(d.total_gb, 100.0)
        self.assertEqual(d.used_gb, 40.0)
        self.assertEqual(d.last_scan, datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc))

    def test_last_scan_from_string(self) -> None:
        d = normalize_drive({"drive": "C:", "lastScan": "2025-01-01T00:00:00Z"})
        self.assertEqual(d.last_scan, datetime(2025, 1, 1, tzinfo=timezone.utc))

    def test_unrecognized_payload(self) -> None:
        with self.assertRaises(UnrecognizedResponseError):
            normalize_drive(42)

    def test_idempotent(self) -> None:
        payloads = [
            {"id": "C:", "totalBytes": 123456789012, "availableBytes": 23456789012},
            {"drive": "D:", "total_gb": "7.777", "used_gb": 1.234},
            ["E:", 10, 3, 1700000000],
            {"label": "F:"},
        ]
        for raw in payloads:
            once = normalize_drive(raw)
            twice = normalize_drive(once)
            self.assertEqual(once, twice)
            self.assertEqual(normalize_drive(once.as_dict()), once)
            self.assertIsInstance(twice, Drive)


class TestNormalizeDrives(unittest.TestCase):
    def test_list_and_wrapped_rows(self) -> None:
        rows = [{"drive": "C:"}, {"drive": "D:"}]
        self.assertEqual([d.drive for d in normalize_drives(rows)], ["C:", "D:"])
        self.assertEqual([d.drive for d in normalize_drives({"rows": rows})], ["C:", "D:"])

    def test_bad_rows_are_skipped(self) -> None:
        out = normalize_drives([{"drive": "C:"}, 42, None])
        self.assertEqual([d.drive for d in out], ["C:"])

    def test_unrecognized_shape_is_empty(self) -> None:
        self.assertEqual(normalize_drives("oops"), [])
        self.assertEqual(normalize_drives(None), [])
        self.assertEqual(normalize_drives({"other": 1}), [])


if __name__ == "__main__":
    unittest.main()
