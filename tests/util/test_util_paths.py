import unittest

from docportal.errors import PreconditionError
from docportal.util.paths import (
    as_listing_dir,
    basename_of,
    canonicalize,
    is_within,
    join_child,
    looks_like_path,
    native_sep,
    parent_of,
    rebase,
    same_path,
    strip_long_prefix,
    to_backend_path,
    to_long_path,
)


class TestCanonicalize(unittest.TestCase):
    def test_long_prefix_separators_and_trailing_are_normalized(self) -> None:
        self.assertEqual(canonicalize("\\\\?\\C:\\a\\b\\"), "C:/a/b")

    def test_equal_paths_examples(self) -> None:
        self.assertTrue(same_path("\\\\?\\C:\\a\\b\\", "C:/a/b"))
        self.assertTrue(same_path("c:\\Data\\x", "C:/Data/x/"))
        self.assertTrue(same_path("/data/", "/data"))
        self.assertFalse(same_path("/data/x", "/data/y"))

    def test_drive_letter_is_upper_cased_and_root_keeps_separator(self) -> None:
        self.assertEqual(canonicalize("c:"), "C:/")
        self.assertEqual(canonicalize("C:\\"), "C:/")
        self.assertEqual(canonicalize("/"), "/")

    def test_unc_paths(self) -> None:
        self.assertEqual(canonicalize("\\\\server\\share\\x"), "//server/share/x")
        self.assertEqual(canonicalize("\\\\?\\UNC\\server\\share"), "//server/share")

    def test_repeated_separators_collapse(self) -> None:
        self.assertEqual(canonicalize("/data//x///y"), "/data/x/y")

    def test_missing_path_is_precondition_error(self) -> None:
        with self.assertRaises(PreconditionError):
            canonicalize(None)
        with self.assertRaises(PreconditionError):
            canonicalize("   ")

    def test_surrounding_spaces_are_part_of_the_name(self) -> None:
        self.assertEqual(canonicalize("/data/ report.pdf "), "/data/ report.pdf ")
        self.assertFalse(same_path("/data/ report.pdf", "/data/report.pdf"))
        self.assertEqual(to_backend_path("C:\\Docs\\ report.pdf"), "C:\\Docs\\ report.pdf")
        self.assertEqual(join_child("/data", " report.pdf"), "/data/ report.pdf")

    def test_strip_long_prefix(self) -> None:
        self.assertEqual(strip_long_prefix("\\\\?\\C:\\x"), "C:\\x")
        self.assertEqual(strip_long_prefix("/plain"), "/plain")


class TestBackendForms(unittest.TestCase):
    def test_native_separator_is_kept(self) -> None:
        self.assertEqual(native_sep("C:/a"), "\\")
        self.assertEqual(native_sep("/data"), "/")
        self.assertEqual(to_backend_path("C:/a/b/"), "C:\\a\\b")
        self.assertEqual(to_backend_path("/data/x/"), "/data/x")
        self.assertEqual(to_backend_path("\\\\?\\C:\\a\\"), "C:\\a")

    def test_explicit_separator_overrides(self) -> None:
        self.assertEqual(to_backend_path("/a/b", "\\"), "\\a\\b")

    def test_listing_dir_has_one_trailing_separator(self) -> None:
        self.assertEqual(as_listing_dir("C:\\a"), "C:\\a\\")
        self.assertEqual(as_listing_dir("C:\\a\\\\"), "C:\\a\\")
        self.assertEqual(as_listing_dir("/data"), "/data/")
        self.assertEqual(as_listing_dir("/"), "/")
        self.assertEqual(as_listing_dir("C:"), "C:\\")

    def test_to_long_path(self) -> None:
        self.assertEqual(to_long_path("C:\\x"), "\\\\?\\C:\\x")
        self.assertEqual(to_long_path("C:/x"), "\\\\?\\C:\\x")
        self.assertEqual(to_long_path("\\\\server\\share"), "\\\\?\\UNC\\server\\share")
        self.assertEqual(to_long_path("\\\\?\\C:\\x"), "\\\\?\\C:\\x")
        self.assertEqual(to_long_path("star"), "star")

    def test_looks_like_path(self) -> None:
        self.assertTrue(looks_like_path("C:"))
        self.assertTrue(looks_like_path("a/b"))
        self.assertTrue(looks_like_path("a\\b"))
        self.assertFalse(looks_like_path("star"))
        self.assertFalse(looks_like_path(42))


class TestPathArithmetic(unittest.TestCase):
    def test_parent_of(self) -> None:
        self.assertEqual(parent_of("C:\\a\\b"), "C:\\a")
        self.assertEqual(parent_of("C:\\a"), "C:\\")
        self.assertEqual(parent_of("/data/x"), "/data")
        self.assertEqual(parent_of("/data"), "/")
        self.assertEqual(parent_of("/"), "/")

    def test_basename_of(self) -> None:
        self.assertEqual(basename_of("C:\\a\\b.txt"), "b.txt")
        self.assertEqual(basename_of("/data/x/"), "x")

    def test_join_child(self) -> None:
        self.assertEqual(join_child("C:\\a", "b"), "C:\\a\\b")
        self.assertEqual(join_child("C:\\", "x"), "C:\\x")
        self.assertEqual(join_child("/data", "x"), "/data/x")
        self.assertEqual(join_child("/", "x"), "/x")
        with self.assertRaises(PreconditionError):
            join_child("/data", " ")

    def test_is_within(self) -> None:
        self.assertTrue(is_within("/data/x/y", "/data/x"))
        self.assertTrue(is_within("/data/x", "/data/x/"))
        self.assertFalse(is_within("/data/xy", "/data/x"))
        self.assertTrue(is_within("/anything", "/"))
        self.assertTrue(is_within("C:\\a\\b", "c:/a"))

    def test_rebase(self) -> None:
        self.assertEqual(rebase("/data/old/f.txt", "/data/old", "/data/new"), "/data/new/f.txt")
        self.assertEqual(rebase("/data/old", "/data/old", "/data/new"), "/data/new")


if __name__ == "__main__":
    unittest.main()
