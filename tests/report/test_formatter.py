import hashlib
import io
import unittest
from pathlib import Path

from find_dups.errors import EnumerationError, HashError
from find_dups.grouping.grouper import Sides
from find_dups.grouping.records import DigestGroup, FileRecord
from find_dups.report.formatter import NO_DUPLICATES, ReportFormatter, sort_groups


def group(digest_byte: int, *paths: str) -> DigestGroup:
    digest = bytes([digest_byte]) * 32
    return DigestGroup(digest, [FileRecord(Path(p), 1, digest) for p in paths])


class SortGroupsTest(unittest.TestCase):
    def test_order(self):
        """Larger groups first, ties broken by digest, members sorted by path."""
        groups = [
            group(0x03, 'z', 'y'),
            group(0x01, 'c', 'a', 'b'),
            group(0x02, 'q', 'p'),
        ]

        ordered = sort_groups(groups)

        self.assertEqual([0x01, 0x02, 0x03], [g.digest[0] for g in ordered])
        self.assertEqual([Path('a'), Path('b'), Path('c')], ordered[0].paths)
        self.assertEqual([Path('p'), Path('q')], ordered[1].paths)
        self.assertEqual([Path('y'), Path('z')], ordered[2].paths)

    def test_input_not_modified(self):
        groups = [group(0x01, 'b', 'a')]

        sort_groups(groups)

        self.assertEqual([Path('b'), Path('a')], groups[0].paths)

    def test_independent_of_input_order(self):
        groups = [group(0x05, 'e', 'f'), group(0x04, 'd', 'c'), group(0x06, 'g', 'h', 'i')]

        self.assertEqual(sort_groups(groups), sort_groups(list(reversed(groups))))


class ReportFormatterTest(unittest.TestCase):
    def setUp(self):
        self.output = io.StringIO()
        self.errors = io.StringIO()
        self.formatter = ReportFormatter(self.output, self.errors)

    def test_groups(self):
        self.formatter.write_groups([group(0x02, 'd', 'c'), group(0x01, 'b', 'a')])

        self.assertEqual(
            f"{'01' * 32}\na\nb\n\n{'02' * 32}\nc\nd\n",
            self.output.getvalue())

    def test_no_groups(self):
        self.formatter.write_groups([])

        self.assertEqual(f"{NO_DUPLICATES}\n", self.output.getvalue())

    def test_records(self):
        b = FileRecord(Path('b'), 5, hashlib.sha256(b'hello').digest())
        a = FileRecord(Path('a'), 0, hashlib.sha256(b'').digest())

        self.formatter.write_records([b, a])

        self.assertEqual(
            f"{hashlib.sha256(b'').hexdigest()}  a\n{hashlib.sha256(b'hello').hexdigest()}  b\n",
            self.output.getvalue())

    def test_sides(self):
        sides = Sides(
            left_only=[Path('l2'), Path('l1')],
            both=[([Path('lb2')], [Path('rb2')]), ([Path('lb1b'), Path('lb1a')], [Path('rb1')])],
            right_only=[Path('r1')])

        self.formatter.write_sides(sides, show_both=True)

        self.assertEqual(
            "<= 'l1'\n<= 'l2'\n=> 'r1'\n"
            "<=>\n  <= 'lb1a'\n  <= 'lb1b'\n  => 'rb1'\n"
            "<=>\n  <= 'lb2'\n  => 'rb2'\n",
            self.output.getvalue())

    def test_sides_defaults_omit_both(self):
        sides = Sides([Path('l')], [([Path('lb')], [Path('rb')])], [Path('r')])

        self.formatter.write_sides(sides)

        self.assertEqual("<= 'l'\n=> 'r'\n", self.output.getvalue())

    def test_sides_omit_left_and_right(self):
        sides = Sides([Path('l')], [], [Path('r')])

        self.formatter.write_sides(sides, show_left=False, show_right=False)

        self.assertEqual("", self.output.getvalue())

    def test_errors_go_to_error_stream(self):
        self.formatter.write_error(HashError(Path('gone'), FileNotFoundError(2, 'No such file or directory')))
        self.formatter.write_error(EnumerationError(Path('odd'), 'not a regular file or directory'))

        self.assertEqual("", self.output.getvalue())
        self.assertEqual(
            "ERROR: gone: No such file or directory\nERROR: odd: not a regular file or directory\n",
            self.errors.getvalue())

    def test_summary(self):
        self.formatter.write_summary(5, 0, groups=[group(0x01, 'a', 'b'), group(0x02, 'c', 'd', 'e')])

        self.assertEqual("5 files scanned, 2 duplicate groups (5 files), 0 errors\n", self.errors.getvalue())

    def test_summary_partial(self):
        self.formatter.write_summary(2, 1)

        lines = self.errors.getvalue().splitlines()
        self.assertEqual("2 files scanned, 1 errors", lines[0])
        self.assertIn("partial", lines[1])

    def test_summary_aborted(self):
        self.formatter.write_summary(2, 0, aborted=True)

        self.assertIn("interrupted", self.errors.getvalue())


if __name__ == '__main__':
    unittest.main()
