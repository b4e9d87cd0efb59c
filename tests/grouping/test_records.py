import hashlib
import unittest
from pathlib import Path

from find_dups.grouping.records import DigestGroup, FileRecord


def record(path: str, content: bytes) -> FileRecord:
    return FileRecord(Path(path), len(content), hashlib.sha256(content).digest())


class FileRecordTest(unittest.TestCase):
    def test_hexdigest(self):
        self.assertEqual(hashlib.sha256(b'x').hexdigest(), record('a', b'x').hexdigest)

    def test_immutable(self):
        r = record('a', b'x')
        with self.assertRaises(AttributeError):
            r.size = 3

    def test_rejects_short_digest(self):
        """Truncated digests are not accepted."""
        with self.assertRaises(ValueError):
            FileRecord(Path('a'), 1, b'\x00' * 16)

    def test_rejects_negative_size(self):
        with self.assertRaises(ValueError):
            FileRecord(Path('a'), -1, b'\x00' * 32)


class DigestGroupTest(unittest.TestCase):
    def test_members_and_size(self):
        a = record('a', b'same')
        b = record('b', b'same')
        group = DigestGroup(a.digest)
        group.add(a)
        group.add(b)

        self.assertEqual(2, len(group))
        self.assertEqual(4, group.size)
        self.assertEqual([Path('a'), Path('b')], group.paths)

    def test_empty_group_size(self):
        self.assertEqual(0, DigestGroup(b'\x00' * 32).size)

    def test_rejects_foreign_record(self):
        group = DigestGroup(record('a', b'one').digest)
        with self.assertRaises(ValueError):
            group.add(record('b', b'two'))


if __name__ == '__main__':
    unittest.main()
