"""Digest-keyed accumulation of file records.

This module provides DuplicateGrouper, which collects FileRecords into DigestGroups
keyed by content digest. The mapping is split into shards selected by the first byte
of the digest, and every shard has its own lock, so records with different digests can
be inserted concurrently while a single digest bucket is only ever mutated by one
inserter at a time.

Typical usage example:

    grouper = DuplicateGrouper()

    for record in records:
        grouper.add(record)

    for group in grouper.groups():
        report(group)
"""

import threading
from pathlib import Path
from typing import Iterator, Mapping, NamedTuple

from .records import DigestGroup, FileRecord


class DuplicateGrouper:
    """Accumulator mapping digests to the groups of files that share them.

    Thread-safety:
        add() may be called from several threads at once. Reads such as groups() are
        meant for after the input has been exhausted; they take each shard lock in turn
        and return a consistent view of every shard but not a global snapshot.
    """

    class _Shard:
        def __init__(self):
            self.lock = threading.Lock()
            self.groups: dict[bytes, DigestGroup] = {}

    def __init__(self, shards: int = 16):
        """Initialize an empty grouper.

        Args:
            shards: Number of independently locked partitions of the digest mapping
        """
        if shards < 1:
            raise ValueError(f"shards must be positive, got {shards}")

        self._shards = [DuplicateGrouper._Shard() for _ in range(shards)]
        self._count_lock = threading.Lock()
        self._file_count = 0

    def add(self, record: FileRecord):
        """Insert a record into the group for its digest, creating the group if needed."""
        shard = self._shards[record.digest[0] % len(self._shards)]

        with shard.lock:
            group = shard.groups.get(record.digest)
            if group is None:
                group = shard.groups[record.digest] = DigestGroup(record.digest)
            group.add(record)

        with self._count_lock:
            self._file_count += 1

    @property
    def file_count(self) -> int:
        """Number of records added so far."""
        return self._file_count

    def all_groups(self) -> Iterator[DigestGroup]:
        """Iterate over every group, including those with a single member."""
        for shard in self._shards:
            with shard.lock:
                groups = list(shard.groups.values())
            yield from groups

    def groups(self) -> list[DigestGroup]:
        """Groups with at least two members, i.e. the duplicates."""
        return [group for group in self.all_groups() if len(group) >= 2]

    def records(self) -> list[FileRecord]:
        return [record for group in self.all_groups() for record in group.members]

    def paths_by_digest(self) -> dict[bytes, list[Path]]:
        return {group.digest: group.paths for group in self.all_groups()}


class Sides(NamedTuple):
    """Content partitioned between a left and a right set of roots.

    Attributes:
        left_only: Paths on the left whose content does not occur on the right
        both: For each digest present on both sides, the (left paths, right paths) pair
        right_only: Paths on the right whose content does not occur on the left
    """
    left_only: list[Path]
    both: list[tuple[list[Path], list[Path]]]
    right_only: list[Path]


def split_sides(left: Mapping[bytes, list[Path]], right: Mapping[bytes, list[Path]]) -> Sides:
    """Partition two digest mappings into one-sided and shared content.

    Args:
        left: Digest to paths for the left-hand roots
        right: Digest to paths for the right-hand roots

    Returns:
        Sides with unsorted path lists; ordering is left to the formatter
    """
    shared = left.keys() & right.keys()

    both = [(list(left[digest]), list(right[digest])) for digest in shared]
    left_only = [path for digest, paths in left.items() if digest not in shared for path in paths]
    right_only = [path for digest, paths in right.items() if digest not in shared for path in paths]

    return Sides(left_only, both, right_only)
