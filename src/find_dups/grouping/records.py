"""Records produced by fingerprinting and the groups they are collected into."""

from dataclasses import dataclass, field
from pathlib import Path

DIGEST_SIZE = 32


@dataclass(frozen=True)
class FileRecord:
    """Fingerprint of one file that was read to the end.

    Attributes:
        path: Path of the file as reached from its root
        size: Number of bytes read
        digest: SHA-256 digest of the full content
    """
    path: Path
    size: int
    digest: bytes

    def __post_init__(self):
        if self.size < 0:
            raise ValueError(f"negative size for {self.path}: {self.size}")
        if len(self.digest) != DIGEST_SIZE:
            raise ValueError(f"digest for {self.path} must be {DIGEST_SIZE} bytes, got {len(self.digest)}")

    @property
    def hexdigest(self) -> str:
        return self.digest.hex()


@dataclass
class DigestGroup:
    """Files sharing one digest, in the order they were added."""
    digest: bytes
    members: list[FileRecord] = field(default_factory=list)

    def __len__(self):
        return len(self.members)

    @property
    def size(self) -> int:
        """Size of each member; all members have identical content."""
        return self.members[0].size if self.members else 0

    @property
    def paths(self) -> list[Path]:
        return [record.path for record in self.members]

    def add(self, record: FileRecord):
        if record.digest != self.digest:
            raise ValueError(f"{record.path} does not belong to group {self.digest.hex()}")
        self.members.append(record)
