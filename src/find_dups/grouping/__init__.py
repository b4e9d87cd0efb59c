from .records import FileRecord, DigestGroup
from .grouper import DuplicateGrouper, Sides, split_sides
