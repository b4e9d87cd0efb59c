"""Tests for grouping module.

Test Files and Coverage:
========================

| Test File          | Test Classes                       | Tested Constructs             | Tested Functionalities                   |
|--------------------|------------------------------------|-------------------------------|------------------------------------------|
| test_records.py    | FileRecordTest, DigestGroupTest    | FileRecord, DigestGroup       | Validation, membership                   |
| test_grouper.py    | DuplicateGrouperTest, SplitSidesTest | DuplicateGrouper, split_sides | Grouping, concurrency, side partitioning |
"""
