"""Tests for command implementation modules.

Test Files and Coverage:
========================

| Test File          | Test Classes       | Tested Constructs      | Tested Functionalities                          |
|--------------------|--------------------|------------------------|-------------------------------------------------|
| test_pipeline.py   | ScanPipelineTest   | ScanPipeline           | Backpressure, errors, abort                     |
| test_scan.py       | ScanTest           | Scanner.scan()         | Duplicate scenarios, worker counts, idempotence |
| test_hash_list.py  | HashListTest       | Scanner.hash()         | Digest listing                                  |
| test_compare.py    | CompareTest        | Scanner.compare()      | Left/right/both partitioning                    |
"""
