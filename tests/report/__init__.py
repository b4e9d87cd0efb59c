"""Tests for report module.

Test Files and Coverage:
========================

| Test File          | Test Classes                          | Tested Constructs             | Tested Functionalities       |
|--------------------|---------------------------------------|-------------------------------|------------------------------|
| test_formatter.py  | SortGroupsTest, ReportFormatterTest   | sort_groups, ReportFormatter  | Ordering, text layout        |
"""
