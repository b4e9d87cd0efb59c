from .formatter import ReportFormatter, sort_groups, NO_DUPLICATES
