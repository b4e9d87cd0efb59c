from .errors import ScanError, EnumerationError, HashError, SetupError, ConfigError
from .grouping import FileRecord, DigestGroup, DuplicateGrouper, Sides, split_sides
from .settings import Settings, ScanOptions
from .scanner import Scanner
from .report import ReportFormatter, sort_groups
from .utils.processor import Processor
from .utils.walker import walk_files, check_roots
