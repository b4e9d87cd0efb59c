import argparse
import io
import logging
import sys
import textwrap
from functools import wraps

from . import Processor, Scanner, Settings, ScanOptions, SetupError
from .report.formatter import ReportFormatter
from .scanner import LOG_FORMAT

EXIT_OK = 0
EXIT_PARTIAL = 1
EXIT_SETUP_ERROR = 2
EXIT_INTERRUPTED = 130


def needs_scanner(func):
    """Decorator for commands that run the scanner.

    The decorated function will receive (scanner, formatter, args) and returns a result with
    error_count and aborted fields. The wrapper function takes (settings, options, formatter,
    args), creates the Processor and Scanner, and turns the result into an exit code.
    """
    @wraps(func)
    def wrapper(settings: Settings, options: ScanOptions, formatter: ReportFormatter, args):
        with Processor(options.workers, options.chunk_size) as processor:
            scanner = Scanner(processor, options, settings, on_error=formatter.write_error)
            if not (hasattr(args, 'log_file') and args.log_file):
                scanner.configure_logging_from_settings()
            result = func(scanner, formatter, args)

        if options.strict and (result.error_count or result.aborted):
            return EXIT_PARTIAL
        return EXIT_OK
    return wrapper


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='find-dups',
        description='Report files with duplicate content by comparing SHA-256 digests. Directories are enumerated '
                    'recursively.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Examples:
              find-dups scan ~/Pictures /mnt/backup/Pictures
              find-dups hash file1.txt dir2
              find-dups compare -l ~/Music -r /mnt/backup/Music --show-both
            ''').strip()
    )
    parser.add_argument(
        '--config',
        metavar='PATH',
        help='Path to a TOML configuration file. If not provided, uses the FIND_DUPS_CONFIG environment variable '
             'when set.')
    parser.add_argument(
        '--workers',
        type=_positive_int,
        metavar='N',
        help='Number of files hashed in parallel (default: number of CPUs)')
    parser.add_argument(
        '--chunk-size',
        type=_positive_int,
        metavar='BYTES',
        help='Size of each read while hashing (default: 65536)')
    parser.add_argument(
        '--queue-size',
        type=_positive_int,
        metavar='N',
        help='Number of hashed files that may wait for grouping before hashing pauses (default: 4 per worker)')
    parser.add_argument(
        '--strict',
        action='store_true',
        default=None,
        help='Exit with status 1 if any file could not be enumerated or read')
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Log progress to standard error')
    parser.add_argument(
        '--log-file',
        metavar='PATH',
        help='Path to log file for operation logging. If not provided, uses logging.path from the configuration '
             'file or no logging.')
    parser.add_argument(
        '--log-level',
        metavar='LEVEL',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults to INFO when --log-file or --verbose '
             'is provided.')
    subparsers = parser.add_subparsers(
        dest='command',
        title='Commands',
        description='Available commands',
        help='Use "find-dups COMMAND --help" for command-specific help',
        required=True
    )

    parser_scan = subparsers.add_parser(
        'scan',
        help='Report groups of files with identical content',
        description='Hashes every file under the given paths and prints each group of files sharing a digest: the '
                    'digest on one line, followed by the member paths. Groups are separated by blank lines.')
    parser_scan.add_argument(
        'paths',
        nargs='+',
        metavar='PATH',
        help='Files or directories to scan')
    parser_scan.set_defaults(method=_scan)

    parser_hash = subparsers.add_parser(
        'hash',
        help='Print the SHA-256 digest of every file',
        description='Hashes every file under the given paths and prints one "DIGEST  PATH" line per file, sorted by '
                    'path.')
    parser_hash.add_argument(
        'paths',
        nargs='+',
        metavar='PATH',
        help='Files or directories to hash')
    parser_hash.set_defaults(method=_hash)

    parser_compare = subparsers.add_parser(
        'compare',
        help='Compare the content of two sets of paths',
        description='Hashes a left-hand and a right-hand set of paths and reports content found only on one side. '
                    'Content found on both sides can be shown as well.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Output:
              <= 'path'     content only on the left-hand side
              => 'path'     content only on the right-hand side
              <=>           content on both sides, followed by its paths
            ''').strip())
    parser_compare.add_argument(
        '-l', '--left',
        action='append',
        required=True,
        metavar='PATH',
        help='Path that makes up the left-hand side of the comparison. Can be repeated.')
    parser_compare.add_argument(
        '-r', '--right',
        action='append',
        required=True,
        metavar='PATH',
        help='Path that makes up the right-hand side of the comparison. Can be repeated.')
    parser_compare.add_argument(
        '-L', '--omit-left',
        action='store_true',
        help='Omit files that only exist on the left-hand side (default: print them)')
    parser_compare.add_argument(
        '-R', '--omit-right',
        action='store_true',
        help='Omit files that only exist on the right-hand side (default: print them)')
    parser_compare.add_argument(
        '-B', '--show-both',
        action='store_true',
        help='Print the files present on both sides (default: omit them)')
    parser_compare.set_defaults(method=_compare)

    return parser


def configure_logging(args):
    """Configure logging from --log-file, --log-level and --verbose."""
    log_level = getattr(args, 'log_level', None)
    if log_level is None:
        log_level = 'INFO'

    if getattr(args, 'log_file', None):
        logging.basicConfig(
            filename=args.log_file,
            level=getattr(logging, log_level),
            format=LOG_FORMAT
        )
    elif getattr(args, 'verbose', False):
        logging.basicConfig(
            stream=sys.stderr,
            level=getattr(logging, log_level),
            format=LOG_FORMAT
        )


def _pass_through_undecodable_names(stream):
    # Names that are not valid in the filesystem encoding are written back as their original bytes
    if isinstance(stream, io.TextIOWrapper):
        stream.reconfigure(errors='surrogateescape')
    return stream


def main(argv=None, output=None, errors=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args)

    output = _pass_through_undecodable_names(output if output is not None else sys.stdout)
    error_stream = _pass_through_undecodable_names(errors if errors is not None else sys.stderr)
    formatter = ReportFormatter(output, error_stream)

    try:
        settings = Settings.load(args.config)
        options = ScanOptions.resolve(
            settings,
            workers=args.workers,
            chunk_size=args.chunk_size,
            queue_size=args.queue_size,
            strict=args.strict)
        return args.method(settings, options, formatter, args)
    except SetupError as e:
        print(f"find-dups: error: {e}", file=error_stream)
        return EXIT_SETUP_ERROR
    except KeyboardInterrupt:
        print("find-dups: interrupted", file=error_stream)
        return EXIT_INTERRUPTED


def find_dups_main():
    sys.exit(main())


@needs_scanner
def _scan(scanner: Scanner, formatter: ReportFormatter, args):
    result = scanner.scan(args.paths)
    formatter.write_groups(result.groups)
    formatter.write_summary(result.files_scanned, result.error_count, groups=result.groups,
                            aborted=result.aborted)
    return result


@needs_scanner
def _hash(scanner: Scanner, formatter: ReportFormatter, args):
    result = scanner.hash(args.paths)
    formatter.write_records(result.records)
    formatter.write_summary(result.files_scanned, result.error_count, aborted=result.aborted)
    return result


@needs_scanner
def _compare(scanner: Scanner, formatter: ReportFormatter, args):
    result = scanner.compare(args.left, args.right)
    formatter.write_sides(
        result.sides,
        show_left=not args.omit_left,
        show_right=not args.omit_right,
        show_both=args.show_both)
    formatter.write_summary(result.files_scanned, result.error_count, aborted=result.aborted)
    return result


if __name__ == '__main__':
    find_dups_main()
