import coloredlogs
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
import logging
import sys

class LoggingFormatter(logging.Formatter):
    def formatTime(self, record, datefmt=None):
        return datetime.fromtimestamp(record.created, tz=timezone.utc).strftime('%Y-%m-%d %H:%M:%S.%f')


# Invisible Unicode character.  Makes figuring out the beginning/end of a log entry much
# easier, given they can contain new line characters themselves.
LINE_SEP = '\u2063'


@dataclass
class LoggingConfig:
    """
    quiet: only critical errors reach the console
    verbose: diagnostic (DEBUG) messages reach the console too; has no effect when quiet is set
    log_file: if set, every message at DEBUG and above is appended to this file regardless of quiet/verbose
    """
    quiet: bool = False
    verbose: bool = False
    log_file: str = None

    @property
    def console_level(self) -> int:
        if self.quiet:
            return logging.ERROR
        if self.verbose:
            return logging.DEBUG
        return logging.INFO


class _BelowErrorFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.ERROR


class LoggingWrangler:
    def __init__(self, config: LoggingConfig):
        self._config = config
        self._initialize_logging()

    def _initialize_logging(self):
        """
        Write normal and diagnostic messages to stdout, critical errors to stderr, and optionally everything to a file.
        """

        root_logger = logging.getLogger()
        root_logger.handlers = []  # Make sure we're starting with a clean slate
        root_logger.setLevel(logging.DEBUG)

        console_formatter = coloredlogs.ColoredFormatter('%(asctime)s - %(message)s')

        # Normal/diagnostic output goes to stdout so it can be piped separately from failures
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setLevel(self._config.console_level)
        stdout_handler.addFilter(_BelowErrorFilter())
        stdout_handler.setFormatter(console_formatter)
        root_logger.addHandler(stdout_handler)

        # Critical errors are never suppressed
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.ERROR)
        stderr_handler.setFormatter(console_formatter)
        root_logger.addHandler(stderr_handler)

        if self._config.log_file:
            file_handler = logging.FileHandler(self._config.log_file, mode='a', encoding='utf8')
            file_handler.setLevel(logging.DEBUG)
            file_formatter = LoggingFormatter(f"%(asctime)s - %(name)s - %(levelname)s - %(message)s{LINE_SEP}")
            file_handler.setFormatter(file_formatter)
            root_logger.addHandler(file_handler)

    @property
    def log_file(self):
        return self._config.log_file

@contextmanager
def set_boto_log_level(log_level = 'INFO'):
    boto3_log_level = logging.getLogger('boto3').level
    botocore_log_level = logging.getLogger('botocore').level
    urllib3_log_level = logging.getLogger('urllib3').level

    logging.getLogger('boto3').setLevel(log_level)
    logging.getLogger('botocore').setLevel(log_level)
    logging.getLogger('urllib3').setLevel(log_level)

    try:
        yield
    finally:
        logging.getLogger('boto3').setLevel(boto3_log_level)
        logging.getLogger('botocore').setLevel(botocore_log_level)
        logging.getLogger('urllib3').setLevel(urllib3_log_level)
