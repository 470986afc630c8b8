import logging
import os
import sys
from logging import Formatter, StreamHandler, getLogger
from logging.handlers import RotatingFileHandler
from logging import DEBUG, INFO, WARNING, ERROR, CRITICAL

class ColourFormatter(Formatter):
    """Custom formatter with colored output for different log levels."""

    LEVEL_COLOURS = [
        (DEBUG, "\x1b[40;1m"),
        (INFO, "\x1b[34;1m"),
        (WARNING, "\x1b[33;1m"),
        (ERROR, "\x1b[31m"),
        (CRITICAL, "\x1b[41m"),
    ]

    FORMATS = {
        level: Formatter(
            f"\x1b[30;1m%(asctime)s\x1b[0m {colour}%(levelname)-8s\x1b[0m "
            f"\x1b[35m%(name)s\x1b[0m %(message)s "
            f"\x1b[30;1m(%(filename)s:%(lineno)d)\x1b[0m",
            "%H:%M:%S",  # Shortened time format
        )
        for level, colour in LEVEL_COLOURS
    }

    def format(self, record):
        formatter = self.FORMATS.get(record.levelno, self.FORMATS[DEBUG])
        return formatter.format(record)

class PlainFormatter(Formatter):
    """Simple formatter without colors, used for MCP client log panes and files."""

    def __init__(self):
        super().__init__(
            "%(asctime)s %(levelname)-8s %(name)s %(message)s (%(filename)s:%(lineno)d)",
            "%Y-%m-%d %H:%M:%S"
        )

def setup_logging(level="INFO", log_to_file=False, log_file_path="logs/nanobanana_mcp.log", max_file_size=10*1024*1024, backup_count=5):
    """
    Set up logging for the server, with optional file logging.

    Console output always goes to stderr: stdout carries the MCP stdio
    transport and must only ever contain protocol messages.

    Args:
        level (str): Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file (bool): Whether to log to a file in addition to console
        log_file_path (str): Path to the log file (if log_to_file is True)
        max_file_size (int): Maximum size of log file before rotation (default 10MB)
        backup_count (int): Number of backup files to keep

    Returns:
        logging.Logger: Configured logger instance
    """
    handlers = []

    console_handler = StreamHandler(sys.stderr)

    # MCP clients capture stderr into plain-text log panes
    if sys.stderr.isatty():
        console_handler.setFormatter(ColourFormatter())
    else:
        console_handler.setFormatter(PlainFormatter())

    handlers.append(console_handler)

    # Add file handler if requested
    if log_to_file:
        # Create logs directory if it doesn't exist
        log_dir = os.path.dirname(log_file_path) if os.path.dirname(log_file_path) else "logs"
        if log_dir and not os.path.exists(log_dir):
            try:
                os.makedirs(log_dir)
            except OSError:
                # If we can't create the directory, log to the current directory
                log_file_path = os.path.basename(log_file_path)

        # Use rotating file handler to prevent log files from growing too large
        try:
            file_handler = RotatingFileHandler(
                log_file_path,
                maxBytes=max_file_size,
                backupCount=backup_count
            )
            file_handler.setFormatter(PlainFormatter())
            handlers.append(file_handler)
        except OSError as e:
            # If we can't create a file handler, continue with console only
            print(f"Warning: Could not set up file logging: {e}", file=sys.stderr)

    # Configure root logger
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=handlers,
        force=True  # Override any existing configuration
    )

    return logging.getLogger()

def get_logger(name=None):
    """
    Get a logger for a module.

    Args:
        name (str): Logger name (typically __name__ from the calling module)

    Returns:
        logging.Logger: Logger that inherits the root logger's handlers
    """
    return getLogger(name)
