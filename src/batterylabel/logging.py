# Logging Configuration
#
# This file is part of the batterylabel project.
#
# Licensed under the GNU General Public License v3.0 or later.
# See LICENSE.md for details.

import logging
import os
import sys

LOG_FILE_ENV = "BATTERYLABEL_LOG_FILE"

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s [%(filename)s:%(lineno)d] %(message)s"
FILE_LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)-8s [%(filename)s:%(lineno)d] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors to log levels for console output."""
    
    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'
    
    def __init__(self, *args, stream=None, **kwargs):
        super().__init__(*args, **kwargs)
        stream = stream if stream is not None else sys.stdout
        self.use_colors = hasattr(stream, "isatty") and stream.isatty()
    
    def format(self, record):
        if not self.use_colors:
            return super().format(record)
        original_levelname = record.levelname
        color = self.COLORS.get(original_levelname, '')
        record.levelname = f"{color}{original_levelname:>8}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original_levelname


def setup_logging(log_file_path=None, log_level=logging.INFO, stream=None):
    """Configure logging with colored console output and optional file output.
    
    Args:
        log_file_path: Path to the log file. Falls back to $BATTERYLABEL_LOG_FILE;
            if neither is set, file logging is skipped.
        log_level: Logging level to set (default: logging.INFO).
        stream: Console stream (default: sys.stdout).
    
    Returns:
        The configured root logger.
    """
    log = logging.getLogger()
    log.setLevel(log_level)
    log.handlers = []
    
    if log_file_path is None:
        log_file_path = os.environ.get(LOG_FILE_ENV)
    
    if log_file_path:
        try:
            fh = logging.FileHandler(log_file_path, mode="a", encoding="utf-8")
        except OSError as e:
            # Console logging still works; report the file problem there
            sys.stderr.write(f"Unable to open log file {log_file_path}: {e}\n")
        else:
            fh.setLevel(log_level)
            fh.setFormatter(logging.Formatter(FILE_LOG_FORMAT, DATE_FORMAT))
            log.addHandler(fh)
    
    stream = stream if stream is not None else sys.stdout
    ch = logging.StreamHandler(stream)
    ch.setLevel(log_level)
    ch.setFormatter(ColoredFormatter(LOG_FORMAT, DATE_FORMAT, stream=stream))
    log.addHandler(ch)
    
    return log
