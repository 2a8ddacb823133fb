# -*- coding: utf-8 -*-

"""Configuration module of the logs.

This module configure the python ``logging`` module, so each outcome of the
sync (upload complete, upload failed, ...) is visible in the console and kept
in a log file.

The log file is rotated each day, and only the last files are kept.

On console output, if the system supports it, logs entries will be colorized.
Non-caught exceptions are logged before the program quit.
"""

import logging
import logging.handlers
import os.path
import sys

from . import path as themesync_path

DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
STRING_FORMAT = '%(asctime)s %(levelname)-7s %(name)s - %(message)s'


def _support_color_output():
    """Try to guess if the standard output supports color term code.

    Returns:
        boolean: True if we are sure the output supports color; False otherwise
    """
    if hasattr(sys.stdout, 'isatty') and sys.stdout.isatty():
        if not sys.platform.startswith('win'):
            return True
    return False


def _get_file_handler(filename, nb_max_files=7):
    """Open a new file for using as a log output.

    The file is rotated at midnight. Only the ``nb_max_files`` most recent
    files are kept.

    Args:
        filename (str): name of the log file. Ex: 'themesync.log'
        nb_max_files (int, optional): number of rotated files to keep.
    Returns:
        FileHandler: a valid handler using the log file, or None if the
            file creation has failed.
    """
    try:
        log_path = os.path.join(themesync_path.get_log_dir(), filename)
        return logging.handlers.TimedRotatingFileHandler(
            log_path, when='midnight', backupCount=nb_max_files,
            encoding='utf-8')
    except (IOError, OSError):
        logging.getLogger(__name__).warning('Unable to create the log file',
                                            exc_info=True)
        return None


class ColoredFormatter(logging.Formatter):
    """Formatter who display colored messages using ANSI escape codes."""

    _colors = {
        'RESET': '\033[0m',
        'DEBUG': '\033[34m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[31m',
        'NAME': '\033[36m',
        'DATE': '\033[30;1m',
        'EXCEPTION_NAME': '\033[31;1m'
    }

    def _colorize(self, msg, color):
        return self._colors.get(color, '') + msg + self._colors['RESET']

    def formatTime(self, record, datefmt=None):
        result = logging.Formatter.formatTime(self, record, datefmt)
        return self._colorize(result, 'DATE')

    def formatException(self, ei):
        msg = logging.Formatter.formatException(self, ei)
        msg_lines = msg.split('\n')
        last_line = msg_lines[-1]
        exc_name, _sep, exc_str = last_line.partition(':')
        return '\n'.join(msg_lines[:-1] + [
            self._colorize(exc_name, 'EXCEPTION_NAME') + _sep + exc_str])

    def format(self, record):
        # The record is shared between handlers: the file handler must not
        # receive the escape codes.
        record = logging.makeLogRecord(record.__dict__)
        record.name = self._colorize(record.name, 'NAME')
        record.levelname = self._colorize(record.levelname, record.levelname)
        return logging.Formatter.format(self, record)


def _excepthook(exctype, value, traceback):
    try:
        logging.getLogger(__name__).critical(
            'Uncaught exception', exc_info=(exctype, value, traceback))
    except Exception:
        pass  # Avoid recursive logging attempt.


class Context(object):
    """Context class used to open and close log handlers."""

    def __init__(self, filename='themesync.log', log_file=True):
        """Prepare a new log context.

        Args:
            filename (str): name fo the log file. default to 'themesync.log'
            log_file (bool): if False, logs are only sent to the console.
        """
        self._filename = filename
        self._log_file = log_file
        self._handlers = []
        self._excepthook = None

    def __enter__(self):
        """Open the log file and prepare the logging module."""

        logging.captureWarnings(True)
        root_logger = logging.getLogger()
        formatter = logging.Formatter(fmt=STRING_FORMAT, datefmt=DATE_FORMAT)

        stdout_handler = logging.StreamHandler()
        if _support_color_output():
            stdout_handler.setFormatter(
                ColoredFormatter(fmt=STRING_FORMAT, datefmt=DATE_FORMAT))
        else:
            stdout_handler.setFormatter(formatter)
        self._handlers.append(stdout_handler)

        if self._log_file:
            file_handler = _get_file_handler(self._filename)
            if file_handler:
                file_handler.setFormatter(formatter)
                self._handlers.append(file_handler)

        for handler in self._handlers:
            root_logger.addHandler(handler)

        set_debug_mode(False)

        # Log all uncaught exceptions
        self._excepthook = sys.excepthook
        sys.excepthook = _excepthook
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Release resources (log files, ...)"""
        logging.getLogger(__name__).debug('Stop logger ...')
        root_logger = logging.getLogger()
        for handler in self._handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self._handlers = []
        sys.excepthook = self._excepthook


def set_logs_level(levels):
    """Configure a fine-grained log levels for the different modules.

    Args:
        levels (dict): A dict associating a module name and a log
            level. A log level can be a number or a str representing one of the
            logging levels (DEBUG, WARNING, ...). The level name will be
            converted to uppercase.
            Invalids values will be ignored.

    Example:

        >>> # Accept DEBUG logs only for the api client
        >>> set_logs_level({'themesync': 'info', 'themesync.api': 'debug'})
    """
    for (module, level) in levels.items():
        try:
            value = level
            if isinstance(value, str):
                value = int(value) if value.isdigit() else value.upper()
            logging.getLogger(module).setLevel(value)
        except ValueError:
            logger = logging.getLogger(__name__)
            logger.warning('Invalid log level "%s" for logger "%s". '
                           'Will be ignored.', level, module)


def set_debug_mode(debug):
    """Set, or unset the debug log level.

    Note: modules others than themesync.* (requests, urllib3, watchdog)
    are never set to DEBUG, they are too verbose. If needed, their level can
    be set by ``set_logs_level()``.

    Args:
        debug (boolean): if True, the themesync log level will be set to
            DEBUG. If False, it will be set to INFO.
    """
    if debug:
        logging.getLogger().setLevel(logging.INFO)
        logging.getLogger('themesync').setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.WARNING)
        logging.getLogger('themesync').setLevel(logging.INFO)
