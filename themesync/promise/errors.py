# -*- coding: utf-8 -*-


class CancelledError(Exception):
    """The operation was cancelled before being executed."""
    pass


class TimeoutError(Exception):
    """An operation could not be executed within the time allowed."""
    pass
