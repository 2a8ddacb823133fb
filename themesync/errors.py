# -*- coding: utf-8 -*-
"""Errors raised by the sync core itself.

Remote failures are not defined here: they are instances of
``themesync.network.errors.NetworkError``.
"""


class ThemeSyncError(Exception):
    """Base class for themesync errors."""
    pass


class ConfigurationError(ThemeSyncError):
    """A required setting (credentials, host, theme) is missing.

    It's fatal: the run is aborted before any file is processed.

    Attributes:
        key (str): name of the missing setting.
    """

    def __init__(self, key, message=None):
        self.key = key
        if message is None:
            message = 'Error, %s for the theme store does not exist!' % key
        ThemeSyncError.__init__(self, message)


class UnsupportedInputError(ThemeSyncError):
    """A change event carries a streamed payload instead of a buffer.

    Only the concerned event fails. The remote API is never contacted.

    Attributes:
        path (str): path of the rejected file.
    """

    def __init__(self, path):
        self.path = path
        ThemeSyncError.__init__(self, 'Streams are not supported: %s' % path)
