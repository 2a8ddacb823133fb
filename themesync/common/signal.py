# -*- coding: utf-8 -*-

import logging

_logger = logging.getLogger(__name__)


class Signal(object):
    """Register callbacks, then call all of them when the signal is fired.

    The signal is an attribute of the observable object, so an object can
    expose several signals, one per kind of notification (eg:
    `file_forwarded`).

    Example:

        >>> class Stage(object):
        ...     def __init__(self):
        ...         self.file_forwarded = Signal()
        >>>
        >>> def next_stage(event, result):
        ...     print('Received %s' % event)
        >>>
        >>> stage = Stage()
        >>> stage.file_forwarded.connect(next_stage)
        >>> stage.file_forwarded.fire('assets/site.css', None)
        Received assets/site.css
    """

    def __init__(self):
        self._handlers = []

    def connect(self, handler):
        """Register a handler/callback to the signal.

        Args:
            handler (callable): handler which will be called each time the
                signal is fired.
        """
        self._handlers.append(handler)

    def fire(self, *args, **kwargs):
        """Call all handlers, in the order of connection.

        An exception raised by a handler is logged, and doesn't prevent the
        next handlers to be called.
        """
        for h in self._handlers[:]:
            try:
                h(*args, **kwargs)
            except Exception:
                _logger.exception('Signal handler %s has raised an exception',
                                  h)

    def disconnect(self, handler):
        """Remove/disconnect a callback.

        Args:
            handler (callable): callback to disconnect
        Returns:
            bool: True if the handler was connected; False otherwise.
        """
        try:
            self._handlers.remove(handler)
            return True
        except ValueError:
            return False

    def disconnect_all(self):
        """Remove all handler/callback registered."""
        self._handlers = []
