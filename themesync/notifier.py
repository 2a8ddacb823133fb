# -*- coding: utf-8 -*-

import logging
from html import escape

_logger = logging.getLogger(__name__)


class Notifier(object):
    """Send the sync outcomes as desktop notifications.

    The desktop notification service is reached through `notify2` (D-Bus).
    A notification which can't be displayed is logged, then ignored: it never
    affects the sync.
    """

    def __init__(self, app_name='themesync'):
        # notify2 requires a D-Bus session, only available on desktops.
        import notify2

        self._notify2 = notify2
        notify2.init(app_name)
        self._need_escape = 'body-markup' in notify2.get_server_caps()

    def send_message(self, title, message, is_error=False):
        """Display a notification.

        Args:
            title (str):
            message (str):
            is_error (boolean): if True, the notification is marked urgent.
        """
        if self._need_escape:
            message = escape(message)

        n = self._notify2.Notification(title, message,
                                       'dialog-error' if is_error else None)
        if is_error:
            n.set_urgency(self._notify2.URGENCY_CRITICAL)
        try:
            n.show()
        except Exception:
            _logger.warning('Unable to display the notification "%s"', title,
                            exc_info=True)
