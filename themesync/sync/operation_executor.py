# -*- coding: utf-8 -*-

import logging

from ..asset_key import RemoteAsset
from ..errors import ConfigurationError
from ..network.errors import InvalidRequestError
from .change_event import ChangeEvent

_logger = logging.getLogger(__name__)


class SyncResult(object):
    """Final outcome of the remote operation of one event.

    Attributes:
        event (ChangeEvent): the source event.
        key (str): asset key.
        operation (str): 'upsert' or 'delete'.
        status (str): one of SUCCESS, VALIDATION_ERROR or UNKNOWN_ERROR.
        error (Exception): cause of the failure. None on success.
        attempts (int): number of calls sent for this event.
    """

    SUCCESS = 'success'
    VALIDATION_ERROR = 'validation_error'
    UNKNOWN_ERROR = 'unknown_error'

    def __init__(self, event, key, operation, status, error=None, attempts=1):
        self.event = event
        self.key = key
        self.operation = operation
        self.status = status
        self.error = error
        self.attempts = attempts

    @property
    def ok(self):
        return self.status == self.SUCCESS

    def __repr__(self):
        return '<SyncResult %s %s: %s>' % (self.operation.upper(), self.key,
                                           self.status)


class OperationExecutor(object):
    """Send the remote call of an event, and classify its result.

    The executor never retries, and never raises for a remote failure: the
    error is logged, then returned in the SyncResult.
    """

    def __init__(self, client, theme_id, key_mapper, notifier=None):
        """
        Args:
            client (ThemeClient): API client.
            theme_id (str): id of the target theme.
            key_mapper (AssetKeyMapper): converts paths into asset keys.
            notifier (Notifier, optional): if set, each outcome is also sent
                as a desktop notification.
        Raises:
            ConfigurationError: if the client or the theme is missing.
        """
        if client is None:
            raise ConfigurationError('api client')
        if not getattr(client, 'host', None):
            raise ConfigurationError('host')
        if not theme_id:
            raise ConfigurationError('themeid')

        self.client = client
        self.theme_id = theme_id
        self.key_mapper = key_mapper
        self._notifier = notifier

    @property
    def host(self):
        return self.client.host

    def execute(self, event, attempt=1):
        """Execute the operation corresponding to the event kind.

        Args:
            event (ChangeEvent)
            attempt (int, optional): number of this attempt, starting at 1.
        Returns:
            SyncResult
        """
        key = self.key_mapper.make_asset_key(event.path)
        if event.kind == ChangeEvent.DELETE:
            return self.destroy(key, event, attempt)
        return self.upsert(key, event.content, event, attempt)

    def upsert(self, key, content, event=None, attempt=1):
        """Upload the content of an asset.

        Args:
            key (str): asset key.
            content (bytes): raw file content.
            event (ChangeEvent, optional): source event.
            attempt (int, optional): number of this attempt.
        Returns:
            SyncResult
        """
        filepath = event.path if event else key
        filename = event.filename if event else key

        _logger.info('Trying to upload: %s', filename)
        try:
            asset = RemoteAsset.from_content(key, bytes(content))
            self.client.update(self.theme_id, asset.to_dict())
        except InvalidRequestError as error:
            _logger.error('Error invalid upload request! %s not uploaded to '
                          '%s: %s', filepath, self.host, error)
            self._notify('Upload failed', '%s: %s' % (filename, error), True)
            return SyncResult(event, key, ChangeEvent.UPSERT,
                              SyncResult.VALIDATION_ERROR, error, attempt)
        except Exception as error:
            _logger.error('Error %s: %s not uploaded to %s (%s)',
                          getattr(error, 'type', type(error).__name__),
                          filepath, self.host, error)
            self._notify('Upload failed', '%s: %s' % (filename, error), True)
            return SyncResult(event, key, ChangeEvent.UPSERT,
                              SyncResult.UNKNOWN_ERROR, error, attempt)

        _logger.info('Upload Complete: %s', filename)
        self._notify('Upload complete', filename)
        return SyncResult(event, key, ChangeEvent.UPSERT, SyncResult.SUCCESS,
                          attempts=attempt)

    def destroy(self, key, event=None, attempt=1):
        """Remove an asset.

        Args:
            key (str): asset key.
            event (ChangeEvent, optional): source event.
            attempt (int, optional): number of this attempt.
        Returns:
            SyncResult
        """
        filepath = event.path if event else key
        filename = event.filename if event else key

        _logger.info('Trying to remove: %s', filename)
        try:
            self.client.destroy(self.theme_id, key)
        except InvalidRequestError as error:
            _logger.error('Error invalid remove request! %s not removed from '
                          '%s: %s', filepath, self.host, error)
            self._notify('Remove failed', '%s: %s' % (filename, error), True)
            return SyncResult(event, key, ChangeEvent.DELETE,
                              SyncResult.VALIDATION_ERROR, error, attempt)
        except Exception as error:
            _logger.error('Error %s: %s not removed from %s (%s)',
                          getattr(error, 'type', type(error).__name__),
                          filepath, self.host, error)
            self._notify('Remove failed', '%s: %s' % (filename, error), True)
            return SyncResult(event, key, ChangeEvent.DELETE,
                              SyncResult.UNKNOWN_ERROR, error, attempt)

        _logger.info('Remove Complete: %s', filename)
        self._notify('Remove complete', filename)
        return SyncResult(event, key, ChangeEvent.DELETE, SyncResult.SUCCESS,
                          attempts=attempt)

    def _notify(self, title, message, is_error=False):
        if not self._notifier:
            return
        try:
            self._notifier.send_message(title, message, is_error)
        except Exception:
            _logger.warning('Unable to notify "%s"', title, exc_info=True)
