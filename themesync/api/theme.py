# -*- coding: utf-8 -*-

import logging
from urllib.parse import unquote

from ..errors import ConfigurationError
from ..network import json_request, prepare_session

_logger = logging.getLogger(__name__)


class ThemeClient(object):
    """Client of the asset endpoints of the theme store admin API.

    An instance owns its HTTP session; it's created once at startup and
    passed to the components sending requests.

    Each operation exists in two variants: with a theme id, the asset of
    this theme is targeted; with `theme_id=None`, the legacy endpoint acting
    on the published theme is used.

    Attributes:
        host (str): hostname of the store, eg: "myshop.example.com".
    """

    def __init__(self, api_key, password, host, port=443, timeout=120,
                 scheme='https'):
        """
        Args:
            api_key (str): API key of the private app.
            password (str): password of the private app.
            host (str): store hostname.
            port (int, optional): default to 443.
            timeout (float, optional): timeout of each request, in seconds.
            scheme (str, optional): 'https' by default.
        Raises:
            ConfigurationError: if a credential or the host is missing.
        """
        for name, value in (('API Key', api_key), ('password', password),
                            ('host', host)):
            if not value:
                raise ConfigurationError(name)

        self.host = host
        self._timeout = timeout
        self._session = prepare_session(api_key, password)

        default_port = {'https': 443, 'http': 80}.get(scheme)
        if port and port != default_port:
            self._base_url = '%s://%s:%s/admin' % (scheme, host, port)
        else:
            self._base_url = '%s://%s/admin' % (scheme, host)

    def __repr__(self):
        return '<ThemeClient %s>' % self._base_url

    def _assets_url(self, theme_id):
        if theme_id is None:
            return '%s/assets.json' % self._base_url
        return '%s/themes/%s/assets.json' % (self._base_url, theme_id)

    def update(self, theme_id, asset):
        """Create or replace an asset.

        Args:
            theme_id (str): id of the theme; None for the published theme.
            asset (dict): asset resource, with the key `key` and exactly one
                of `value` (text content) or `attachment` (base64 content).
        Returns:
            dict: the asset resource returned by the server.
        Raises:
            InvalidRequestError: if the asset has been refused.
            NetworkError: any other error.
        """
        result = json_request(self._session, 'PUT',
                              self._assets_url(theme_id),
                              timeout=self._timeout, json={'asset': asset})
        return (result['content'] or {}).get('asset')

    def destroy(self, theme_id, key):
        """Remove an asset.

        Args:
            theme_id (str): id of the theme; None for the published theme.
            key (str): asset key, already URI-encoded.
        Returns:
            dict: the server response, if any.
        Raises:
            InvalidRequestError: if the request has been refused.
            NetworkError: any other error.
        """
        # requests encodes the query string itself.
        params = {'asset[key]': unquote(key)}
        result = json_request(self._session, 'DELETE',
                              self._assets_url(theme_id),
                              timeout=self._timeout, params=params)
        return result['content']

    def close(self):
        self._session.close()
