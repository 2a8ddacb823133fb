# -*- coding: utf-8 -*-

import base64

import pytest

from themesync.api import ThemeClient
from themesync.errors import ConfigurationError
from themesync.network.errors import (HTTPServerError,
                                      HTTPTooManyRequestsError,
                                      HTTPUnauthorizedError,
                                      InvalidRequestError)


def _make_client(http_server):
    host, port = http_server.host.split(':')
    return ThemeClient('api-key', 'secret', host, port=int(port),
                       timeout=5, scheme='http')


class TestThemeClient(object):

    def test_missing_settings(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ThemeClient(None, 'secret', 'shop.example.com')
        assert exc_info.value.key == 'API Key'

        with pytest.raises(ConfigurationError):
            ThemeClient('key', '', 'shop.example.com')
        with pytest.raises(ConfigurationError):
            ThemeClient('key', 'secret', None)

    def test_default_url(self):
        client = ThemeClient('key', 'secret', 'shop.example.com')
        assert repr(client) == '<ThemeClient https://shop.example.com/admin>'
        client.close()

    def test_update_text_asset(self, http_server):
        client = _make_client(http_server)
        asset = {'key': 'templates/index.liquid', 'value': '{{ x }}'}

        with http_server:
            result = client.update('123', asset)
        client.close()

        assert result == asset
        request = http_server.requests[0]
        assert request.method == 'PUT'
        assert request.path == '/admin/themes/123/assets.json'
        assert request.json() == {'asset': asset}
        assert request.headers['Authorization'] == 'Basic %s' % (
            base64.b64encode(b'api-key:secret').decode('ascii'))

    def test_update_published_theme(self, http_server):
        client = _make_client(http_server)

        with http_server:
            client.update(None, {'key': 'assets/a.css', 'value': ''})
        client.close()

        assert http_server.requests[0].path == '/admin/assets.json'

    def test_destroy_asset(self, http_server):
        client = _make_client(http_server)
        http_server.add_response(200, {'message': 'deleted'})

        with http_server:
            result = client.destroy('123', 'assets/my%20logo.png')
        client.close()

        assert result == {'message': 'deleted'}
        request = http_server.requests[0]
        assert request.method == 'DELETE'
        assert request.path == '/admin/themes/123/assets.json'
        assert request.query == {'asset[key]': ['assets/my logo.png']}

    def test_invalid_asset(self, http_server):
        client = _make_client(http_server)
        http_server.add_response(422, {'errors': {
            'asset': ["Liquid syntax error: tag 'if' was never closed"]}})

        with http_server:
            with pytest.raises(InvalidRequestError) as exc_info:
                client.update('123', {'key': 'templates/a.liquid',
                                      'value': '{% if %}'})
        client.close()

        error = exc_info.value
        assert error.type == 'InvalidRequestError'
        assert error.code == 422
        assert error.detail == {
            'asset': ["Liquid syntax error: tag 'if' was never closed"]}
        assert 'was never closed' in str(error)

    def test_authentication_error(self, http_server):
        client = _make_client(http_server)
        http_server.add_response(401, {'errors': 'Invalid API key'})

        with http_server:
            with pytest.raises(HTTPUnauthorizedError):
                client.destroy('123', 'assets/a.css')
        client.close()

    def test_call_limit_exceeded(self, http_server):
        client = _make_client(http_server)
        http_server.add_response(429, {'errors': 'Exceeded 2 calls/second'},
                                 {'Retry-After': '2.0'})

        with http_server:
            with pytest.raises(HTTPTooManyRequestsError) as exc_info:
                client.update('123', {'key': 'assets/a.css', 'value': ''})
        client.close()

        assert exc_info.value.retry_after == 2.0
        assert len(http_server.requests) == 1

    def test_call_limit_with_integer_retry_after_is_not_resent(
            self, http_server):
        client = _make_client(http_server)
        http_server.add_response(429, {'errors': 'Exceeded 2 calls/second'},
                                 {'Retry-After': '1'})
        http_server.add_response(200, {'asset': {'key': 'assets/a.css'}})

        with http_server:
            with pytest.raises(HTTPTooManyRequestsError) as exc_info:
                client.destroy('123', 'assets/a.css')
        client.close()

        assert exc_info.value.retry_after == 1.0
        assert len(http_server.requests) == 1

    def test_server_error(self, http_server):
        client = _make_client(http_server)
        http_server.add_response(503, b'Service Unavailable',
                                 {'Retry-After': '1'})

        with http_server:
            with pytest.raises(HTTPServerError) as exc_info:
                client.update('123', {'key': 'assets/a.css', 'value': ''})
        client.close()

        assert exc_info.value.response == 'Service Unavailable'
        assert exc_info.value.detail is None
        assert len(http_server.requests) == 1
