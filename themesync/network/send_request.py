# -*- coding: utf-8 -*-

import logging

import requests
from requests import __version__ as requests_version
from urllib3.util.retry import Retry

from ..__version__ import __version__ as themesync_version
from . import errors

_logger = logging.getLogger(__name__)

# Maximum number of automatic retry in case of connection error.
# HTTP errors (4XX and 5XX, including 429) are never retried here: each call
# sent must have been admitted by the rate limiter.
MAX_RETRY = 3

DEFAULT_TIMEOUT = 120


def prepare_session(api_key, password):
    """Prepare a session to send HTTP(S) requests, with auto retry.

    Args:
        api_key (str): API key of the private app, used as username.
        password (str): password of the private app.
    Returns:
        requests.Session: new HTTP(s) session
    """
    session = requests.Session()
    retry = Retry(total=MAX_RETRY, read=0, status=0,
                  respect_retry_after_header=False, raise_on_status=False)
    adapter = requests.adapters.HTTPAdapter(max_retries=retry)
    session.mount('http://', adapter)
    session.mount('https://', adapter)
    session.auth = (api_key, password)
    session.headers.update({
        'Accept': 'application/json',
        'User-Agent': 'themesync/%s python-requests/%s' % (
            themesync_version, requests_version)
    })
    return session


@errors.handler
def json_request(session, verb, url, timeout=DEFAULT_TIMEOUT, **params):
    """Performs a json HTTP requests, then returns the result.

    Args:
        session (requests.Session)
        verb (str): HTTP verb
        url (str): HTTP URL
        timeout (float, optional): timeout of the request, in seconds.
        **params: extra arguments passed to `requests`, like `json` or
            `params`.
    Returns:
        dict: contains 3 keys:
          - 'code': the HTTP response code
          - 'headers': a dict containing all headers (key: value)
          - 'content': JSON response, or None if the body is empty.
    Raises:
        NetworkError: on any failure, including HTTP 4XX and 5XX responses.
    """
    _logger.debug('Send request %s %s', verb, url)
    response = session.request(method=verb, url=url, timeout=timeout,
                               **params)

    _logger.debug('request %s %s -> %s', verb, url, response.status_code)

    response.raise_for_status()

    content = None
    if response.content:
        content = response.json()

    return {
        'code': response.status_code,
        'headers': response.headers,
        'content': content
    }
