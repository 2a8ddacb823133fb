# -*- coding: utf-8 -*-
"""Network module

This module performs the HTTPS requests to the theme store admin API.

Requests are synchronous: they are sent from the dispatch worker of the sync
queue, who is the only one to know when a call is allowed by the rate limit.

All `requests` exceptions are converted into `errors.NetworkError`
instances. The message is human-readable and can be logged as is.

Example:

    >>> session = prepare_session('key', 'password')
    >>> result = json_request(session, 'GET',
    ...                       'https://shop.example.com/admin/themes.json')
    >>> result['code']
    200
"""

from . import errors  # noqa
from .send_request import json_request, prepare_session

__all__ = ['errors', 'json_request', 'prepare_session']
