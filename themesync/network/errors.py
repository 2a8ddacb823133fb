# -*- coding: utf-8 -*-
"""This module defines all errors which can occur in the network module.

requests exceptions can be converted to themesync.network errors using the
``handler`` decorator.

Errors have a human-readable message, ready to be logged. They are more
verbose when displayed using `repr()`.
"""

import functools

import requests.exceptions


class NetworkError(Exception):
    """Base class for themesync.network errors.

    Attributes:
        message (str): Human readable message, describing the error.
        reason (Exception): internal exception which've produced this error.
            Can be None.
        type (str): kind of error, as reported in the logs. It's the class
            name by default.
        detail: structured description of the error sent by the server, if
            any.
    """

    def __init__(self, reason=None, message=None):
        self.reason = reason
        self.message = message or "A network error has occurred."
        self.type = self.__class__.__name__
        self.detail = None
        Exception.__init__(self, self.message)

    def __repr__(self):
        return '%s("%s")' % (self.__class__.__name__, self.message)

    def __str__(self):
        return self.message


class ConnectionError(NetworkError):
    def __init__(self, error):
        NetworkError.__init__(self, error,
                              "Unable to connect to the theme store.")


class TimeoutError(NetworkError):
    def __init__(self, error):
        NetworkError.__init__(self, error,
                              "The server did not respond on time.")


class HTTPError(NetworkError):
    """Base class for HTTP errors.

    Attributes:
        code (int): HTTP status code
        status_text (str): HTTP status text
        request (str): representation of the request.
        response (dict or text): If the response content was in json, the
            corresponding dict, else the content as text.
        detail: the ``errors`` entry of a JSON response, if present.
    """

    def __init__(self, error, message=None):
        """
        Args:
            error (requests.exceptions.HTTPError): base error.
        """
        response = error.response
        if not message:
            message = "The server has returned an HTTP error: %s %s" % (
                response.status_code, response.reason)

        NetworkError.__init__(self, error, message)

        self.code = response.status_code
        self.status_text = response.reason
        if error.request is not None:
            self.request = '%s %s' % (error.request.method, error.request.url)
        else:
            self.request = None

        try:
            self.response = response.json()
        except ValueError:
            self.response = response.text
        else:
            if isinstance(self.response, dict):
                self.detail = self.response.get('errors')

    def __repr__(self):
        return '\n'.join((
            "HTTP Error: %s %s" % (self.code, self.status_text),
            "\tRequest: %s" % self.request,
            "\tResponse: %s" % (self.response,)))


class InvalidRequestError(HTTPError):
    """The server has refused the asset (bad key, forbidden folder, ...).

    Retrying the same request will fail the same way.
    """

    def __init__(self, error):
        HTTPError.__init__(self, error, "The request is invalid.")
        if self.detail:
            self.message = '%s %s' % (self.message, _format_detail(
                self.detail))


class HTTPUnauthorizedError(HTTPError):
    def __init__(self, error):
        HTTPError.__init__(self, error,
                           "Authentication failed: check the API key and "
                           "password.")


class HTTPForbiddenError(HTTPError):
    def __init__(self, error):
        HTTPError.__init__(self, error, "You don't have the permission to do "
                                        "this operation.")


class HTTPNotFoundError(HTTPError):
    def __init__(self, error):
        HTTPError.__init__(self, error,
                           "The element you're looking for has not been "
                           "found.")


class HTTPTooManyRequestsError(HTTPError):
    """The API call limit is exceeded.

    Attributes:
        retry_after (float): delay requested by the server, in seconds. None
            if not specified.
    """

    def __init__(self, error):
        HTTPError.__init__(self, error, "The API call limit is exceeded.")
        try:
            self.retry_after = float(
                error.response.headers.get('Retry-After'))
        except (TypeError, ValueError):
            self.retry_after = None


class HTTPServerError(HTTPError):
    def __init__(self, error):
        HTTPError.__init__(self, error, "The theme store has encountered an "
                                        "unexpected error.")


def _format_detail(detail):
    """Flatten the ``errors`` payload into a single line.

    The payload is either a string, a list of strings, or a dict associating
    a field to one or many messages.
    """
    if isinstance(detail, dict):
        return '; '.join('%s: %s' % (field, _format_detail(messages))
                         for field, messages in sorted(detail.items()))
    if isinstance(detail, (list, tuple)):
        return ', '.join(str(message) for message in detail)
    return str(detail)


_code2error = {
    400: InvalidRequestError,
    401: HTTPUnauthorizedError,
    403: HTTPForbiddenError,
    404: HTTPNotFoundError,
    422: InvalidRequestError,
    429: HTTPTooManyRequestsError,
}


def handler(func):
    """Decorator who handles errors of the requests.

    Converts requests.exceptions.* into themesync.network.errors.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except requests.exceptions.ConnectionError as error:
            raise ConnectionError(error)
        except requests.exceptions.Timeout as error:
            raise TimeoutError(error)
        except requests.exceptions.HTTPError as error:
            code = error.response.status_code
            err_class = _code2error.get(code)
            if err_class is None:
                err_class = HTTPServerError if code >= 500 else HTTPError
            raise err_class(error)
        except requests.exceptions.RequestException as error:
            raise NetworkError(error)

    return wrapper
