# -*- coding: utf-8 -*-
"""Conversion of local files into theme assets.

The original path to a file may be something like shop/assets/site.css
whereas the API requires assets/site.css. The part to strip is the base
path, set once at startup (by default, the current working directory).
"""

import base64
import logging
import os
import os.path
from urllib.parse import quote

_logger = logging.getLogger(__name__)

# Characters kept as is in asset keys, in addition to letters, digits and
# "_.-~". It's the set left untouched by javascript's encodeURI().
_KEY_SAFE_CHARS = "/;,?:@&=+$!*'()#"

# Number of bytes inspected to detect binary content.
_BINARY_CHECK_SIZE = 8000


def resolve_base_path(explicit_base=None):
    """Returns the absolute base path.

    Args:
        explicit_base (str, optional): base path set by the user. Can be
            relative to the current directory.
    Returns:
        str: `explicit_base` in absolute form if it's not empty; otherwise
            the current working directory.
    """
    if explicit_base:
        return os.path.abspath(explicit_base)
    return os.getcwd()


class AssetKeyMapper(object):
    """Converts local file paths into asset keys.

    The base path is resolved once, at creation. Create another instance to
    use another base.

    Attributes:
        base_path (str): absolute base path.
    """

    def __init__(self, base_path=None):
        self.base_path = resolve_base_path(base_path)

    def __repr__(self):
        return '<AssetKeyMapper base=%s>' % self.base_path

    def to_relative(self, filepath):
        """Make a path relative to base path, with forward slashes.

        Args:
            filepath (str): absolute path, or path relative to the current
                directory.
        Returns:
            str: path relative to the base.
        """
        rel_path = os.path.relpath(os.path.abspath(filepath), self.base_path)
        return rel_path.replace('\\', '/')

    def make_asset_key(self, filepath):
        """Convert a local file path into its asset key.

        The result is stable: the same path always gives the same key.

        Args:
            filepath (str): path of the local file.
        Returns:
            str: URI-encoded key, eg: "assets/my%20logo.png".
        """
        return quote(self.to_relative(filepath), safe=_KEY_SAFE_CHARS)


def is_binary_content(content):
    """Guess if file content must be sent as a binary attachment.

    Content is binary if it contains a NUL byte in its first bytes, or if it
    can't be decoded as UTF-8.

    Args:
        content (bytes): raw file content.
    Returns:
        bool: True if binary, False if text.
    """
    if b'\x00' in content[:_BINARY_CHECK_SIZE]:
        return True
    try:
        content.decode('utf-8')
    except UnicodeDecodeError:
        return True
    return False


class RemoteAsset(object):
    """Asset resource, as sent to the API.

    Exactly one of `value` and `attachment` is set.

    Attributes:
        key (str): URI-encoded asset key.
        value (str): text content. None for binary assets.
        attachment (str): base64-encoded content. None for text assets.
    """

    def __init__(self, key, value=None, attachment=None):
        if (value is None) == (attachment is None):
            raise ValueError('An asset requires either a value or an '
                             'attachment (and not both): %s' % key)
        self.key = key
        self.value = value
        self.attachment = attachment

    @classmethod
    def from_content(cls, key, content):
        """Build the asset from raw file content.

        Args:
            key (str): asset key.
            content (bytes): raw file content.
        Returns:
            RemoteAsset
        """
        if is_binary_content(content):
            return cls(key, attachment=base64.b64encode(content).decode(
                'ascii'))
        return cls(key, value=content.decode('utf-8'))

    @property
    def is_binary(self):
        return self.attachment is not None

    def to_dict(self):
        if self.is_binary:
            return {'key': self.key, 'attachment': self.attachment}
        return {'key': self.key, 'value': self.value}

    def __repr__(self):
        return '<RemoteAsset %s (%s)>' % (
            self.key, 'attachment' if self.is_binary else 'value')
