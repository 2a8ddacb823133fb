# -*- coding: utf-8 -*-

"""Manages settings and config file.

Settings are loaded from an INI file (section ``[config]``). For each entry,
an environment variable ``THEMESYNC_<KEY>`` overrides the file value, and if
neither is set, a default value is provided.
When an option is set, the config file is updated.

Before any use, the module must be initialized by calling ``load()``.
"""

import configparser
import logging
import os
import os.path

from . import path as themesync_path
from ..errors import ConfigurationError

_logger = logging.getLogger(__name__)


# Default config dict. Values not present in this dict are not valid.
# Each entry contains the type expected, and the default value.
_default_config = {
    'api_key': {'type': str, 'default': None},
    'password': {'type': str, 'default': None},
    'host': {'type': str, 'default': None},
    'theme_id': {'type': str, 'default': None},
    'base_path': {'type': str, 'default': ''},
    # extra delay applied to each call, in milliseconds.
    'delay': {'type': int, 'default': 0},
    'bucket_size': {'type': int, 'default': 40},
    'leak_rate': {'type': float, 'default': 2.0},
    'retry_attempts': {'type': int, 'default': 1},
    'retry_backoff': {'type': float, 'default': 0.5},
    'notifications': {'type': bool, 'default': False},
    'debug_mode': {'type': bool, 'default': False},
    'log_levels': {'type': dict, 'default': {}}
}

# Settings without which no request can be sent.
REQUIRED_KEYS = ('api_key', 'password', 'host', 'theme_id')

ENV_PREFIX = 'THEMESYNC_'

_config_parser = configparser.ConfigParser()
_config_parser.add_section('config')

_config_file_path = None


def _get_config_file_path():
    if _config_file_path:
        return _config_file_path
    return os.path.join(themesync_path.get_config_dir(), 'themesync.ini')


def load(file_path=None):
    """Find and load the config file.

    This function must be called before any use of the module.

    Args:
        file_path (str, optional): explicit path of the config file. By
            default, the file is searched in the user's config directory.
    """
    global _config_file_path, _config_parser

    _config_file_path = file_path
    _config_parser = configparser.ConfigParser()
    _config_parser.add_section('config')

    config_file_path = _get_config_file_path()
    if not _config_parser.read(config_file_path):
        _logger.warning('Unable to load config file: %s', config_file_path)


def _convert(key, raw_value):
    value_type = _default_config[key]['type']

    if value_type is bool:
        if raw_value.lower() not in _config_parser.BOOLEAN_STATES:
            raise ValueError('Not a boolean: %s' % raw_value)
        return _config_parser.BOOLEAN_STATES[raw_value.lower()]
    elif value_type is dict:
        # Dict entries are in the form 'key=value;key2=value2'
        result = {}
        for pair in filter(None, raw_value.split(';')):
            try:
                (k, v) = pair.split('=')
                result[k.strip()] = v.strip()
            except ValueError:
                _logger.warning('Unable to parse pair key=value: "%s"', pair)
        return result
    return value_type(raw_value)


def get(key):
    """Find and return a configuration entry

    The environment is checked first, then the config file. If the entry is
    specified in none of them, the default value is returned.
    An invalid value (eg: "abc" for an int entry) is ignored with a warning.

    Args:
        key (string): the entry key.
    Returns:
        The corresponding value found.
    Raises:
        KeyError: if the config entry doesn't exists.
    """
    if key not in _default_config:
        raise KeyError(key)

    raw_value = os.environ.get(ENV_PREFIX + key.upper())
    if raw_value is None:
        try:
            raw_value = _config_parser.get('config', key)
        except configparser.NoOptionError:
            return _default_config[key]['default']

    try:
        return _convert(key, raw_value)
    except ValueError:
        _logger.warning('Invalid value for config "%s": "%s". Default value '
                        'will be used.', key, raw_value)
        return _default_config[key]['default']


def set(key, value):
    """Set a configuration entry.

    Args:
        key (string): the entry key.
        value: the new value to set. It will be converted to string.
    Raises:
        KeyError: if the config entry is not valid.
    """
    if key not in _default_config:
        raise KeyError(key)

    if isinstance(value, dict):
        value = ';'.join('%s=%s' % item for item in value.items())
    _config_parser.set('config', key, str(value))

    config_file_path = _get_config_file_path()
    try:
        with open(config_file_path, 'w') as config_file:
            _config_parser.write(config_file)
        _logger.debug('Config file modified.')
    except IOError:
        _logger.warning('Unable to write in the config file', exc_info=True)


def require(*keys):
    """Check that mandatory entries are set, and returns their values.

    Args:
        *keys (str): entries to check. Default to all the required settings
            (credentials, host and theme).
    Returns:
        dict: key -> value, for each checked entry.
    Raises:
        ConfigurationError: when an entry is missing (or empty).
    """
    result = {}
    for key in keys or REQUIRED_KEYS:
        value = get(key)
        if value is None or value == '':
            raise ConfigurationError(key)
        result[key] = value
    return result
