# -*- coding: utf-8 -*-

import logging

import pytest

from themesync.common import config
from themesync.errors import ConfigurationError


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Load an empty config file, isolated from the user's environment."""
    for name in list(config.os.environ):
        if name.startswith(config.ENV_PREFIX):
            monkeypatch.delenv(name)

    path = tmp_path / 'themesync.ini'
    path.write_text(u'[config]\n')
    config.load(str(path))
    yield path
    config.load(str(path))


class TestConfigLoad(object):

    def test_load_missing_file_logs_a_warning(self, tmp_path, caplog):
        config.load(str(tmp_path / 'nothing.ini'))
        assert 'Unable to load config file' in caplog.text

    def test_load_existing_file(self, tmp_path, caplog):
        path = tmp_path / 'themesync.ini'
        path.write_text(u'[config]\nhost = shop.example.com\n')

        with caplog.at_level(logging.WARNING):
            config.load(str(path))
        assert 'Unable to load config file' not in caplog.text
        assert config.get('host') == 'shop.example.com'

    def test_load_resets_previous_values(self, config_file, tmp_path):
        config.set('host', 'shop.example.com')

        config.load(str(tmp_path / 'other.ini'))
        assert config.get('host') is None


class TestConfigGet(object):

    def test_key_does_not_exist(self, config_file):
        with pytest.raises(KeyError):
            config.get('plop')
        with pytest.raises(KeyError):
            config.set('plop', 42)

    def test_default_values(self, config_file):
        assert config.get('bucket_size') == 40
        assert config.get('leak_rate') == 2.0
        assert config.get('delay') == 0
        assert config.get('retry_attempts') == 1
        assert config.get('api_key') is None
        assert config.get('log_levels') == {}

    def test_get_a_bool_value(self, config_file):
        config.set('notifications', False)
        value = config.get('notifications')
        assert type(value) is bool and not value

        config.set('notifications', 'yes')
        value = config.get('notifications')
        assert type(value) is bool and value

    def test_get_a_bool_with_invalid_value(self, config_file, caplog):
        config.set('debug_mode', 'plop')
        assert config.get('debug_mode') is False
        assert 'Invalid value for config "debug_mode"' in caplog.text

    def test_get_an_int_value(self, config_file):
        config.set('bucket_size', 42)
        value = config.get('bucket_size')
        assert type(value) is int and value == 42

    def test_get_an_int_with_invalid_value(self, config_file):
        config.set('bucket_size', 'plop')
        assert config.get('bucket_size') == 40

    def test_get_a_float_value(self, config_file):
        config.set('leak_rate', '0.5')
        assert config.get('leak_rate') == 0.5

    def test_get_a_dict_value(self, config_file):
        config.set('log_levels', 'aa=bb;cc=dd')
        assert config.get('log_levels') == {'aa': 'bb', 'cc': 'dd'}

        config.set('log_levels', {'themesync.sync': 'DEBUG'})
        assert config.get('log_levels') == {'themesync.sync': 'DEBUG'}

    def test_get_a_dict_with_invalid_pair(self, config_file):
        config.set('log_levels', 'aa=bb;plop;cc=dd')
        assert config.get('log_levels') == {'aa': 'bb', 'cc': 'dd'}

    def test_set_writes_the_file(self, config_file):
        config.set('host', 'shop.example.com')
        assert 'host = shop.example.com' in config_file.read_text()

        config.load(str(config_file))
        assert config.get('host') == 'shop.example.com'

    def test_environment_overrides_the_file(self, config_file, monkeypatch):
        config.set('theme_id', '123')
        monkeypatch.setenv('THEMESYNC_THEME_ID', '456')
        assert config.get('theme_id') == '456'

    def test_environment_value_is_converted(self, config_file, monkeypatch):
        monkeypatch.setenv('THEMESYNC_LEAK_RATE', '4')
        assert config.get('leak_rate') == 4.0


class TestConfigRequire(object):

    def test_require_returns_values(self, config_file):
        config.set('api_key', 'key')
        config.set('password', 'secret')

        values = config.require('api_key', 'password')
        assert values == {'api_key': 'key', 'password': 'secret'}

    def test_require_missing_value(self, config_file):
        config.set('api_key', 'key')

        with pytest.raises(ConfigurationError) as exc_info:
            config.require('api_key', 'password')
        assert exc_info.value.key == 'password'
        assert 'password' in str(exc_info.value)

    def test_require_empty_value(self, config_file):
        config.set('host', '')

        with pytest.raises(ConfigurationError):
            config.require('host')

    def test_require_all_mandatory_settings_by_default(self, config_file):
        for key in ('api_key', 'password', 'host'):
            config.set(key, 'value')

        with pytest.raises(ConfigurationError) as exc_info:
            config.require()
        assert exc_info.value.key == 'theme_id'
