# -*- coding: utf-8 -*-

import base64
import os
import os.path
from urllib.parse import unquote

import pytest

from themesync.asset_key import (AssetKeyMapper, RemoteAsset,
                                 is_binary_content, resolve_base_path)


class TestResolveBasePath(object):

    def test_default_is_the_current_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(str(tmp_path))
        assert resolve_base_path() == os.getcwd()
        assert resolve_base_path('') == os.getcwd()

    def test_relative_base_is_made_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(str(tmp_path))
        assert resolve_base_path('shop') == os.path.join(os.getcwd(), 'shop')


class TestAssetKeyMapper(object):

    def test_strip_the_base_path(self, tmp_path):
        mapper = AssetKeyMapper(str(tmp_path / 'shop'))
        path = str(tmp_path / 'shop' / 'assets' / 'site.css')
        assert mapper.make_asset_key(path) == 'assets/site.css'

    def test_base_is_resolved_once(self, tmp_path, monkeypatch):
        monkeypatch.chdir(str(tmp_path))
        base = os.getcwd()
        mapper = AssetKeyMapper()
        os.mkdir('elsewhere')
        monkeypatch.chdir('elsewhere')

        path = os.path.join(base, 'templates', 'index.liquid')
        assert mapper.base_path == base
        assert mapper.make_asset_key(path) == 'templates/index.liquid'

    def test_key_is_stable(self, tmp_path):
        mapper = AssetKeyMapper(str(tmp_path))
        path = str(tmp_path / 'assets' / 'my logo.png')
        assert mapper.make_asset_key(path) == mapper.make_asset_key(path)

    def test_special_characters_are_encoded(self, tmp_path):
        mapper = AssetKeyMapper(str(tmp_path))
        path = str(tmp_path / 'assets' / u'my logo é.png')

        key = mapper.make_asset_key(path)
        assert key == 'assets/my%20logo%20%C3%A9.png'
        assert unquote(key) == u'assets/my logo é.png'

    def test_uri_reserved_characters_are_kept(self, tmp_path):
        mapper = AssetKeyMapper(str(tmp_path))
        path = str(tmp_path / 'assets' / "a+b,c;d=e&f!g'h(i).js")
        assert mapper.make_asset_key(path) == "assets/a+b,c;d=e&f!g'h(i).js"

    def test_percent_sign_is_encoded(self, tmp_path):
        mapper = AssetKeyMapper(str(tmp_path))
        path = str(tmp_path / 'assets' / '100%.css')
        assert mapper.make_asset_key(path) == 'assets/100%25.css'

    def test_decoded_key_is_the_relative_path(self, tmp_path):
        mapper = AssetKeyMapper(str(tmp_path))
        for name in (u'snippets/a b.liquid', u'assets/été/ü.svg',
                     u'locales/en.default.json'):
            path = os.path.join(str(tmp_path), *name.split('/'))
            assert unquote(mapper.make_asset_key(path)) == name
            assert mapper.to_relative(path) == name

    def test_relative_path_uses_forward_slashes(self, tmp_path):
        mapper = AssetKeyMapper(str(tmp_path))
        path = os.path.join(str(tmp_path), 'sections', 'header.liquid')
        assert '\\' not in mapper.to_relative(path)

    def test_windows_separators_are_converted(self, tmp_path, monkeypatch):
        mapper = AssetKeyMapper(str(tmp_path))
        monkeypatch.setattr(os.path, 'relpath',
                            lambda path, start: 'assets\\img\\logo.png')
        assert mapper.make_asset_key('whatever') == 'assets/img/logo.png'


class TestBinaryContent(object):

    def test_text_content(self):
        assert not is_binary_content(b'body { color: red; }')
        assert not is_binary_content(u'{{ "é" }}'.encode('utf-8'))
        assert not is_binary_content(b'')

    def test_nul_byte_is_binary(self):
        assert is_binary_content(b'GIF89a\x00\x01')

    def test_invalid_utf8_is_binary(self):
        assert is_binary_content(b'\xff\xd8\xff\xe0JFIF')


class TestRemoteAsset(object):

    def test_requires_exactly_one_payload(self):
        with pytest.raises(ValueError):
            RemoteAsset('assets/a.css')
        with pytest.raises(ValueError):
            RemoteAsset('assets/a.css', value='a', attachment='YQ==')

    def test_text_asset(self):
        asset = RemoteAsset.from_content('assets/a.css', b'a { }')
        assert not asset.is_binary
        assert asset.to_dict() == {'key': 'assets/a.css', 'value': 'a { }'}

    def test_binary_asset(self):
        content = b'\x89PNG\r\n\x1a\n\x00\x00'
        asset = RemoteAsset.from_content('assets/logo.png', content)

        assert asset.is_binary
        data = asset.to_dict()
        assert set(data) == {'key', 'attachment'}
        assert base64.b64decode(data['attachment']) == content

    def test_empty_file_is_a_text_asset(self):
        asset = RemoteAsset.from_content('snippets/empty.liquid', b'')
        assert asset.to_dict() == {'key': 'snippets/empty.liquid',
                                   'value': ''}
