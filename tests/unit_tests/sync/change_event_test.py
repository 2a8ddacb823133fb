# -*- coding: utf-8 -*-

import io

from themesync.sync import ChangeEvent


class TestChangeEvent(object):

    def test_event_with_content_is_an_upsert(self):
        event = ChangeEvent('/shop/assets/a.css', b'a { }')
        assert event.kind == ChangeEvent.UPSERT
        assert not event.is_deletion

    def test_event_without_content_is_a_deletion(self):
        event = ChangeEvent('/shop/assets/a.css')
        assert event.kind == ChangeEvent.DELETE
        assert event.is_deletion

    def test_empty_file_is_an_upsert(self):
        event = ChangeEvent.upsert('/shop/snippets/empty.liquid', b'')
        assert not event.is_deletion

    def test_explicit_deletion(self):
        assert ChangeEvent.delete('/shop/assets/a.css').is_deletion

    def test_buffers_are_not_streams(self):
        assert not ChangeEvent.upsert('a', b'abc').is_stream
        assert not ChangeEvent.upsert('a', bytearray(b'abc')).is_stream
        assert not ChangeEvent.delete('a').is_stream

    def test_file_object_is_a_stream(self):
        event = ChangeEvent.upsert('/shop/assets/a.css', io.BytesIO(b'abc'))
        assert event.is_stream

    def test_filename(self):
        assert ChangeEvent.delete('/shop/assets/a.css').filename == 'a.css'
        assert ChangeEvent.delete('C:\\shop\\layout\\theme.liquid') \
            .filename == 'theme.liquid'
