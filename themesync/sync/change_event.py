# -*- coding: utf-8 -*-


class ChangeEvent(object):
    """A change observed on a local file.

    The kind of the event is deduced from the content: an event without
    content is a deletion. The event is forwarded unmodified once the remote
    operation is done.

    Attributes:
        path (str): path of the file (absolute, or relative to the current
            directory).
        content (bytes): file content. None for deletions. A file-like
            object here is a "stream", and is not supported.
        kind (str): one of `ChangeEvent.UPSERT` or `ChangeEvent.DELETE`.
    """

    UPSERT = 'upsert'
    DELETE = 'delete'

    def __init__(self, path, content=None, is_deletion=None):
        """
        Args:
            path (str): path of the file.
            content (bytes, optional): file content.
            is_deletion (bool, optional): explicit kind of the event. By
                default, it's a deletion if there is no content.
        """
        self.path = path
        self.content = content
        if is_deletion is None:
            is_deletion = content is None
        self.kind = self.DELETE if is_deletion else self.UPSERT

    @classmethod
    def upsert(cls, path, content):
        return cls(path, content, is_deletion=False)

    @classmethod
    def delete(cls, path):
        return cls(path, None, is_deletion=True)

    @property
    def is_deletion(self):
        return self.kind == self.DELETE

    @property
    def is_stream(self):
        """True if the content is a non-buffered, readable stream."""
        if self.content is None or isinstance(
                self.content, (bytes, bytearray, memoryview)):
            return False
        return callable(getattr(self.content, 'read', None))

    @property
    def filename(self):
        return self.path.replace('\\', '/').rsplit('/', 1)[-1]

    def __repr__(self):
        return '<ChangeEvent %s %s>' % (self.kind.upper(), self.path)
