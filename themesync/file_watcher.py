# -*- coding: utf-8 -*-

import logging
import os
import os.path

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .sync.change_event import ChangeEvent

_logger = logging.getLogger(__name__)

# Assets need to be in a suitable directory.
#  - Liquid templates => 'templates/'
#  - Liquid layouts => 'layout/'
#  - Liquid snippets => 'snippets/'
#  - Liquid sections => 'sections/'
#  - Theme blocks => 'blocks/'
#  - Theme settings => 'config/'
#  - General assets => 'assets/'
#  - Language files => 'locales/'
THEME_DIRECTORIES = ('assets', 'blocks', 'config', 'layout', 'locales',
                     'sections', 'snippets', 'templates')


def is_theme_file(base_path, file_path):
    """Check if a file is part of the theme, and should be synced.

    The file must be in one of the theme directories, and no part of its
    path can be hidden (starting by a dot).

    Args:
        base_path (str): absolute path of the theme root.
        file_path (str): path of the file.
    """
    rel_path = os.path.relpath(os.path.abspath(file_path), base_path)
    parts = rel_path.replace('\\', '/').split('/')
    if len(parts) < 2 or parts[0] not in THEME_DIRECTORIES:
        return False
    return not any(part.startswith('.') for part in parts)


def _read_file(file_path):
    """Returns the file content, or None if the file is gone."""
    try:
        with open(file_path, 'rb') as f:
            return f.read()
    except (IOError, OSError):
        _logger.debug('Unable to read %s: file ignored.', file_path,
                      exc_info=True)
        return None


def collect_files(base_path, paths):
    """Build the upsert events of a list of files and directories.

    Directories are browsed recursively. Files outside the theme directories
    are ignored.

    Args:
        base_path (str): absolute path of the theme root.
        paths (Iterable[str]): files or directories to upload.
    Yields:
        ChangeEvent
    """
    for path in paths:
        if os.path.isdir(path):
            for dir_path, dir_names, file_names in os.walk(path):
                dir_names[:] = sorted(d for d in dir_names
                                      if not d.startswith('.'))
                for name in sorted(file_names):
                    for event in collect_files(
                            base_path, [os.path.join(dir_path, name)]):
                        yield event
        elif is_theme_file(base_path, path):
            content = _read_file(path)
            if content is not None:
                yield ChangeEvent.upsert(os.path.abspath(path), content)
        else:
            _logger.debug('%s is not a theme file: ignored.', path)


class ThemeWatcher(FileSystemEventHandler):
    """Watch all modification of a theme folder in the filesystem.

    Each change of a theme file is converted into a ChangeEvent, passed to
    the `on_change` callback.

    Note: a file creation raises several events (file created, file changed,
        directory changed). Directory events are ignored: the API knows only
        files.
    """

    def __init__(self, base_path, on_change):
        """
        Args:
            base_path (str): absolute path of the theme root.
            on_change (callable): receives each ChangeEvent.
        """
        self.base_path = base_path
        self._on_change = on_change
        self._observer = Observer()
        self._observer.schedule(self, path=base_path, recursive=True)

    def start(self):
        _logger.info('Watching %s', self.base_path)
        self._observer.start()

    def stop(self):
        self._observer.stop()
        self._observer.join()

    def _is_ignored(self, event, path):
        return event.is_directory or not is_theme_file(self.base_path, path)

    def _push_upsert(self, path):
        content = _read_file(path)
        if content is not None:
            self._on_change(ChangeEvent.upsert(path, content))

    def on_created(self, event):
        if not self._is_ignored(event, event.src_path):
            self._push_upsert(event.src_path)

    def on_modified(self, event):
        if not self._is_ignored(event, event.src_path):
            self._push_upsert(event.src_path)

    def on_deleted(self, event):
        if not self._is_ignored(event, event.src_path):
            self._on_change(ChangeEvent.delete(event.src_path))

    def on_moved(self, event):
        if event.is_directory:
            return
        if is_theme_file(self.base_path, event.src_path):
            self._on_change(ChangeEvent.delete(event.src_path))
        if is_theme_file(self.base_path, event.dest_path):
            self._push_upsert(event.dest_path)
