# -*- coding: utf-8 -*-

from .__version__ import __version__  # noqa

import argparse
import logging
import os
import time

from .api import ThemeClient
from .asset_key import AssetKeyMapper
from .common import config
from .common import log
from .errors import ConfigurationError
from .file_watcher import ThemeWatcher, collect_files
from .promise import Promise
from .sync import OperationExecutor, RateLimiter, RetryPolicy, SyncQueue

_logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_CONFIGURATION_ERROR = 2


def _build_parser():
    parser = argparse.ArgumentParser(
        prog='themesync',
        description='Upload local theme files to the theme store, within '
                    'the API call limit.')
    parser.add_argument('--config', help='path of the config file.')
    parser.add_argument('--base', help='theme root folder. Default to the '
                                       'current directory.')
    parser.add_argument('--theme-id', help='id of the target theme.')
    parser.add_argument('--debug', action='store_true', default=None,
                        help='display debug logs.')
    parser.add_argument('--no-log-file', action='store_true',
                        help='only log to the console.')

    commands = parser.add_subparsers(dest='command')
    commands.required = True
    deploy = commands.add_parser('deploy', help='upload files or folders, '
                                                'then exit.')
    deploy.add_argument('paths', nargs='+')
    commands.add_parser('watch', help='upload each change of the theme '
                                      'files, until interrupted.')
    return parser


def _get_setting(args, key):
    """Command-line value if set, else the config value."""
    value = getattr(args, key, None)
    if value is None:
        return config.get(key)
    return value


def build_queue(args):
    """Create the sync queue and its collaborators from the settings.

    Returns:
        Tuple[SyncQueue, AssetKeyMapper]
    Raises:
        ConfigurationError: if a required setting is missing, or if the
            rate limit or retry settings are invalid.
    """
    settings = config.require('api_key', 'password', 'host')
    theme_id = _get_setting(args, 'theme_id')
    if not theme_id:
        raise ConfigurationError('theme_id')

    try:
        rate_limiter = RateLimiter(config.get('bucket_size'),
                                   config.get('leak_rate'),
                                   config.get('delay') / 1000.0)
    except ValueError as error:
        raise ConfigurationError('rate limit', 'Error, invalid rate '
                                 'limit: %s' % error)
    try:
        retry_policy = RetryPolicy(config.get('retry_attempts'),
                                   config.get('retry_backoff'))
    except ValueError as error:
        raise ConfigurationError('retry_attempts', 'Error, invalid retry '
                                 'policy: %s' % error)

    key_mapper = AssetKeyMapper(args.base or config.get('base_path'))
    client = ThemeClient(settings['api_key'], settings['password'],
                         settings['host'])

    notifier = None
    if config.get('notifications'):
        from .notifier import Notifier
        try:
            notifier = Notifier()
        except Exception:
            _logger.warning('Desktop notifications are not available.',
                            exc_info=True)

    executor = OperationExecutor(client, theme_id, key_mapper, notifier)
    return SyncQueue(executor, rate_limiter, retry_policy), key_mapper


def deploy(queue, key_mapper, paths):
    """Upload a batch of files, and wait for all of them.

    Returns:
        int: number of failed operations.
    """
    with queue:
        events = list(collect_files(key_mapper.base_path, paths))
        _logger.info('%s files to upload.', len(events))
        # A rejected event (stream or cancelled) counts as a failure.
        promises = [queue.enqueue(event).catch(lambda error: None)
                    for event in events]
        queue.join()

    results = Promise.all(promises).result()
    failures = [event.path for (event, result) in zip(events, results)
                if result is None or not result.ok]
    if failures:
        _logger.error('%s of %s files have not been synced:\n\t%s',
                      len(failures), len(events), '\n\t'.join(failures))
    return len(failures)


def watch(queue, key_mapper):
    """Sync each change of the theme files, until Ctrl+C."""
    watcher = ThemeWatcher(key_mapper.base_path,
                           lambda event: queue.enqueue(event).safeguard())
    with queue:
        watcher.start()
        try:
            while True:
                time.sleep(0.2)
        except KeyboardInterrupt:
            _logger.info('Stop watching.')
        finally:
            watcher.stop()


def main(argv=None):
    """Entry point of the themesync command."""
    args = _build_parser().parse_args(argv)

    with log.Context(log_file=not args.no_log_file):
        _logger.debug('Current working directory is : "%s"', os.getcwd())

        config.load(args.config)
        log.set_debug_mode(config.get('debug_mode')
                           if args.debug is None else args.debug)
        log.set_logs_level(config.get('log_levels'))

        try:
            queue, key_mapper = build_queue(args)
        except ConfigurationError as error:
            _logger.critical('%s', error)
            return EXIT_CONFIGURATION_ERROR

        if args.command == 'deploy':
            if deploy(queue, key_mapper, args.paths):
                return EXIT_FAILURES
        else:
            watch(queue, key_mapper)
        return EXIT_OK


if __name__ == "__main__":
    main()
