# -*- coding: utf-8 -*-

from concurrent.futures import ThreadPoolExecutor
import functools
import logging
import threading

_logger = logging.getLogger(__name__)


class SharedContext(object):
    """Thread-safe context shared between all workers of an executor.

    The context contains an instance of `threading.Condition`. It must be
    held to read or write any attribute of the context (the stop order, and
    whatever attributes a subclass adds). It's also used to wake up workers.

    When `stop_order` is True, all workers should returns as soon as
    possible.

    `with context:` is a shortcut for `with context.condition:`.

    The minimal worker function is like that:

    ```
    def worker(context):
        with context:
            while not context.stop_order:
                # ... make operations ...
                context.condition.wait()
    ```

    Attributes:
        condition (Condition)
        stop_order (boolean): if True, the executor is in shutdown phase.
    """

    def __init__(self):
        self.condition = threading.Condition()
        self.stop_order = False

    def __enter__(self):
        self.condition.__enter__()
        return self

    def __exit__(self, _type, _value, _tb):
        return self.condition.__exit__(_type, _value, _tb)


class GenericExecutor(object):
    """Executor running never-ending workers.

    All the workers are started at `start()`. A worker who crashes (raises
    an exception) is replaced by a new one, until the executor is stopped.
    The workers manage their item queue themselves, through the context.

    Attributes:
        context (SharedContext): context for communication with workers.
    """

    def __init__(self, worker_name, max_workers, fn, shared_context=None):
        """
        Args:
            worker_name (str): name of the workers. eg: 'dispatch'.
            max_workers (int): number of running workers.
            fn (callable): the worker function. The context is passed to
                it at call.
            shared_context (SharedContext, optional): context shared between
               all workers. By default, a generic SharedContext is used.
        """
        if shared_context is not None:
            self.context = shared_context
        else:
            self.context = SharedContext()
        self._worker_name = worker_name
        self._max_workers = max_workers
        self._last_worker_id = 0

        self._executor = None
        self._fn = fn

    def start(self):
        """Start all the workers."""
        with self.context:
            self.context.stop_order = False

        _logger.debug('Start service "%s"', self._worker_name)
        self._executor = ThreadPoolExecutor(max_workers=self._max_workers)
        for _ in range(self._max_workers):
            self._submit_worker()

    def stop(self):
        """Stop all the workers.

        Returns only when all the worker threads are joined.
        """
        _logger.debug('Stop service "%s"', self._worker_name)
        with self.context:
            self.context.stop_order = True
            self.context.condition.notify_all()
        if self._executor:
            self._executor.shutdown()
            self._executor = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, _type, _value, _tb):
        self.stop()

    def _submit_worker(self):
        self._last_worker_id += 1
        future = self._executor.submit(self._run_worker, self._last_worker_id)
        future.add_done_callback(functools.partial(
            self._handle_worker_ending, self._last_worker_id))

    def _run_worker(self, worker_id):
        threading.current_thread().name = 'Worker %s #%s' % (
            self._worker_name, worker_id)
        return self._fn(self.context)

    def _handle_worker_ending(self, worker_id, future):
        """Called after a worker just stopped.

        If it's an uncaught exception, a new worker is started.
        """
        error = future.exception()

        if error:
            _logger.critical("Worker %s #%s has crashed: %s",
                             self._worker_name, worker_id, error)
            with self.context:
                if not self.context.stop_order and self._executor:
                    self._submit_worker()
        else:
            _logger.debug("Worker %s #%s has returned.", self._worker_name,
                          worker_id)
