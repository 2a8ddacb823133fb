# -*- coding: utf-8 -*-

import logging
from functools import partial
from threading import Condition, Lock

from .errors import TimeoutError
from .util import is_thenable

_logger = logging.getLogger(__name__)


class Promise(object):
    """Value of an operation which will be completed in the future.

    Callbacks can be attached with `then()` and `catch()`; they are called as
    soon as the promise is settled, in the thread settling it. Threads
    which can block use `result()` instead.

    All calls to the methods are thread-safe.
    """

    PENDING = 'pending'
    FULFILLED = 'fulfilled'
    REJECTED = 'rejected'

    def __init__(self, executor, _name=None):
        """Constructor of the Promise.

        `executor` is called before the constructor returns, with two
        callables: ``resolve(value)`` and ``reject(error)``. If it raises an
        exception, the Promise is rejected with it.

        Args:
            executor (callable): takes the `resolve` and `reject` callbacks.
            _name (str): if set, name used when converted to text.
        """
        self._state = self.PENDING
        self._result = None
        self._error = None
        self._condition = Condition()
        self._name = _name or getattr(executor, '__name__', '???')

        self._callbacks = []
        self._errbacks = []

        try:
            executor(self._fulfill, self._reject)
        except Exception as error:
            self._reject(error)

    def _fulfill(self, result):
        with self._condition:
            if self._state != self.PENDING:
                _logger.warning('Try to fulfill Promise %r already settled. '
                                'New result will be ignored: %r',
                                self, result)
                return
            self._result = result
            self._state = self.FULFILLED
            self._condition.notify_all()
            callbacks, self._callbacks, self._errbacks = \
                self._callbacks, None, None

        for callback in callbacks:
            self._exec_callback(callback, result)

    def _reject(self, error):
        with self._condition:
            if self._state != self.PENDING:
                _logger.warning('Try to reject Promise %r already settled. '
                                'New error will be ignored: %r', self, error)
                return
            self._error = error
            self._state = self.REJECTED
            self._condition.notify_all()
            errbacks, self._callbacks, self._errbacks = \
                self._errbacks, None, None

        for errback in errbacks:
            self._exec_callback(errback, error, is_errback=True)

    @property
    def state(self):
        with self._condition:
            return self._state

    def result(self, timeout=None):
        """Wait for the result and returns it as soon as it's available.

        Args:
            timeout (float, optional): if set, maximum time to wait the
                promise to be settled. By default, it can wait indefinitely.
        Returns:
            *: value encapsulated, defined by the operation.
        Raises:
            TimeoutError: if the promise is not settled within the delay.
            *: If the promise is rejected, the rejection cause is raised.
        """
        with self._condition:
            if self._state == self.PENDING:
                self._condition.wait(timeout)

            if self._state == self.PENDING:
                raise TimeoutError()
            elif self._state == self.REJECTED:
                raise self._error
            return self._result

    def exception(self, timeout=None):
        """Wait for the promise to be settled and returns its error.

        Returns:
            Exception: the error causing the rejection of the Promise, or
                None if the promise is fulfilled.
        Raises:
            TimeoutError: if the promise is not settled within the delay.
        """
        with self._condition:
            if self._state == self.PENDING:
                self._condition.wait(timeout)

            if self._state == self.PENDING:
                raise TimeoutError()
            return self._error

    def then(self, on_fulfilled=None, on_rejected=None):
        """Create a new promise from callbacks called when this one is settled.

        The callback called defines the state of the returned Promise: the
        value it returns fulfills the new Promise (a thenable is waited
        first), and an exception raised rejects it.
        If the matching callback is not set, the state is transferred as is.

        Args:
            on_fulfilled (callable, optional): receives the result.
            on_rejected (callable, optional): receives the exception.
        Returns:
            Promise<*>: new promise depending of self.
        """

        def chained_executor(fulfill, reject):

            def settle_with(callback, value):
                try:
                    new_value = callback(value)
                except Exception as error:
                    return reject(error)
                if is_thenable(new_value):
                    new_value.then(fulfill, reject)
                else:
                    fulfill(new_value)

            def callback(result):
                if on_fulfilled is None:
                    return fulfill(result)
                settle_with(on_fulfilled, result)

            def errback(error):
                if on_rejected is None:
                    return reject(error)
                settle_with(on_rejected, error)

            self._add_callbacks(callback, errback)

        name = '%s -> %s' % (self._name, getattr(
            on_fulfilled or on_rejected, '__name__', '???'))
        return Promise(chained_executor, _name=name)

    def catch(self, on_rejected):
        """Alias of `self.then(None, on_rejected)`"""
        return self.then(None, on_rejected)

    def safeguard(self):
        """Log the rejection error, if any, with the maximum of details.

        Without error handler, a rejected Promise is silently ignored.
        """
        def guard(error):
            _logger.error('[SAFEGUARD] %r', self,
                          exc_info=(type(error), error, error.__traceback__))

        self._add_callbacks(None, guard)

    def __repr__(self):
        return 'Promise(%s %s)' % (self._name, self.state[0].upper())

    @classmethod
    def resolve(cls, value):
        """Create a promise who resolves the selected value.

        If value is already a thenable, it's returned as is.
        """
        if is_thenable(value):
            return value
        return cls(lambda ok, error: ok(value), _name='RESOLVE')

    @classmethod
    def reject(cls, reason):
        """Create a Promise rejected for the reason specified."""
        return cls(lambda ok, error: error(reason), _name='REJECT')

    @classmethod
    def all(cls, promises):
        """Create a Promise who wait a list of promises to be all fulfilled.

        The results are kept in the order of the promise list. The first
        rejection rejects the resulting Promise, and other results are
        ignored.

        Args:
            promises (list of Promise)
        Returns:
            Promise<list>
        """
        promises = list(promises)
        if not promises:
            return cls.resolve([])

        lock = Lock()
        results = [None] * len(promises)
        state = {'remaining': len(promises), 'failed': False}

        def executor(resolve, reject):
            def resolve_one(index, value):
                with lock:
                    if state['failed']:
                        return
                    results[index] = value
                    state['remaining'] -= 1
                    done = state['remaining'] == 0
                if done:
                    resolve(results)

            def reject_one(reason):
                with lock:
                    if state['failed']:
                        return
                    state['failed'] = True
                reject(reason)

            for index, p in enumerate(promises):
                p.then(partial(resolve_one, index), reject_one)

        return cls(executor, _name='ALL')

    @staticmethod
    def _exec_callback(callback, value, is_errback=False):
        try:
            callback(value)
        except Exception:
            if is_errback:
                _logger.exception("Promise errback raise an exception!")
            else:
                _logger.exception("Promise callback raise an exception!")

    def _add_callbacks(self, callback, errback):
        with self._condition:
            if self._state == self.PENDING:
                if callback is not None:
                    self._callbacks.append(callback)
                if errback is not None:
                    self._errbacks.append(errback)
                return
            state, result, error = self._state, self._result, self._error

        if state == self.FULFILLED and callback is not None:
            self._exec_callback(callback, result)
        elif state == self.REJECTED and errback is not None:
            self._exec_callback(errback, error, is_errback=True)
