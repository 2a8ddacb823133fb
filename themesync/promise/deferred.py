# -*- coding: utf-8 -*-

from .promise import Promise


class Deferred(object):
    """Producer side of a Promise.

    The code doing the asynchronous work keeps the Deferred, and settles it
    with `resolve()` or `reject()`. The consumer receives `promise`.

    Attributes:
        promise (Promise): the Promise associated to the Deferred.
        resolve (callable): fulfill the promise with a value.
        reject (callable): reject the promise with an exception.
    """

    def __init__(self, _name=None):
        self.promise = Promise(self._executor, _name=_name)

    def _executor(self, resolve, reject):
        self.resolve = resolve
        self.reject = reject
