# -*- coding: utf-8 -*-

from .errors import CancelledError, TimeoutError
from .promise import Promise
from .deferred import Deferred
from .util import is_thenable

__all__ = ['CancelledError', 'Deferred', 'Promise', 'TimeoutError',
           'is_thenable']
