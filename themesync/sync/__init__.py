# -*- coding: utf-8 -*-

"""Send local theme changes to the store, within its API call limit.

The store uses a leaky bucket: bursts of 40 calls are allowed, then the
bucket leaks at 2 calls per second.
https://shopify.dev/docs/api/usage/rate-limits

Each file change (ChangeEvent) given to the SyncQueue is admitted by the
RateLimiter, which computes when its call may be sent. At that time, the
OperationExecutor uploads or removes the asset, and classifies the result:
success, validation error (the asset is refused), or unknown error.
Only then the event is forwarded to the next stage.

A failed event never stops the others. Retrying is disabled by default, and
when enabled (RetryPolicy), it's bounded and never applies to validation
errors.
"""

from .change_event import ChangeEvent
from .operation_executor import OperationExecutor, SyncResult
from .rate_limiter import RateLimiter
from .retry_policy import RetryPolicy
from .sync_queue import DispatchSlot, SyncQueue

__all__ = [
    'ChangeEvent',
    'DispatchSlot',
    'OperationExecutor',
    'RateLimiter',
    'RetryPolicy',
    'SyncQueue',
    'SyncResult'
]
