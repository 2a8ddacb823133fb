# -*- coding: utf-8 -*-


class RetryPolicy(object):
    """Bounded retry, with exponential backoff.

    Only unknown errors (network, server, ...) are retried: an asset refused
    by the server would be refused again.

    With the default `max_attempts` of 1, nothing is retried.

    Attributes:
        max_attempts (int): total number of attempts, including the first.
        backoff (float): minimal delay before the 1st retry, in seconds.
        factor (float): multiplier applied to the backoff at each retry.
        max_backoff (float): upper bound of the backoff.
    """

    def __init__(self, max_attempts=1, backoff=0.5, factor=2.0,
                 max_backoff=30.0):
        if max_attempts < 1:
            raise ValueError('max_attempts must be at least 1: %s'
                             % max_attempts)
        self.max_attempts = max_attempts
        self.backoff = backoff
        self.factor = factor
        self.max_backoff = max_backoff

    def should_retry(self, result):
        """Check if a failed operation deserves another attempt.

        Args:
            result (SyncResult): result of the last attempt.
        Returns:
            bool
        """
        return (result.status == result.UNKNOWN_ERROR and
                result.attempts < self.max_attempts)

    def backoff_for(self, result):
        """Minimal delay before the next attempt, in seconds.

        If the server has asked to wait (HTTP 429 with Retry-After), its
        delay is honored.

        Args:
            result (SyncResult): result of the last attempt.
        """
        delay = min(self.backoff * self.factor ** (result.attempts - 1),
                    self.max_backoff)
        retry_after = getattr(result.error, 'retry_after', None)
        if retry_after:
            delay = max(delay, retry_after)
        return delay
