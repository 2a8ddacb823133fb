# -*- coding: utf-8 -*-

import logging
import threading

_logger = logging.getLogger(__name__)

# The store allows bursts of 40 calls, then leaks 2 calls per second.
DEFAULT_BUCKET_SIZE = 40
DEFAULT_LEAK_RATE = 2.0


class RateLimiter(object):
    """Leaky bucket computing when each call is allowed to be sent.

    Calls are counted in the order of admission. The call at position N
    (0-based) is delayed by ``max(0, (N - bucket_size) / leak_rate)``
    seconds, plus the flat `base_delay`. So the first ``bucket_size + 1``
    calls are sent at once, then the next ones are spaced by
    ``1 / leak_rate`` seconds.

    The counter is never reset: the bucket is considered refilled only
    between two runs of the program.

    Attributes:
        bucket_size (int): number of calls allowed in a burst.
        leak_rate (float): calls per second allowed after the burst.
        base_delay (float): extra delay applied to every call, in seconds.
    """

    def __init__(self, bucket_size=DEFAULT_BUCKET_SIZE,
                 leak_rate=DEFAULT_LEAK_RATE, base_delay=0):
        if bucket_size < 0:
            raise ValueError('bucket_size must be positive: %s' % bucket_size)
        if leak_rate <= 0:
            raise ValueError('leak_rate must be strictly positive: %s'
                             % leak_rate)
        if base_delay < 0:
            raise ValueError('base_delay must be positive: %s' % base_delay)

        self.bucket_size = bucket_size
        self.leak_rate = float(leak_rate)
        self.base_delay = base_delay

        # Events can be admitted from the watcher thread and from the
        # dispatch worker (retries): increment and read must be atomic.
        self._lock = threading.Lock()
        self._admitted = 0

    def __repr__(self):
        return '<RateLimiter bucket=%s leak=%s/s admitted=%s>' % (
            self.bucket_size, self.leak_rate, self.admitted)

    @property
    def admitted(self):
        """Number of calls admitted since the creation."""
        with self._lock:
            return self._admitted

    def delay_for(self, position):
        """Compute the delay of the call at a given position.

        Args:
            position (int): 0-based sequence position.
        Returns:
            float: delay, in seconds.
        """
        overflow = max(0, position - self.bucket_size)
        return overflow / self.leak_rate + self.base_delay

    def admit_slot(self):
        """Admit a new call, and returns its position and delay.

        Returns:
            Tuple[int, float]: 0-based position, and delay in seconds.
        """
        with self._lock:
            position = self._admitted
            self._admitted += 1
        return position, self.delay_for(position)

    def admit(self):
        """Admit a new call.

        Returns:
            float: delay before the call may be sent, in seconds.
        """
        return self.admit_slot()[1]
