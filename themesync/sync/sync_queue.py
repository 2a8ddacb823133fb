# -*- coding: utf-8 -*-

import functools
import heapq
import logging
import time

from ..common.signal import Signal
from ..errors import UnsupportedInputError
from ..generic_executor import GenericExecutor, SharedContext
from ..promise import CancelledError, Deferred, Promise
from .operation_executor import SyncResult
from .rate_limiter import RateLimiter
from .retry_policy import RetryPolicy

_logger = logging.getLogger(__name__)


@functools.total_ordering
class DispatchSlot(object):
    """An admitted event, waiting for its call to be allowed.

    Slots are ordered by due time. At equal due time, the first admitted is
    the first dispatched.

    Attributes:
        position (int): sequence position given by the rate limiter.
        delay (float): delay computed at admission, in seconds.
        due_time (float): clock value from which the call can be sent.
        event (ChangeEvent): the event to sync.
        deferred (Deferred): settled when the event is forwarded.
        attempt (int): number of the attempt, starting at 1.
    """

    def __init__(self, position, delay, due_time, event, deferred,
                 attempt=1):
        self.position = position
        self.delay = delay
        self.due_time = due_time
        self.event = event
        self.deferred = deferred
        self.attempt = attempt

    def __eq__(self, other):
        return (self.due_time, self.position) == (other.due_time,
                                                  other.position)

    def __lt__(self, other):
        return (self.due_time, self.position) < (other.due_time,
                                                 other.position)

    def __repr__(self):
        return '<DispatchSlot #%s +%.1fs %r>' % (self.position, self.delay,
                                                 self.event)


class SyncQueueContext(SharedContext):
    """Context shared between the queue and its dispatch worker.

    Attributes:
        slots (heapq): DispatchSlot not yet dispatched.
        nb_pending (int): number of events admitted, not yet forwarded. It
            includes the slots in `slots`, and the one being dispatched.
        is_closed (bool): set when the queue is stopped. No more event is
            accepted.
    """

    def __init__(self):
        super(SyncQueueContext, self).__init__()
        self.slots = []
        self.nb_pending = 0
        self.is_closed = False


class SyncQueue(object):
    """Rate-limited queue sending the remote operations of file changes.

    Each event given to `enqueue()` is immediately admitted by the rate
    limiter, which gives it a position and a delay. The event is then
    dispatched by a dedicated worker when its delay has elapsed, so the call
    rate never exceeds the quota of the server. Admission never waits for
    the dispatch of the previous events.

    When the remote call of an event is settled (successfully or not), the
    event is forwarded: the `file_forwarded` signal is fired with the event
    and its SyncResult, then the promise returned by `enqueue()` is
    resolved. Each event is forwarded exactly once, after its own call.
    Events are admitted in FIFO order, but nothing guarantees that they are
    forwarded in the same order.

    A failure is local to its event: it never blocks the other events.

    The calls are sent one at a time, by a single worker thread.

    Attributes:
        file_forwarded (Signal): fired with `(event, result)` for each event
            settled.
    """

    def __init__(self, executor, rate_limiter=None, retry_policy=None,
                 clock=time.monotonic):
        """
        Args:
            executor (OperationExecutor): sends the remote calls. Its
                configuration is checked at its creation.
            rate_limiter (RateLimiter, optional): default to the store
                limits (bursts of 40 calls, then 2 calls per second).
            retry_policy (RetryPolicy, optional): default to no retry.
            clock (callable, optional): monotonic clock, in seconds.
        """
        self.file_forwarded = Signal()

        self._executor = executor
        self._rate_limiter = rate_limiter or RateLimiter()
        self._retry_policy = retry_policy or RetryPolicy()
        self._clock = clock
        self._context = SyncQueueContext()
        self._workers = GenericExecutor('dispatch', 1, self._run_worker,
                                        self._context)

    @property
    def rate_limiter(self):
        return self._rate_limiter

    def start(self):
        """Start the dispatch worker."""
        _logger.info('Ready to upload to %s', self._executor.host)
        self._workers.start()

    def stop(self):
        """Stop the dispatch worker.

        The call in progress, if any, is completed first. All events not yet
        dispatched are rejected with a CancelledError, and are not
        forwarded.
        """
        with self._context as ctx:
            ctx.is_closed = True
        self._workers.stop()

        with self._context as ctx:
            slots, ctx.slots = ctx.slots, []
            ctx.nb_pending -= len(slots)
            ctx.condition.notify_all()

        if slots:
            _logger.warning('%s operations cancelled before being sent.',
                            len(slots))
        for slot in slots:
            slot.deferred.reject(CancelledError(
                'Sync queue stopped before sending %s' % slot.event.path))

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, _type, _value, _tb):
        self.stop()

    def enqueue(self, event):
        """Admit a change event, and schedule its remote operation.

        Args:
            event (ChangeEvent): file change to sync.
        Returns:
            Promise<SyncResult>: resolved when the event has been forwarded.
                It's rejected with an UnsupportedInputError if the event
                contains a stream (such an event is never forwarded), or with
                a CancelledError if the queue is stopped before the dispatch.
        """
        if event.is_stream:
            error = UnsupportedInputError(event.path)
            _logger.error('Error, %s', error)
            return Promise.reject(error)

        # The slot must be pushed before `stop()` can drain the heap.
        with self._context as ctx:
            if ctx.is_closed:
                return Promise.reject(CancelledError(
                    'Sync queue is stopped: %s not sent' % event.path))

            deferred = Deferred(_name='SYNC %s' % event.path)
            self._admit(event, deferred)
        return deferred.promise

    def _admit(self, event, deferred, attempt=1, min_delay=0):
        """Reserve a position in the rate limiter, and push the slot."""
        position, delay = self._rate_limiter.admit_slot()
        delay = max(delay, min_delay)
        slot = DispatchSlot(position, delay, self._clock() + delay, event,
                            deferred, attempt)

        with self._context as ctx:
            heapq.heappush(ctx.slots, slot)
            if attempt == 1:
                ctx.nb_pending += 1
            ctx.condition.notify_all()

        _logger.debug('Admit %r at position %s, dispatched in %.1fs', event,
                      position, delay)

    def join(self, timeout=None):
        """Wait until all admitted events are forwarded (or cancelled).

        Args:
            timeout (float, optional): maximum time to wait, in seconds.
        Returns:
            bool: True if the queue is empty; False if the timeout expired.
        """
        deadline = None if timeout is None else self._clock() + timeout
        with self._context as ctx:
            while ctx.nb_pending > 0:
                if deadline is None:
                    ctx.condition.wait()
                else:
                    remaining = deadline - self._clock()
                    if remaining <= 0:
                        return False
                    ctx.condition.wait(remaining)
        return True

    @property
    def nb_pending(self):
        with self._context as ctx:
            return ctx.nb_pending

    def _run_worker(self, context):
        """Main loop of the dispatch worker.

        Wait for the first slot to be due, then send its call.
        """
        while True:
            with context:
                if context.stop_order:
                    return
                if not context.slots:
                    context.condition.wait()
                    continue

                wait_time = context.slots[0].due_time - self._clock()
                if wait_time > 0:
                    context.condition.wait(wait_time)
                    continue
                slot = heapq.heappop(context.slots)

            self._dispatch(slot)

    def _dispatch(self, slot):
        event = slot.event
        try:
            result = self._executor.execute(event, attempt=slot.attempt)
        except Exception as error:
            _logger.exception('Unexpected error when sending %r', event)
            result = SyncResult(event, None, event.kind,
                                SyncResult.UNKNOWN_ERROR, error, slot.attempt)

        if self._retry_policy.should_retry(result):
            backoff = self._retry_policy.backoff_for(result)
            _logger.warning('Retry %s (attempt %s/%s) in at least %.1fs',
                            event.path, slot.attempt + 1,
                            self._retry_policy.max_attempts, backoff)
            self._admit(event, slot.deferred, slot.attempt + 1, backoff)
            return

        self._forward(slot, result)

    def _forward(self, slot, result):
        self.file_forwarded.fire(slot.event, result)
        slot.deferred.resolve(result)

        with self._context as ctx:
            ctx.nb_pending -= 1
            ctx.condition.notify_all()
