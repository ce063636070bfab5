"""
frontier.py - Shared Work Queue with Quiescence Detection

Holds the pending (url, depth) work items and an `outstanding` counter of
items that are queued or still being processed by a worker. The crawl is
over only when that counter drops to zero: an empty queue on its own
means nothing, since a worker mid-fetch may be about to push more links.

Key role: the single place where workers block, wake and learn to stop
"""

from collections import deque, namedtuple
from threading import Condition

from utils import get_logger


WorkItem = namedtuple("WorkItem", ["url", "depth"])


class Frontier(object):
    """
    Thread-safe FIFO of WorkItems.

    Protocol, per item: push() once, pop() once by exactly one worker,
    mark_done() once after processing, whatever the outcome. pop()
    returns None (the stop signal) once the run is quiescent or cancelled.
    """

    def __init__(self):
        self.logger = get_logger("FRONTIER")
        self._cond = Condition()
        self._queue = deque()
        self._outstanding = 0
        self._cancelled = False

        # Lifetime counters, read by tests and the run summary
        self.pushed = 0
        self.completed = 0
        self.max_depth_seen = 0

    def push(self, item):
        """Append `item` to the tail and wake one waiting worker."""
        with self._cond:
            self._queue.append(item)
            self._outstanding += 1
            self.pushed += 1
            if item.depth > self.max_depth_seen:
                self.max_depth_seen = item.depth
            self._cond.notify()

    def pop(self):
        """
        Claim the next item, blocking while the queue is empty but work
        is still in flight.

        Returns:
            WorkItem, or None once the frontier is quiescent or cancelled
        """
        with self._cond:
            while True:
                if self._cancelled:
                    return None
                if self._queue:
                    return self._queue.popleft()
                if self._outstanding == 0:
                    return None
                self._cond.wait()

    def mark_done(self):
        """
        Record that a popped item has been fully processed.

        Raises:
            RuntimeError: if there is no outstanding item to complete
        """
        with self._cond:
            if self._outstanding <= 0:
                raise RuntimeError("mark_done() called with no outstanding work")
            self._outstanding -= 1
            self.completed += 1
            if self._outstanding == 0:
                self.logger.info(
                    f"Frontier quiescent after {self.completed} items.")
                self._cond.notify_all()

    def cancel(self):
        """Make every current and future pop() return None immediately."""
        with self._cond:
            if not self._cancelled:
                self._cancelled = True
                self.logger.warning(
                    f"Frontier cancelled with {len(self._queue)} queued and "
                    f"{self._outstanding} outstanding items.")
            self._cond.notify_all()

    def wait_quiescent(self, timeout=None):
        """
        Block until no work remains anywhere or the run is cancelled.

        Returns:
            True if the frontier drained, False on cancellation or timeout
        """
        with self._cond:
            self._cond.wait_for(
                lambda: self._outstanding == 0 or self._cancelled, timeout)
            return self._outstanding == 0 and not self._cancelled

    @property
    def outstanding(self):
        with self._cond:
            return self._outstanding

    @property
    def cancelled(self):
        with self._cond:
            return self._cancelled

    def __len__(self):
        with self._cond:
            return len(self._queue)
