"""
The last known status of the receiver, shared between the receiver loop that writes it
and the connection that waits on it.
"""
import threading
import time
from collections import namedtuple

from denoncontrol.errors import ConnectionClosedError, ResponseTimeoutError

StatusEntry = namedtuple('StatusEntry', ['value', 'generation'])


class StatusTable:
    """
    Maps each status kind to its last published value and a generation count.

    The generation of a kind is incremented on every publish, so a caller that noted the
    generation before sending a query knows a later generation is the answer, or at least
    newer than the query.

    All state is guarded by a single lock, held only for the duration of each operation.
    """

    def __init__(self):
        self._entries = {}
        self._changed = threading.Condition(threading.Lock())
        self._closed = False
        self.close_reason = None

    def publish(self, kind, value) -> int:
        """
        Replaces the value for kind and wakes all waiters.
        :return: the new generation of kind.
        """
        with self._changed:
            entry = self._entries.get(kind)
            generation = (entry.generation if entry else 0) + 1
            self._entries[kind] = StatusEntry(value, generation)
            self._changed.notify_all()
            return generation

    def snapshot(self, kind):
        """
        :return: the current StatusEntry for kind, or None if nothing has been published.
        """
        with self._changed:
            return self._entries.get(kind)

    def generation(self, kind) -> int:
        """ the current generation of kind. 0 when nothing has been published yet. """
        entry = self.snapshot(kind)
        return entry.generation if entry else 0

    def wait_for_update(self, kind, since_generation, timeout):
        """
        Blocks until kind is published with a generation later than since_generation.
        :param timeout: the maximum time to wait, in seconds.
        :return: the published value.
        :raises ResponseTimeoutError: no update arrived within timeout.
        :raises ConnectionClosedError: the table was closed, either before or during the wait.
        """
        deadline = time.monotonic() + timeout
        with self._changed:
            while True:
                entry = self._entries.get(kind)
                if entry and entry.generation > since_generation:
                    return entry.value
                if self._closed:
                    raise ConnectionClosedError("connection closed while waiting for %s" % kind) \
                        from self.close_reason
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise ResponseTimeoutError("no %s status received within %ss" % (kind, timeout))
                self._changed.wait(remaining)

    @property
    def closed(self) -> bool:
        with self._changed:
            return self._closed

    def close(self, reason=None):
        """
        Marks the table closed. Waiters wake and fail. The first reason given is kept.
        """
        with self._changed:
            if not self._closed:
                self._closed = True
                self.close_reason = reason
            self._changed.notify_all()
