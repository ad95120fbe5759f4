# reports/coordinator.py
"""
Last-request-wins ordering of report computations.

Every computation takes a ticket for its session key before it starts; only
the holder of the newest ticket may publish. A slower, older computation
that finishes late is discarded instead of overwriting newer results.

Only the newest ticket per key is kept. Keys are dropped when their session
ends, and the least recently used ones are evicted past ``max_keys``.
"""
import itertools
import logging
import threading
from collections import OrderedDict

logger = logging.getLogger(__name__)

DEFAULT_MAX_KEYS = 10000


def gate_key(request, user_id):
    """Ticket key of a request: its session, or the user when there is none"""
    return request.session.session_key or f"user-{user_id}"


class RequestGate:
    """Process-local ticket counter per session key"""

    def __init__(self, max_keys=DEFAULT_MAX_KEYS):
        self.max_keys = max_keys
        self._lock = threading.Lock()
        self._counter = itertools.count(1)
        self._latest = OrderedDict()

    def __len__(self):
        with self._lock:
            return len(self._latest)

    def __contains__(self, key):
        with self._lock:
            return key in self._latest

    def issue(self, key):
        with self._lock:
            ticket = next(self._counter)
            self._latest[key] = ticket
            self._latest.move_to_end(key)
            while len(self._latest) > self.max_keys:
                evicted, _ = self._latest.popitem(last=False)
                logger.debug(f"Evicted report ticket for {evicted}")
            return ticket

    def is_current(self, key, ticket):
        with self._lock:
            return self._latest.get(key) == ticket

    def publish(self, key, ticket):
        """Return whether ``ticket`` is still the newest for ``key``"""
        with self._lock:
            if self._latest.get(key) != ticket:
                logger.debug(f"Discarding stale report ticket {ticket} for {key}")
                return False
            return True

    def forget(self, *keys):
        with self._lock:
            for key in keys:
                self._latest.pop(key, None)


report_gate = RequestGate()
