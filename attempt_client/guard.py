# attempt_client/guard.py
import threading


class SubmissionGuard:
    """
    Lets exactly one submit call through per client.

    ``try_acquire`` is an atomic check-and-set. The guard is released only
    when the server definitely did not record anything; once the outcome is
    recorded or unknown it stays closed.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._in_flight = False
        self._done = False

    @property
    def in_flight(self):
        return self._in_flight

    @property
    def done(self):
        return self._done

    def try_acquire(self):
        with self._lock:
            if self._in_flight or self._done:
                return False
            self._in_flight = True
            return True

    def complete(self):
        with self._lock:
            self._in_flight = False
            self._done = True

    def release(self):
        with self._lock:
            self._in_flight = False
