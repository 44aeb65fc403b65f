# attempt_client/timer.py
"""
Countdown for an open attempt.

The remaining time is always recomputed from the authoritative start
timestamp, so a reload, a reconnect or a slow tick never makes the clock
drift or reset.
"""
import logging
import threading
from datetime import datetime, timedelta, timezone

logger = logging.getLogger(__name__)


def utcnow():
    return datetime.now(timezone.utc)


def parse_timestamp(value):
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def remaining_seconds(start_time, duration_seconds, now):
    """Seconds left at ``now``; zero or negative once the deadline passed."""
    elapsed = int((now - start_time).total_seconds())
    return int(duration_seconds) - elapsed


def clock_skew(server_time, local_now):
    """Offset to add to the local clock to read server time."""
    return parse_timestamp(server_time) - local_now


class DeadlineTimer:
    def __init__(self, start_time, duration_seconds, on_expire, on_tick=None,
                 clock=utcnow, skew=timedelta(0), interval=1.0):
        self.start_time = parse_timestamp(start_time)
        self.duration_seconds = int(duration_seconds)
        self._on_expire = on_expire
        self._on_tick = on_tick
        self._clock = clock
        self._skew = skew
        self._interval = interval

        self._lock = threading.Lock()
        self._timer = None
        self._stopped = False
        self._fired = False

    def now(self):
        return self._clock() + self._skew

    def remaining(self):
        return max(0, remaining_seconds(self.start_time, self.duration_seconds, self.now()))

    @property
    def expired(self):
        return self._fired

    @property
    def running(self):
        return not self._stopped

    def start(self, schedule=True):
        """
        Establish the countdown. Returns False when the deadline has already
        passed, in which case the expiry callback has run before returning.
        """
        if self.remaining() <= 0:
            logger.info("Deadline already passed at start; forcing submission")
            self._expire()
            return False
        if schedule:
            self._schedule()
        return True

    def tick(self):
        if self._stopped:
            return 0
        remaining = self.remaining()
        if self._on_tick:
            self._on_tick(remaining)
        if remaining <= 0:
            self._expire()
        return remaining

    def stop(self):
        with self._lock:
            self._stopped = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _run(self):
        if self.tick() > 0:
            self._schedule()

    def _schedule(self):
        with self._lock:
            if self._stopped:
                return
            self._timer = threading.Timer(self._interval, self._run)
            self._timer.daemon = True
            self._timer.start()

    def _expire(self):
        with self._lock:
            if self._fired:
                return
            self._fired = True
            self._stopped = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        self._on_expire()
