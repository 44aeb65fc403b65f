# attempt_client/proctoring.py
import logging
import threading

logger = logging.getLogger(__name__)

DEFAULT_FOCUS_LOSS_LIMIT = 3


class ProctoringMonitor:
    """
    Counts focus losses during an attempt.

    Below the limit each loss produces a warning with the remaining
    allowance; reaching it forces a submission once and turns the monitor
    off. Any submission, forced or not, should call ``disable``.
    """

    def __init__(self, on_force_submit, on_warning=None, threshold=DEFAULT_FOCUS_LOSS_LIMIT):
        if threshold < 1:
            raise ValueError("threshold must be at least 1")
        self.threshold = threshold
        self.warning_count = 0
        self._on_force_submit = on_force_submit
        self._on_warning = on_warning
        self._active = True
        self._lock = threading.Lock()

    @property
    def active(self):
        return self._active

    @property
    def remaining_allowance(self):
        return max(0, self.threshold - self.warning_count)

    def disable(self):
        with self._lock:
            self._active = False

    def focus_lost(self):
        """Record one loss of focus. Returns True if it forced a submission."""
        with self._lock:
            if not self._active:
                return False
            self.warning_count += 1
            count = self.warning_count
            force = count >= self.threshold
            if force:
                self._active = False

        if force:
            logger.warning(f"Focus lost {count} times; forcing submission")
            self._on_force_submit()
            return True

        logger.info(f"Focus lost ({count}/{self.threshold})")
        if self._on_warning:
            self._on_warning(count, self.threshold - count)
        return False
