# attempt_client/session.py
import logging

from .exceptions import (
    AlreadyAttempted,
    AlreadySubmitted,
    AttemptClientError,
    SubmitOutcomeUnknown,
)
from .guard import SubmissionGuard
from .proctoring import DEFAULT_FOCUS_LOSS_LIMIT, ProctoringMonitor
from .timer import DeadlineTimer, clock_skew, parse_timestamp, utcnow

logger = logging.getLogger(__name__)


class AttemptSession:
    """
    Client side of one attempt: opens (or resumes) it, keeps the answers,
    runs the deadline timer and the proctoring monitor, and sends the single
    submission.

    Forced submissions (deadline or focus loss) run on the timer thread or
    the caller's thread; their errors go to ``on_error`` instead of raising.
    """

    def __init__(self, api, exam_id, clock=utcnow, on_warning=None, on_tick=None,
                 on_submitted=None, on_error=None, interval=1.0):
        self.api = api
        self.exam_id = exam_id
        self._clock = clock
        self._on_warning = on_warning
        self._on_tick = on_tick
        self._on_submitted = on_submitted
        self._on_error = on_error
        self._interval = interval

        self.guard = SubmissionGuard()
        self.attempt_id = None
        self.start_time = None
        self.duration_seconds = None
        self.timer = None
        self.monitor = None
        self.result = None
        self.answers = {}

    # -------------------------------------------------
    # lifecycle
    # -------------------------------------------------
    def open(self, schedule=True):
        try:
            info = self.api.start(self.exam_id)
        except AlreadyAttempted:
            # A reload: pick the attempt back up if it is still open
            info = self.api.status(self.exam_id)
            if info.get("submitted"):
                raise
            logger.info(f"Resuming attempt {info['attempt_id']} for exam {self.exam_id}")

        self.attempt_id = info["attempt_id"]
        self.start_time = parse_timestamp(info["start_time"])
        self.duration_seconds = int(info["duration_seconds"])

        skew = clock_skew(info["server_time"], self._clock()) if info.get("server_time") else None
        self.monitor = ProctoringMonitor(
            on_force_submit=self._force_submit,
            on_warning=self._on_warning,
            threshold=int(info.get("focus_loss_limit") or DEFAULT_FOCUS_LOSS_LIMIT),
        )
        timer_kwargs = {"skew": skew} if skew is not None else {}
        self.timer = DeadlineTimer(
            self.start_time,
            self.duration_seconds,
            on_expire=self._force_submit,
            on_tick=self._on_tick,
            clock=self._clock,
            interval=self._interval,
            **timer_kwargs,
        )
        self.timer.start(schedule=schedule)
        return info

    def answer(self, question_id, selected_option=None, text_answer=None):
        if self.guard.in_flight or self.guard.done:
            logger.info(f"Ignoring answer for question {question_id}: already submitting")
            return False
        entry = {"question_id": question_id}
        if selected_option is not None:
            entry["selected_option"] = selected_option
        else:
            entry["text_answer"] = text_answer
        self.answers[question_id] = entry
        return True

    def focus_lost(self):
        if self.monitor is None:
            return False
        return self.monitor.focus_lost()

    def remaining(self):
        return self.timer.remaining() if self.timer else 0

    def time_taken(self):
        if self.timer is None:
            return 0
        return max(0, self.duration_seconds - self.timer.remaining())

    # -------------------------------------------------
    # submission
    # -------------------------------------------------
    def submit(self, auto_submitted=False):
        """
        Send the answers once. A second call (or a forced submission racing
        a manual one) returns the first call's result without a request.

        The guard always leaves the in-flight state: it closes for good once
        the outcome is recorded or unknown, and reopens when nothing was sent
        or the server rejected the request outright.
        """
        if not self.guard.try_acquire():
            logger.info("Submission already in flight or done; skipping")
            return self.result

        if self.monitor is not None:
            self.monitor.disable()
        if self.timer is not None:
            self.timer.stop()

        try:
            result = self._send(auto_submitted)
        except SubmitOutcomeUnknown:
            # May have been recorded; it is never sent again
            self.guard.complete()
            raise
        except Exception:
            self.guard.release()
            raise

        self.guard.complete()
        self.result = result
        if self._on_submitted:
            self._on_submitted(result)
        return result

    def _send(self, auto_submitted):
        try:
            return self.api.submit(
                self.attempt_id,
                list(self.answers.values()),
                time_taken=self.time_taken(),
                auto_submitted=auto_submitted,
            )
        except AlreadySubmitted:
            logger.info(f"Attempt {self.attempt_id} was already recorded")
            return self.reconcile()
        except SubmitOutcomeUnknown:
            return self.reconcile()

    def reconcile(self):
        """Ask the server whether the submission landed. Never resubmits."""
        try:
            return self._recorded_result()
        except AttemptClientError as exc:
            raise SubmitOutcomeUnknown(
                f"Submission for attempt {self.attempt_id} is not confirmed; contact your instructor."
            ) from exc

    def _recorded_result(self):
        summary = self.api.summary(self.attempt_id)
        return {
            "status": "already_submitted",
            "score": summary["score"],
            "total_marks": summary["total_marks"],
            "percentage": summary["percentage"],
        }

    def _force_submit(self):
        try:
            self.submit(auto_submitted=True)
        except Exception as exc:
            # Runs on the timer thread or inside a focus handler; report, do not raise
            logger.exception(f"Forced submission for attempt {self.attempt_id} failed: {exc}")
            if self._on_error:
                self._on_error(exc)
