"""Client-side runtime for taking a timed, proctored attempt."""
from .api import AttemptApiClient
from .guard import SubmissionGuard
from .proctoring import ProctoringMonitor
from .session import AttemptSession
from .timer import DeadlineTimer, remaining_seconds

__all__ = [
    "AttemptApiClient",
    "AttemptSession",
    "DeadlineTimer",
    "ProctoringMonitor",
    "SubmissionGuard",
    "remaining_seconds",
]
