# assessments/exceptions.py
from rest_framework import status


class AttemptError(Exception):
    """Base class for attempt lifecycle failures surfaced to the caller."""
    code = "attempt_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Attempt request failed."

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class TestUnavailable(AttemptError):
    code = "test_unavailable"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Test not found or inactive."

    # Keep test runners from collecting this as a test case
    __test__ = False


class NotEnrolled(AttemptError):
    code = "not_enrolled"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You must enroll with this teacher to attempt this test."


class AlreadyAttempted(AttemptError):
    code = "already_attempted"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Test already attempted."


class InvalidTestConfiguration(AttemptError):
    code = "invalid_test_configuration"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "This test cannot be scored in its current state."


class NotStarted(AttemptError):
    code = "not_started"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Test not started."


class AlreadySubmitted(AttemptError):
    code = "already_submitted"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Your submission was already recorded."


class AttemptNotSubmitted(AttemptError):
    code = "not_submitted"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Results are available once the attempt is submitted."


class QuestionUnresolvable(Exception):
    """An answer references a question that no longer belongs to the attempt."""

    def __init__(self, question_id):
        super().__init__(f"Question {question_id} cannot be resolved")
        self.question_id = question_id
