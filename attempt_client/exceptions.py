# attempt_client/exceptions.py


class AttemptClientError(Exception):
    code = "client_error"

    def __init__(self, message="", status_code=None, payload=None):
        super().__init__(message or self.__class__.__name__)
        self.status_code = status_code
        self.payload = payload or {}


class RequestRejected(AttemptClientError):
    """The server answered with an error that nothing below maps to."""
    code = "rejected"


class TransportError(AttemptClientError):
    """No usable response (timeout, refused connection)."""
    code = "transport"


class SubmitOutcomeUnknown(TransportError):
    """
    The submit request left but no answer came back. It may or may not have
    been recorded; poll the summary instead of sending it again.
    """
    code = "outcome_unknown"


class TestUnavailable(AttemptClientError):
    code = "test_unavailable"
    __test__ = False


class NotEnrolled(AttemptClientError):
    code = "not_enrolled"


class AlreadyAttempted(AttemptClientError):
    code = "already_attempted"


class InvalidTestConfiguration(AttemptClientError):
    code = "invalid_test_configuration"


class NotStarted(AttemptClientError):
    code = "not_started"


class AlreadySubmitted(AttemptClientError):
    code = "already_submitted"


class AttemptNotSubmitted(AttemptClientError):
    code = "not_submitted"


ERRORS_BY_CODE = {
    cls.code: cls
    for cls in (
        TestUnavailable,
        NotEnrolled,
        AlreadyAttempted,
        InvalidTestConfiguration,
        NotStarted,
        AlreadySubmitted,
        AttemptNotSubmitted,
    )
}


def error_for(status_code, payload):
    payload = payload if isinstance(payload, dict) else {}
    cls = ERRORS_BY_CODE.get(payload.get("code"), RequestRejected)
    message = payload.get("error") or payload.get("detail") or f"HTTP {status_code}"
    return cls(str(message), status_code=status_code, payload=payload)
