from unittest import TestCase
from unittest.mock import Mock

import requests

from attempt_client.api import AttemptApiClient
from attempt_client.exceptions import (
    AlreadyAttempted,
    AlreadySubmitted,
    RequestRejected,
    SubmitOutcomeUnknown,
    TransportError,
)


def response(status_code, payload=None):
    resp = Mock(status_code=status_code, ok=status_code < 400)
    if payload is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    return resp


class AttemptApiClientTests(TestCase):
    def setUp(self):
        self.session = Mock(headers={})
        self.api = AttemptApiClient("http://testserver/api", token="abc", timeout=5, session=self.session)

    def test_requests_carry_token_and_timeout(self):
        self.session.request.return_value = response(201, {"attempt_id": 7})

        self.assertEqual(self.api.start(3), {"attempt_id": 7})
        self.session.request.assert_called_once_with(
            "POST", "http://testserver/api/exams/3/start/", timeout=5
        )
        self.assertEqual(self.session.headers["Authorization"], "Bearer abc")

    def test_submit_payload(self):
        self.session.request.return_value = response(200, {"status": "Submitted"})
        self.api.submit(7, [{"question_id": 1, "selected_option": 0}], time_taken=61.9, auto_submitted=True)

        kwargs = self.session.request.call_args.kwargs
        self.assertEqual(kwargs["json"], {
            "answers": [{"question_id": 1, "selected_option": 0}],
            "time_taken": 61,
            "auto_submitted": True,
        })

    def test_error_codes_map_to_exceptions(self):
        self.session.request.return_value = response(409, {"error": "dup", "code": "already_attempted"})
        with self.assertRaises(AlreadyAttempted) as ctx:
            self.api.start(3)
        self.assertEqual(ctx.exception.status_code, 409)

        self.session.request.return_value = response(409, {"error": "dup", "code": "already_submitted"})
        with self.assertRaises(AlreadySubmitted):
            self.api.submit(7, [])

    def test_unmapped_error_is_rejected(self):
        self.session.request.return_value = response(500)
        with self.assertRaises(RequestRejected):
            self.api.status(3)

    def test_submit_timeout_has_unknown_outcome(self):
        self.session.request.side_effect = requests.exceptions.Timeout()
        with self.assertRaises(SubmitOutcomeUnknown):
            self.api.submit(7, [])

    def test_other_timeouts_are_transport_errors(self):
        self.session.request.side_effect = requests.exceptions.ConnectionError()
        with self.assertRaises(TransportError) as ctx:
            self.api.summary(7)
        self.assertNotIsInstance(ctx.exception, SubmitOutcomeUnknown)

    def test_broken_response_during_submit_has_unknown_outcome(self):
        self.session.request.side_effect = requests.exceptions.ChunkedEncodingError()
        with self.assertRaises(SubmitOutcomeUnknown):
            self.api.submit(7, [])

    def test_non_json_success_during_submit_has_unknown_outcome(self):
        self.session.request.return_value = response(200)
        with self.assertRaises(SubmitOutcomeUnknown):
            self.api.submit(7, [])

    def test_non_json_success_elsewhere_is_transport_error(self):
        self.session.request.return_value = response(200)
        with self.assertRaises(TransportError):
            self.api.summary(7)
