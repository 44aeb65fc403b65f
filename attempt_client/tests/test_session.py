from datetime import datetime, timedelta, timezone
from unittest import TestCase
from unittest.mock import Mock

import requests

from attempt_client.api import AttemptApiClient

from attempt_client.exceptions import (
    AlreadyAttempted,
    AlreadySubmitted,
    AttemptNotSubmitted,
    NotStarted,
    SubmitOutcomeUnknown,
)
from attempt_client.session import AttemptSession

T0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

OPEN_INFO = {
    "attempt_id": 11,
    "exam_id": 3,
    "start_time": "2026-03-01T09:00:00Z",
    "duration_seconds": 1800,
    "total_marks": 2.0,
    "question_count": 2,
    "server_time": "2026-03-01T09:00:00Z",
    "focus_loss_limit": 3,
}

SUMMARY = {"id": 11, "score": 1.0, "total_marks": 2.0, "percentage": 50.0}


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


class AttemptSessionTests(TestCase):
    def setUp(self):
        self.clock = FakeClock(T0)
        self.api = Mock()
        self.api.start.return_value = dict(OPEN_INFO)
        self.api.submit.return_value = {"status": "Submitted", "score": 2.0, "total_marks": 2.0, "percentage": 100.0}
        self.api.summary.return_value = dict(SUMMARY)
        self.on_submitted = Mock()
        self.on_error = Mock()
        self.session = AttemptSession(
            self.api, 3, clock=self.clock, on_submitted=self.on_submitted, on_error=self.on_error,
        )

    def test_manual_submit_sends_answers_once(self):
        self.session.open(schedule=False)
        self.session.answer(1, selected_option=0)
        self.session.answer(2, text_answer="Paris")
        self.session.answer(1, selected_option=1)
        self.clock.now = T0 + timedelta(minutes=2)

        result = self.session.submit()

        self.assertEqual(result["status"], "Submitted")
        self.api.submit.assert_called_once_with(
            11,
            [{"question_id": 1, "selected_option": 1}, {"question_id": 2, "text_answer": "Paris"}],
            time_taken=120,
            auto_submitted=False,
        )
        self.on_submitted.assert_called_once_with(result)
        self.assertFalse(self.session.monitor.active)
        self.assertFalse(self.session.timer.running)

    def test_second_submit_makes_no_request(self):
        self.session.open(schedule=False)
        first = self.session.submit()
        self.assertIs(self.session.submit(), first)
        self.assertEqual(self.api.submit.call_count, 1)

    def test_answers_are_frozen_once_submitted(self):
        self.session.open(schedule=False)
        self.session.submit()
        self.assertFalse(self.session.answer(1, selected_option=0))

    def test_third_focus_loss_forces_submission(self):
        self.session.open(schedule=False)
        self.session.focus_lost()
        self.session.focus_lost()
        self.api.submit.assert_not_called()

        self.session.focus_lost()
        self.assertTrue(self.api.submit.call_args.kwargs["auto_submitted"])

    def test_deadline_and_focus_loss_race_submits_once(self):
        self.session.open(schedule=False)
        self.session.focus_lost()
        self.session.focus_lost()

        self.clock.now = T0 + timedelta(minutes=31)
        self.session.timer.tick()
        self.session.focus_lost()

        self.assertEqual(self.api.submit.call_count, 1)
        self.assertTrue(self.api.submit.call_args.kwargs["auto_submitted"])

    def test_reopen_after_deadline_submits_immediately(self):
        self.api.start.return_value = dict(OPEN_INFO, server_time="2026-03-01T09:45:00Z")
        self.clock.now = T0 + timedelta(minutes=45)
        self.session.open(schedule=False)

        self.api.submit.assert_called_once()
        self.assertTrue(self.api.submit.call_args.kwargs["auto_submitted"])
        self.assertEqual(self.session.remaining(), 0)

    def test_already_attempted_resumes_open_attempt(self):
        self.api.start.side_effect = AlreadyAttempted("dup", status_code=409)
        self.api.status.return_value = dict(
            OPEN_INFO, server_time="2026-03-01T09:15:00Z", submitted=False, remaining_seconds=900,
        )
        self.clock.now = T0 + timedelta(minutes=15)

        self.session.open(schedule=False)

        self.assertEqual(self.session.attempt_id, 11)
        self.assertEqual(self.session.remaining(), 900)

    def test_already_attempted_and_submitted_is_raised(self):
        self.api.start.side_effect = AlreadyAttempted("dup", status_code=409)
        self.api.status.return_value = dict(OPEN_INFO, submitted=True, remaining_seconds=0)
        with self.assertRaises(AlreadyAttempted):
            self.session.open(schedule=False)

    def test_already_submitted_counts_as_success(self):
        self.api.submit.side_effect = AlreadySubmitted("dup", status_code=409)
        self.session.open(schedule=False)

        result = self.session.submit()

        self.assertEqual(result["status"], "already_submitted")
        self.assertEqual(result["score"], 1.0)
        self.assertTrue(self.session.guard.done)

    def test_unknown_outcome_is_reconciled_not_resubmitted(self):
        self.api.submit.side_effect = SubmitOutcomeUnknown("timeout")
        self.session.open(schedule=False)

        result = self.session.submit()

        self.assertEqual(result["percentage"], 50.0)
        self.assertEqual(self.api.submit.call_count, 1)
        self.api.summary.assert_called_once_with(11)

    def test_unconfirmed_outcome_is_reported(self):
        self.api.submit.side_effect = SubmitOutcomeUnknown("timeout")
        self.api.summary.side_effect = AttemptNotSubmitted("not yet", status_code=409)
        self.session.open(schedule=False)

        with self.assertRaises(SubmitOutcomeUnknown):
            self.session.submit()
        # never retried automatically
        self.assertIsNone(self.session.submit())
        self.assertEqual(self.api.submit.call_count, 1)

    def test_rejected_submit_can_be_retried(self):
        self.api.submit.side_effect = [NotStarted("gone", status_code=404), {"status": "Submitted"}]
        self.session.open(schedule=False)

        with self.assertRaises(NotStarted):
            self.session.submit()
        self.assertEqual(self.session.submit(), {"status": "Submitted"})

    def test_forced_submission_errors_go_to_callback(self):
        error = NotStarted("gone", status_code=404)
        self.api.submit.side_effect = error
        self.session.open(schedule=False)

        self.session.focus_lost()
        self.session.focus_lost()
        self.session.focus_lost()

        self.on_error.assert_called_once_with(error)


def http_response(status_code, payload=None):
    resp = Mock(status_code=status_code, ok=status_code < 400)
    if payload is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    return resp


class SessionOverHttpTests(TestCase):
    """Session wired to the real API wrapper over a stubbed HTTP session."""

    def setUp(self):
        self.clock = FakeClock(T0)
        self.http = Mock(headers={})
        self.on_error = Mock()
        api = AttemptApiClient("http://testserver/api", timeout=5, session=self.http)
        self.session = AttemptSession(api, 3, clock=self.clock, on_error=self.on_error)
        self.http.request.return_value = http_response(201, dict(OPEN_INFO))
        self.session.open(schedule=False)
        self.http.request.reset_mock()

    def test_dropped_connection_during_forced_submit_is_reported(self):
        self.http.request.side_effect = requests.exceptions.ChunkedEncodingError("connection broken")

        self.session.focus_lost()
        self.session.focus_lost()
        self.session.focus_lost()

        self.on_error.assert_called_once()
        self.assertIsInstance(self.on_error.call_args.args[0], SubmitOutcomeUnknown)
        self.assertFalse(self.session.guard.in_flight)
        self.assertTrue(self.session.guard.done)

        # submit, then one summary check; never a second submit
        self.assertIsNone(self.session.submit())
        methods = [c.args[0] for c in self.http.request.call_args_list]
        self.assertEqual(methods, ["POST", "GET"])

    def test_non_json_success_body_is_reconciled_from_summary(self):
        self.http.request.side_effect = [http_response(200), http_response(200, dict(SUMMARY))]

        result = self.session.submit()

        self.assertEqual(result["status"], "already_submitted")
        self.assertEqual(result["percentage"], 50.0)
        self.assertTrue(self.session.guard.done)

    def test_unexpected_error_reopens_guard(self):
        self.http.request.side_effect = [RuntimeError("boom"), http_response(200, {"status": "Submitted"})]

        with self.assertRaises(RuntimeError):
            self.session.submit()
        self.assertFalse(self.session.guard.in_flight)
        self.assertEqual(self.session.submit(), {"status": "Submitted"})
