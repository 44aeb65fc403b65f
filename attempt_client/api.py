# attempt_client/api.py
import logging

import requests

from .exceptions import SubmitOutcomeUnknown, TransportError, error_for

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 20


class AttemptApiClient:
    """
    Thin HTTP wrapper around the attempt endpoints.

    Every call carries a bounded timeout. Errors come back as the exceptions
    in ``attempt_client.exceptions``, keyed by the ``code`` the server sends.
    """

    def __init__(self, base_url, token=None, timeout=DEFAULT_TIMEOUT, session=None):
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self.session = session or requests.Session()
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _url(self, path):
        return self.base_url + path.lstrip("/")

    def _request(self, method, path, **kwargs):
        resp = self.session.request(method, self._url(path), timeout=self.timeout, **kwargs)
        if resp.ok:
            try:
                return resp.json()
            except ValueError as exc:
                raise TransportError(
                    f"{method} {path} returned HTTP {resp.status_code} without a JSON body"
                ) from exc

        try:
            payload = resp.json()
        except ValueError:
            payload = {}
        raise error_for(resp.status_code, payload)

    def _call(self, method, path, **kwargs):
        try:
            return self._request(method, path, **kwargs)
        except requests.exceptions.Timeout as exc:
            raise TransportError(f"{method} {path} timed out after {self.timeout}s") from exc
        except requests.exceptions.ConnectionError as exc:
            raise TransportError(f"Could not connect for {method} {path}") from exc
        except requests.exceptions.RequestException as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc

    def start(self, exam_id):
        return self._call("POST", f"exams/{exam_id}/start/")

    def status(self, exam_id):
        return self._call("GET", f"exams/{exam_id}/attempt/")

    def summary(self, attempt_id):
        return self._call("GET", f"attempts/{attempt_id}/")

    def submit(self, attempt_id, answers, time_taken=0, auto_submitted=False):
        payload = {
            "answers": list(answers),
            "time_taken": int(time_taken),
            "auto_submitted": bool(auto_submitted),
        }
        # Anything short of a parsed reply may or may not have been recorded
        try:
            return self._request("POST", f"attempts/{attempt_id}/submit/", json=payload)
        except (requests.exceptions.RequestException, TransportError) as exc:
            logger.error(f"Submit for attempt {attempt_id} has no known outcome: {exc}")
            raise SubmitOutcomeUnknown(
                f"No response while submitting attempt {attempt_id}; check the summary before retrying."
            ) from exc
