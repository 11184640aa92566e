"""HTTP client for the registration backend."""
import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from src.utils.exceptions import RecordNotFoundError, SubmissionError

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


def serialize_payload(payload: Dict[str, Any]) -> bytes:
    """
    Encode a record for the request body.

    Key order follows the record, so an unmodified record always produces
    the same bytes.
    """
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")


class RegistrationApi:
    """
    Fetches and submits team registrations.

    Both calls are single-shot: no retries, any failure is raised to the
    caller as RecordNotFoundError / SubmissionError.
    """

    def __init__(self, base_url: str, timeout: float = 15.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, *parts: str) -> str:
        return "/".join([self.base_url, *parts])

    def fetch_by_secret(self, secret: str) -> Dict[str, Any]:
        """
        Load the record behind a secret edit link.

        Args:
            secret: Opaque token from the edit URL

        Returns:
            Record as decoded JSON

        Raises:
            RecordNotFoundError: On transport failure, any non-2xx status or a
                body that isn't a JSON object
        """
        if not secret:
            raise RecordNotFoundError("Empty secret")

        url = self._url("team", "edit", quote(secret, safe=""))
        logger.debug(f'API: Sending GET to endpoint "{url}"')

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f'API: GET to endpoint "{url}" failed: {e}')
            raise RecordNotFoundError(f"Could not fetch record: {e}") from e

        if not response.ok:
            logger.error(
                f'API: GET to endpoint "{url}" returned status code {response.status_code} response: {response.text}'
            )
            raise RecordNotFoundError(f"Record lookup returned {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f'API: GET to endpoint "{url}" returned a non-JSON body')
            raise RecordNotFoundError("Record lookup returned invalid JSON") from e

        if not isinstance(data, dict):
            raise RecordNotFoundError("Record lookup returned unexpected JSON")
        return data

    def submit(self, secret: Optional[str], payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Send the whole record.

        Args:
            secret: Edit token, or None for a new registration
            payload: Record with attachments already encoded

        Returns:
            Decoded response body ({} if the body isn't JSON)

        Raises:
            SubmissionError: On transport failure or any non-2xx status
        """
        if secret:
            url = self._url("team", "update", quote(secret, safe=""))
        else:
            url = self._url("team", "register")
        body = serialize_payload(payload)
        logger.debug(f'API: Sending POST to endpoint "{url}" with {len(body)} bytes')

        try:
            response = self.session.post(url, data=body, headers=JSON_HEADERS, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f'API: POST to endpoint "{url}" failed: {e}')
            raise SubmissionError(f"Could not submit registration: {e}") from e

        if not response.ok:
            logger.error(
                f'API: POST to endpoint "{url}" returned status code {response.status_code} response: {response.text}'
            )
            raise SubmissionError(f"Submission returned {response.status_code}")

        try:
            return response.json()
        except ValueError:
            return {}
