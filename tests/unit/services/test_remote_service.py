"""Unit tests for the registration backend client."""
import json
import pytest
import requests
from unittest.mock import MagicMock
from src.services.remote_service import RegistrationApi, serialize_payload
from src.utils.exceptions import RecordNotFoundError, SubmissionError


def _response(status_code=200, body=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def session():
    """Mocked requests.Session."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def api(session):
    """Client pointed at a fake backend."""
    return RegistrationApi("https://api.example.com/users/", timeout=5, session=session)


class TestFetchBySecret:
    """Test loading a record by secret."""

    def test_success(self, api, session):
        """JSON object is returned as-is."""
        session.get.return_value = _response(body={"teamName": "Hackers"})

        assert api.fetch_by_secret("abc123") == {"teamName": "Hackers"}
        session.get.assert_called_once_with("https://api.example.com/users/team/edit/abc123", timeout=5)

    def test_secret_is_url_quoted(self, api, session):
        """Slashes in the secret can't change the path."""
        session.get.return_value = _response(body={})
        api.fetch_by_secret("a/b")
        assert session.get.call_args[0][0].endswith("/team/edit/a%2Fb")

    @pytest.mark.parametrize("status_code", [400, 404, 500])
    def test_any_error_status_is_not_found(self, api, session, status_code):
        """Status code doesn't matter, every failure is not-found."""
        session.get.return_value = _response(status_code, text="nope")
        with pytest.raises(RecordNotFoundError):
            api.fetch_by_secret("abc123")

    def test_transport_failure(self, api, session):
        """Connection errors are not-found."""
        session.get.side_effect = requests.ConnectionError("down")
        with pytest.raises(RecordNotFoundError):
            api.fetch_by_secret("abc123")

    def test_non_json_body(self, api, session):
        """Undecodable body is not-found."""
        session.get.return_value = _response(body=ValueError("no json"))
        with pytest.raises(RecordNotFoundError):
            api.fetch_by_secret("abc123")

    def test_non_object_body(self, api, session):
        """A JSON list isn't a record."""
        session.get.return_value = _response(body=[1, 2])
        with pytest.raises(RecordNotFoundError):
            api.fetch_by_secret("abc123")

    def test_empty_secret(self, api, session):
        """No request is made without a secret."""
        with pytest.raises(RecordNotFoundError):
            api.fetch_by_secret("")
        session.get.assert_not_called()


class TestSubmit:
    """Test submitting a record."""

    def test_update_posts_whole_record(self, api, session):
        """Edit flow posts JSON to the update endpoint."""
        session.post.return_value = _response(body={"ok": True})
        payload = {"teamName": "駭客", "teamMembers": []}

        assert api.submit("abc123", payload) == {"ok": True}

        args, kwargs = session.post.call_args
        assert args[0] == "https://api.example.com/users/team/update/abc123"
        assert json.loads(kwargs["data"].decode("utf-8")) == payload
        assert kwargs["headers"]["Content-Type"] == "application/json"
        assert kwargs["timeout"] == 5

    def test_create_posts_to_register(self, api, session):
        """No secret means a new registration."""
        session.post.return_value = _response(body={})
        api.submit(None, {"teamName": "Hackers"})
        assert session.post.call_args[0][0] == "https://api.example.com/users/team/register"

    def test_error_status(self, api, session):
        """Non-2xx raises SubmissionError."""
        session.post.return_value = _response(422, text="bad")
        with pytest.raises(SubmissionError):
            api.submit("abc123", {})

    def test_transport_failure(self, api, session):
        """Timeouts raise SubmissionError."""
        session.post.side_effect = requests.Timeout("slow")
        with pytest.raises(SubmissionError):
            api.submit("abc123", {})

    def test_non_json_success_body(self, api, session):
        """Empty success body is fine."""
        session.post.return_value = _response(body=ValueError("empty"))
        assert api.submit("abc123", {}) == {}


class TestSerializePayload:
    """Test request body encoding."""

    def test_keeps_unicode(self):
        """Chinese text isn't escaped."""
        assert serialize_payload({"gender": "男"}) == '{"gender": "男"}'.encode("utf-8")

    def test_same_record_same_bytes(self):
        """Serialization is deterministic."""
        record = {"teamName": "Hackers", "teamMembers": [{"name": "Amy"}]}
        assert serialize_payload(record) == serialize_payload(json.loads(serialize_payload(record)))
