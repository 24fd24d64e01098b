from unittest.mock import Mock
import pytest
from requests import HTTPError
from jsm_portal.application.jsm_errors import FormsAPIError
from jsm_portal.config import JSMConfig
from jsm_portal.infrastructure.forms_client import FormsClient


def _config(cloud_id: str | None = "cloud-123") -> JSMConfig:
    return JSMConfig(
        base_url="https://example.atlassian.net",
        email="bot@example.org",
        api_token="dummy-token",
        cloud_id=cloud_id,
        timeout_seconds=5.0,
    )

def _make_client_with_mock_session(status_code: int, payload: object) -> tuple[FormsClient, Mock]:
    client = FormsClient(_config())

    mock_response = Mock()
    mock_response.status_code = status_code
    mock_response.ok = 200 <= status_code < 300
    mock_response.json = Mock(return_value=payload)

    mock_session = Mock()
    mock_session.get = Mock(return_value=mock_response)
    client._session = mock_session                                                  # type: ignore[attr-defined]
    return client, mock_session

def test_get_request_type_form_happy_path() -> None:
    form = {"id": "283175d3", "design": {"questions": {}}}
    client, session = _make_client_with_mock_session(200, form)

    result = client.get_request_type_form(2, 17)

    assert result == form
    url = session.get.call_args.args[0]
    assert url == "https://api.atlassian.com/jira/forms/cloud/cloud-123/servicedesk/2/requesttype/17/form"
    assert session.get.call_args.kwargs["headers"]["X-ExperimentalApi"] == "opt-in"

def test_error_status_is_wrapped_in_forms_api_error() -> None:
    client, _ = _make_client_with_mock_session(404, {"errors": [{"title": "Not found"}]})

    with pytest.raises(FormsAPIError) as exc_info:
        client.get_request_type_form(2, 17)

    assert exc_info.value.status_code == 404
    assert exc_info.value.body == {"errors": [{"title": "Not found"}]}

def test_network_error_is_wrapped_in_forms_api_error() -> None:
    client = FormsClient(_config())
    mock_session = Mock()
    mock_session.get.side_effect = HTTPError("boom")
    client._session = mock_session                                                  # type: ignore[attr-defined]

    with pytest.raises(FormsAPIError):
        client.get_request_type_form(2, 17)

def test_missing_cloud_id_is_rejected() -> None:
    with pytest.raises(FormsAPIError):
        FormsClient(_config(cloud_id=None))
