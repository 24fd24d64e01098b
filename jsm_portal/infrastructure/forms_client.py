from __future__ import annotations
import logging
from typing import Any
import requests
from requests import RequestException
from requests.auth import HTTPBasicAuth
from jsm_portal.application.jsm_errors import FormsAPIError
from jsm_portal.config import JSMConfig


logger = logging.getLogger(__name__)

class FormsClient:
    """Read-only client for the Atlassian Forms (ProForma) cloud API.

        The forms API is addressed by cloud id rather than by site URL, so
        ``JIRA_CLOUD_ID`` must be configured.
        """

    def __init__(self, config: JSMConfig) -> None:
        if not config.cloud_id:
            raise FormsAPIError("JIRA_CLOUD_ID must be configured to call the Forms API")

        self._config = config
        self._session = requests.Session()
        self._auth = HTTPBasicAuth(config.email, config.api_token)

    def get_request_type_form(self, service_desk_id: int, request_type_id: int) -> dict[str, Any]:
        """Fetch the ProForma form template attached to a request type."""

        url = (
            f"{self._config.forms_base_url.rstrip('/')}/{self._config.cloud_id}"
            f"/servicedesk/{service_desk_id}/requesttype/{request_type_id}/form"
        )
        logger.debug("Fetching ProForma form from %s", url)

        try:
            response = self._session.get(
                url,
                auth=self._auth,
                headers={
                    "Accept": "application/json",
                    "X-ExperimentalApi": "opt-in",
                },
                timeout=self._config.timeout_seconds,
            )
        except RequestException as exc:
            msg = f"Error calling Forms API: {exc}"
            logger.error(msg)
            raise FormsAPIError(msg) from exc

        try:
            body: Any = response.json()
        except ValueError:
            body = response.text

        if not response.ok:
            msg = f"Forms API returned {response.status_code} for request type {request_type_id}"
            logger.error("%s: %s", msg, body)
            raise FormsAPIError(msg, status_code=response.status_code, body=body)

        if not isinstance(body, dict):
            msg = "Failed to parse Forms API response as a JSON object"
            logger.error(msg)
            raise FormsAPIError(msg, status_code=response.status_code, body=body)

        return body
