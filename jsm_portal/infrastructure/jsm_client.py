from __future__ import annotations
import base64
import binascii
import logging
from typing import Any
import requests
from requests import RequestException, Timeout
from requests.auth import HTTPBasicAuth
from jsm_portal.application.jsm_errors import (
    AttachmentUploadError,
    JSMAPIError,
    TicketCreationError,
)
from jsm_portal.config import JSMConfig
from jsm_portal.domain.ticket import AttachmentDescriptor


logger = logging.getLogger(__name__)

class JSMClient:
    """HTTP client for the Jira Service Management REST API (``/rest/servicedeskapi``).

        Uses Basic authentication built from the configured email/API token pair
        and a bounded timeout on every call. Failed calls are never retried:
        network errors and non-2xx responses surface immediately as `JSMAPIError`
        subclasses carrying the upstream status and body.
        """

    def __init__(self, config: JSMConfig) -> None:
        self._config = config
        self._session = requests.Session()
        self._auth = HTTPBasicAuth(config.email, config.api_token)

    def _url(self, path: str) -> str:
        return f"{self._config.base_url}/rest/servicedeskapi/{path.lstrip('/')}"

    def _send(
        self,
        method: str,
        url: str,
        error_cls: type[JSMAPIError],
        **kwargs: Any,
    ) -> requests.Response:
        try:
            return self._session.request(
                method,
                url,
                auth=self._auth,
                timeout=self._config.timeout_seconds,
                **kwargs,
            )
        except Timeout as exc:
            msg = (
                f"JSM call {method} {url} timed out after "
                f"{self._config.timeout_seconds:.0f}s (transient failure): {exc}"
            )
            logger.error(msg)
            raise error_cls(msg) from exc
        except RequestException as exc:
            msg = f"Error calling JSM endpoint {method} {url}: {exc}"
            logger.error(msg)
            raise error_cls(msg) from exc

    def upload_temporary_attachment(
        self,
        service_desk_id: int,
        attachment: AttachmentDescriptor,
    ) -> list[str]:
        """Upload one file and return the temporary attachment ids JSM assigned to it.

            Raises:
                AttachmentUploadError: if the payload is not valid base64 or the
                    upload endpoint answers with a non-2xx status.
            """

        try:
            file_bytes = base64.b64decode(attachment.file_data)
        except (binascii.Error, ValueError) as exc:
            msg = f"Attachment {attachment.file_name!r} is not valid base64"
            logger.error("%s: %s", msg, exc)
            raise AttachmentUploadError(msg) from exc

        logger.info(
            "Uploading temporary attachment %s (%d bytes, %s)",
            attachment.file_name,
            len(file_bytes),
            attachment.content_type,
        )

        response = self._send(
            "POST",
            self._url(f"servicedesk/{service_desk_id}/attachTemporaryFile"),
            AttachmentUploadError,
            headers={
                "X-Atlassian-Token": "nocheck",
                "X-ExperimentalApi": "true",
            },
            files={"file": (attachment.file_name, file_bytes, attachment.content_type)},
        )

        body = _read_body(response)
        if not response.ok:
            msg = f"Failed to upload temporary attachment {attachment.file_name!r}: {response.status_code} {body}"
            logger.error(msg)
            raise AttachmentUploadError(msg, status_code=response.status_code, body=body)

        if not isinstance(body, dict):
            msg = f"Unexpected attachment upload response for {attachment.file_name!r}: {body!r}"
            logger.error(msg)
            raise AttachmentUploadError(msg, status_code=response.status_code, body=body)

        ids = [
            str(item["temporaryAttachmentId"])
            for item in body.get("temporaryAttachments") or []
            if isinstance(item, dict) and item.get("temporaryAttachmentId")
        ]
        logger.info("Uploaded temporary attachment %s, ids=%s", attachment.file_name, ids)
        return ids

    def create_request(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Create a customer request and return the parsed JSM response.

            Raises:
                TicketCreationError: on non-2xx responses or a non-JSON success body.
            """

        response = self._send(
            "POST",
            self._url("request"),
            TicketCreationError,
            headers={"Accept": "application/json"},
            json=payload,
        )

        body = _read_body(response)
        if not response.ok:
            msg = f"Error from JSM: {response.status_code} {response.reason}"
            if response.status_code == 401:
                logger.error(
                    "JSM rejected the credentials; the API token may be expired or invalid"
                )
                msg += " - authentication failed, check the API email and token"
            logger.error("%s: %s", msg, body)
            raise TicketCreationError(msg, status_code=response.status_code, body=body)

        if not isinstance(body, dict):
            msg = f"Failed to parse JSM response: {body!r}"
            logger.error(msg)
            raise TicketCreationError(msg, status_code=response.status_code, body=body)

        logger.info("JSM request created: %s", body.get("issueKey"))
        return body

    def get_request_type(self, service_desk_id: int, request_type_id: int) -> dict[str, Any]:
        return self._get_json(f"servicedesk/{service_desk_id}/requesttype/{request_type_id}")

    def get_request_type_fields(self, service_desk_id: int, request_type_id: int) -> dict[str, Any]:
        return self._get_json(f"servicedesk/{service_desk_id}/requesttype/{request_type_id}/field")

    def list_request_types(self, service_desk_id: int) -> dict[str, Any]:
        return self._get_json(f"servicedesk/{service_desk_id}/requesttype")

    def _get_json(self, path: str) -> dict[str, Any]:
        url = self._url(path)
        response = self._send("GET", url, JSMAPIError, headers={"Accept": "application/json"})

        body = _read_body(response)
        if not response.ok:
            msg = f"JSM GET {path} failed: {response.status_code} {response.reason}"
            logger.error("%s: %s", msg, body)
            raise JSMAPIError(msg, status_code=response.status_code, body=body)

        if not isinstance(body, dict):
            msg = f"Unexpected JSM response for GET {path}: {type(body).__name__}"
            logger.error(msg)
            raise JSMAPIError(msg, status_code=response.status_code, body=body)
        return body

def _read_body(response: requests.Response) -> Any:
    """Return the JSON body of a response, or its raw text when it is not JSON."""
    try:
        return response.json()
    except ValueError:
        return response.text
