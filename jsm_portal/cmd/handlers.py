"""HTTP function handlers for the support portal.

Each handler takes a serverless HTTP event (``httpMethod``, ``body``,
``isBase64Encoded``, ``queryStringParameters``) and returns a
``{"statusCode", "headers", "body"}`` dict with a JSON body. Collaborators are
built from environment configuration on every call unless injected.
"""

from __future__ import annotations
import base64
import json
import logging
from typing import Any, Callable, Mapping, Optional
from jsm_portal.application.dto.ticket_request import BodyParseError, decode_body, parse_ticket_request
from jsm_portal.application.field_documentation import build_field_documentation
from jsm_portal.application.form_discovery import discover_form_structure
from jsm_portal.application.jsm_errors import FormsAPIError, JSMAPIError
from jsm_portal.application.ports.jsm_port import FormsPort, RequestTypeCatalogPort
from jsm_portal.application.ticket_submitter import TicketSubmitter
from jsm_portal.cmd.logging_setup import logging_conf
from jsm_portal.config import load_jsm_config, load_submission_config
from jsm_portal.infrastructure.field_mapping_loader import load_field_mapping
from jsm_portal.infrastructure.forms_client import FormsClient
from jsm_portal.infrastructure.jsm_client import JSMClient
from jsm_portal.shared.normalization import normalize_int_or_none


logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}

DEFAULT_SERVICE_DESK_ID = 2
DEFAULT_REQUEST_TYPE_ID = 17

Event = Mapping[str, Any]
Response = dict[str, Any]
DiscoveryClients = tuple[RequestTypeCatalogPort, Optional[FormsPort]]

def build_ticket_submitter() -> TicketSubmitter:
    jsm_config = load_jsm_config()
    submission_config = load_submission_config()

    return TicketSubmitter(
        JSMClient(jsm_config),
        field_mapping=load_field_mapping(submission_config.field_mapping_path),
        attachment_failure_policy=submission_config.attachment_failure_policy,
    )

def build_discovery_clients() -> DiscoveryClients:
    jsm_config = load_jsm_config()
    catalog = JSMClient(jsm_config)

    forms: FormsPort | None
    try:
        forms = FormsClient(jsm_config)
    except FormsAPIError as exc:
        logger.warning("Forms API disabled: %s", exc)
        forms = None
    return catalog, forms

def _response(status_code: int, body: Any = None) -> Response:
    return {
        "statusCode": status_code,
        "headers": dict(CORS_HEADERS),
        "body": "" if body is None else json.dumps(body),
    }

def _is_preflight(event: Event) -> bool:
    return str(event.get("httpMethod") or "").upper() == "OPTIONS"

def _event_body(event: Event) -> str | None:
    body = event.get("body")
    if body and event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body).decode("utf-8")
        except (ValueError, UnicodeDecodeError) as exc:
            raise BodyParseError(f"Request body is not valid base64-encoded UTF-8: {exc}") from exc
    return body

def _query_int(event: Event, name: str, default: int) -> int:
    params = event.get("queryStringParameters") or {}
    raw = params.get(name)
    if raw is None or raw == "":
        return default

    value = normalize_int_or_none(raw)
    if value is None:
        raise BodyParseError(f"Query parameter {name} must be a positive integer, got {raw!r}")
    return value

def create_support_ticket(
    event: Event,
    context: Any = None,
    *,
    submitter: TicketSubmitter | None = None,
) -> Response:
    """Create a JSM request from a portal submission.

        Always answers 200 with the created request or 500 with the cause in
        ``message``; ``jsmResponse`` carries the upstream body on both paths when
        JSM answered.
        """

    logging_conf()
    if _is_preflight(event):
        return _response(204)

    received: Any = {}
    jsm_response: Any = None

    try:
        received = decode_body(_event_body(event))
        logger.info("Received ticket submission for request type %s", received.get("requestTypeId"))
        ticket_request = parse_ticket_request(received)

        if submitter is None:
            submitter = build_ticket_submitter()
        result = submitter.submit(ticket_request)
    except BodyParseError as exc:
        logger.error("Invalid ticket submission: %s", exc)
        message = f"Error: {exc}"
    except JSMAPIError as exc:
        logger.error("JSM submission failed: %s", exc)
        message = f"Error: {exc}"
        jsm_response = exc.body
    except Exception as exc:
        logger.exception("Unexpected error while creating the support ticket")
        message = f"Error: {exc}"
    else:
        jsm_response = result.raw
        message = "Request created successfully"
        if result.failed_attachments:
            message += f" (attachments not uploaded: {', '.join(result.failed_attachments)})"
        return _response(
            200,
            {"message": message, "receivedData": received, "jsmResponse": jsm_response},
        )

    return _response(
        500,
        {"message": message, "receivedData": received, "jsmResponse": jsm_response},
    )

def _discovery_handler(
    event: Event,
    clients: DiscoveryClients | None,
    action: Callable[[int, int, RequestTypeCatalogPort, Optional[FormsPort]], dict[str, Any]],
    failure_message: str,
) -> Response:
    logging_conf()
    if _is_preflight(event):
        return _response(204)

    try:
        service_desk_id = _query_int(event, "serviceDeskId", DEFAULT_SERVICE_DESK_ID)
        request_type_id = _query_int(event, "requestTypeId", DEFAULT_REQUEST_TYPE_ID)

        catalog, forms = clients if clients is not None else build_discovery_clients()
        return _response(200, action(service_desk_id, request_type_id, catalog, forms))
    except Exception as exc:
        logger.exception(failure_message)
        return _response(500, {"message": failure_message, "error": str(exc)})

def get_form_structure(
    event: Event,
    context: Any = None,
    *,
    clients: DiscoveryClients | None = None,
) -> Response:
    return _discovery_handler(event, clients, discover_form_structure, "ProForma discovery failed")

def get_field_documentation(
    event: Event,
    context: Any = None,
    *,
    clients: DiscoveryClients | None = None,
) -> Response:
    return _discovery_handler(
        event,
        clients,
        build_field_documentation,
        "Field documentation generation failed",
    )
