from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping
from jsm_portal.domain.ticket import AttachmentDescriptor
from jsm_portal.shared.normalization import normalize_int_or_none, normalize_str_or_none


logger = logging.getLogger(__name__)

class BodyParseError(ValueError):
    """Raised when an incoming request body is not a valid ticket submission."""

@dataclass(frozen=True)
class TicketRequest:
    service_desk_id: int
    request_type_id: int
    request_field_values: Mapping[str, Any] = field(default_factory=dict)
    attachments: list[AttachmentDescriptor] = field(default_factory=list)

def decode_body(body: str | bytes | None) -> dict[str, Any]:
    """Decode a raw JSON request body into a dict.

        Raises:
            BodyParseError: if the body is empty, not JSON, or not a JSON object.
        """

    if body is None or (isinstance(body, (str, bytes)) and not body.strip()):
        raise BodyParseError("Request body is empty")

    try:
        data = json.loads(body)
    except ValueError as exc:
        msg = f"Request body is not valid JSON: {exc}"
        logger.error(msg)
        raise BodyParseError(msg) from exc

    if not isinstance(data, dict):
        raise BodyParseError(f"Request body must be a JSON object, got {type(data).__name__}")
    return data

def parse_ticket_request(data: Mapping[str, Any]) -> TicketRequest:
    """Validate a decoded body and build a `TicketRequest`.

        Raises:
            BodyParseError: on missing identifiers or wrongly typed sections.
        """

    service_desk_id = normalize_int_or_none(data.get("serviceDeskId"))
    if service_desk_id is None:
        raise BodyParseError("serviceDeskId must be a positive integer")

    request_type_id = normalize_int_or_none(data.get("requestTypeId"))
    if request_type_id is None:
        raise BodyParseError("requestTypeId must be a positive integer")

    field_values = data.get("requestFieldValues")
    if field_values is None:
        field_values = {}
    if not isinstance(field_values, dict):
        raise BodyParseError("requestFieldValues must be an object")

    attachments_raw = data.get("attachments")
    if attachments_raw is None:
        attachments_raw = []
    if not isinstance(attachments_raw, list):
        raise BodyParseError("attachments must be a list")

    attachments = [_parse_attachment(index, item) for index, item in enumerate(attachments_raw)]

    return TicketRequest(
        service_desk_id=service_desk_id,
        request_type_id=request_type_id,
        request_field_values=field_values,
        attachments=attachments,
    )

def _parse_attachment(index: int, item: Any) -> AttachmentDescriptor:
    if not isinstance(item, dict):
        raise BodyParseError(f"attachments[{index}] must be an object")

    file_name = normalize_str_or_none(item.get("fileName"))
    if file_name is None:
        raise BodyParseError(f"attachments[{index}].fileName is required")

    file_data = item.get("fileData")
    if not isinstance(file_data, str) or not file_data:
        raise BodyParseError(f"attachments[{index}].fileData must be a non-empty base64 string")

    return AttachmentDescriptor(
        file_name=file_name,
        file_data=file_data,
        content_type=normalize_str_or_none(item.get("contentType")) or "application/octet-stream",
        size=normalize_int_or_none(item.get("size"), allow_zero=True),
    )
