from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True, slots=True)
class AttachmentDescriptor:
    file_name: str
    file_data: str
    content_type: str = "application/octet-stream"
    size: Optional[int] = None

@dataclass(slots=True)
class TicketSubmission:
    service_desk_id: int
    request_type_id: int
    request_field_values: Dict[str, Any]
    raise_on_behalf_of: Optional[str] = None
    form_answers: Optional[Dict[str, Any]] = None

    def to_payload(self) -> Dict[str, Any]:
        """Build the JSON body of the JSM create-request call."""
        payload: Dict[str, Any] = {
            "serviceDeskId": self.service_desk_id,
            "requestTypeId": self.request_type_id,
            "requestFieldValues": self.request_field_values,
        }
        if self.raise_on_behalf_of:
            payload["raiseOnBehalfOf"] = self.raise_on_behalf_of
        if self.form_answers:
            payload["form"] = {"answers": self.form_answers}
        return payload

@dataclass(frozen=True, slots=True)
class TicketResult:
    issue_key: Optional[str]
    raw: Dict[str, Any]
    failed_attachments: List[str] = field(default_factory=list)
