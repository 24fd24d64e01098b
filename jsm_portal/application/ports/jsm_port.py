from __future__ import annotations
from typing import Any, Protocol
from jsm_portal.domain.ticket import AttachmentDescriptor


class ServiceDeskPort(Protocol):
    def upload_temporary_attachment(
        self,
        service_desk_id: int,
        attachment: AttachmentDescriptor,
    ) -> list[str]:
        ...

    def create_request(self, payload: dict[str, Any]) -> dict[str, Any]:
        ...

class RequestTypeCatalogPort(Protocol):
    def get_request_type(self, service_desk_id: int, request_type_id: int) -> dict[str, Any]:
        ...

    def get_request_type_fields(self, service_desk_id: int, request_type_id: int) -> dict[str, Any]:
        ...

    def list_request_types(self, service_desk_id: int) -> dict[str, Any]:
        ...

class FormsPort(Protocol):
    def get_request_type_form(self, service_desk_id: int, request_type_id: int) -> dict[str, Any]:
        ...
