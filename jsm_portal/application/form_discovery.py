from __future__ import annotations
import logging
from typing import Any
from jsm_portal.application.jsm_errors import JSMAPIError
from jsm_portal.application.ports.jsm_port import FormsPort, RequestTypeCatalogPort


logger = logging.getLogger(__name__)

def discover_form_structure(
    service_desk_id: int,
    request_type_id: int,
    catalog: RequestTypeCatalogPort,
    forms: FormsPort | None,
) -> dict[str, Any]:
    """Probe the Forms API and the JSM request-type endpoints for one request type.

        Each probe is independent; a failing probe is logged and reported as
        ``False`` in the summary instead of aborting the discovery.
        """

    logger.info(
        "Starting ProForma discovery: service desk %s, request type %s",
        service_desk_id,
        request_type_id,
    )

    form_structure: dict[str, Any] | None = None
    if forms is None:
        logger.warning("Forms API client is not configured; skipping form lookup")
    else:
        try:
            form_structure = forms.get_request_type_form(service_desk_id, request_type_id)
        except JSMAPIError as exc:
            logger.warning("Forms API lookup failed: %s", exc)

    request_type: dict[str, Any] | None = None
    try:
        request_type = catalog.get_request_type(service_desk_id, request_type_id)
    except JSMAPIError as exc:
        logger.warning("JSM request type lookup failed: %s", exc)

    request_types: dict[str, Any] | None = None
    try:
        request_types = catalog.list_request_types(service_desk_id)
    except JSMAPIError as exc:
        logger.warning("JSM request type listing failed: %s", exc)

    total_request_types = 0
    if request_types is not None:
        total_request_types = int(request_types.get("size") or len(request_types.get("values") or []))

    return {
        "message": "ProForma discovery complete",
        "summary": {
            "serviceDeskId": service_desk_id,
            "requestTypeId": request_type_id,
            "formsApiWorking": form_structure is not None,
            "jsmApiWorking": request_type is not None,
            "allRequestTypesFound": request_types is not None,
            "totalRequestTypes": total_request_types,
        },
        "requestType": request_type,
        "requestTypes": request_types,
        "formStructure": form_structure,
    }
