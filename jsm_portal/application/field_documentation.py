from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional
from jsm_portal.application.jsm_errors import JSMAPIError
from jsm_portal.application.ports.jsm_port import FormsPort, RequestTypeCatalogPort


logger = logging.getLogger(__name__)

# normalized labels -> semantic keys used by the portal front-end
SEMANTIC_KEYS: dict[str, str] = {
    "summary": "summary",
    "description": "description",
    "issue_description": "description",
    "priority": "priority",
    "access_id": "accessId",
    "user_name": "userName",
    "full_name": "userName",
    "name": "userName",
    "issue_type": "issueType",
    "type_of_issue": "issueType",
    "access_resource": "accessResource",
    "resource": "accessResource",
    "does_your_problem_involve_an_access_resource": "resourceInvolved",
    "identity_provider": "identityProvider",
    "browser": "browser",
    "keywords": "keywords",
    "suggested_keyword": "suggestedKeyword",
}

CUSTOM_FIELD_TYPES: dict[str, str] = {
    "com.atlassian.jira.plugin.system.customfieldtypes:select": "choice",
    "com.atlassian.jira.plugin.system.customfieldtypes:multiselect": "multiple_choice",
    "com.atlassian.jira.plugin.system.customfieldtypes:textfield": "text",
    "com.atlassian.jira.plugin.system.customfieldtypes:textarea": "long_text",
}

SYSTEM_FIELD_TYPES: dict[str, str] = {
    "string": "text",
    "priority": "choice",
    "user": "user_picker",
    "option": "choice",
    "array": "multiple_choice",
}

PROFORMA_QUESTION_TYPES: dict[str, str] = {
    "cs": "choice",
    "cm": "multiple_choice",
    "cd": "dropdown",
    "cl": "checklist",
    "ts": "text",
    "tl": "long_text",
    "tn": "number",
    "td": "date",
    "te": "email",
    "tu": "url",
}

@dataclass
class FieldChoice:
    label: str
    value: str

@dataclass
class HumanReadableField:
    label: str
    description: str
    type: str
    source: str
    required: bool = False
    field_id: Optional[str] = None
    question_id: Optional[str] = None
    choices: list[FieldChoice] = field(default_factory=list)
    semantic_key: Optional[str] = None
    jira_schema: Optional[dict[str, Any]] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "label": self.label,
            "description": self.description,
            "type": self.type,
            "source": self.source,
            "required": self.required,
            "semanticKey": self.semantic_key,
        }
        if self.field_id is not None:
            data["fieldId"] = self.field_id
        if self.question_id is not None:
            data["questionId"] = self.question_id
        if self.choices:
            data["choices"] = [{"label": c.label, "value": c.value} for c in self.choices]
        if self.jira_schema is not None:
            data["jiraSchema"] = self.jira_schema
        return data

def generate_semantic_key(label: str) -> str:
    base_key = label.lower()
    base_key = re.sub(r"[^a-z0-9\s]", "", base_key)
    base_key = re.sub(r"\s+", "_", base_key)
    base_key = re.sub(r"_+", "_", base_key).strip("_")
    return SEMANTIC_KEYS.get(base_key, base_key)

def clean_description(description: str | None) -> str:
    """Strip HTML tags, icon references and extra whitespace from a field description."""
    if not description:
        return ""

    text = re.sub(r"<[^>]*>", "", description)
    text = re.sub(r"\s*icon\s*:\s*[^\s,}]+", "", text, flags=re.IGNORECASE)
    return re.sub(r"\s+", " ", text).strip()

def map_jsm_field_type(jira_type: str | None, custom_type: str | None = None) -> str:
    if custom_type:
        return CUSTOM_FIELD_TYPES.get(custom_type, "custom")
    if not jira_type:
        return "unknown"
    return SYSTEM_FIELD_TYPES.get(jira_type, jira_type)

def map_proforma_question_type(question_type: str | None) -> str:
    if not question_type:
        return "unknown"
    return PROFORMA_QUESTION_TYPES.get(question_type, question_type)

def describe_jsm_fields(fields_payload: dict[str, Any] | None) -> list[HumanReadableField]:
    if not fields_payload:
        return []

    result: list[HumanReadableField] = []
    for item in fields_payload.get("requestTypeFields") or []:
        if not isinstance(item, dict):
            continue
        label = str(item.get("name") or item.get("fieldId") or "")
        schema = item.get("jiraSchema") or {}
        result.append(
            HumanReadableField(
                label=label,
                description=clean_description(item.get("description")),
                type=map_jsm_field_type(schema.get("type"), schema.get("custom")),
                source="jsm",
                required=bool(item.get("required")),
                field_id=item.get("fieldId"),
                choices=[
                    FieldChoice(label=str(v.get("label", "")), value=str(v.get("value", "")))
                    for v in item.get("validValues") or []
                    if isinstance(v, dict)
                ],
                semantic_key=generate_semantic_key(label),
                jira_schema=schema or None,
            )
        )
    return result

def describe_proforma_questions(form_payload: dict[str, Any] | None) -> list[HumanReadableField]:
    result: list[HumanReadableField] = []
    for question_id, question in _iter_questions(form_payload):
        label = str(question.get("label") or "")
        validation = question.get("validation") or {}
        result.append(
            HumanReadableField(
                label=label,
                description=clean_description(question.get("description")),
                type=map_proforma_question_type(question.get("type")),
                source="proforma",
                required=bool(validation.get("rq")),
                question_id=question_id,
                field_id=question.get("jiraField"),
                choices=[
                    FieldChoice(label=str(c.get("label", "")), value=str(c.get("id", "")))
                    for c in question.get("choices") or []
                    if isinstance(c, dict)
                ],
                semantic_key=generate_semantic_key(label),
            )
        )
    return result

def _iter_questions(form_payload: dict[str, Any] | None) -> Iterable[tuple[str, dict[str, Any]]]:
    # the forms API nests questions under "design"; older payloads keep them top-level
    if not isinstance(form_payload, dict):
        return []

    design = form_payload.get("design")
    if isinstance(design, dict) and "questions" in design:
        questions = design["questions"]
    else:
        questions = form_payload.get("questions")
    if isinstance(questions, dict):
        return [(str(qid), q) for qid, q in questions.items() if isinstance(q, dict)]
    if isinstance(questions, list):
        return [(str(q.get("id", "")), q) for q in questions if isinstance(q, dict)]
    return []

def _split_required(fields: list[HumanReadableField]) -> dict[str, list[dict[str, Any]]]:
    return {
        "required": [f.to_dict() for f in fields if f.required],
        "optional": [f.to_dict() for f in fields if not f.required],
    }

def build_field_documentation(
    service_desk_id: int,
    request_type_id: int,
    catalog: RequestTypeCatalogPort,
    forms: FormsPort | None,
) -> dict[str, Any]:
    """Collect JSM fields and ProForma questions of a request type into front-end docs.

        Upstream failures do not raise: they are logged and reported in the
        summary (``apiStatus: failed``) and in ``rawApiData.<source>.error``.
        """

    logger.info(
        "Building field documentation for service desk %s, request type %s",
        service_desk_id,
        request_type_id,
    )

    request_type_name = f"Request Type {request_type_id}"
    try:
        request_type = catalog.get_request_type(service_desk_id, request_type_id)
        request_type_name = request_type.get("name") or request_type_name
    except JSMAPIError as exc:
        logger.warning("Could not load request type %s: %s", request_type_id, exc)

    jsm_data: dict[str, Any] | None = None
    jsm_error: Any = None
    try:
        jsm_data = catalog.get_request_type_fields(service_desk_id, request_type_id)
    except JSMAPIError as exc:
        logger.warning("Could not load JSM fields for request type %s: %s", request_type_id, exc)
        jsm_error = exc.body if exc.body is not None else str(exc)

    form_data: dict[str, Any] | None = None
    form_error: Any = None
    if forms is None:
        form_error = "Forms API is not configured (JIRA_CLOUD_ID missing)"
    else:
        try:
            form_data = forms.get_request_type_form(service_desk_id, request_type_id)
        except JSMAPIError as exc:
            logger.warning("Could not load ProForma form for request type %s: %s", request_type_id, exc)
            form_error = exc.body if exc.body is not None else str(exc)

    jsm_fields = describe_jsm_fields(jsm_data)
    proforma_fields = describe_proforma_questions(form_data)

    logger.info(
        "Field documentation ready: %d JSM field(s), %d ProForma question(s)",
        len(jsm_fields),
        len(proforma_fields),
    )

    return {
        "summary": {
            "serviceDeskId": service_desk_id,
            "requestTypeId": request_type_id,
            "requestTypeName": request_type_name,
            "jsm": {
                "apiStatus": "success" if jsm_data is not None else "failed",
                "fieldCount": len(jsm_fields),
            },
            "proforma": {
                "apiStatus": "success" if form_data is not None else "failed",
                "questionCount": len(proforma_fields),
            },
        },
        "documentation": {
            "requestTypeId": request_type_id,
            "requestTypeName": request_type_name,
            "jsmFields": _split_required(jsm_fields),
            "proformaFields": _split_required(proforma_fields),
        },
        "rawApiData": {
            "jsm": {"data": jsm_data, "error": jsm_error},
            "proforma": {"data": form_data, "error": form_error},
        },
    }
