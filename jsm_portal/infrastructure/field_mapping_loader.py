from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Dict
import yaml
from jsm_portal.domain.field_mapping import DEFAULT_FIELD_MAPPING, FieldMapping


logger = logging.getLogger(__name__)

_QUESTION_TYPES = ("text", "choices")

class FieldMappingError(RuntimeError):
    """Raised when a field-mapping file cannot be read, parsed, or validated."""

def load_field_mapping(path: str | Path | None) -> FieldMapping:
    """Load field-mapping tables from a YAML file.

        Expected shape (every section optional; missing sections keep the
        built-in tables)::

            field_mapping:
              request_types:
                17: {summary: summary, priority: priority}
              proforma_questions:
                17: {keywords: "9"}
              question_types:
                "9": choices
              priorities: {high: "2"}
              issue_types: {"training question": "10217"}
              default_priority: "3"
              default_issue_type: "10214"

        Returns the built-in mapping when ``path`` is None.
        """

    if path is None:
        return DEFAULT_FIELD_MAPPING

    text = _read_text(Path(path))
    data = _parse_yaml(text)

    try:
        section = data["field_mapping"]
    except (TypeError, KeyError) as exc:
        msg = "Unexpected field mapping shape; expected top-level 'field_mapping'"
        logger.error("%s: %s", msg, exc)
        raise FieldMappingError(msg) from exc

    if not isinstance(section, dict):
        raise FieldMappingError("'field_mapping' must be a mapping")

    try:
        request_types = _keyed_by_request_type(section.get("request_types"))
        proforma_questions = _keyed_by_request_type(section.get("proforma_questions"))
        question_types = _string_table(section.get("question_types"))
        priorities = _string_table(section.get("priorities"), lowercase_keys=True)
        issue_types = _string_table(section.get("issue_types"), lowercase_keys=True)
    except (AttributeError, TypeError, ValueError) as exc:
        msg = "Failed to map field mapping file to domain models"
        logger.error("%s: %s", msg, exc)
        raise FieldMappingError(msg) from exc

    for question_id, question_type in question_types.items():
        if question_type not in _QUESTION_TYPES:
            raise FieldMappingError(
                f"Question {question_id} has unknown type {question_type!r}; "
                f"expected one of {', '.join(_QUESTION_TYPES)}"
            )

    mapping = FieldMapping(
        request_type_fields=request_types or DEFAULT_FIELD_MAPPING.request_type_fields,
        proforma_questions=proforma_questions or DEFAULT_FIELD_MAPPING.proforma_questions,
        question_types=question_types or DEFAULT_FIELD_MAPPING.question_types,                         # type: ignore[arg-type]
        priority_ids=priorities or DEFAULT_FIELD_MAPPING.priority_ids,
        issue_type_ids=issue_types or DEFAULT_FIELD_MAPPING.issue_type_ids,
        default_priority_id=str(section.get("default_priority") or DEFAULT_FIELD_MAPPING.default_priority_id),
        default_issue_type_id=str(section.get("default_issue_type") or DEFAULT_FIELD_MAPPING.default_issue_type_id),
    )
    logger.info(
        "Loaded field mapping from %s: %d request type(s), %d with ProForma questions",
        path,
        len(mapping.request_type_fields),
        len(mapping.proforma_questions),
    )
    return mapping

def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read field mapping file {path}"
        logger.error("%s: %s", msg, exc)
        raise FieldMappingError(msg) from exc

def _parse_yaml(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        msg = "Failed to parse field mapping YAML"
        logger.error(msg)
        raise FieldMappingError(msg) from exc

def _keyed_by_request_type(raw: Any) -> Dict[int, Dict[str, str]]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise TypeError(f"expected a mapping of request type ids, got {type(raw).__name__}")

    return {int(request_type_id): _string_table(table) for request_type_id, table in raw.items()}

def _string_table(raw: Any, *, lowercase_keys: bool = False) -> Dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise TypeError(f"expected a mapping, got {type(raw).__name__}")

    table: Dict[str, str] = {}
    for key, value in raw.items():
        key_str = str(key).strip()
        table[key_str.lower() if lowercase_keys else key_str] = str(value)
    return table
