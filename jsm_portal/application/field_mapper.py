from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Mapping
from jsm_portal.domain.field_mapping import DEFAULT_FIELD_MAPPING, FieldMapping
from jsm_portal.shared.normalization import is_blank


logger = logging.getLogger(__name__)

ValueTransform = Callable[[Any, FieldMapping], Any]

def map_priority_value(value: Any, field_mapping: FieldMapping = DEFAULT_FIELD_MAPPING) -> dict[str, str]:
    """Translate a priority word or id into the ``{"id": ...}`` shape JSM expects.

        Unknown values fall back to the medium priority.
        """

    if is_blank(value):
        return {"id": field_mapping.default_priority_id}

    key = str(value).strip().lower()
    return {"id": field_mapping.priority_ids.get(key, field_mapping.default_priority_id)}

def map_issue_type_value(value: Any, field_mapping: FieldMapping = DEFAULT_FIELD_MAPPING) -> dict[str, str]:
    """Translate an issue-type phrase or option id into the ``{"id": ...}`` shape.

        Unknown phrases fall back to the "user support question" option.
        """

    if is_blank(value):
        return {"id": field_mapping.default_issue_type_id}

    key = str(value).strip().lower()
    return {"id": field_mapping.issue_type_ids.get(key, field_mapping.default_issue_type_id)}

VALUE_TRANSFORMS: Dict[str, ValueTransform] = {
    "priority": map_priority_value,
    "issueType": map_issue_type_value,
}

def map_field_values(
    request_type_id: int,
    user_input: Mapping[str, Any],
    field_mapping: FieldMapping = DEFAULT_FIELD_MAPPING,
) -> dict[str, Any]:
    """Map semantically named portal fields to JSM field keys for a request type.

        Fields missing from the mapping are ignored, blank values (``""`` / ``None``)
        are never forwarded, and fields with a registered value transform are
        converted before being stored under their JSM key. An unknown request type
        yields an empty dict.
        """

    fields = field_mapping.fields_for(request_type_id)
    if not fields:
        logger.warning("No field mapping found for request type %s", request_type_id)
        return {}

    mapped: dict[str, Any] = {}
    for semantic_name, jsm_key in fields.items():
        if semantic_name not in user_input:
            continue

        value = user_input[semantic_name]
        if is_blank(value):
            continue

        transform = VALUE_TRANSFORMS.get(semantic_name)
        if transform is not None:
            value = transform(value, field_mapping)

        mapped[jsm_key] = value

    logger.info("Mapped %d field(s) for request type %s", len(mapped), request_type_id)
    return mapped
