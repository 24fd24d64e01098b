from __future__ import annotations
import logging
from typing import Any, Mapping
from jsm_portal.domain.field_mapping import DEFAULT_FIELD_MAPPING, FieldMapping
from jsm_portal.shared.normalization import is_blank, normalize_str_or_none


logger = logging.getLogger(__name__)

def format_choices(value: Any) -> dict[str, Any]:
    # lists are already discrete choices; strings are comma-separated
    if isinstance(value, (list, tuple)):
        return {"choices": [str(choice) for choice in value if not is_blank(choice)]}

    choices = [part.strip() for part in str(value).split(",")]
    return {"choices": [choice for choice in choices if choice]}

def format_text(value: Any) -> dict[str, Any]:
    if isinstance(value, (list, tuple)):
        return {"text": ", ".join(str(item) for item in value)}
    return {"text": str(value)}

def map_proforma_values(
    request_type_id: int,
    user_input: Mapping[str, Any],
    field_mapping: FieldMapping = DEFAULT_FIELD_MAPPING,
) -> dict[str, Any] | None:
    """Build the ``form.answers`` section of a create-request payload.

        Returns None when the request type has no ProForma questions or when none
        of its questions received a non-empty value, so callers can omit the form
        section entirely.
        """

    questions = field_mapping.questions_for(request_type_id)
    if not questions:
        logger.debug("No ProForma questions for request type %s", request_type_id)
        return None

    answers: dict[str, Any] = {}
    answer: dict[str, Any]
    for semantic_name, question_id in questions.items():
        value = user_input.get(semantic_name)
        if is_blank(value):
            continue

        question_type = field_mapping.question_type(question_id)
        if question_type == "text":
            answer = format_text(value)
            if normalize_str_or_none(answer["text"]) is None:
                continue
        elif question_type == "choices":
            answer = format_choices(value)
            if not answer["choices"]:
                continue
        else:
            logger.warning(
                "ProForma question %s (field %r) has no declared type; skipping",
                question_id,
                semantic_name,
            )
            continue

        answers[question_id] = answer

    if not answers:
        return None

    logger.info("Mapped %d ProForma answer(s) for request type %s", len(answers), request_type_id)
    return answers
