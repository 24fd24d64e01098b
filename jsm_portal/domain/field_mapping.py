from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Literal


QuestionType = Literal["text", "choices"]

DEFAULT_PRIORITY_ID = "3"
DEFAULT_ISSUE_TYPE_ID = "10214"

# semantic field name -> JSM field key, per request type
REQUEST_TYPE_FIELDS: Dict[int, Dict[str, str]] = {
    # Support Ticket
    17: {
        "summary": "summary",
        "description": "description",
        "accessId": "customfield_10103",
        "name": "customfield_10108",
        "issueType": "customfield_10111",
        "priority": "priority",
    },
    # Cannot login to the ACCESS portal
    30: {
        "name": "customfield_10108",
        "accessId": "customfield_10103",
        "description": "description",
    },
    # Cannot login to a resource provider
    31: {
        "name": "customfield_10108",
        "accessId": "customfield_10103",
        "accessResource": "customfield_10110",
        "description": "description",
    },
}

# semantic field name -> ProForma question id, per request type
PROFORMA_QUESTIONS: Dict[int, Dict[str, str]] = {
    17: {
        "userIdAtResource": "5",
        "resourceName": "8",
        "keywords": "9",
        "suggestedKeyword": "13",
    },
    30: {
        "identityProvider": "16",
        "browser": "17",
    },
}

PROFORMA_QUESTION_TYPES: Dict[str, QuestionType] = {
    "5": "text",
    "8": "choices",      # dropdown
    "9": "choices",      # multi-select
    "13": "text",
    "16": "choices",     # dropdown
    "17": "choices",     # multi-select
}

PRIORITY_IDS: Dict[str, str] = {
    "highest": "1",
    "high": "2",
    "medium": "3",
    "lowest": "4",
    "low": "5",
    "1": "1",
    "2": "2",
    "3": "3",
    "4": "4",
    "5": "5",
}

# values of customfield_10111 (ACCESS User Support Issue)
ISSUE_TYPE_IDS: Dict[str, str] = {
    "user account question": "10212",
    "allocation question": "10213",
    "user support question": "10214",
    "cssn/ccep question": "10216",
    "training question": "10217",
    "metrics question": "10218",
    "ondemand question": "10219",
    "pegasus question": "10220",
    "xdmod question": "10221",
    "some other question": "10223",
    "10212": "10212",
    "10213": "10213",
    "10214": "10214",
    "10216": "10216",
    "10217": "10217",
    "10218": "10218",
    "10219": "10219",
    "10220": "10220",
    "10221": "10221",
    "10223": "10223",
}


@dataclass(frozen=True)
class FieldMapping:
    """Static translation tables between the portal's semantic field names and JSM.

        Instances are read-only configuration. Lookups for unknown request types
        return empty mappings instead of raising.
        """

    request_type_fields: Dict[int, Dict[str, str]] = field(default_factory=lambda: dict(REQUEST_TYPE_FIELDS))
    proforma_questions: Dict[int, Dict[str, str]] = field(default_factory=lambda: dict(PROFORMA_QUESTIONS))
    question_types: Dict[str, QuestionType] = field(default_factory=lambda: dict(PROFORMA_QUESTION_TYPES))
    priority_ids: Dict[str, str] = field(default_factory=lambda: dict(PRIORITY_IDS))
    issue_type_ids: Dict[str, str] = field(default_factory=lambda: dict(ISSUE_TYPE_IDS))
    default_priority_id: str = DEFAULT_PRIORITY_ID
    default_issue_type_id: str = DEFAULT_ISSUE_TYPE_ID

    def fields_for(self, request_type_id: int) -> Dict[str, str]:
        return self.request_type_fields.get(request_type_id, {})

    def questions_for(self, request_type_id: int) -> Dict[str, str] | None:
        return self.proforma_questions.get(request_type_id)

    def question_type(self, question_id: str) -> QuestionType | None:
        return self.question_types.get(question_id)


DEFAULT_FIELD_MAPPING = FieldMapping()
