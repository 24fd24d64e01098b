from pathlib import Path
import pytest
from jsm_portal.domain.field_mapping import DEFAULT_FIELD_MAPPING
from jsm_portal.infrastructure.field_mapping_loader import FieldMappingError, load_field_mapping


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "field_mapping.yaml"
    path.write_text(text, encoding="utf-8")
    return path

def test_none_path_returns_builtin_mapping() -> None:
    assert load_field_mapping(None) is DEFAULT_FIELD_MAPPING

def test_load_field_mapping_happy_path(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
field_mapping:
  request_types:
    10006:
      summary: summary
      description: description
  proforma_questions:
    10006:
      browser: 3
  question_types:
    3: choices
  priorities:
    Urgent: "1"
  default_priority: 4
""",
    )

    mapping = load_field_mapping(path)

    assert mapping.fields_for(10006) == {"summary": "summary", "description": "description"}
    assert mapping.questions_for(10006) == {"browser": "3"}
    assert mapping.question_type("3") == "choices"
    assert mapping.priority_ids == {"urgent": "1"}
    assert mapping.default_priority_id == "4"
    # sections left out keep the built-in tables
    assert mapping.issue_type_ids == DEFAULT_FIELD_MAPPING.issue_type_ids
    assert mapping.default_issue_type_id == "10214"

def test_unexpected_shape_raises(tmp_path: Path) -> None:
    path = _write(tmp_path, "mapping:\n  request_types: {}\n")

    with pytest.raises(FieldMappingError):
        load_field_mapping(path)

def test_non_integer_request_type_raises(tmp_path: Path) -> None:
    path = _write(tmp_path, "field_mapping:\n  request_types:\n    support: {summary: summary}\n")

    with pytest.raises(FieldMappingError):
        load_field_mapping(path)

def test_unknown_question_type_raises(tmp_path: Path) -> None:
    path = _write(tmp_path, "field_mapping:\n  question_types:\n    '5': checkbox\n")

    with pytest.raises(FieldMappingError):
        load_field_mapping(path)

def test_invalid_yaml_raises(tmp_path: Path) -> None:
    path = _write(tmp_path, "field_mapping: [unclosed\n")

    with pytest.raises(FieldMappingError):
        load_field_mapping(path)

def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FieldMappingError):
        load_field_mapping(tmp_path / "nope.yaml")
