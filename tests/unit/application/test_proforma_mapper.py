from jsm_portal.application.proforma_mapper import format_choices, map_proforma_values
from jsm_portal.domain.field_mapping import FieldMapping


def test_request_type_without_questions_returns_none() -> None:
    assert map_proforma_values(31, {"keywords": "a,b"}) is None
    assert map_proforma_values(9999, {"keywords": "a,b"}) is None

def test_all_inputs_empty_returns_none() -> None:
    user_input = {"userIdAtResource": "", "resourceName": None, "summary": "not a question"}

    assert map_proforma_values(17, user_input) is None

def test_single_text_answer() -> None:
    result = map_proforma_values(17, {"userIdAtResource": "jdoe42"})

    assert result == {"5": {"text": "jdoe42"}}

def test_single_choices_answer_from_comma_separated_string() -> None:
    result = map_proforma_values(17, {"keywords": "a, b,c"})

    assert result == {"9": {"choices": ["a", "b", "c"]}}

def test_choices_answer_from_list_is_used_directly() -> None:
    result = map_proforma_values(30, {"browser": ["a", "b"]})

    assert result == {"17": {"choices": ["a", "b"]}}

def test_mixed_answers_for_support_ticket() -> None:
    result = map_proforma_values(
        17,
        {
            "userIdAtResource": "jdoe42",
            "resourceName": "Anvil",
            "keywords": ["GPU", "MPI"],
            "suggestedKeyword": "containers",
            "summary": "ignored",
        },
    )

    assert result == {
        "5": {"text": "jdoe42"},
        "8": {"choices": ["Anvil"]},
        "9": {"choices": ["GPU", "MPI"]},
        "13": {"text": "containers"},
    }

def test_text_answer_stringifies_non_string_values() -> None:
    assert map_proforma_values(17, {"userIdAtResource": 12345}) == {"5": {"text": "12345"}}

def test_format_choices_drops_blank_entries() -> None:
    assert format_choices("a,, b ,") == {"choices": ["a", "b"]}

def test_question_without_declared_type_is_skipped() -> None:
    mapping = FieldMapping(
        proforma_questions={40: {"color": "99", "size": "100"}},
        question_types={"100": "text"},
    )

    assert map_proforma_values(40, {"color": "red", "size": "L"}, mapping) == {"100": {"text": "L"}}

def test_choices_with_nothing_left_after_formatting_are_omitted() -> None:
    assert map_proforma_values(30, {"browser": " , "}) is None
    assert map_proforma_values(30, {"browser": []}) is None
    assert map_proforma_values(30, {"browser": ["", None]}) is None

def test_whitespace_only_text_is_omitted() -> None:
    assert map_proforma_values(17, {"userIdAtResource": "   "}) is None
    assert map_proforma_values(17, {"userIdAtResource": []}) is None

def test_empty_answer_is_dropped_but_others_are_kept() -> None:
    result = map_proforma_values(30, {"browser": " , ", "identityProvider": "ACCESS CI"})

    assert result == {"16": {"choices": ["ACCESS CI"]}}
