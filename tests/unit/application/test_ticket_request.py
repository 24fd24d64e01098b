from typing import Any
import pytest
from jsm_portal.application.dto.ticket_request import (
    BodyParseError,
    decode_body,
    parse_ticket_request,
)


def test_parse_full_body() -> None:
    data = decode_body(
        '{"serviceDeskId": 2, "requestTypeId": "17",'
        ' "requestFieldValues": {"summary": "S"},'
        ' "attachments": [{"fileName": "log.txt", "contentType": "text/plain",'
        ' "fileData": "aGVsbG8=", "size": 5}]}'
    )

    request = parse_ticket_request(data)

    assert request.service_desk_id == 2
    assert request.request_type_id == 17
    assert request.request_field_values == {"summary": "S"}
    assert len(request.attachments) == 1
    attachment = request.attachments[0]
    assert attachment.file_name == "log.txt"
    assert attachment.content_type == "text/plain"
    assert attachment.file_data == "aGVsbG8="
    assert attachment.size == 5

def test_optional_sections_default_to_empty() -> None:
    request = parse_ticket_request({"serviceDeskId": 2, "requestTypeId": 17})

    assert request.request_field_values == {}
    assert request.attachments == []

def test_attachment_content_type_defaults_to_octet_stream() -> None:
    request = parse_ticket_request(
        {
            "serviceDeskId": 2,
            "requestTypeId": 17,
            "attachments": [{"fileName": "blob", "fileData": "AAAA"}],
        }
    )

    assert request.attachments[0].content_type == "application/octet-stream"
    assert request.attachments[0].size is None

@pytest.mark.parametrize("body", [None, "", "   ", "{not json", "[1, 2]", '"text"'])
def test_decode_body_rejects_invalid_bodies(body: Any) -> None:
    with pytest.raises(BodyParseError):
        decode_body(body)

@pytest.mark.parametrize(
    "data",
    [
        {"requestTypeId": 17},
        {"serviceDeskId": "abc", "requestTypeId": 17},
        {"serviceDeskId": 2},
        {"serviceDeskId": 2, "requestTypeId": 0},
        {"serviceDeskId": True, "requestTypeId": 17},
        {"serviceDeskId": 1.5, "requestTypeId": 17},
        {"serviceDeskId": float("inf"), "requestTypeId": 17},
        {"serviceDeskId": 2, "requestTypeId": 17, "requestFieldValues": ["summary"]},
        {"serviceDeskId": 2, "requestTypeId": 17, "attachments": {"fileName": "x"}},
        {"serviceDeskId": 2, "requestTypeId": 17, "attachments": ["x"]},
        {"serviceDeskId": 2, "requestTypeId": 17, "attachments": [{"fileData": "AAAA"}]},
        {"serviceDeskId": 2, "requestTypeId": 17, "attachments": [{"fileName": "a", "fileData": ""}]},
    ],
)
def test_parse_ticket_request_rejects_invalid_shapes(data: dict[str, Any]) -> None:
    with pytest.raises(BodyParseError):
        parse_ticket_request(data)

@pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "NaN", "1e400"])
def test_non_finite_identifier_is_a_parse_error(literal: str) -> None:
    data = decode_body(f'{{"serviceDeskId": {literal}, "requestTypeId": 17}}')

    with pytest.raises(BodyParseError, match="serviceDeskId"):
        parse_ticket_request(data)

def test_integral_float_identifier_is_accepted() -> None:
    request = parse_ticket_request({"serviceDeskId": 2.0, "requestTypeId": 17})

    assert request.service_desk_id == 2
