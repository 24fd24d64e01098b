import json
from pathlib import Path
import pytest
from jsm_portal.cmd import main as cli


def test_dry_run_prints_mapped_payload(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("FIELD_MAPPING_PATH", raising=False)
    body = tmp_path / "body.json"
    body.write_text(
        json.dumps(
            {
                "serviceDeskId": 2,
                "requestTypeId": 30,
                "requestFieldValues": {
                    "description": "Cannot log in",
                    "browser": "Firefox, Safari",
                    "email": "user@example.org",
                },
            }
        ),
        encoding="utf-8",
    )

    exit_code = cli.main(["create-ticket", str(body), "--dry-run"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload == {
        "serviceDeskId": 2,
        "requestTypeId": 30,
        "requestFieldValues": {"description": "Cannot log in"},
        "raiseOnBehalfOf": "user@example.org",
        "form": {"answers": {"17": {"choices": ["Firefox", "Safari"]}}},
    }

def test_dry_run_with_invalid_body_fails(tmp_path: Path) -> None:
    body = tmp_path / "body.json"
    body.write_text("[]", encoding="utf-8")

    assert cli.main(["create-ticket", str(body), "--dry-run"]) == 1

def test_discovery_command_exit_code_follows_status(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    captured_events = []

    def _fake_handler(event):                                                                                               # type: ignore[no-untyped-def]
        captured_events.append(event)
        return {"statusCode": 500, "headers": {}, "body": json.dumps({"message": "ProForma discovery failed"})}

    monkeypatch.setattr(cli, "get_form_structure", _fake_handler)

    exit_code = cli.main(["form-structure", "--service-desk-id", "5", "--request-type-id", "31"])

    assert exit_code == 1
    assert captured_events[0]["queryStringParameters"] == {"serviceDeskId": "5", "requestTypeId": "31"}
    assert json.loads(capsys.readouterr().out)["message"] == "ProForma discovery failed"
