from __future__ import annotations
import argparse
import json
import logging
from pathlib import Path
from typing import Any
from jsm_portal.application.dto.ticket_request import BodyParseError, decode_body, parse_ticket_request
from jsm_portal.application.ticket_submitter import build_submission
from jsm_portal.cmd.handlers import create_support_ticket, get_field_documentation, get_form_structure
from jsm_portal.cmd.logging_setup import logging_conf
from jsm_portal.config import load_submission_config
from jsm_portal.infrastructure.field_mapping_loader import FieldMappingError, load_field_mapping


logger = logging.getLogger(__name__)

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsm-portal",
        description="Invoke the support portal functions locally.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create-ticket", help="Create a JSM request from a JSON body file")
    create.add_argument("body", type=Path, help="Path to the request body JSON")
    create.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the mapped JSM payload without calling JSM (attachments are not uploaded)",
    )

    for name, help_text in (
        ("form-structure", "Discover the ProForma form of a request type"),
        ("field-docs", "Print human-readable field documentation for a request type"),
    ):
        discovery = sub.add_parser(name, help=help_text)
        discovery.add_argument("--service-desk-id", default="2")
        discovery.add_argument("--request-type-id", default="17")

    return parser

def _dry_run(body_path: Path) -> dict[str, Any]:
    data = decode_body(body_path.read_text(encoding="utf-8"))
    ticket_request = parse_ticket_request(data)
    field_mapping = load_field_mapping(load_submission_config().field_mapping_path)

    submission = build_submission(ticket_request, [], field_mapping)
    if ticket_request.attachments:
        logger.info(
            "Dry run: %d attachment(s) would be uploaded first",
            len(ticket_request.attachments),
        )
    return submission.to_payload()

def main(argv: list[str] | None = None) -> int:
    logging_conf()
    args = _build_parser().parse_args(argv)

    if args.command == "create-ticket":
        if args.dry_run:
            try:
                output: Any = _dry_run(args.body)
            except (BodyParseError, FieldMappingError, OSError) as exc:
                logger.error("Cannot build payload from %s: %s", args.body, exc)
                return 1
            print(json.dumps(output, indent=2))
            return 0

        event = {"httpMethod": "POST", "body": args.body.read_text(encoding="utf-8")}
        response = create_support_ticket(event)
    else:
        event = {
            "httpMethod": "GET",
            "queryStringParameters": {
                "serviceDeskId": args.service_desk_id,
                "requestTypeId": args.request_type_id,
            },
        }
        handler = get_form_structure if args.command == "form-structure" else get_field_documentation
        response = handler(event)

    print(json.dumps(json.loads(response["body"]), indent=2))
    return 0 if response["statusCode"] == 200 else 1

if __name__ == "__main__":
    raise SystemExit(main())
