from __future__ import annotations
import logging
from jsm_portal.application.dto.ticket_request import TicketRequest
from jsm_portal.application.field_mapper import map_field_values
from jsm_portal.application.jsm_errors import AttachmentUploadError
from jsm_portal.application.ports.jsm_port import ServiceDeskPort
from jsm_portal.application.proforma_mapper import map_proforma_values
from jsm_portal.config import ATTACHMENT_POLICIES
from jsm_portal.domain.field_mapping import DEFAULT_FIELD_MAPPING, FieldMapping
from jsm_portal.domain.ticket import TicketResult, TicketSubmission
from jsm_portal.shared.normalization import normalize_str_or_none


logger = logging.getLogger(__name__)

ATTACHMENT_FIELD = "attachment"
ON_BEHALF_OF_FIELD = "email"

def build_submission(
    ticket_request: TicketRequest,
    attachment_ids: list[str],
    field_mapping: FieldMapping = DEFAULT_FIELD_MAPPING,
) -> TicketSubmission:
    """Assemble the create-request submission; makes no outbound calls."""

    user_input = ticket_request.request_field_values

    field_values = map_field_values(ticket_request.request_type_id, user_input, field_mapping)
    if attachment_ids:
        field_values[ATTACHMENT_FIELD] = list(attachment_ids)

    return TicketSubmission(
        service_desk_id=ticket_request.service_desk_id,
        request_type_id=ticket_request.request_type_id,
        request_field_values=field_values,
        raise_on_behalf_of=normalize_str_or_none(user_input.get(ON_BEHALF_OF_FIELD)),
        form_answers=map_proforma_values(ticket_request.request_type_id, user_input, field_mapping),
    )

class TicketSubmitter:
    """Turn a validated portal submission into a single JSM create-request call.

        Steps, in order:
        - map ``requestFieldValues`` to JSM field keys;
        - upload every attachment one after another and collect the temporary ids;
        - add the ProForma ``form.answers`` section when the request type has
          answered questions;
        - set ``raiseOnBehalfOf`` from the submitter's email;
        - POST the payload.

        With ``attachment_failure_policy="abort"`` the first failed upload
        propagates and no ticket is created. With ``"skip"`` the failure is logged,
        the file name is reported in `TicketResult.failed_attachments`, and the
        ticket is created without it.
        """

    def __init__(
        self,
        client: ServiceDeskPort,
        field_mapping: FieldMapping = DEFAULT_FIELD_MAPPING,
        attachment_failure_policy: str = "abort",
    ) -> None:
        if attachment_failure_policy not in ATTACHMENT_POLICIES:
            raise ValueError(f"Unknown attachment failure policy: {attachment_failure_policy!r}")

        self._client = client
        self._field_mapping = field_mapping
        self._attachment_failure_policy = attachment_failure_policy

    def upload_attachments(self, ticket_request: TicketRequest) -> tuple[list[str], list[str]]:
        """Upload attachments sequentially.

            Returns ``(temporary_ids, failed_file_names)``.
            """

        temporary_ids: list[str] = []
        failed: list[str] = []

        for attachment in ticket_request.attachments:
            logger.info("Processing attachment: %s", attachment.file_name)
            try:
                ids = self._client.upload_temporary_attachment(ticket_request.service_desk_id, attachment)
            except AttachmentUploadError as exc:
                if self._attachment_failure_policy == "abort":
                    raise
                logger.warning(
                    "Skipping attachment %s after upload failure: %s",
                    attachment.file_name,
                    exc,
                )
                failed.append(attachment.file_name)
                continue

            if not ids:
                logger.warning("Upload of %s returned no temporary attachment id", attachment.file_name)
            temporary_ids.extend(ids)

        return temporary_ids, failed

    def submit(self, ticket_request: TicketRequest) -> TicketResult:
        """Create the JSM request for ``ticket_request``.

            Raises:
                AttachmentUploadError: when an upload fails under the "abort" policy.
                TicketCreationError: when JSM rejects the create-request call.
            """

        temporary_ids, failed = self.upload_attachments(ticket_request)
        submission = build_submission(ticket_request, temporary_ids, self._field_mapping)
        payload = submission.to_payload()

        logger.info(
            "Submitting request type %s to service desk %s: fields=%s attachments=%d form=%s",
            submission.request_type_id,
            submission.service_desk_id,
            sorted(submission.request_field_values),
            len(temporary_ids),
            "yes" if submission.form_answers else "no",
        )
        logger.debug("JSM payload: %s", payload)

        response = self._client.create_request(payload)

        issue_key = response.get("issueKey") or response.get("key")
        logger.info("Created JSM request %s", issue_key)
        return TicketResult(issue_key=issue_key, raw=response, failed_attachments=failed)
