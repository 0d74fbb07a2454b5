"""
Contact Module - Contact submission flow: validate, persist, report

``submit`` never raises. Validation failures become a 400 result with the
field-level detail; anything else becomes a generic 500 result and the cause
is only logged.
"""

from dataclasses import dataclass
from datetime import datetime

from flask import current_app, has_app_context

from .validation import ValidationError, validate_contact

SUCCESS_MESSAGE = "Contact message sent successfully"
FAILURE_MESSAGE = "Failed to send message"

HTTP_CREATED = 201
HTTP_BAD_REQUEST = 400
HTTP_SERVER_ERROR = 500


@dataclass(frozen=True)
class SubmissionResult:
    status_code: int
    body: dict

    @property
    def success(self):
        return bool(self.body.get('success'))

    @property
    def stored(self):
        return self.body.get('data')


def _log_error(message):
    if has_app_context():
        current_app.logger.error(message)


def submit(raw_payload, storage, now=None):
    """
    Validate and persist one contact submission

    Args:
        raw_payload: Decoded request body (anything; non-mappings fail validation)
        storage (ContactStorage): Storage collaborator
        now (datetime, optional): Submission time, defaults to utcnow

    Returns:
        SubmissionResult: Status code and JSON body for the response
    """
    created_at = now or datetime.utcnow()
    if isinstance(raw_payload, dict):
        payload = {**raw_payload, 'created_at': created_at}
    else:
        payload = raw_payload

    try:
        record = validate_contact(payload)
        stored = storage.create_contact(record)
    except ValidationError as e:
        return SubmissionResult(HTTP_BAD_REQUEST, {'success': False, 'message': str(e)})
    except Exception as e:
        _log_error(f"Contact submission failed: {str(e)}")
        return SubmissionResult(HTTP_SERVER_ERROR, {'success': False, 'message': FAILURE_MESSAGE})

    return SubmissionResult(HTTP_CREATED, {
        'success': True,
        'message': SUCCESS_MESSAGE,
        'data': stored,
    })


__all__ = ['SubmissionResult', 'submit', 'SUCCESS_MESSAGE', 'FAILURE_MESSAGE']
