"""
Validation Module - Contact form schema and readable validation errors
"""

from datetime import datetime
from typing import Annotated

import pydantic
from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field

# Human-readable messages keyed on (field, pydantic error type)
FIELD_MESSAGES = {
    ('name', 'string_too_short'): 'Name must be at least 2 characters',
    ('email', 'value_error'): 'Please enter a valid email address',
    ('subject', 'string_too_short'): 'Subject must be at least 2 characters',
    ('message', 'string_too_short'): 'Message must be at least 10 characters',
}

GENERIC_MESSAGES = {
    'missing': 'Required',
    'string_type': 'Expected string',
    'model_type': 'Expected object',
    'dict_type': 'Expected object',
}


def check_email(value):
    """Check address syntax, returning the address exactly as submitted"""
    if '<' in value or '>' in value:
        raise ValueError("Display-name addresses are not accepted")
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(str(e)) from e
    return value


class ContactSubmission(BaseModel):
    """A contact form submission, validated before it reaches storage"""

    model_config = ConfigDict(extra='ignore', frozen=True)

    name: str = Field(min_length=2)
    email: Annotated[str, AfterValidator(check_email)]
    subject: str = Field(min_length=2)
    message: str = Field(min_length=10)
    created_at: datetime


class ValidationError(ValueError):
    """
    Contact payload failed validation

    Attributes:
        issues (list): (field, message) pairs in the order they were found
    """

    def __init__(self, issues):
        self.issues = issues
        super().__init__(format_issues(issues))

    @property
    def fields(self):
        return [field for field, _ in self.issues]


def format_issues(issues):
    """Render issues as 'Validation error: <detail> at "<field>"; ...'"""
    parts = []
    for field, message in issues:
        parts.append(f'{message} at "{field}"' if field else message)
    return 'Validation error: ' + '; '.join(parts)


def _describe(error):
    loc = error.get('loc') or ()
    field = '.'.join(str(part) for part in loc)
    error_type = error.get('type', '')
    message = FIELD_MESSAGES.get((field, error_type)) or GENERIC_MESSAGES.get(error_type) or error.get('msg', 'Invalid value')
    return field, message


def validate_contact(payload):
    """
    Validate a raw payload into a ContactSubmission

    Args:
        payload: Decoded request body merged with the server timestamp

    Returns:
        ContactSubmission: The validated record

    Raises:
        ValidationError: With one issue per violated field
    """
    try:
        return ContactSubmission.model_validate(payload)
    except pydantic.ValidationError as e:
        raise ValidationError([_describe(error) for error in e.errors()]) from e


__all__ = ['ContactSubmission', 'ValidationError', 'validate_contact', 'format_issues']
