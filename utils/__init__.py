"""
Utils Package - Centralized utility modules initialization
"""

from .validation import ContactSubmission, ValidationError, validate_contact
from .storage import (
    ContactStorage,
    DatabaseContactStorage,
    MemoryContactStorage,
    StorageError,
    create_storage
)
from .contact import SubmissionResult, submit
from .notifications import notify_new_contact, send_telegram_notification
from .security import get_client_ip, add_security_headers

__all__ = [
    # Validation
    'ContactSubmission',
    'ValidationError',
    'validate_contact',

    # Storage
    'ContactStorage',
    'DatabaseContactStorage',
    'MemoryContactStorage',
    'StorageError',
    'create_storage',

    # Contact flow
    'SubmissionResult',
    'submit',

    # Notifications
    'notify_new_contact',
    'send_telegram_notification',

    # Security
    'get_client_ip',
    'add_security_headers',
]
