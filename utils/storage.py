"""
Storage Module - Persistence of contact messages

DatabaseContactStorage writes through the Flask-SQLAlchemy session and is
what the application uses against DATABASE_URL. MemoryContactStorage keeps
records in process for local development and tests.
"""

import itertools
import threading
from abc import ABC, abstractmethod

from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import ContactMessage


class StorageError(RuntimeError):
    """The persistence backend is unreachable or rejected the write"""


class ContactStorage(ABC):
    """Storage collaborator for contact messages"""

    @abstractmethod
    def create_contact(self, record):
        """
        Durably insert one validated contact message

        Args:
            record (ContactSubmission): Validated submission

        Returns:
            dict: The stored record, including its generated id

        Raises:
            StorageError: If the write did not happen
        """


class DatabaseContactStorage(ContactStorage):
    def create_contact(self, record):
        contact = ContactMessage(
            name=record.name,
            email=str(record.email),
            subject=record.subject,
            message=record.message,
            created_at=record.created_at,
        )
        try:
            db.session.add(contact)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError(f"Could not store contact message: {e}") from e
        return contact.to_dict()


class MemoryContactStorage(ContactStorage):
    def __init__(self):
        self.records = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def create_contact(self, record):
        with self._lock:
            stored = {
                'id': next(self._ids),
                'name': record.name,
                'email': str(record.email),
                'subject': record.subject,
                'message': record.message,
                'created_at': record.created_at.isoformat(),
            }
            self.records.append(stored)
        return dict(stored)

    def reset(self):
        with self._lock:
            self.records = []
            self._ids = itertools.count(1)


def create_storage(kind):
    """Build the storage backend named by CONTACT_STORAGE"""
    if kind == 'memory':
        return MemoryContactStorage()
    if kind == 'database':
        return DatabaseContactStorage()
    raise ValueError(f"Unknown contact storage: {kind}")


__all__ = [
    'ContactStorage',
    'DatabaseContactStorage',
    'MemoryContactStorage',
    'StorageError',
    'create_storage',
]
