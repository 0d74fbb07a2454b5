import pytest

from utils.contact import FAILURE_MESSAGE, SUCCESS_MESSAGE, submit
from utils.storage import ContactStorage, StorageError


class RecordingStorage(ContactStorage):
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def create_contact(self, record):
        self.calls.append(record)
        if self.error is not None:
            raise self.error
        return {'id': len(self.calls), **record.model_dump(mode='json')}


@pytest.mark.parametrize('data', [
    {'name': 'Jo', 'email': 'a@b.com', 'subject': 'Hi', 'message': '1234567890'},
    {'name': 'Ada Lovelace', 'email': 'ada@example.org', 'subject': 'Engines',
     'message': 'I would like to discuss the analytical engine.'},
    {'name': 'Élodie', 'email': 'elodie@exemple.fr', 'subject': 'Bonjour',
     'message': 'Un message suffisamment long.'},
])
def test_valid_payload_is_stored(data, memory_storage, submitted_at):
    result = submit(data, memory_storage, now=submitted_at)

    assert result.status_code == 201
    assert result.success
    assert result.body['message'] == SUCCESS_MESSAGE
    stored = result.stored
    for field in ('name', 'email', 'subject', 'message'):
        assert stored[field] == data[field]
    assert stored['created_at'] == submitted_at.isoformat()
    assert memory_storage.records == [stored]


def test_stored_ids_increase(memory_storage, valid_payload):
    first = submit(valid_payload, memory_storage)
    second = submit(valid_payload, memory_storage)
    assert (first.stored['id'], second.stored['id']) == (1, 2)


def test_client_cannot_choose_created_at(memory_storage, valid_payload, submitted_at):
    valid_payload['created_at'] = '1999-01-01T00:00:00'
    result = submit(valid_payload, memory_storage, now=submitted_at)
    assert result.stored['created_at'] == submitted_at.isoformat()


@pytest.mark.parametrize('field, value', [
    ('name', 'J'),
    ('email', 'not-an-email'),
    ('subject', ''),
    ('message', '123456789'),
])
def test_invalid_payload_never_reaches_storage(field, value, valid_payload):
    storage = RecordingStorage()
    valid_payload[field] = value

    result = submit(valid_payload, storage)

    assert result.status_code == 400
    assert result.body['success'] is False
    assert f'"{field}"' in result.body['message']
    assert 'data' not in result.body
    assert storage.calls == []


def test_storage_failure_is_generic_500(valid_payload):
    storage = RecordingStorage(error=StorageError('connection refused on 10.0.0.5'))

    result = submit(valid_payload, storage)

    assert result.status_code == 500
    assert result.body == {'success': False, 'message': FAILURE_MESSAGE}
    assert len(storage.calls) == 1


def test_unexpected_failure_is_generic_500(valid_payload):
    result = submit(valid_payload, RecordingStorage(error=KeyError('boom')))
    assert result.status_code == 500
    assert result.body['message'] == FAILURE_MESSAGE


def test_one_write_attempt_per_call(valid_payload):
    storage = RecordingStorage(error=StorageError('down'))
    submit(valid_payload, storage)
    assert len(storage.calls) == 1
