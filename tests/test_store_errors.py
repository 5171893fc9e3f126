"""Driver failures surface as timeout/unavailable errors, never as raw exceptions."""
import pytest
from flask_sqlalchemy.query import Query
from pymongo import errors as mongo_errors
from sqlalchemy import exc as sa_exc

from accolade.errors import StoreTimeout, Unavailable
from accolade.models import AchievementMirror

MISSING_ID = '65a1b2c3d4e5f60718293a4b'


def _raiser(error):
    def _raise(*args, **kwargs):
        raise error
    return _raise


@pytest.mark.parametrize('error, expected, kind, status', [
    (mongo_errors.NetworkTimeout('socket timed out'), StoreTimeout, 'timeout', 504),
    (mongo_errors.ExecutionTimeout('operation exceeded time limit'), StoreTimeout, 'timeout', 504),
    (mongo_errors.ServerSelectionTimeoutError('no servers'), Unavailable, 'unavailable', 503),
    (mongo_errors.AutoReconnect('connection reset'), Unavailable, 'unavailable', 503),
])
def test_document_store_read_errors(ctx, achievements, store, monkeypatch, error, expected, kind, status):
    monkeypatch.setattr(store.collection, 'find_one', _raiser(error))

    with pytest.raises(expected) as excinfo:
        achievements.get_by_id(MISSING_ID)

    assert type(excinfo.value) is expected
    assert excinfo.value.kind == kind
    assert excinfo.value.status_code == status


def test_document_store_write_error_leaves_no_mirror_row(ctx, achievements, store, monkeypatch):
    monkeypatch.setattr(store.collection, 'insert_one',
                        _raiser(mongo_errors.ServerSelectionTimeoutError('no servers')))

    with pytest.raises(Unavailable):
        achievements.create('owner', 'A real title', 'A long enough description', 'doc')

    assert AchievementMirror.query.count() == 0


def test_document_store_timeout_over_http(client, student, store, monkeypatch):
    _, headers = student
    monkeypatch.setattr(store.collection, 'find_one', _raiser(mongo_errors.NetworkTimeout('slow')))

    response = client.get(f'/api/achievements/{MISSING_ID}', headers=headers)

    assert response.status_code == 504
    assert response.get_json()['kind'] == 'timeout'


def test_document_store_unavailable_over_http(client, student, store, monkeypatch):
    _, headers = student
    monkeypatch.setattr(store.collection, 'find', _raiser(mongo_errors.ServerSelectionTimeoutError('down')))

    response = client.get('/api/achievements', headers=headers)

    assert response.status_code == 503
    assert response.get_json() == {
        'status': 'error',
        'kind': 'unavailable',
        'message': 'Document store is unreachable: down',
    }


@pytest.mark.parametrize('error, expected', [
    (sa_exc.OperationalError('SELECT 1', {}, Exception('database is locked')), Unavailable),
    (sa_exc.OperationalError('SELECT 1', {}, Exception('connection timeout expired')), StoreTimeout),
    (sa_exc.InterfaceError('SELECT 1', {}, Exception('connection already closed')), Unavailable),
    (sa_exc.TimeoutError('QueuePool limit reached'), StoreTimeout),
])
def test_relational_store_errors(ctx, users, monkeypatch, error, expected):
    monkeypatch.setattr(Query, 'paginate', _raiser(error))

    with pytest.raises(expected) as excinfo:
        users.list()

    assert type(excinfo.value) is expected


@pytest.mark.parametrize('error, kind, status', [
    (sa_exc.OperationalError('SELECT 1', {}, Exception('could not connect to server')), 'unavailable', 503),
    (sa_exc.OperationalError('SELECT 1', {}, Exception('statement timeout')), 'timeout', 504),
])
def test_relational_store_errors_over_http(client, admin_headers, monkeypatch, error, kind, status):
    monkeypatch.setattr(Query, 'paginate', _raiser(error))

    response = client.get('/api/users', headers=admin_headers)

    assert response.status_code == status
    assert response.get_json()['kind'] == kind
