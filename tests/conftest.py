"""
In-memory stand-in for the subset of google.cloud.firestore.Client used by firerepo.
"""
import copy

import pytest
from google.api_core import exceptions
from google.cloud import firestore

from firerepo.services.query import QueryExecutor
from firerepo.services.store import RecordStore

_MISSING = object()


def _lookup(data, path):
    value = data
    for part in path.split('.'):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _matches(value, op, expected):
    if value is _MISSING:
        return False
    if op == '==':
        return value == expected
    if op == '!=':
        return value != expected
    if op == '<':
        return value < expected
    if op == '<=':
        return value <= expected
    if op == '>':
        return value > expected
    if op == '>=':
        return value >= expected
    if op == 'array-contains':
        return isinstance(value, list) and expected in value
    if op == 'array-contains-any':
        return isinstance(value, list) and any(v in value for v in expected)
    if op == 'in':
        return value in expected
    if op == 'not-in':
        return value not in expected
    raise ValueError(f"unsupported operator {op}")


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data)


class FakeQuery:
    def __init__(self, client, path, filters=(), orders=(), count=None):
        self._client = client
        self.path = path
        self._filters = filters
        self._orders = orders
        self._count = count

    def where(self, filter=None):
        return FakeQuery(self._client, self.path, self._filters + (filter,), self._orders, self._count)

    def order_by(self, field_path, direction=firestore.Query.ASCENDING):
        return FakeQuery(self._client, self.path, self._filters, self._orders + ((field_path, direction),), self._count)

    def limit(self, count):
        return FakeQuery(self._client, self.path, self._filters, self._orders, count)

    def stream(self, timeout=None):
        self._client.calls.append(('stream', self.path, timeout))
        self._client.check('stream')

        prefix = self.path + '/'
        docs = [
            (path[len(prefix):], data)
            for path, data in sorted(self._client.docs.items())
            if path.startswith(prefix) and '/' not in path[len(prefix):]
        ]

        for f in self._filters:
            docs = [(i, d) for i, d in docs if _matches(_lookup(d, f.field_path), f.op_string, f.value)]

        for field_path, _ in self._orders:
            docs = [(i, d) for i, d in docs if _lookup(d, field_path) is not _MISSING]
        for field_path, direction in reversed(self._orders):
            docs.sort(key=lambda item: _lookup(item[1], field_path), reverse=direction == firestore.Query.DESCENDING)

        if self._count is not None:
            docs = docs[:self._count]

        for n, (doc_id, data) in enumerate(docs):
            if self._client.fail_stream_after == n:
                raise exceptions.ServiceUnavailable("stream interrupted")
            yield FakeSnapshot(doc_id, copy.deepcopy(data))


class FakeCollection(FakeQuery):
    def __init__(self, client, path):
        super().__init__(client, path)

    @property
    def id(self):
        return self.path.rsplit('/', 1)[-1]

    def document(self, doc_id):
        return FakeDocument(self._client, f"{self.path}/{doc_id}")


class FakeDocument:
    def __init__(self, client, path):
        self._client = client
        self.path = path

    @property
    def id(self):
        return self.path.rsplit('/', 1)[-1]

    def collection(self, name):
        return FakeCollection(self._client, f"{self.path}/{name}")

    def get(self, timeout=None):
        self._client.calls.append(('get', self.path, timeout))
        self._client.check('get')
        return FakeSnapshot(self.id, copy.deepcopy(self._client.docs.get(self.path)))

    def set(self, data, timeout=None):
        self._client.calls.append(('set', self.path, timeout))
        self._client.check('set')
        self._client.docs[self.path] = copy.deepcopy(data)

    def update(self, patch, timeout=None):
        self._client.calls.append(('update', self.path, timeout))
        self._client.check('update')
        if self.path not in self._client.docs:
            raise exceptions.NotFound(f"No document to update: {self.path}")
        doc = self._client.docs[self.path]
        for field_path, value in patch.items():
            target = doc
            parts = field_path.split('.')
            for part in parts[:-1]:
                target = target.setdefault(part, {})
            target[parts[-1]] = copy.deepcopy(value)

    def delete(self, timeout=None):
        self._client.calls.append(('delete', self.path, timeout))
        self._client.check('delete')
        self._client.docs.pop(self.path, None)


class FakeBatch:
    def __init__(self, client):
        self._client = client
        self.writes = []

    def set(self, ref, data):
        self.writes.append((ref.path, copy.deepcopy(data)))

    def commit(self, timeout=None):
        self._client.calls.append(('commit', len(self.writes), timeout))
        self._client.check('commit')
        for path, data in self.writes:
            self._client.docs[path] = data


class FakeFirestoreClient:
    """Documents are kept in a flat dict keyed by full path."""

    def __init__(self):
        self.docs = {}
        self.calls = []
        self.fail_on = {}
        self.fail_stream_after = None

    def check(self, operation):
        if operation in self.fail_on:
            raise self.fail_on[operation]

    def collection(self, name):
        return FakeCollection(self, name)

    def batch(self):
        return FakeBatch(self)


@pytest.fixture
def client():
    return FakeFirestoreClient()


@pytest.fixture
def store(client):
    return RecordStore(client, root_path='')


@pytest.fixture
def executor(store):
    return QueryExecutor(store)
