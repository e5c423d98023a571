import copy
from types import SimpleNamespace

import pytest
from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument

from people.core.config import Settings
from people.repositories.person import PersonRepository


def _matches(document, query):
    for key, expected in query.items():
        value = document.get(key)
        if isinstance(value, list):
            if expected not in value:
                return False
        elif value != expected:
            return False
    return True


def _project(document, projection):
    if not projection:
        return copy.deepcopy(document)
    projected = {key: copy.deepcopy(document[key]) for key, flag in projection.items() if flag and key in document}
    if projection.get("_id", 1) and "_id" in document:
        projected["_id"] = document["_id"]
    return projected


class StubCursor:
    def __init__(self, documents, projection=None):
        self._documents = [copy.deepcopy(document) for document in documents]
        self._projection = projection
        self.calls = []

    def sort(self, key, direction):
        self.calls.append(("sort", key, direction))
        self._documents.sort(key=lambda document: document.get(key), reverse=direction == DESCENDING)
        return self

    def limit(self, count):
        self.calls.append(("limit", count))
        self._documents = self._documents[:count]
        return self

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for document in self._documents:
            yield _project(document, self._projection)


class StubCollection:
    """In-memory stand-in for the subset of AsyncIOMotorCollection the repository uses."""

    def __init__(self, name="people"):
        self.name = name
        self.documents = []
        self.failures = {}
        self.calls = []
        self.cursors = []

    def fail(self, method, exc):
        self.failures[method] = exc

    def _record(self, method, *args):
        self.calls.append((method, args))
        if method in self.failures:
            raise self.failures[method]

    def _first(self, query):
        for document in self.documents:
            if _matches(document, query):
                return document
        return None

    async def insert_one(self, document):
        self._record("insert_one", document)
        document.setdefault("_id", ObjectId())
        self.documents.append(copy.deepcopy(document))
        return SimpleNamespace(inserted_id=document["_id"])

    async def insert_many(self, documents, ordered=True):
        self._record("insert_many", documents)
        inserted_ids = []
        for document in documents:
            document.setdefault("_id", ObjectId())
            self.documents.append(copy.deepcopy(document))
            inserted_ids.append(document["_id"])
        return SimpleNamespace(inserted_ids=inserted_ids)

    def find(self, query, projection=None):
        self._record("find", query, projection)
        cursor = StubCursor([d for d in self.documents if _matches(d, query)], projection)
        self.cursors.append(cursor)
        return cursor

    async def find_one(self, query):
        self._record("find_one", query)
        document = self._first(query)
        return copy.deepcopy(document) if document is not None else None

    async def replace_one(self, query, replacement):
        self._record("replace_one", query, replacement)
        document = self._first(query)
        if document is None:
            return SimpleNamespace(matched_count=0, modified_count=0)
        document.clear()
        document.update(copy.deepcopy(replacement))
        return SimpleNamespace(matched_count=1, modified_count=1)

    async def find_one_and_update(self, query, update, return_document=ReturnDocument.BEFORE):
        self._record("find_one_and_update", query, update)
        document = self._first(query)
        if document is None:
            return None
        before = copy.deepcopy(document)
        document.update(update["$set"])
        return copy.deepcopy(document) if return_document is ReturnDocument.AFTER else before

    async def find_one_and_delete(self, query):
        self._record("find_one_and_delete", query)
        document = self._first(query)
        if document is None:
            return None
        self.documents.remove(document)
        return document

    async def delete_many(self, query):
        self._record("delete_many", query)
        remaining = [d for d in self.documents if not _matches(d, query)]
        deleted = len(self.documents) - len(remaining)
        self.documents = remaining
        return SimpleNamespace(deleted_count=deleted)


class StubAdmin:
    def __init__(self, error=None):
        self.error = error
        self.commands = []

    async def command(self, name):
        self.commands.append(name)
        if self.error is not None:
            raise self.error
        return {"ok": 1.0}


class StubDatabase:
    def __init__(self, name):
        self.name = name
        self.collections = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, StubCollection(name))


class StubClient:
    """Stand-in for AsyncIOMotorClient."""

    def __init__(self, uri, error=None, **options):
        self.uri = uri
        self.options = options
        self.admin = StubAdmin(error)
        self.databases = {}
        self.closed = False

    def __getitem__(self, name):
        return self.databases.setdefault(name, StubDatabase(name))

    def get_default_database(self, default=None):
        return self[default]

    def close(self):
        self.closed = True


@pytest.fixture
def client_factory():
    """Build a motor client factory; created clients are collected on `build.clients`."""

    def make(error=None):
        def build(uri, **options):
            client = StubClient(uri, error=error, **options)
            build.clients.append(client)
            return client

        build.clients = []
        return build

    return make


@pytest.fixture
def collection():
    return StubCollection()


@pytest.fixture
def repository(collection):
    return PersonRepository(collection)


@pytest.fixture
def settings():
    return Settings(_env_file=None, MONGO_URI="mongodb://stub:27017", MONGO_DATABASE="people_test")
