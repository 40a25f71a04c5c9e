"""
Pytest fixtures for plp-bookstore tests.

Provides an in-memory stand-in for the PyMongo async client so the
scripts can be exercised without a MongoDB server. Only the driver
surface the package calls is implemented.
"""

from __future__ import annotations

import copy
import io
import math
import re
from types import SimpleNamespace
from typing import Any

import pytest
from bson import ObjectId
from pymongo.errors import OperationFailure as DriverOperationFailure
from rich.console import Console


class FakeCursor:
    """Mock for the driver's async cursor and command cursor."""

    def __init__(self, documents: list[dict[str, Any]], plan: dict[str, Any] | None = None) -> None:
        self._documents = documents
        self._plan = plan or {}

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        if length is None:
            return list(self._documents)
        return list(self._documents[:length])

    async def explain(self) -> dict[str, Any]:
        return self._plan


def _get_field(doc: dict[str, Any], path: str) -> Any:
    current: Any = doc
    for part in path.split("."):
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            return None
    return current


def _to_string(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _concat(args: list[Any]) -> str | None:
    if any(a is None for a in args):
        return None
    return "".join(args)


EXPRESSION_OPERATORS = {
    "$concat": _concat,
    "$toString": _to_string,
    "$multiply": lambda args: math.prod(args),
    "$divide": lambda args: args[0] / args[1],
    "$floor": lambda value: float(math.floor(value)) if isinstance(value, float) else value,
}


def _evaluate(expr: Any, doc: dict[str, Any]) -> Any:
    """Evaluate an aggregation expression against a document."""
    if isinstance(expr, str) and expr.startswith("$"):
        return _get_field(doc, expr[1:])
    if isinstance(expr, list):
        return [_evaluate(e, doc) for e in expr]
    if isinstance(expr, dict) and len(expr) == 1:
        ((op, args),) = expr.items()
        if op.startswith("$"):
            if op not in EXPRESSION_OPERATORS:
                raise NotImplementedError(f"fake does not support {op}")
            return EXPRESSION_OPERATORS[op](_evaluate(args, doc))
    return expr


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _accumulate(spec: dict[str, Any], docs: list[dict[str, Any]]) -> Any:
    ((op, arg),) = spec.items()
    values = [_evaluate(arg, doc) for doc in docs]
    if op == "$sum":
        return sum(v for v in values if _is_number(v))
    if op == "$avg":
        numbers = [v for v in values if _is_number(v)]
        return sum(numbers) / len(numbers) if numbers else None
    if op == "$push":
        return values
    raise NotImplementedError(f"fake does not support accumulator {op}")


def _sort_key(value: Any) -> tuple[bool, Any]:
    return (value is not None, value)


def _sort(docs: list[dict[str, Any]], spec: list[tuple[str, Any]]) -> list[dict[str, Any]]:
    results = list(docs)
    for field, direction in reversed(spec):
        results.sort(key=lambda d: _sort_key(_get_field(d, field)), reverse=(direction == -1))
    return results


class FakeAsyncCollection:
    """Mock for a PyMongo AsyncCollection."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.documents: list[dict[str, Any]] = []
        self.indexes: dict[str, dict[str, Any]] = {}
        self._reset_indexes()

    def _reset_indexes(self) -> None:
        self.indexes = {"_id_": {"v": 2, "key": {"_id": 1}, "name": "_id_"}}

    # -- queries -----------------------------------------------------------

    def find(
        self,
        filter: dict[str, Any] | None = None,
        projection: dict[str, Any] | None = None,
        sort: list[tuple[str, int]] | None = None,
        skip: int = 0,
        limit: int = 0,
        hint: Any = None,
    ) -> FakeCursor:
        filter = filter or {}
        if hint is not None:
            self._resolve_hint(hint)
        if "$text" in filter and not self._text_fields():
            raise DriverOperationFailure("text index required for $text query", code=27)

        matched = [doc for doc in self.documents if self._matches(doc, filter)]
        results = matched
        if sort:
            results = _sort(results, sort)
        if skip:
            results = results[skip:]
        if limit:
            results = results[:limit]
        if projection:
            results = [self._project(doc, projection) for doc in results]

        return FakeCursor(
            [copy.deepcopy(doc) for doc in results],
            self._plan(filter, hint, len(results)),
        )

    def _plan(self, filter: dict[str, Any], hint: Any, returned: int) -> dict[str, Any]:
        indexed = hint is not None or any(
            next(iter(index["key"])) in filter
            for name, index in self.indexes.items()
            if name != "_id_"
        )
        stage = "IXSCAN" if indexed else "COLLSCAN"
        return {
            "queryPlanner": {"winningPlan": {"stage": "FETCH" if indexed else stage}},
            "executionStats": {
                "executionSuccess": True,
                "nReturned": returned,
                "executionTimeMillis": 0,
                "totalKeysExamined": returned if indexed else 0,
                "totalDocsExamined": returned if indexed else len(self.documents),
                "executionStages": {"stage": stage},
            },
        }

    async def count_documents(self, filter: dict[str, Any]) -> int:
        return sum(1 for doc in self.documents if self._matches(doc, filter))

    async def aggregate(self, pipeline: list[dict[str, Any]]) -> FakeCursor:
        docs = [copy.deepcopy(doc) for doc in self.documents]
        for stage in pipeline:
            ((name, spec),) = stage.items()
            docs = self._run_stage(name, spec, docs)
        return FakeCursor(docs)

    def _run_stage(self, name: str, spec: Any, docs: list[dict[str, Any]]) -> list[dict[str, Any]]:
        if name == "$match":
            return [doc for doc in docs if self._matches(doc, spec)]
        if name == "$group":
            return self._group(spec, docs)
        if name == "$sort":
            return _sort(docs, list(spec.items()))
        if name == "$limit":
            return docs[:spec]
        if name == "$skip":
            return docs[spec:]
        if name == "$project":
            return [self._project_stage(doc, spec) for doc in docs]
        if name == "$bucket":
            return self._bucket(spec, docs)
        raise NotImplementedError(f"fake does not support stage {name}")

    def _group(self, spec: dict[str, Any], docs: list[dict[str, Any]]) -> list[dict[str, Any]]:
        groups: dict[Any, list[dict[str, Any]]] = {}
        for doc in docs:
            groups.setdefault(_evaluate(spec["_id"], doc), []).append(doc)

        results = []
        for key, members in groups.items():
            row = {"_id": key}
            for field, accumulator in spec.items():
                if field != "_id":
                    row[field] = _accumulate(accumulator, members)
            results.append(row)
        return results

    def _bucket(self, spec: dict[str, Any], docs: list[dict[str, Any]]) -> list[dict[str, Any]]:
        boundaries = spec["boundaries"]
        output = spec.get("output", {"count": {"$sum": 1}})
        buckets: dict[Any, list[dict[str, Any]]] = {}

        for doc in docs:
            value = _evaluate(spec["groupBy"], doc)
            key = None
            for lower, upper in zip(boundaries, boundaries[1:]):
                if _is_number(value) and lower <= value < upper:
                    key = lower
                    break
            if key is None:
                if "default" not in spec:
                    raise DriverOperationFailure("$bucket could not find a matching branch", code=40066)
                key = spec["default"]
            buckets.setdefault(key, []).append(doc)

        order = [b for b in boundaries[:-1] if b in buckets]
        if spec.get("default") in buckets:
            order.append(spec["default"])

        results = []
        for key in order:
            row = {"_id": key}
            for field, accumulator in output.items():
                row[field] = _accumulate(accumulator, buckets[key])
            results.append(row)
        return results

    def _project_stage(self, doc: dict[str, Any], spec: dict[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if spec.get("_id", 1) not in (0, False) and "_id" in doc:
            result["_id"] = doc["_id"]
        for field, value in spec.items():
            if field == "_id":
                continue
            if value is True or value == 1:
                if field in doc:
                    result[field] = doc[field]
            elif value is False or value == 0:
                continue
            else:
                result[field] = _evaluate(value, doc)
        return result

    # -- writes ------------------------------------------------------------

    async def insert_many(self, documents: list[dict[str, Any]]) -> SimpleNamespace:
        inserted_ids = []
        for document in documents:
            if "_id" not in document:
                document["_id"] = ObjectId()
            self.documents.append(copy.deepcopy(document))
            inserted_ids.append(document["_id"])
        return SimpleNamespace(inserted_ids=inserted_ids, acknowledged=True)

    async def update_one(
        self,
        filter: dict[str, Any],
        update: dict[str, Any],
        upsert: bool = False,
    ) -> SimpleNamespace:
        for doc in self.documents:
            if self._matches(doc, filter):
                modified = self._apply_update(doc, update)
                return SimpleNamespace(
                    matched_count=1,
                    modified_count=1 if modified else 0,
                    upserted_id=None,
                    acknowledged=True,
                )

        upserted_id = None
        if upsert:
            new_doc = {k: v for k, v in filter.items() if not k.startswith("$")}
            self._apply_update(new_doc, update)
            new_doc.setdefault("_id", ObjectId())
            self.documents.append(new_doc)
            upserted_id = new_doc["_id"]

        return SimpleNamespace(
            matched_count=0, modified_count=0, upserted_id=upserted_id, acknowledged=True
        )

    async def delete_one(self, filter: dict[str, Any]) -> SimpleNamespace:
        for i, doc in enumerate(self.documents):
            if self._matches(doc, filter):
                del self.documents[i]
                return SimpleNamespace(deleted_count=1, acknowledged=True)
        return SimpleNamespace(deleted_count=0, acknowledged=True)

    async def drop(self) -> None:
        self.documents.clear()
        self._reset_indexes()

    # -- indexes -----------------------------------------------------------

    async def create_index(self, keys: list[tuple[str, Any]], **kwargs: Any) -> str:
        key = dict(keys)
        name = kwargs.get("name") or "_".join(f"{field}_{direction}" for field, direction in keys)

        existing = self.indexes.get(name)
        if existing is not None:
            if existing["key"] != key:
                raise DriverOperationFailure(
                    f"Index with name: {name} already exists with a different key",
                    code=85,
                )
            return name

        if "text" in key.values() and self._text_fields():
            raise DriverOperationFailure("An equivalent text index already exists", code=85)

        self.indexes[name] = {"v": 2, "key": key, "name": name, **kwargs}
        return name

    async def list_indexes(self) -> FakeCursor:
        return FakeCursor([dict(index) for index in self.indexes.values()])

    async def drop_index(self, name: str) -> None:
        if name == "_id_" or name not in self.indexes:
            raise DriverOperationFailure(f"index not found with name [{name}]", code=27)
        del self.indexes[name]

    def _resolve_hint(self, hint: Any) -> dict[str, Any]:
        for name, index in self.indexes.items():
            if hint == name or (not isinstance(hint, str) and dict(hint) == index["key"]):
                return index
        raise DriverOperationFailure(
            "hint provided does not correspond to an existing index", code=2
        )

    def _text_fields(self) -> list[str]:
        return [
            field
            for index in self.indexes.values()
            for field, direction in index["key"].items()
            if direction == "text"
        ]

    # -- matching ----------------------------------------------------------

    def _text_match(self, doc: dict[str, Any], search: str) -> bool:
        terms = search.lower().split()
        words: set[str] = set()
        for field in self._text_fields():
            words.update(re.findall(r"\w+", str(doc.get(field, "")).lower()))
        return any(term in words for term in terms)

    def _matches(self, doc: dict[str, Any], filter: dict[str, Any]) -> bool:
        """Check if document matches filter."""
        for key, value in filter.items():
            if key == "$text":
                if not self._text_match(doc, value["$search"]):
                    return False
                continue
            if key == "$and":
                if not all(self._matches(doc, f) for f in value):
                    return False
                continue
            if key == "$or":
                if not any(self._matches(doc, f) for f in value):
                    return False
                continue

            doc_value = _get_field(doc, key)

            if isinstance(value, dict) and any(k.startswith("$") for k in value):
                for op, op_value in value.items():
                    if op == "$eq":
                        if doc_value != op_value:
                            return False
                    elif op == "$ne":
                        if doc_value == op_value:
                            return False
                    elif op == "$gt":
                        if doc_value is None or doc_value <= op_value:
                            return False
                    elif op == "$gte":
                        if doc_value is None or doc_value < op_value:
                            return False
                    elif op == "$lt":
                        if doc_value is None or doc_value >= op_value:
                            return False
                    elif op == "$lte":
                        if doc_value is None or doc_value > op_value:
                            return False
                    elif op == "$in":
                        if doc_value not in op_value:
                            return False
                    else:
                        raise NotImplementedError(f"fake does not support {op}")
            elif doc_value != value:
                return False

        return True

    def _apply_update(self, doc: dict[str, Any], update: dict[str, Any]) -> bool:
        """Apply update operators to document."""
        modified = False

        for op, fields in update.items():
            if op == "$set":
                for key, value in fields.items():
                    if doc.get(key) != value:
                        doc[key] = value
                        modified = True
            elif op == "$inc":
                for key, value in fields.items():
                    doc[key] = doc.get(key, 0) + value
                    modified = True
            elif op == "$unset":
                for key in fields:
                    if key in doc:
                        del doc[key]
                        modified = True
            else:
                raise NotImplementedError(f"fake does not support {op}")

        return modified

    def _project(self, doc: dict[str, Any], projection: dict[str, Any]) -> dict[str, Any]:
        """Apply find projection to document."""
        include_mode = any(v for k, v in projection.items() if k != "_id")

        if include_mode:
            result = {key: doc[key] for key, include in projection.items() if include and key in doc}
            if "_id" in doc and projection.get("_id", 1) != 0:
                result["_id"] = doc["_id"]
            return result
        return {k: v for k, v in doc.items() if projection.get(k, 1) != 0}


class FakeAsyncDatabase:
    """Mock for a PyMongo AsyncDatabase."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.collections: dict[str, FakeAsyncCollection] = {}

    def __getitem__(self, name: str) -> FakeAsyncCollection:
        if name not in self.collections:
            self.collections[name] = FakeAsyncCollection(name)
        return self.collections[name]


class FakeAdmin:
    def __init__(self, server: FakeMongoServer) -> None:
        self._server = server
        self.commands: list[str] = []

    async def command(self, name: str) -> dict[str, Any]:
        self.commands.append(name)
        if self._server.ping_error is not None:
            raise self._server.ping_error
        return {"ok": 1.0}


class FakeAsyncMongoClient:
    """Mock for pymongo.AsyncMongoClient that counts close() calls."""

    def __init__(self, server: FakeMongoServer, uri: str, **kwargs: Any) -> None:
        self._server = server
        self.uri = uri
        self.kwargs = kwargs
        self.admin = FakeAdmin(server)
        self.close_calls = 0

    def __getitem__(self, name: str) -> FakeAsyncDatabase:
        return self._server.database(name)

    async def close(self) -> None:
        self.close_calls += 1


class FakeMongoServer:
    """Shared state behind every fake client created during a test."""

    def __init__(self) -> None:
        self.databases: dict[str, FakeAsyncDatabase] = {}
        self.clients: list[FakeAsyncMongoClient] = []
        self.ping_error: Exception | None = None

    def client(self, uri: str, **kwargs: Any) -> FakeAsyncMongoClient:
        client = FakeAsyncMongoClient(self, uri, **kwargs)
        self.clients.append(client)
        return client

    def database(self, name: str) -> FakeAsyncDatabase:
        if name not in self.databases:
            self.databases[name] = FakeAsyncDatabase(name)
        return self.databases[name]

    def collection(self, database: str, name: str) -> FakeAsyncCollection:
        return self.database(database)[name]


@pytest.fixture
def mongo_server(monkeypatch: pytest.MonkeyPatch) -> FakeMongoServer:
    """Replace AsyncMongoClient in the client module with the fake."""
    server = FakeMongoServer()
    monkeypatch.setattr("plp_bookstore.client.AsyncMongoClient", server.client)
    return server


@pytest.fixture
def settings():
    from plp_bookstore import Settings

    return Settings(uri="mongodb://test.local:27017", database="testdb", collection="books")


@pytest.fixture
async def client(mongo_server: FakeMongoServer, settings):
    """Create a connected BookstoreClient."""
    from plp_bookstore import BookstoreClient

    client = BookstoreClient(settings)
    await client.connect()
    yield client
    await client.close()


@pytest.fixture
async def books(client):
    """The empty books collection."""
    return client.books


@pytest.fixture
async def seeded_books(books):
    """The books collection loaded with the sample dataset."""
    from plp_bookstore.sample_data import BOOKS

    await books.insert_many(copy.deepcopy(BOOKS))
    return books


@pytest.fixture
def fake_books(mongo_server: FakeMongoServer, settings) -> FakeAsyncCollection:
    """The fake driver collection backing ``books``."""
    return mongo_server.collection(settings.database, settings.collection)


@pytest.fixture
def console() -> Console:
    """A console that records output instead of writing to stdout."""
    return Console(file=io.StringIO(), width=200, color_system=None)
