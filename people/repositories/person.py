"""Data access for Person documents."""

from __future__ import annotations

import functools
import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, TypeVar

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from opentelemetry import trace
from pydantic import ValidationError
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import ConnectionFailure, PyMongoError

from people.core.exceptions import OperationError, StorageConnectionError
from people.models.person import Person, PersonDraft, PersonId, project_document, to_object_id
from people.utils.monitoring import observe_operation

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

T = TypeVar("T")


def storage_operation(name: str) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Trace, time and translate driver errors for one repository operation."""

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(self: "PersonRepository", *args: Any, **kwargs: Any) -> T:
            started = time.perf_counter()
            outcome = "error"
            with tracer.start_as_current_span(f"people.{name}") as span:
                span.set_attribute("db.system", "mongodb")
                span.set_attribute("db.collection.name", self.collection.name)
                try:
                    result = await func(self, *args, **kwargs)
                    outcome = "success"
                    return result
                except ConnectionFailure as exc:
                    logger.error("Storage unavailable during %s: %s", name, exc)
                    raise StorageConnectionError(
                        f"Storage unavailable during {name}", details={"reason": str(exc)}
                    ) from exc
                except PyMongoError as exc:
                    raise OperationError(name, str(exc)) from exc
                except ValidationError as exc:
                    logger.error("Stored document rejected during %s: %s", name, exc)
                    raise OperationError(name, f"Stored document failed validation: {exc}") from exc
                finally:
                    observe_operation(name, outcome, time.perf_counter() - started)

        return wrapper

    return decorator


def _document_key(field: str) -> str:
    """Map a model field name (or alias) to the stored document key."""

    if field == "id":
        return "_id"
    model_field = PersonDraft.model_fields.get(field)
    if model_field is not None and model_field.alias:
        return model_field.alias
    return field


class PersonRepository:
    """CRUD operations over the Person collection.

    The repository holds no state besides the collection handle and never
    locks; each method is one request/response against MongoDB, except
    `edit_then_save` which is a load followed by a full-document replace.
    "No match" is returned as `None`, `[]` or `0`, never raised.
    """

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self.collection = collection

    @storage_operation("insert_one")
    async def insert_one(self, draft: PersonDraft) -> Person:
        document = draft.to_document()
        result = await self.collection.insert_one(document)
        logger.debug("Inserted person %s", result.inserted_id)
        return Person.from_document({**document, "_id": result.inserted_id})

    @storage_operation("insert_many")
    async def insert_many(self, drafts: Sequence[PersonDraft]) -> List[Person]:
        if not drafts:
            return []
        documents = [draft.to_document() for draft in drafts]
        result = await self.collection.insert_many(documents, ordered=True)
        return [
            Person.from_document({**document, "_id": inserted_id})
            for document, inserted_id in zip(documents, result.inserted_ids)
        ]

    @storage_operation("find_by_name")
    async def find_by_name(self, name: str) -> List[Person]:
        cursor = self.collection.find({"name": name})
        return [Person.from_document(document) async for document in cursor]

    @storage_operation("find_one_by_favorite_food")
    async def find_one_by_favorite_food(self, food: str) -> Optional[Person]:
        document = await self.collection.find_one({"favoriteFoods": food})
        return Person.from_document(document) if document else None

    @storage_operation("find_by_id")
    async def find_by_id(self, person_id: PersonId) -> Optional[Person]:
        object_id = self._object_id("find_by_id", person_id)
        document = await self.collection.find_one({"_id": object_id})
        return Person.from_document(document) if document else None

    @storage_operation("edit_then_save")
    async def edit_then_save(self, person_id: PersonId, food: str = "Hamburger") -> Optional[Person]:
        """Append `food` to a person's favourites by loading then saving the whole record.

        Not atomic: a write landing between the load and the replace is lost
        (last writer wins). Use `find_and_update` style updates when that matters.
        """

        object_id = self._object_id("edit_then_save", person_id)
        document = await self.collection.find_one({"_id": object_id})
        if document is None:
            logger.info("Person not found with ID: %s", person_id)
            return None

        person = Person.from_document(document)
        person.favorite_foods.append(food)

        # Keys the model does not know about (e.g. "__v") are carried over unchanged.
        replacement = {**document, **person.to_document()}
        result = await self.collection.replace_one({"_id": object_id}, replacement)
        if result.matched_count == 0:
            logger.warning("Person %s was removed before it could be saved", person_id)
            return None
        return person

    @storage_operation("find_and_update")
    async def find_and_update(self, name: str, age: int = 20) -> Optional[Person]:
        document = await self.collection.find_one_and_update(
            {"name": name},
            {"$set": {"age": age}},
            return_document=ReturnDocument.AFTER,
        )
        return Person.from_document(document) if document else None

    @storage_operation("remove_by_id")
    async def remove_by_id(self, person_id: PersonId) -> Optional[Person]:
        object_id = self._object_id("remove_by_id", person_id)
        document = await self.collection.find_one_and_delete({"_id": object_id})
        return Person.from_document(document) if document else None

    @storage_operation("remove_by_name")
    async def remove_by_name(self, name: str) -> int:
        result = await self.collection.delete_many({"name": name})
        return result.deleted_count

    @storage_operation("query_chain")
    async def query_chain(
        self,
        food: str,
        *,
        sort_by: str = "name",
        ascending: bool = True,
        limit: int = 2,
        fields: Sequence[str] = ("name",),
    ) -> List[Dict[str, Any]]:
        """Filter by favourite food, then sort, then limit, then project.

        The server evaluates the projection after sort and limit regardless of
        where it appears in the request, so the order above is what callers get.
        """

        if limit <= 0:
            raise OperationError("query_chain", "limit must be positive", details={"limit": limit})

        projection: Dict[str, int] = {_document_key(field): 1 for field in fields}
        projection.setdefault("_id", 0)

        cursor = (
            self.collection.find({"favoriteFoods": food}, projection)
            .sort(_document_key(sort_by), ASCENDING if ascending else DESCENDING)
            .limit(limit)
        )
        return [project_document(document) async for document in cursor]

    @staticmethod
    def _object_id(operation: str, person_id: PersonId) -> ObjectId:
        try:
            return to_object_id(person_id)
        except ValueError as exc:
            raise OperationError(operation, str(exc), details={"person_id": str(person_id)}) from exc
