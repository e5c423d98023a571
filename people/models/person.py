"""Person document model."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Union

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel, ConfigDict, Field

PersonId = Union[str, ObjectId]


class PersonDraft(BaseModel):
    """A Person that has not been stored yet."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    age: Optional[int] = Field(None, ge=0)
    favorite_foods: List[str] = Field(default_factory=list, alias="favoriteFoods")

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"id"})


class Person(PersonDraft):
    """A stored Person. `id` is the hex form of the document's `_id`."""

    id: str

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "Person":
        payload = {key: value for key, value in document.items() if key != "_id"}
        payload["id"] = str(document["_id"])
        return cls.model_validate(payload)

    def to_document(self) -> Dict[str, Any]:
        return {"_id": ObjectId(self.id), **super().to_document()}


def to_object_id(person_id: PersonId) -> ObjectId:
    """Parse a person identifier; raises `ValueError` when it is not an ObjectId."""

    if isinstance(person_id, ObjectId):
        return person_id
    try:
        return ObjectId(person_id)
    except (InvalidId, TypeError) as exc:
        raise ValueError(f"Invalid person id: {person_id!r}") from exc


def project_document(document: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert a projected document to a plain dict, surfacing `_id` as `id`."""

    projected = dict(document)
    if "_id" in projected:
        projected["id"] = str(projected.pop("_id"))
    return projected
