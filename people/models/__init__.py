from .person import Person, PersonDraft, PersonId, project_document, to_object_id

__all__ = [
    "Person",
    "PersonDraft",
    "PersonId",
    "project_document",
    "to_object_id",
]
