"""
Registry of submission kinds.

Every cross-collection operation resolves its discriminator here and then
talks to the returned ``RecordKind``; adding a new kind means adding one entry
to ``REGISTRY``.
"""

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Type

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from database import create_document, get_documents, oid, utcnow
from errors import InvalidType, StoreError
from schemas import (
    DevelopmentIdeaCreate,
    DevelopmentIdeaUpdate,
    OpinionCreate,
    OpinionUpdate,
    Submission,
    SuggestionCreate,
    SuggestionUpdate,
    VolunteerCreate,
    VolunteerUpdate,
)

logger = logging.getLogger(__name__)


@contextmanager
def _store_call(kind: "RecordKind", action: str) -> Iterator[None]:
    try:
        yield
    except PyMongoError as exc:
        logger.exception("Store error while trying to %s %s", action, kind.tag)
        raise StoreError(f"Error trying to {action} {kind.label.lower()}", error=str(exc)) from exc


@dataclass(frozen=True)
class RecordKind:
    tag: str
    label: str
    collection: str
    total_key: str
    searchable_fields: Tuple[str, ...]
    supports_viewed: bool
    create_schema: Type[Submission]
    update_schema: Type[Submission]

    def search_filter(self, search: Optional[str]) -> Dict[str, Any]:
        text = (search or "").strip()
        if not text:
            return {}
        pattern = re.escape(text)
        return {"$or": [{field: {"$regex": pattern, "$options": "i"}} for field in self.searchable_fields]}

    def insert(self, db: Database, data: Dict[str, Any]) -> dict:
        with _store_call(self, "create"):
            return create_document(db, self.collection, data)

    def count(self, db: Database, filter_dict: Optional[Dict[str, Any]] = None) -> int:
        with _store_call(self, "count"):
            return db[self.collection].count_documents(filter_dict or {})

    def find(
        self,
        db: Database,
        filter_dict: Optional[Dict[str, Any]] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[dict]:
        with _store_call(self, "fetch"):
            return get_documents(db, self.collection, filter_dict, skip=skip, limit=limit)

    def find_by_id(self, db: Database, record_id: str) -> Optional[dict]:
        _id = oid(record_id)
        with _store_call(self, "fetch"):
            return db[self.collection].find_one({"_id": _id})

    def update_by_id(self, db: Database, record_id: str, fields: Dict[str, Any]) -> Optional[dict]:
        _id = oid(record_id)
        with _store_call(self, "update"):
            return db[self.collection].find_one_and_update(
                {"_id": _id},
                {"$set": {**fields, "updatedAt": utcnow()}},
                return_document=ReturnDocument.AFTER,
            )

    def mark_viewed(self, db: Database, record_id: str) -> Optional[dict]:
        if not self.supports_viewed:
            return self.find_by_id(db, record_id)
        return self.update_by_id(db, record_id, {"viewed": True})

    def delete_by_id(self, db: Database, record_id: str) -> Optional[dict]:
        _id = oid(record_id)
        with _store_call(self, "delete"):
            return db[self.collection].find_one_and_delete({"_id": _id})


class Registry:
    def __init__(self, kinds: Sequence[RecordKind]):
        self._kinds = {kind.tag: kind for kind in kinds}

    def __iter__(self) -> Iterator[RecordKind]:
        return iter(self._kinds.values())

    def __len__(self) -> int:
        return len(self._kinds)

    @property
    def tags(self) -> Tuple[str, ...]:
        return tuple(self._kinds)

    def resolve(self, tag: Optional[str]) -> RecordKind:
        if not tag:
            raise InvalidType(self.tags, required=True)
        kind = self._kinds.get(tag)
        if kind is None:
            raise InvalidType(self.tags)
        return kind


REGISTRY = Registry(
    [
        RecordKind(
            tag="volunteer",
            label="Volunteer",
            collection="volunteer",
            total_key="totalVolunteers",
            searchable_fields=("fullname", "fathername", "mothername", "mobile", "education", "area"),
            supports_viewed=True,
            create_schema=VolunteerCreate,
            update_schema=VolunteerUpdate,
        ),
        RecordKind(
            tag="opinion",
            label="Opinion",
            collection="your_opinion",
            total_key="totalOpinions",
            searchable_fields=("fullname", "mobile", "area", "typeOfOpinion", "comment"),
            supports_viewed=False,
            create_schema=OpinionCreate,
            update_schema=OpinionUpdate,
        ),
        RecordKind(
            tag="suggestion",
            label="Suggestion",
            collection="your_suggest",
            total_key="totalSuggestions",
            searchable_fields=("fullname", "mobile", "area", "typeOfSuggest", "comment"),
            supports_viewed=True,
            create_schema=SuggestionCreate,
            update_schema=SuggestionUpdate,
        ),
        RecordKind(
            tag="developmentIdea",
            label="Development idea",
            collection="development_idea",
            total_key="totalDevelopmentIdeas",
            searchable_fields=("fullname", "mobile", "area", "comment", "typeOfIdea"),
            supports_viewed=True,
            create_schema=DevelopmentIdeaCreate,
            update_schema=DevelopmentIdeaUpdate,
        ),
    ]
)
