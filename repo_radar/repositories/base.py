"""Generic repository over a single MongoDB collection."""

from __future__ import annotations

from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database

from repo_radar.entities.base import BaseEntity
from repo_radar.utils.datetime import utc_now

T = TypeVar("T", bound=BaseEntity)

SortSpec = Sequence[Tuple[str, int]]


class BaseRepository(Generic[T]):
    """CRUD helpers shared by every collection repository."""

    def __init__(self, db: Database, collection_name: str, model_class: Type[T]):
        self.db = db
        self.collection: Collection = db[collection_name]
        self.model_class = model_class

    @staticmethod
    def _to_object_id(value: str | ObjectId) -> ObjectId:
        if isinstance(value, ObjectId):
            return value
        return ObjectId(value)

    @staticmethod
    def is_valid_id(value: str | ObjectId | None) -> bool:
        if isinstance(value, ObjectId):
            return True
        return bool(value) and ObjectId.is_valid(value)

    def _to_entity(self, document: Optional[Dict[str, Any]]) -> Optional[T]:
        if not document:
            return None
        return self.model_class.model_validate(document)

    def find_by_id(self, entity_id: str | ObjectId) -> Optional[T]:
        if not self.is_valid_id(entity_id):
            return None
        return self.find_one({"_id": self._to_object_id(entity_id)})

    def find_one(self, query: Dict[str, Any], sort: Optional[SortSpec] = None) -> Optional[T]:
        document = self.collection.find_one(query, sort=list(sort) if sort else None)
        return self._to_entity(document)

    def find_many(
        self,
        query: Dict[str, Any],
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[T]:
        cursor = self.collection.find(query)
        if sort:
            cursor = cursor.sort(list(sort))
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return [self.model_class.model_validate(doc) for doc in cursor]

    def count(self, query: Dict[str, Any]) -> int:
        return self.collection.count_documents(query)

    def insert_one(self, entity: T) -> T:
        result = self.collection.insert_one(entity.to_mongo())
        entity.id = result.inserted_id
        return entity

    def update_one(self, entity_id: str | ObjectId, updates: Dict[str, Any]) -> Optional[T]:
        updates = {**updates, "updated_at": updates.get("updated_at") or utc_now()}
        document = self.collection.find_one_and_update(
            {"_id": self._to_object_id(entity_id)},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        return self._to_entity(document)

    def delete_one(self, entity_id: str | ObjectId) -> bool:
        result = self.collection.delete_one({"_id": self._to_object_id(entity_id)})
        return result.deleted_count > 0

    def delete_many(self, query: Dict[str, Any]) -> int:
        result = self.collection.delete_many(query)
        return result.deleted_count
