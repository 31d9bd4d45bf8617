from datetime import datetime
from typing import Dict, List, Optional, Sequence, Set

from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database

from repo_radar.entities.star_snapshot import StarSnapshot

from .base import BaseRepository


class StarSnapshotRepository(BaseRepository[StarSnapshot]):
    def __init__(self, db: Database):
        super().__init__(db, "star_snapshots", StarSnapshot)

    def find_on_or_after(self, github_repo_id: int, since: datetime) -> Optional[StarSnapshot]:
        return self.find_one(
            {"github_repo_id": github_repo_id, "recorded_at": {"$gte": since}}
        )

    def find_latest_before(self, github_repo_id: int, before: datetime) -> Optional[StarSnapshot]:
        return self.find_one(
            {"github_repo_id": github_repo_id, "recorded_at": {"$lte": before}},
            sort=[("recorded_at", DESCENDING)],
        )

    def find_oldest(self, github_repo_id: int) -> Optional[StarSnapshot]:
        return self.find_one(
            {"github_repo_id": github_repo_id},
            sort=[("recorded_at", ASCENDING)],
        )

    def _first_per_repo(self, match: Dict, direction: int) -> Dict[int, StarSnapshot]:
        pipeline = [
            {"$match": match},
            {"$sort": {"github_repo_id": ASCENDING, "recorded_at": direction}},
            {"$group": {"_id": "$github_repo_id", "snapshot": {"$first": "$$ROOT"}}},
        ]
        return {
            doc["_id"]: StarSnapshot.model_validate(doc["snapshot"])
            for doc in self.collection.aggregate(pipeline)
        }

    def find_baselines(
        self, github_repo_ids: Sequence[int], before: datetime
    ) -> Dict[int, StarSnapshot]:
        """
        Baseline per repository for a whole list: the newest snapshot at or
        before ``before``, else the oldest one. Repositories without any
        snapshot are absent from the result.
        """
        ids = list(set(github_repo_ids))
        if not ids:
            return {}

        baselines = self._first_per_repo(
            {"github_repo_id": {"$in": ids}, "recorded_at": {"$lte": before}}, DESCENDING
        )
        missing = [github_repo_id for github_repo_id in ids if github_repo_id not in baselines]
        if missing:
            baselines.update(
                self._first_per_repo({"github_repo_id": {"$in": missing}}, ASCENDING)
            )
        return baselines

    def repo_ids_recorded_since(self, github_repo_ids: Sequence[int], since: datetime) -> Set[int]:
        return set(
            self.collection.distinct(
                "github_repo_id",
                {"github_repo_id": {"$in": list(github_repo_ids)}, "recorded_at": {"$gte": since}},
            )
        )

    def insert_many(self, snapshots: List[StarSnapshot]) -> int:
        if not snapshots:
            return 0
        result = self.collection.insert_many([snapshot.to_mongo() for snapshot in snapshots])
        return len(result.inserted_ids)

    def list_for_repo(self, github_repo_id: int, limit: int = 90) -> List[StarSnapshot]:
        return self.find_many(
            {"github_repo_id": github_repo_id},
            sort=[("recorded_at", DESCENDING)],
            limit=limit,
        )
