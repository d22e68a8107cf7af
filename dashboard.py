"""
Dashboard aggregation over every submission kind.

All store access goes through the kinds in ``registry.REGISTRY``. pymongo is
blocking, so each call runs in a worker thread. Reads are gathered under a
single deadline. Single-record writes run without one, so a 504 never reports
a write that went through.

The cross-kind listing loads every matching record of every kind, sorts them
in memory and slices the requested page. Per-kind ``skip``/``limit`` cannot
produce a correct global page, so this path costs O(matching records) per
request. That is fine for thousands of submissions; revisit before the
collections reach the hundreds of thousands.
"""

import asyncio
import logging
import math
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from pymongo.database import Database

from config import settings
from database import serialize
from errors import NotFound, Timeout
from registry import REGISTRY, RecordKind, Registry

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def paginate(total: int, page: int, limit: int) -> Dict[str, Any]:
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "totalPages": math.ceil(total / limit),
        "hasNextPage": page * limit < total,
        "hasPrevPage": page > 1,
    }


def normalize_paging(page: Optional[int], limit: Optional[int]) -> Tuple[int, int]:
    page = page if page and page >= 1 else DEFAULT_PAGE
    limit = limit if limit and limit >= 1 else DEFAULT_LIMIT
    return page, limit


def tag_record(doc: dict, kind: RecordKind) -> dict:
    return {**serialize(doc), "type": kind.tag}


def _created_at(doc: dict) -> datetime:
    value = doc.get("createdAt")
    if not isinstance(value, datetime):
        return _OLDEST
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def merge_newest_first(batches: List[Tuple[RecordKind, List[dict]]]) -> List[Tuple[RecordKind, dict]]:
    """
    Concatenate per-kind results and order them newest first.

    Equal ``createdAt`` values fall back to kind tag, then id, both ascending.
    Records without a timestamp go last.
    """

    merged = [(kind, doc) for kind, docs in batches for doc in docs]
    merged.sort(key=lambda pair: (pair[0].tag, str(pair[1].get("_id", ""))))
    merged.sort(key=lambda pair: _created_at(pair[1]), reverse=True)
    return merged


class DashboardService:
    def __init__(
        self,
        db: Database,
        registry: Registry = REGISTRY,
        timeout: Optional[float] = None,
    ):
        self.db = db
        self.registry = registry
        self.timeout = settings.query_timeout_seconds if timeout is None else timeout

    async def _gather(self, *calls: Tuple[Callable[..., Any], tuple]) -> List[Any]:
        tasks = [asyncio.to_thread(func, *args) for func, args in calls]
        try:
            return await asyncio.wait_for(asyncio.gather(*tasks), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("Dashboard query exceeded %.2fs", self.timeout)
            raise Timeout("Dashboard query timed out", error=f"no response within {self.timeout:g}s")

    async def overview(self) -> Dict[str, int]:
        kinds = list(self.registry)
        counts = await self._gather(*[(kind.count, (self.db,)) for kind in kinds])
        data = {kind.total_key: count for kind, count in zip(kinds, counts)}
        data["totalSubmissions"] = sum(counts)
        return data

    async def list_records(
        self,
        type_: Optional[str] = None,
        search: Optional[str] = None,
        page: Optional[int] = DEFAULT_PAGE,
        limit: Optional[int] = DEFAULT_LIMIT,
    ) -> Tuple[List[dict], Dict[str, Any]]:
        page, limit = normalize_paging(page, limit)
        skip = (page - 1) * limit

        if type_:
            kind = self.registry.resolve(type_)
            query = kind.search_filter(search)
            docs, total = await self._gather(
                (kind.find, (self.db, query, skip, limit)),
                (kind.count, (self.db, query)),
            )
            return [tag_record(doc, kind) for doc in docs], paginate(total, page, limit)

        kinds = list(self.registry)
        batches = await self._gather(*[(kind.find, (self.db, kind.search_filter(search))) for kind in kinds])
        merged = merge_newest_first(list(zip(kinds, batches)))
        page_items = merged[skip:skip + limit]
        return [tag_record(doc, kind) for kind, doc in page_items], paginate(len(merged), page, limit)

    async def details(self, record_id: str, type_: Optional[str]) -> dict:
        kind = self.registry.resolve(type_)
        (doc,) = await self._gather((kind.find_by_id, (self.db, record_id)))
        return self._found(doc, kind)

    async def mark_viewed(self, record_id: str, type_: Optional[str]) -> dict:
        kind = self.registry.resolve(type_)
        doc = await asyncio.to_thread(kind.mark_viewed, self.db, record_id)
        record = self._found(doc, kind)
        if kind.supports_viewed:
            logger.info("Marked %s %s as viewed", kind.tag, record_id)
        else:
            logger.debug("%s has no viewed flag; left %s unchanged", kind.tag, record_id)
        return record

    async def delete(self, record_id: str, type_: Optional[str]) -> dict:
        kind = self.registry.resolve(type_)
        doc = await asyncio.to_thread(kind.delete_by_id, self.db, record_id)
        record = self._found(doc, kind)
        logger.info("Deleted %s %s", kind.tag, record_id)
        return record

    @staticmethod
    def _found(doc: Optional[dict], kind: RecordKind) -> dict:
        if not doc:
            raise NotFound(f"{kind.label} not found")
        return tag_record(doc, kind)
