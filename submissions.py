"""
Per-kind submission routes.

Creating a submission is public; reading, editing and deleting one is an admin
action. One router is built per registered kind.
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pymongo.database import Database

from auth import require_admin
from dashboard import DashboardService
from database import get_db, serialize
from errors import NotFound
from registry import REGISTRY, RecordKind

logger = logging.getLogger(__name__)


def route_prefix(kind: RecordKind) -> str:
    return "/api/" + kind.collection.replace("_", "-")


def build_router(kind: RecordKind) -> APIRouter:
    router = APIRouter(prefix=route_prefix(kind), tags=[kind.label])
    create_schema = kind.create_schema
    update_schema = kind.update_schema

    @router.post("", status_code=201)
    async def create_submission(payload: create_schema, db: Database = Depends(get_db)):
        doc = await asyncio.to_thread(kind.insert, db, payload.to_document())
        logger.info("New %s submission %s", kind.tag, doc["_id"])
        return {
            "success": True,
            "message": f"{kind.label} submitted successfully",
            "data": serialize(doc),
        }

    @router.get("", dependencies=[Depends(require_admin)])
    async def list_submissions(
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        db: Database = Depends(get_db),
    ):
        data, pagination = await DashboardService(db).list_records(kind.tag, search, page, limit)
        return {"success": True, "data": data, "pagination": pagination}

    @router.get("/{record_id}", dependencies=[Depends(require_admin)])
    async def get_submission(record_id: str, db: Database = Depends(get_db)):
        data = await DashboardService(db).details(record_id, kind.tag)
        return {"success": True, "data": data}

    @router.put("/{record_id}", dependencies=[Depends(require_admin)])
    async def update_submission(record_id: str, payload: update_schema, db: Database = Depends(get_db)):
        doc = await asyncio.to_thread(kind.update_by_id, db, record_id, payload.to_document(partial=True))
        if not doc:
            raise NotFound(f"{kind.label} not found")
        return {
            "success": True,
            "message": f"{kind.label} updated successfully",
            "data": serialize(doc),
        }

    @router.delete("/{record_id}", dependencies=[Depends(require_admin)])
    async def delete_submission(record_id: str, db: Database = Depends(get_db)):
        await DashboardService(db).delete(record_id, kind.tag)
        return {"success": True, "message": f"{kind.label} deleted successfully"}

    return router


routers = [build_router(kind) for kind in REGISTRY]
