import logging
from typing import Optional

from fastapi import Depends, FastAPI, Query
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.database import Database
from starlette.exceptions import HTTPException as StarletteHTTPException

import database
from auth import require_admin, warn_if_open
from config import settings
from dashboard import DashboardService
from database import get_db
from errors import PortalError
from schemas import TypeSelector
from submissions import routers as submission_routers

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Civic Portal API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------- Error envelopes ----------

def failure(status_code: int, message: str, error: Optional[str] = None) -> JSONResponse:
    body = {"success": False, "message": message}
    if error:
        body["error"] = error
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(PortalError)
async def portal_error_handler(request, exc: PortalError):
    return failure(exc.status_code, exc.message, exc.error)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request, exc: StarletteHTTPException):
    return failure(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request, exc: RequestValidationError):
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        msg = str(err.get("msg", "")).removeprefix("Value error, ")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return failure(400, "Please provide all required fields in a valid format", "; ".join(parts))


@app.exception_handler(Exception)
async def unexpected_error_handler(request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return failure(500, "Internal server error", str(exc))


# ---------- Lifecycle ----------

@app.on_event("startup")
async def on_start():
    warn_if_open()


@app.on_event("shutdown")
async def on_stop():
    database.close_client()


# ---------- Basic ----------

@app.get("/")
def root():
    return {"name": "Civic Portal API", "status": "ok"}


@app.get("/test")
def test_database():
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "collections": []
    }
    try:
        if database.db is not None:
            response["database"] = "✅ Connected"
            response["collections"] = database.db.list_collection_names()
    except Exception as e:
        response["database"] = f"⚠️ {str(e)[:80]}"
    return response


# ---------- Dashboard ----------

def get_dashboard(db: Database = Depends(get_db)) -> DashboardService:
    return DashboardService(db)


def _selected_type(payload: Optional[TypeSelector], type_: Optional[str]) -> Optional[str]:
    if payload is not None and payload.type:
        return payload.type
    return type_


@app.get("/api/dashboard/overview", dependencies=[Depends(require_admin)])
async def dashboard_overview(service: DashboardService = Depends(get_dashboard)):
    return {"success": True, "data": await service.overview()}


@app.get("/api/dashboard/all-data", dependencies=[Depends(require_admin)])
async def dashboard_all_data(
    page: int = 1,
    limit: int = 10,
    search: Optional[str] = None,
    type_: Optional[str] = Query(None, alias="type"),
    service: DashboardService = Depends(get_dashboard),
):
    data, pagination = await service.list_records(type_, search, page, limit)
    return {"success": True, "data": data, "pagination": pagination}


@app.get("/api/dashboard/details/{record_id}", dependencies=[Depends(require_admin)])
async def dashboard_details(
    record_id: str,
    type_: Optional[str] = Query(None, alias="type"),
    service: DashboardService = Depends(get_dashboard),
):
    return {"success": True, "data": await service.details(record_id, type_)}


@app.patch("/api/dashboard/mark-viewed/{record_id}", dependencies=[Depends(require_admin)])
async def dashboard_mark_viewed(
    record_id: str,
    payload: Optional[TypeSelector] = None,
    type_: Optional[str] = Query(None, alias="type"),
    service: DashboardService = Depends(get_dashboard),
):
    data = await service.mark_viewed(record_id, _selected_type(payload, type_))
    return {"success": True, "message": "Marked as viewed", "data": data}


@app.delete("/api/dashboard/delete/{record_id}", dependencies=[Depends(require_admin)])
async def dashboard_delete(
    record_id: str,
    payload: Optional[TypeSelector] = None,
    type_: Optional[str] = Query(None, alias="type"),
    service: DashboardService = Depends(get_dashboard),
):
    data = await service.delete(record_id, _selected_type(payload, type_))
    return {"success": True, "message": f"{data['type']} deleted successfully", "data": data}


# ---------- Submissions ----------

for router in submission_routers:
    app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000)
