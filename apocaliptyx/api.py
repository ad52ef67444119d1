# api.py
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from apocaliptyx import __version__
from apocaliptyx.dedup.service import DuplicateDetectionService
from apocaliptyx.utils.logger import log_error


class ScenarioText(BaseModel):
    title: str
    description: str = ""


class DuplicateCheckRequest(ScenarioText):
    exclude_id: Optional[str] = None


class MarkDuplicateRequest(BaseModel):
    original_id: str


_service: Optional[DuplicateDetectionService] = None


def get_service() -> DuplicateDetectionService:
    global _service
    if _service is None:
        _service = DuplicateDetectionService()
    return _service


router = APIRouter()


# --------------------------
# Duplicate checks
# --------------------------
@router.post("/check-duplicates")
async def check_duplicates(
    item: DuplicateCheckRequest,
    service: DuplicateDetectionService = Depends(get_service),
):
    result = await service.check_for_duplicates(item.title, item.description, item.exclude_id)
    return result.to_dict()


@router.get("/suggestions")
async def suggestions(
    q: str = Query("", description="Partial title typed so far"),
    service: DuplicateDetectionService = Depends(get_service),
):
    results = await service.get_suggestions(q)
    return {"results": [s.to_dict() for s in results]}


@router.post("/content-hash")
def content_hash(item: ScenarioText):
    return {"contentHash": DuplicateDetectionService.generate_content_hash(item.title, item.description)}


# --------------------------
# Hash maintenance
# --------------------------
@router.put("/{scenario_id}/content-hash")
async def update_content_hash(
    scenario_id: str,
    item: ScenarioText,
    service: DuplicateDetectionService = Depends(get_service),
):
    updated = await service.update_content_hash(scenario_id, item.title, item.description)
    return {"success": updated}


@router.post("/{scenario_id}/mark-duplicate")
async def mark_duplicate(
    scenario_id: str,
    item: MarkDuplicateRequest,
    service: DuplicateDetectionService = Depends(get_service),
):
    marked = await service.mark_as_duplicate(scenario_id, item.original_id)
    return {"success": marked}


@router.post("/backfill-hashes")
async def backfill_hashes(service: DuplicateDetectionService = Depends(get_service)):
    return {"updated": await service.update_all_hashes()}


def create_app() -> FastAPI:
    app = FastAPI(
        title="Apocaliptyx Duplicate Detection",
        description="Duplicate and similarity detection for prediction scenarios",
        version=__version__,
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        log_error("Unhandled exception", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=500,
            content={"success": False, "detail": "Internal server error"},
        )

    @app.get("/health")
    def health():
        return {"status": "ok", "version": __version__}

    app.include_router(router, prefix="/scenarios", tags=["Scenarios"])
    return app


app = create_app()
