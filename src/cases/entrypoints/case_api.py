"""
Case API Entrypoint - Thin API with Command Dispatch
Writes dispatch commands through the message bus, reads go through views.
"""
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from cases import views
from cases.adapters.repository import AbstractCaseRepository, create_case_repository
from cases.domain.commands import AddCases, AssignConfirmLink, UpdateCase
from cases.domain.model import CaseNotFound, InvalidCase, parse_case_id
from cases.service_layer import messagebus
from cases.service_layer.unit_of_work import CaseStoreUnitOfWork
from shared.entrypoints.http import configure_logging, install_error_handlers, read_json, require_cases_token
from uploads.adapters.repository import AbstractFileStore, LocalFileStore, create_file_store
from uploads.entrypoints import upload_api

configure_logging()
logger = logging.getLogger(__name__)

router = APIRouter()

# ---------- Request/Response models ----------

class CasesListResponse(BaseModel):
    cases: List[Dict[str, Any]]


class BulkInsertResponse(BaseModel):
    ok: bool
    count: int


class CaseUpdateResponse(BaseModel):
    ok: bool
    case: Dict[str, Any]


class LinkStatusResponse(BaseModel):
    id: int
    confirm_url: str


class LinkAssignedResponse(BaseModel):
    message: str
    case: Dict[str, Any]


# ---------- Dependencies ----------

def get_uow(request: Request) -> CaseStoreUnitOfWork:
    return CaseStoreUnitOfWork(request.app.state.repository)


# ---------- Endpoints ----------

@router.get("/health")
async def health_check(request: Request):
    """Health check endpoint"""
    repository = request.app.state.repository
    return {
        "status": "healthy",
        "service": "case-api",
        "store_backend": repository.backend if repository else None,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/api/cases", response_model=CasesListResponse, summary="List all cases")
def list_cases(uow: CaseStoreUnitOfWork = Depends(get_uow)):
    return CasesListResponse(cases=views.list_cases(uow))


@router.post(
    "/api/cases",
    response_model=BulkInsertResponse,
    summary="Append one case or a list of cases",
    dependencies=[Depends(require_cases_token)],
)
async def add_cases(request: Request, uow: CaseStoreUnitOfWork = Depends(get_uow)):
    """
    Bulk insert. The body is a single case object or an array of them.
    Nothing is stored unless every item is a valid case.
    """
    logger.info("POST request on /api/cases")
    body = await read_json(request)
    items = body if isinstance(body, list) else [body]
    if not all(isinstance(item, dict) for item in items):
        raise HTTPException(status_code=400, detail="invalid_json")

    try:
        count = messagebus.handle(AddCases(cases=items), uow)
    except InvalidCase as e:
        logger.error(f"Validation error adding cases: {e}")
        raise HTTPException(status_code=400, detail="invalid_case")

    return BulkInsertResponse(ok=True, count=count)


@router.patch(
    "/api/cases/{case_id}",
    response_model=CaseUpdateResponse,
    summary="Merge a partial record onto a case",
    dependencies=[Depends(require_cases_token)],
)
async def patch_case(case_id: str, request: Request, uow: CaseStoreUnitOfWork = Depends(get_uow)):
    id_num = parse_case_id(case_id)
    if id_num is None:
        raise HTTPException(status_code=400, detail="invalid_id")

    payload = await read_json(request)
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="invalid_json")

    try:
        updated = messagebus.handle(UpdateCase(case_id=id_num, patch=payload), uow)
    except CaseNotFound:
        raise HTTPException(status_code=404, detail="not_found")
    except InvalidCase as e:
        logger.error(f"Validation error patching case {id_num}: {e}")
        raise HTTPException(status_code=400, detail="invalid_case")

    return CaseUpdateResponse(ok=True, case=updated.to_dict())


@router.get("/api/caselink", response_model=LinkStatusResponse, summary="Confirmation link status of a case")
def get_case_link(case_id: Optional[str] = Query(default=None, alias="caseId"), uow: CaseStoreUnitOfWork = Depends(get_uow)):
    if not case_id:
        raise HTTPException(status_code=400, detail="Missing caseId query parameter.")

    id_num = parse_case_id(case_id)
    status = views.get_link_status(id_num, uow) if id_num is not None else None
    if status is None:
        raise HTTPException(status_code=404, detail=f"Case with ID {case_id} not found in store.")

    return LinkStatusResponse(**status)


@router.post("/api/caselink", response_model=LinkAssignedResponse, summary="Assign a confirmation link to a case")
async def assign_case_link(request: Request, uow: CaseStoreUnitOfWork = Depends(get_uow)):
    try:
        body = await request.json()
        case_id = body.get("caseId")
        link = body.get("link")

        if not case_id or not link:
            raise HTTPException(status_code=400, detail="Missing caseId or link in request body.")

        id_num = parse_case_id(case_id)
        if id_num is None:
            raise CaseNotFound(case_id)

        updated = messagebus.handle(AssignConfirmLink(case_id=id_num, link=str(link)), uow)

        return LinkAssignedResponse(message="Case link updated successfully.", case=updated.to_dict())

    except HTTPException:
        raise  # Re-raise HTTP exceptions
    except CaseNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error processing POST /api/caselink: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


def create_app(
    repository: Optional[AbstractCaseRepository] = None,
    file_store: Optional[AbstractFileStore] = None,
) -> FastAPI:
    """
    Build the Case API.

    Without an explicit repository the store backend is resolved once on
    startup and kept for the lifetime of the process.
    """
    app = FastAPI(
        title="Case API",
        description="Case records, confirmation links and document uploads",
        version="1.0.0"
    )
    install_error_handlers(app)

    app.state.repository = repository
    app.state.file_store = file_store or create_file_store()

    if isinstance(app.state.file_store, LocalFileStore):
        app.mount(
            "/uploads",
            StaticFiles(directory=app.state.file_store.directory, check_dir=False),
            name="uploads",
        )

    @app.on_event("startup")
    async def startup_event():
        if app.state.repository is None:
            app.state.repository = create_case_repository()
        logger.info(f"✓ Case store initialized ({app.state.repository.backend})")

    app.include_router(upload_api.router)
    app.include_router(router)
    return app


app = create_app()


def main():
    uvicorn.run(
        "cases.entrypoints.case_api:app",
        host=os.environ.get("API_BIND", "0.0.0.0"),
        port=int(os.environ.get("API_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
