"""
Upload API - stores case documents and returns their URLs.
Independent of the case store; mounted by the Case API.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel
from starlette.datastructures import UploadFile

from shared.entrypoints.http import require_cases_token
from uploads.adapters.repository import AbstractFileStore
from uploads.service_layer.services import UPLOAD_FIELDS, NoFilesError, save_uploads

logger = logging.getLogger(__name__)

router = APIRouter()


class UploadUrls(BaseModel):
    original: Optional[str] = None
    redacted: Optional[str] = None


class UploadResponse(BaseModel):
    ok: bool
    urls: UploadUrls


def get_file_store(request: Request) -> AbstractFileStore:
    return request.app.state.file_store


@router.post("/api/upload", response_model=UploadResponse, dependencies=[Depends(require_cases_token)])
async def upload_files(request: Request, store: AbstractFileStore = Depends(get_file_store)):
    """
    Accept multipart parts named 'original' and/or 'redacted'.

    Each present file is stored under a generated name; missing parts
    come back as null URLs.
    """
    try:
        form = await request.form()
        files = {}
        for name in UPLOAD_FIELDS:
            part = form.get(name)
            if isinstance(part, UploadFile):
                files[name] = (part.filename, await part.read())

        urls = save_uploads(files, store)
        return UploadResponse(ok=True, urls=UploadUrls(**urls))

    except NoFilesError:
        raise HTTPException(status_code=400, detail="no_files")
    except Exception as e:
        logger.error(f"Upload failed: {e}")
        raise HTTPException(status_code=500, detail="upload_failed")
