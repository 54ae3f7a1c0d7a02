"""
POST /upload-file, POST /upload-folder
======================================
Multipart upload endpoints backed by the line scanner.

/upload-file    field `file`   → stored under bug/files/, scanned, findings recorded
/upload-folder  field `files`  → stored under bugfolders/folders/, each file scanned
                                 in order, all findings recorded in one insert

Errors:
    400 {"error": "No file uploaded" | "No folder uploaded"}, nothing stored;
        unnamed empty parts (an empty browser file input) count as missing
    500 {"error": <upstream message>}
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from bugtracker.api.deps import error_response, form_files, get_orchestrator, read_upload, read_uploads
from bugtracker.core import constants
from bugtracker.models.finding import Finding
from bugtracker.models.upload import StoredFile
from bugtracker.services.ingestion import IngestionOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Uploads"])


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class UploadFileResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    bug_found: bool = Field(alias="bugFound")
    file_url: Optional[str] = Field(default=None, alias="fileUrl")
    detected_bugs: List[Finding] = Field(default_factory=list, alias="detectedBugs")


class UploadFolderResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    files_uploaded: int = Field(alias="filesUploaded")
    bugs_detected: int = Field(alias="bugsDetected")
    uploaded_files: List[StoredFile] = Field(default_factory=list, alias="uploadedFiles")
    detected_bugs: List[Finding] = Field(default_factory=list, alias="detectedBugs")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------
@router.post("/upload-file", response_model=UploadFileResponse)
async def upload_file(
    request: Request,
    orchestrator: IngestionOrchestrator = Depends(get_orchestrator),
):
    parts = await form_files(request, "file")
    if not parts:
        return JSONResponse(status_code=400, content={"error": constants.MSG_NO_FILE})

    file = parts[0]
    try:
        upload = await read_upload(file)
        summary = await orchestrator.upload_file(upload)
    except Exception as exc:
        logger.error("[upload-file] %s failed: %s", file.filename, exc, exc_info=True)
        return error_response(exc)

    return UploadFileResponse(
        message=constants.MSG_FILE_UPLOADED,
        bug_found=summary.bug_found,
        file_url=summary.stored.url,
        detected_bugs=summary.findings,
    )


@router.post("/upload-folder", response_model=UploadFolderResponse)
async def upload_folder(
    request: Request,
    orchestrator: IngestionOrchestrator = Depends(get_orchestrator),
):
    files = await form_files(request, "files")
    if not files:
        return JSONResponse(status_code=400, content={"error": constants.MSG_NO_FOLDER})

    try:
        uploads = await read_uploads(files)
        summary = await orchestrator.upload_folder(uploads)
    except Exception as exc:
        logger.error("[upload-folder] %d file(s) failed: %s", len(files), exc, exc_info=True)
        return error_response(exc)

    return UploadFolderResponse(
        message=constants.MSG_FOLDER_UPLOADED,
        files_uploaded=summary.files_uploaded,
        bugs_detected=summary.bugs_detected,
        uploaded_files=summary.uploaded_files,
        detected_bugs=summary.findings,
    )
