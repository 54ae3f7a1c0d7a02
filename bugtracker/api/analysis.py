"""
POST /bug
Uploads a single file to bug/bug/ and asks the remote classifier for a
whole-file label. The raw classifier payload (or {"error": ...}) is echoed
back as `aiAnalysis`.
"""
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from bugtracker.api.deps import error_response, form_files, get_orchestrator, read_upload
from bugtracker.core import constants
from bugtracker.services.ingestion import IngestionOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Analysis"])


class AnalysisResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    ai_analysis: Any = Field(default=None, alias="aiAnalysis")
    file_url: Optional[str] = Field(default=None, alias="fileUrl")


@router.post("/bug", response_model=AnalysisResponse)
async def analyze_bug(
    request: Request,
    orchestrator: IngestionOrchestrator = Depends(get_orchestrator),
):
    parts = await form_files(request, "file")
    if not parts:
        return JSONResponse(status_code=400, content={"error": constants.MSG_NO_FILE})

    file = parts[0]
    try:
        upload = await read_upload(file)
        summary = await orchestrator.analyze_file(upload)
    except Exception as exc:
        logger.error("[bug] analysis of %s failed: %s", file.filename, exc, exc_info=True)
        return error_response(exc)

    return AnalysisResponse(
        message=constants.MSG_ANALYSIS_DONE,
        ai_analysis=summary.classification.as_payload(),
        file_url=summary.stored.url,
    )
