"""
API Dependencies
================
Builds the process-wide IngestionOrchestrator from Settings once and hands
it to route handlers via FastAPI's dependency injection. Tests replace it
with `app.dependency_overrides[get_orchestrator]`.
"""
from functools import lru_cache
from typing import List, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from bugtracker.core.config import Settings, get_settings
from bugtracker.core.errors import BugTrackerError
from bugtracker.models.upload import UploadedFile
from bugtracker.scanner.classifier import ClassifierClient
from bugtracker.services.findings_store import SupabaseFindingsStore
from bugtracker.services.ingestion import IngestionOrchestrator
from bugtracker.services.linter import CommandLinter
from bugtracker.services.storage import SupabaseBlobStore
from bugtracker.services.supabase_client import SupabaseConnection


def build_orchestrator(settings: Settings) -> IngestionOrchestrator:
    connection = SupabaseConnection(settings)
    return IngestionOrchestrator(
        settings=settings,
        blob_store=SupabaseBlobStore(connection),
        findings_store=SupabaseFindingsStore(connection),
        classifier=ClassifierClient(settings.classifier_url, settings.classifier_api_key),
        linter=CommandLinter(settings.lint_command, timeout=settings.lint_timeout),
    )


@lru_cache(maxsize=1)
def get_orchestrator() -> IngestionOrchestrator:
    return build_orchestrator(get_settings())


async def form_files(request: Request, field: str) -> List[UploadFile]:
    """File parts of `field` that carry a filename.

    Browsers send an empty, unnamed part for a file input with nothing
    selected; such parts count as no upload at all.
    """
    form = await request.form()
    return [
        part for part in form.getlist(field)
        if isinstance(part, UploadFile) and part.filename
    ]


async def read_upload(upload: UploadFile) -> UploadedFile:
    content = await upload.read()
    return UploadedFile(
        filename=upload.filename or "upload",
        content=content,
        content_type=upload.content_type or "application/octet-stream",
    )


async def read_uploads(uploads: Optional[List[UploadFile]]) -> List[UploadedFile]:
    return [await read_upload(u) for u in uploads or []]


def error_response(exc: Exception) -> JSONResponse:
    status = exc.status_code if isinstance(exc, BugTrackerError) else 500
    return JSONResponse(status_code=status, content={"error": str(exc)})
