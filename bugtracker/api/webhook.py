"""
/detect-bugs
============
Storage webhook: the caller POSTs {"path": "<object path in bucket bug>"}
after a file lands in storage. The file is downloaded, linted, and its
diagnostics are inserted into the `bugs` table.

Plain-text responses:
    200  "No bugs detected." | "Bug tracking data stored successfully."
    400  "Missing file path in request."
    405  "Method Not Allowed"  (any verb other than POST)
    500  "Internal Server Error: <message>"
"""
import logging
from json import JSONDecodeError

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from bugtracker.api.deps import get_orchestrator
from bugtracker.core import constants
from bugtracker.core.errors import InputError, MethodNotAllowed
from bugtracker.services.ingestion import IngestionOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Webhook"])


async def _read_path(request: Request) -> str:
    try:
        body = await request.json()
    except (JSONDecodeError, UnicodeDecodeError):
        return ""
    if not isinstance(body, dict):
        return ""
    path = body.get("path")
    return path if isinstance(path, str) else ""


@router.api_route(
    "/detect-bugs",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    response_class=PlainTextResponse,
)
async def detect_bugs(
    request: Request,
    orchestrator: IngestionOrchestrator = Depends(get_orchestrator),
):
    try:
        if request.method != "POST":
            raise MethodNotAllowed(constants.MSG_METHOD_NOT_ALLOWED)

        path = await _read_path(request)
        if not path:
            raise InputError(constants.MSG_MISSING_PATH)

        summary = await orchestrator.detect_stored_file(path)
    except (MethodNotAllowed, InputError) as exc:
        return PlainTextResponse(str(exc), status_code=exc.status_code)
    except Exception as exc:
        logger.error("Error in bug detection webhook: %s", exc, exc_info=True)
        return PlainTextResponse(f"Internal Server Error: {exc}", status_code=500)

    if not summary.findings:
        return PlainTextResponse(constants.MSG_NO_BUGS)
    return PlainTextResponse(constants.MSG_BUGS_STORED)
