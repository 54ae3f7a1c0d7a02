"""
Errors
======
Exception taxonomy shared by the orchestrator and the HTTP layer.

    InputError        — request is missing its file/path        → 400
    UpstreamError     — storage, datastore or lint call failed  → 500
    LintError         — lint command missing / timed out        → 500
    MethodNotAllowed  — wrong verb on the webhook endpoint      → 405

Classifier failures are not exceptions: the classifier adapter returns a
degraded Classification instead (see bugtracker.scanner.classifier).
"""
from typing import Optional


class BugTrackerError(Exception):
    """Base class for all service errors."""
    status_code = 500


class InputError(BugTrackerError):
    status_code = 400


class UpstreamError(BugTrackerError):
    """A collaborator call failed. `stage` records where the request was."""

    def __init__(self, message: str, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage

    def with_context(self, prefix: str, stage: Optional[str] = None) -> "UpstreamError":
        return type(self)(f"{prefix}: {self.message}", stage=stage or self.stage)


class LintError(UpstreamError):
    pass


class MethodNotAllowed(BugTrackerError):
    status_code = 405
