"""
Shared fixtures: in-memory collaborators for the ingestion orchestrator.
No Supabase, no network, no lint subprocess.
"""
import os
from typing import List, Optional

# No daily log file from the app import in main.py
os.environ["LOG_DIR"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from bugtracker.api.deps import get_orchestrator  # noqa: E402
from bugtracker.core.config import Settings  # noqa: E402
from bugtracker.core.errors import UpstreamError  # noqa: E402
from bugtracker.models.finding import Finding  # noqa: E402
from bugtracker.models.result import Err, Ok  # noqa: E402
from bugtracker.models.upload import LintMessage  # noqa: E402
from bugtracker.scanner.classifier import Classification  # noqa: E402
from bugtracker.services.ingestion import IngestionOrchestrator  # noqa: E402

FIXED_NOW = 1700000000.0


class FakeBlobStore:
    def __init__(self, fail_upload: Optional[str] = None, public: bool = True) -> None:
        self.fail_upload = fail_upload
        self.public = public
        self.uploads: list[tuple[str, str, bytes, str]] = []
        self.downloads: list[tuple[str, str]] = []
        self.objects: dict[tuple[str, str], bytes] = {}

    async def upload(self, bucket, path, content, content_type):
        self.uploads.append((bucket, path, content, content_type))
        if self.fail_upload:
            return Err(UpstreamError(self.fail_upload))
        self.objects[(bucket, path)] = content
        return Ok(path)

    async def public_url(self, bucket, path):
        if not self.public:
            return None
        return f"https://storage.test/{bucket}/{path}"

    async def download(self, bucket, path):
        self.downloads.append((bucket, path))
        if (bucket, path) not in self.objects:
            return Err(UpstreamError("Object not found"))
        return Ok(self.objects[(bucket, path)])


class FakeFindingsStore:
    def __init__(self, fail: Optional[str] = None) -> None:
        self.fail = fail
        self.inserts: list[tuple[str, List[Finding]]] = []

    async def insert(self, table, findings):
        self.inserts.append((table, list(findings)))
        if self.fail:
            return Err(UpstreamError(self.fail))
        return Ok(len(findings))


class FakeClassifier:
    def __init__(self, result: Optional[Classification] = None) -> None:
        self.result = result or Classification(label="LABEL_1", confidence=0.87, raw=[{"label": "LABEL_1", "score": 0.87}])
        self.calls: list[str] = []
        self.closed = False

    async def classify(self, text):
        self.calls.append(text)
        return self.result

    async def close(self):
        self.closed = True


class FakeLinter:
    def __init__(self, messages: Optional[List[LintMessage]] = None, error: Optional[Exception] = None) -> None:
        self.messages = messages or []
        self.error = error
        self.calls: list[str] = []

    async def lint_text(self, text):
        self.calls.append(text)
        if self.error:
            raise self.error
        return list(self.messages)


@pytest.fixture
def blob_store():
    return FakeBlobStore()


@pytest.fixture
def findings_store():
    return FakeFindingsStore()


@pytest.fixture
def classifier():
    return FakeClassifier()


@pytest.fixture
def linter():
    return FakeLinter()


@pytest.fixture
def orchestrator(blob_store, findings_store, classifier, linter):
    return IngestionOrchestrator(
        settings=Settings(),
        blob_store=blob_store,
        findings_store=findings_store,
        classifier=classifier,
        linter=linter,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def client(orchestrator):
    from main import app
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    yield TestClient(app)
    app.dependency_overrides.clear()


