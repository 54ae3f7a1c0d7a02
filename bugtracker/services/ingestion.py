"""
Ingestion Orchestrator
======================
Drives one request through: store upload → decode → scan/classify/lint →
bulk insert → summary.

Per-request stages:
    received → (per file: uploading → uploaded → scanning → scanned)
             → aggregating → persisting (skipped when empty) → responding

Rules:
    - Files of a folder upload are handled one at a time, in input order.
    - Findings of all files are accumulated and written in ONE insert.
    - An empty batch is never inserted.
    - Any storage/datastore/lint failure raises UpstreamError tagged with
      the stage it happened in. Already-written blobs are not cleaned up.
    - A failed classifier call degrades the analysis; it never fails the
      request and nothing is recorded for it.
"""
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from bugtracker.core import constants
from bugtracker.core.config import Settings
from bugtracker.core.errors import InputError, UpstreamError
from bugtracker.models.finding import Finding
from bugtracker.models.upload import StoredFile, UploadedFile
from bugtracker.scanner.classifier import Classification, ClassifierClient
from bugtracker.scanner.line_scanner import scan_text
from bugtracker.scanner.patterns import DEFAULT_REGISTRY, PatternRegistry
from bugtracker.services.findings_store import FindingsStore
from bugtracker.services.linter import Linter
from bugtracker.services.storage import BlobStore

logger = logging.getLogger(__name__)


class IngestStage(str, Enum):
    """Stages an UpstreamError can be tagged with."""
    UPLOADING = "uploading"
    UPLOADED = "uploaded"
    SCANNING = "scanning"
    PERSISTING = "persisting"


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------
@dataclass
class FileUploadSummary:
    stored: StoredFile
    findings: List[Finding] = field(default_factory=list)

    @property
    def bug_found(self) -> bool:
        return len(self.findings) > 0


@dataclass
class FolderUploadSummary:
    uploaded_files: List[StoredFile] = field(default_factory=list)
    findings: List[Finding] = field(default_factory=list)

    @property
    def files_uploaded(self) -> int:
        return len(self.uploaded_files)

    @property
    def bugs_detected(self) -> int:
        return len(self.findings)


@dataclass
class AnalysisSummary:
    stored: StoredFile
    classification: Classification
    finding: Optional[Finding] = None


@dataclass
class LintSummary:
    path: str
    findings: List[Finding] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------
class IngestionOrchestrator:

    def __init__(
        self,
        settings: Settings,
        blob_store: BlobStore,
        findings_store: FindingsStore,
        classifier: ClassifierClient,
        linter: Linter,
        registry: PatternRegistry = DEFAULT_REGISTRY,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.settings = settings
        self.blob_store = blob_store
        self.findings_store = findings_store
        self.classifier = classifier
        self.linter = linter
        self.registry = registry
        self._clock = clock

    # --- building blocks ---------------------------------------------------
    def storage_path(self, prefix: str, filename: str) -> str:
        """Time-prefixed storage key. Not collision-proof within one millisecond."""
        return f"{prefix}{int(self._clock() * 1000)}_{filename}"

    async def _persist(self, file: UploadedFile, bucket: str, prefix: str) -> StoredFile:
        path = self.storage_path(prefix, file.filename)
        logger.info("Uploading file: %s (bucket=%s, stage=%s)", path, bucket, IngestStage.UPLOADING.value)

        result = await self.blob_store.upload(bucket, path, file.content, file.content_type)
        result.unwrap("File upload failed", IngestStage.UPLOADING.value)

        url = await self.blob_store.public_url(bucket, path)
        logger.debug("Uploaded %s → %s", path, url)
        return StoredFile(path=path, url=url)

    def _scan(self, file: UploadedFile, stored: StoredFile) -> List[Finding]:
        findings = scan_text(file.text(), file.filename, stored.path, stored.url, registry=self.registry)
        logger.debug("Scanned %s: %d finding(s)", file.filename, len(findings))
        return findings

    async def _record(self, table: str, findings: List[Finding]) -> int:
        if not findings:
            logger.debug("No findings to record; skipping insert into %s", table)
            return 0
        result = await self.findings_store.insert(table, findings)
        return result.unwrap("Database insert failed", IngestStage.PERSISTING.value)

    # --- operations --------------------------------------------------------
    async def upload_file(self, file: UploadedFile) -> FileUploadSummary:
        stored = await self._persist(file, constants.FILE_BUCKET, constants.FILE_PREFIX)
        findings = self._scan(file, stored)
        if findings:
            logger.warning("%d bug(s) detected in file %s", len(findings), file.filename)
        await self._record(constants.FINDINGS_TABLE, findings)
        return FileUploadSummary(stored=stored, findings=findings)

    async def upload_folder(self, files: List[UploadedFile]) -> FolderUploadSummary:
        if not files:
            raise InputError(constants.MSG_NO_FOLDER)

        summary = FolderUploadSummary()
        for file in files:
            stored = await self._persist(file, constants.FOLDER_BUCKET, constants.FOLDER_PREFIX)
            summary.uploaded_files.append(stored)
            summary.findings.extend(self._scan(file, stored))

        if summary.findings:
            logger.warning(
                "%d bug(s) detected across %d file(s)", summary.bugs_detected, summary.files_uploaded
            )
        await self._record(constants.FINDINGS_TABLE, summary.findings)
        return summary

    async def analyze_file(self, file: UploadedFile) -> AnalysisSummary:
        stored = await self._persist(file, constants.ANALYSIS_BUCKET, constants.ANALYSIS_PREFIX)
        classification = await self.classifier.classify(file.text())

        if classification.failed:
            logger.warning("Classifier unavailable for %s; nothing recorded", file.filename)
            return AnalysisSummary(stored=stored, classification=classification)

        finding = Finding(
            file_name=file.filename,
            file_url=stored.url,
            line_number=0,
            error_message=classification.label,
            confidence=classification.confidence,
        )
        await self._record(constants.FINDINGS_TABLE, [finding])
        return AnalysisSummary(stored=stored, classification=classification, finding=finding)

    async def detect_stored_file(self, path: str) -> LintSummary:
        if not path:
            raise InputError(constants.MSG_MISSING_PATH)

        file_name = path.split("/")[-1]
        result = await self.blob_store.download(constants.WEBHOOK_BUCKET, path)
        content = result.unwrap("Error fetching file from storage", IngestStage.UPLOADED.value)

        try:
            messages = await self.linter.lint_text(content.decode("utf-8", errors="replace"))
        except UpstreamError as e:
            e.stage = e.stage or IngestStage.SCANNING.value
            raise

        findings = [
            Finding(
                file_name=file_name,
                file_path=path,
                line_number=max(m.line, 0),
                error_message=m.message,
            )
            for m in messages
        ]
        if not findings:
            logger.info("No bugs detected in %s", path)
        else:
            await self._record(constants.LINT_FINDINGS_TABLE, findings)
            logger.info("Stored %d lint finding(s) for %s", len(findings), path)
        return LintSummary(path=path, findings=findings)

    async def close(self) -> None:
        await self.classifier.close()
