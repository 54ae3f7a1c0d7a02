"""
Upload Models
=============
UploadedFile  — bytes + name + MIME type, detached from the HTTP layer
StoredFile    — where an upload landed in the blob store
LintMessage   — one diagnostic from the external lint engine
"""
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


class StoredFile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    path: str = Field(alias="fileName")
    url: Optional[str] = Field(default=None, alias="fileUrl")


@dataclass(frozen=True)
class LintMessage:
    line: int
    message: str
