"""
Blob Store
==========
Adapter over Supabase Storage.

    upload(bucket, path, content, content_type) -> Result[str]     (stored path)
    public_url(bucket, path)                    -> Optional[str]
    download(bucket, path)                      -> Result[bytes]

Library exceptions never escape: failures come back as Err(UpstreamError).
The supabase client is synchronous, so calls run in a worker thread.
"""
import asyncio
import logging
from typing import Optional, Protocol

from bugtracker.core.errors import UpstreamError
from bugtracker.models.result import Err, Ok, Result
from bugtracker.services.supabase_client import SupabaseConnection, error_message

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    async def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> Result[str]:
        ...

    async def public_url(self, bucket: str, path: str) -> Optional[str]:
        ...

    async def download(self, bucket: str, path: str) -> Result[bytes]:
        ...


class SupabaseBlobStore:

    def __init__(self, connection: SupabaseConnection) -> None:
        self._connection = connection

    async def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> Result[str]:
        def _upload() -> None:
            self._connection.client.storage.from_(bucket).upload(
                path, content, file_options={"content-type": content_type}
            )

        try:
            await asyncio.to_thread(_upload)
        except UpstreamError as e:
            return Err(e)
        except Exception as e:
            logger.warning("Storage upload %s/%s failed: %s", bucket, path, e)
            return Err(UpstreamError(error_message(e)))
        return Ok(path)

    async def public_url(self, bucket: str, path: str) -> Optional[str]:
        try:
            url = await asyncio.to_thread(
                lambda: self._connection.client.storage.from_(bucket).get_public_url(path)
            )
        except Exception as e:
            logger.warning("No public URL for %s/%s: %s", bucket, path, e)
            return None
        return url or None

    async def download(self, bucket: str, path: str) -> Result[bytes]:
        try:
            data = await asyncio.to_thread(
                lambda: self._connection.client.storage.from_(bucket).download(path)
            )
        except UpstreamError as e:
            return Err(e)
        except Exception as e:
            logger.warning("Storage download %s/%s failed: %s", bucket, path, e)
            return Err(UpstreamError(error_message(e)))
        return Ok(data)
