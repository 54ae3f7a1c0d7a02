"""
Findings Store
==============
Adapter over the Supabase (PostgREST) findings tables.

    insert(table, findings) -> Result[int]   (number of rows written)

One call is one bulk insert. Callers are expected to skip empty batches;
an empty list is answered with Ok(0) without touching the network.
"""
import asyncio
import logging
from typing import List, Protocol

from bugtracker.core.errors import UpstreamError
from bugtracker.models.finding import Finding
from bugtracker.models.result import Err, Ok, Result
from bugtracker.services.supabase_client import SupabaseConnection, error_message

logger = logging.getLogger(__name__)


class FindingsStore(Protocol):
    async def insert(self, table: str, findings: List[Finding]) -> Result[int]:
        ...


class SupabaseFindingsStore:

    def __init__(self, connection: SupabaseConnection) -> None:
        self._connection = connection

    async def insert(self, table: str, findings: List[Finding]) -> Result[int]:
        if not findings:
            return Ok(0)

        rows = [f.to_row() for f in findings]
        try:
            await asyncio.to_thread(
                lambda: self._connection.client.table(table).insert(rows).execute()
            )
        except UpstreamError as e:
            return Err(e)
        except Exception as e:
            logger.warning("Insert of %d row(s) into %s failed: %s", len(rows), table, e)
            return Err(UpstreamError(error_message(e)))

        logger.info("Inserted %d row(s) into %s", len(rows), table)
        return Ok(len(rows))
