"""
Multi-row writes without a transaction.

PostgREST runs each request in its own transaction, so a parent row and
its children cannot be committed together. InsertLog remembers every row
it inserted; on failure the caller rolls back, deleting them newest first.
"""

from postgrest.exceptions import APIError
from supabase import Client
from typing import Any, Dict, List, Tuple, Union
import logging

logger = logging.getLogger(__name__)


class InsertLog:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self._inserted: List[Tuple[str, Any]] = []

    def insert(self, table: str, rows: Union[Dict[str, Any], List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
        result = self.supabase.table(table).insert(rows).execute()
        for row in result.data or []:
            self._inserted.append((table, row["id"]))
        return result.data or []

    def rollback(self) -> None:
        while self._inserted:
            table, row_id = self._inserted.pop()
            try:
                self.supabase.table(table).delete().eq("id", row_id).execute()
            except APIError as e:
                logger.error(f"Rollback delete of {table} {row_id} failed: {e}")
