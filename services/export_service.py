"""
services/export_service.py
---------------------------
Generates CSV and Excel exports of a route's records.
"""

import io
from typing import Union

import pandas as pd

from repositories.query_registry import Route, lookup
from services.record_service import RecordService
from utils.logger import get_logger

logger = get_logger(__name__)


class ExportService:
    """Generates downloadable record reports in CSV and Excel formats."""

    def __init__(self, records: RecordService):
        self.records = records

    def _frame(self, owner: int, route: Union[str, Route]) -> pd.DataFrame:
        rows = [dict(r) for r in self.records.iter_rows(owner, route)]
        return pd.DataFrame(rows)

    def export_route_csv(self, owner: int, route: Union[str, Route]) -> io.BytesIO:
        """
        Export every record of a route as a CSV file.

        Args:
            owner: user_id of the owner.
            route: Route name.

        Returns:
            A BytesIO buffer containing the CSV data.
        """
        name = str(lookup(route).route)
        df = self._frame(owner, route)
        buffer = io.BytesIO()
        df.to_csv(buffer, index=False, encoding="utf-8-sig")
        buffer.seek(0)
        logger.info(f"Exported {len(df)} {name} records as CSV for user {owner}")
        return buffer

    def export_route_excel(self, owner: int, route: Union[str, Route]) -> io.BytesIO:
        """
        Export every record of a route as an Excel (.xlsx) file.

        Returns:
            A BytesIO buffer containing the Excel data.
        """
        name = str(lookup(route).route)
        df = self._frame(owner, route)

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            # Sheet names are capped at 31 characters
            df.to_excel(writer, sheet_name=name[:31], index=False)

        buffer.seek(0)
        logger.info(f"Exported {len(df)} {name} records as Excel for user {owner}")
        return buffer
