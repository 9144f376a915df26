"""Spreadsheet exporter: one workbook, one sheet per table."""
import logging
import zipfile
from pathlib import Path

import pandas as pd

from .base import Exporter
from ..models import TweetTables, SHEET_NAMES, TABLE_COLUMNS

logger = logging.getLogger(__name__)

class XLSXExporter(Exporter):
    """Write tables to an XLSX workbook, appending to existing sheets unless truncating."""

    suffix = '.xlsx'

    def export(self, tables: TweetTables, output_path: Path) -> None:
        output_path = Path(output_path)
        if not self.truncate and output_path.exists():
            tables = self.load(output_path).concat(tables)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
            for name, df in tables.items():
                df.to_excel(writer, sheet_name=SHEET_NAMES[name], index=False)
        logger.info(f"Wrote {len(tables.tweets)} tweets and {len(tables.links)} links to {output_path}")

    def load(self, path: Path) -> TweetTables:
        """Read the sheets of an existing workbook; missing or unreadable sheets come back empty."""
        try:
            sheets = pd.read_excel(path, sheet_name=None, dtype=str, engine='openpyxl')
        except (OSError, ValueError, KeyError, zipfile.BadZipFile) as e:
            logger.warning(f"Output file {path} missing or invalid, creating it: {e}")
            return TweetTables()

        tables = {}
        for name, sheet in SHEET_NAMES.items():
            df = sheets.get(sheet)
            if df is None:
                df = pd.DataFrame(columns=TABLE_COLUMNS[name])
            tables[name] = df.fillna('')
        return TweetTables(**tables)
