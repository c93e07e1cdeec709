"""
Spreadsheet reader (.xlsx via openpyxl, legacy .xls via xlrd).
"""

import datetime as dt
import zlib
from pathlib import Path
from typing import Any
from zipfile import BadZipFile

import openpyxl
import xlrd
from openpyxl.utils.exceptions import InvalidFileException

from src.core.exceptions import ParseError
from src.core.models import RawRecord

from .csv_reader import FIRST_DATA_ROW, normalize_header

# XML parse errors from ElementTree and lxml both subclass SyntaxError
WORKBOOK_ERRORS = (BadZipFile, InvalidFileException, KeyError, OSError, ValueError, zlib.error, SyntaxError)


def cell_to_string(value: Any) -> str:
    """Render a spreadsheet cell as the string a CSV export would hold."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, dt.datetime):
        return value.date().isoformat() if value.time() == dt.time(0) else value.isoformat()
    if isinstance(value, dt.date):
        return value.isoformat()
    return str(value)


def rows_to_records(rows: list[tuple[Any, ...]]) -> list[RawRecord]:
    """Turn a header row plus data rows into RawRecords, skipping blank rows."""
    if not rows:
        return []

    headers = [normalize_header(cell_to_string(h)) for h in rows[0]]
    records: list[RawRecord] = []

    for row in rows[1:]:
        cells = [cell_to_string(v) for v in row]
        if not any(c.strip() for c in cells):
            continue
        values = {
            header: (cells[i] if i < len(cells) else "")
            for i, header in enumerate(headers)
            if header
        }
        records.append(RawRecord(row_number=len(records) + FIRST_DATA_ROW, values=values))

    return records


class ExcelReader:
    """
    Reads the first worksheet of a workbook into RawRecords.
    """

    def __init__(self, sheet_name: str | None = None):
        """
        Initialize Excel reader.

        Args:
            sheet_name: Worksheet to read (defaults to the first sheet)
        """
        self.sheet_name = sheet_name

    def read(self, file_path: str | Path) -> list[RawRecord]:
        """
        Read a workbook.

        Raises:
            ParseError: If the workbook is unreadable
        """
        if Path(file_path).suffix.lower() == ".xls":
            return rows_to_records(self._read_xls(file_path))
        return rows_to_records(self._read_xlsx(file_path))

    def _read_xlsx(self, file_path: str | Path) -> list[tuple[Any, ...]]:
        try:
            wb = openpyxl.load_workbook(file_path, read_only=True, data_only=True)
        except WORKBOOK_ERRORS as e:
            raise ParseError(str(file_path), f"unreadable workbook: {e}") from e

        try:
            if self.sheet_name and self.sheet_name in wb.sheetnames:
                ws = wb[self.sheet_name]
            else:
                ws = wb.worksheets[0]
            # read_only sheets parse their XML lazily, during iteration
            return list(ws.iter_rows(values_only=True))
        except WORKBOOK_ERRORS as e:
            raise ParseError(str(file_path), f"unreadable worksheet: {e}") from e
        finally:
            wb.close()

    def _read_xls(self, file_path: str | Path) -> list[tuple[Any, ...]]:
        try:
            book = xlrd.open_workbook(str(file_path))
        except (xlrd.XLRDError, OSError, ValueError) as e:
            raise ParseError(str(file_path), f"unreadable workbook: {e}") from e

        if self.sheet_name and self.sheet_name in book.sheet_names():
            sheet = book.sheet_by_name(self.sheet_name)
        else:
            sheet = book.sheet_by_index(0)

        rows = []
        for r in range(sheet.nrows):
            row = []
            for c in range(sheet.ncols):
                cell = sheet.cell(r, c)
                if cell.ctype == xlrd.XL_CELL_DATE:
                    row.append(xlrd.xldate.xldate_as_datetime(cell.value, book.datemode))
                else:
                    row.append(cell.value)
            rows.append(tuple(row))
        return rows
