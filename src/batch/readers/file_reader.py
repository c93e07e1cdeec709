"""
File normalizer dispatching uploads to the CSV or spreadsheet reader.
"""

from pathlib import Path

from src.core.exceptions import UnsupportedFormatError
from src.core.models import RawRecord

from .csv_reader import CSVReader
from .excel_reader import ExcelReader

SUPPORTED_EXTENSIONS: frozenset[str] = frozenset({".csv", ".xlsx", ".xls"})


def file_type_for(file_path: str | Path) -> str:
    """
    Map a file name to its declared type ("csv" or "xlsx").

    Raises:
        UnsupportedFormatError: If the extension is not supported
    """
    extension = Path(file_path).suffix.lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError(str(file_path), extension or "<none>")
    return "csv" if extension == ".csv" else "xlsx"


class FileNormalizer:
    """
    Parses an uploaded CSV or spreadsheet into ordered RawRecords.

    Header names become lower-case with whitespace replaced by underscores.
    Row order is preserved and is the only source of row numbering.
    """

    def __init__(self, csv_reader: CSVReader | None = None, excel_reader: ExcelReader | None = None):
        self.csv_reader = csv_reader or CSVReader()
        self.excel_reader = excel_reader or ExcelReader()

    def read(self, file_path: str | Path, file_type: str | None = None) -> list[RawRecord]:
        """
        Read a file into RawRecords.

        Args:
            file_path: Path to the stored upload
            file_type: Declared type ("csv" or "xlsx"); inferred from the extension if omitted

        Returns:
            RawRecords in file order

        Raises:
            UnsupportedFormatError: If the extension is not .csv, .xlsx or .xls
            ParseError: If the file is structurally corrupt
        """
        detected = file_type_for(file_path)
        declared = (file_type or detected).lower()
        if declared not in ("csv", "xlsx"):
            raise UnsupportedFormatError(str(file_path), declared)

        if declared == "csv":
            return self.csv_reader.read(file_path)
        return self.excel_reader.read(file_path)
