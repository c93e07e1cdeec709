"""
CSV reader producing normalized RawRecords.
"""

import csv
import re
from pathlib import Path

from src.core.exceptions import ParseError
from src.core.models import RawRecord
from src.observability.logger import get_logger

logger = get_logger(__name__)

# First data row sits under the header row.
FIRST_DATA_ROW = 2


def normalize_header(header: str) -> str:
    """Lower-case a column name and replace internal whitespace with underscores."""
    return re.sub(r"\s+", "_", str(header).strip().lower())


class CSVReader:
    """
    Reads CSV files into RawRecords with canonical column names.
    """

    def __init__(self, delimiter: str = ",", encoding: str = "utf-8-sig"):
        """
        Initialize CSV reader.

        Args:
            delimiter: Field delimiter
            encoding: File encoding (utf-8-sig strips a leading BOM)
        """
        self.delimiter = delimiter
        self.encoding = encoding

    def read(self, file_path: str | Path) -> list[RawRecord]:
        """
        Read a CSV file.

        Args:
            file_path: Path to CSV file

        Returns:
            RawRecords in file order

        Raises:
            ParseError: If the file cannot be decoded or is not valid CSV
        """
        records: list[RawRecord] = []

        try:
            with open(file_path, newline="", encoding=self.encoding) as f:
                reader = csv.reader(f, delimiter=self.delimiter, strict=True)
                header_row = next(reader, None)
                if header_row is None:
                    return records

                headers = [normalize_header(h) for h in header_row]

                for row in reader:
                    if not any(cell.strip() for cell in row):
                        continue
                    if len(row) > len(headers):
                        logger.warning(
                            f"Ignoring {len(row) - len(headers)} extra value(s) "
                            f"in row {len(records) + FIRST_DATA_ROW} of {file_path}"
                        )
                    values = {
                        header: (row[i] if i < len(row) else "")
                        for i, header in enumerate(headers)
                        if header
                    }
                    records.append(
                        RawRecord(row_number=len(records) + FIRST_DATA_ROW, values=values)
                    )

        except csv.Error as e:
            raise ParseError(str(file_path), f"malformed CSV: {e}") from e
        except UnicodeDecodeError as e:
            raise ParseError(str(file_path), f"file is not valid {self.encoding} text: {e}") from e

        return records
