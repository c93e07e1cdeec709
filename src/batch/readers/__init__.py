"""
Upload file readers.
"""

from .csv_reader import CSVReader, normalize_header
from .excel_reader import ExcelReader
from .file_reader import SUPPORTED_EXTENSIONS, FileNormalizer, file_type_for

__all__ = [
    "CSVReader",
    "ExcelReader",
    "FileNormalizer",
    "SUPPORTED_EXTENSIONS",
    "file_type_for",
    "normalize_header",
]
