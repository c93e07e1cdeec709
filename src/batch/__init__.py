"""
Batch validation of uploaded provider files.
"""

from .executor import JobExecutor
from .pipeline import JobOrchestrator, ValidationSummary
from .readers import CSVReader, ExcelReader, FileNormalizer

__all__ = [
    "JobExecutor",
    "JobOrchestrator",
    "ValidationSummary",
    "CSVReader",
    "ExcelReader",
    "FileNormalizer",
]
