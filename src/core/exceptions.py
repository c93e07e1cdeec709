"""
Exception hierarchy for the provider validation pipeline.

Job-level faults (UnsupportedFormatError, ParseError) fail the whole job.
Record-level data problems are never raised; they are reported as issues.
"""


class PipelineError(Exception):
    """Base class for all pipeline errors."""
    pass


class UnsupportedFormatError(PipelineError):
    """Raised when a file extension is not one of .csv, .xlsx or .xls."""

    def __init__(self, file_path: str, extension: str):
        self.file_path = file_path
        self.extension = extension
        super().__init__(f"Unsupported file format '{extension}' for {file_path}")


class ParseError(PipelineError):
    """Raised when a file is structurally corrupt and cannot be read."""

    def __init__(self, file_path: str, reason: str):
        self.file_path = file_path
        self.reason = reason
        super().__init__(f"Failed to parse {file_path}: {reason}")


class InvalidJobTransitionError(PipelineError):
    """Raised when a job is asked to move to a state it cannot reach."""

    def __init__(self, job_id: str, current: str, target: str):
        self.job_id = job_id
        self.current = current
        self.target = target
        super().__init__(f"Job {job_id} cannot move from '{current}' to '{target}'")


class JobNotFoundError(PipelineError):
    """Raised when a job id is unknown to the job store."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Validation job not found: {job_id}")


class ProviderNotFoundError(PipelineError):
    """Raised when a provider id is unknown to the provider store."""

    def __init__(self, provider_id: str):
        self.provider_id = provider_id
        super().__init__(f"Provider not found: {provider_id}")


class UploadRejectedError(PipelineError):
    """Raised when an uploaded file is rejected before storage."""
    pass
