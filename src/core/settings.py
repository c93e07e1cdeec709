"""
Runtime settings read from environment variables.

A ``.env`` file in the working directory is loaded first when present.
"""

import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


class Settings(BaseModel):
    """
    Pipeline settings.

    Attributes:
        upload_dir: Directory uploads are stored in
        max_upload_bytes: Largest accepted upload
        reference_data_path: Optional YAML file with reference data
        store_backend: "memory" or "postgres"
        job_workers: Threads running validation jobs
        classifier_workers: Threads classifying records within one job
    """

    upload_dir: Path = Path("./uploads")
    max_upload_bytes: int = Field(DEFAULT_MAX_UPLOAD_BYTES, gt=0)
    reference_data_path: Path | None = None
    store_backend: Literal["memory", "postgres"] = "memory"
    job_workers: int = Field(4, ge=1)
    classifier_workers: int = Field(4, ge=1)

    @classmethod
    def from_env(cls, env_file: str | Path | None = ".env") -> "Settings":
        """
        Build settings from the environment.

        Args:
            env_file: Optional dotenv file loaded before reading variables
        """
        if env_file and Path(env_file).exists():
            load_dotenv(env_file, override=False)

        reference_path = os.getenv("REFERENCE_DATA_PATH")
        return cls(
            upload_dir=Path(os.getenv("UPLOAD_DIR", "./uploads")),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES))),
            reference_data_path=Path(reference_path) if reference_path else None,
            store_backend=os.getenv("STORE_BACKEND", "memory").lower(),
            job_workers=int(os.getenv("JOB_WORKERS", "4")),
            classifier_workers=int(os.getenv("CLASSIFIER_WORKERS", "4")),
        )
