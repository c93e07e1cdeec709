"""
Command-line interface for the provider validation pipeline.

Usage:
    python -m src.cli.validation_cli validate --input <file_path> [options]
    python -m src.cli.validation_cli serve [--host <host>] [--port <port>]
    python -m src.cli.validation_cli init-db
"""

import argparse
import sys
from pathlib import Path

import uvicorn

from src.batch.readers import file_type_for
from src.core.exceptions import ParseError, PipelineError, UnsupportedFormatError
from src.core.models import FieldIssue, JobError, ValidationJob
from src.core.settings import Settings
from src.observability.logger import get_logger
from src.services.application import build_application
from src.warehouse.connection import DatabaseConnectionPool
from src.warehouse.schema_mgmt import SchemaManager

logger = get_logger(__name__)


def _log_issue(issue: FieldIssue | JobError) -> None:
    if isinstance(issue, JobError):
        row, field, severity = issue.row_number, issue.field_name, issue.error_type
        message, suggested = issue.error_message, issue.suggested_value
    else:
        row, field, severity = issue.row, issue.field, issue.severity
        message, suggested = issue.message, issue.suggested

    line = f"Row {row} [{severity}] {field}: {message}"
    if suggested:
        line += f" (suggested: {suggested})"
    logger.info(line)


def validate_command(args) -> int:
    """
    Validate one file, importing its valid rows unless --dry-run is given.

    Args:
        args: Command-line arguments

    Returns:
        Process exit code
    """
    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {args.input}")
        return 1

    settings = Settings.from_env()
    if args.reference_data:
        settings = settings.model_copy(update={"reference_data_path": Path(args.reference_data)})

    application = build_application(settings, run_in_background=False)
    try:
        if args.dry_run:
            logger.info("DRY RUN MODE: No providers will be written")
            try:
                summary = application.orchestrator.preview(input_path)
            except (ParseError, UnsupportedFormatError) as e:
                logger.error(str(e))
                return 1

            logger.info("=" * 60)
            logger.info(f"Total records: {summary.total_records}")
            logger.info(f"Valid records: {summary.valid_records}")
            logger.info(f"Invalid records: {summary.invalid_records}")
            logger.info(f"Records with warnings: {summary.warning_records}")
            logger.info("=" * 60)
            for issue in sorted([*summary.errors, *summary.warnings], key=lambda i: i.row):
                _log_issue(issue)
            return 0

        try:
            file_type = file_type_for(input_path)
        except UnsupportedFormatError as e:
            logger.error(str(e))
            return 1

        job = application.stores.jobs.create(ValidationJob(
            file_name=input_path.name,
            file_path=str(input_path),
            file_type=file_type,
            created_by=args.actor,
        ))
        job = application.orchestrator.run(job.id)
        errors = application.stores.job_errors.list_for_job(job.id)

        logger.info("=" * 60)
        logger.info(f"Job {job.id}: {job.status}")
        if job.status == "failed":
            logger.error(f"Failure reason: {job.failure_reason}")
            return 1
        logger.info(f"Total records: {job.total_records}")
        logger.info(f"Imported providers: {job.valid_records}")
        logger.info(f"Rejected records: {job.invalid_records}")
        logger.info(f"Warnings: {job.warnings_count}")
        logger.info("=" * 60)
        for error in errors:
            _log_issue(error)
        return 0

    except PipelineError as e:
        logger.error(f"Error during validation: {e}", exc_info=True)
        return 1
    finally:
        application.close()


def serve_command(args) -> int:
    """Run the HTTP API."""
    from src.api import create_app

    logger.info(f"Serving provider validation API on {args.host}:{args.port}")
    uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0


def init_db_command(args) -> int:
    """Create the PostgreSQL tables."""
    pool = DatabaseConnectionPool()
    pool.open()
    try:
        SchemaManager(pool).create_tables()
        logger.info("Database tables created")
    finally:
        pool.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Healthcare provider validation pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate and import a CSV file
  python -m src.cli.validation_cli validate --input data/providers.csv

  # Validate only, nothing is written
  python -m src.cli.validation_cli validate --input data/providers.xlsx --dry-run

  # Use custom reference data
  python -m src.cli.validation_cli validate --input data/providers.csv \\
      --reference-data config/reference_data.yaml

  # Run the API
  python -m src.cli.validation_cli serve --port 8000
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    validate_parser = subparsers.add_parser("validate", help="Validate a provider file")
    validate_parser.add_argument(
        "--input",
        required=True,
        help="Path to a .csv, .xlsx or .xls file"
    )
    validate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate without creating a job or importing providers"
    )
    validate_parser.add_argument(
        "--reference-data",
        default=None,
        help="Path to a reference data YAML file (default: REFERENCE_DATA_PATH or built-in)"
    )
    validate_parser.add_argument(
        "--actor",
        default="cli",
        help="Actor recorded on the job and audit entries (default: cli)"
    )

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")

    subparsers.add_parser("init-db", help="Create PostgreSQL tables")

    return parser


COMMANDS = {
    "validate": validate_command,
    "serve": serve_command,
    "init-db": init_db_command,
}


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
