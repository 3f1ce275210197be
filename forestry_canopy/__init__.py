"""NYC forestry service request and tree canopy analysis pipeline."""

from .cli import main as cli_main
from .ingest import ParseError, load_canopy_cover, load_service_requests, run_download
from .report import ReportResult, run_report
from .transform import (
    DataQualityError,
    build_summary_tables,
    clean_service_requests,
    join_canopy_cover,
)

__all__ = [
    "cli_main",
    "ParseError",
    "DataQualityError",
    "load_service_requests",
    "load_canopy_cover",
    "run_download",
    "clean_service_requests",
    "join_canopy_cover",
    "build_summary_tables",
    "ReportResult",
    "run_report",
]
