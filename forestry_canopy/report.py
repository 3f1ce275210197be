"""Run the full load, clean, join and aggregate pipeline."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

import pandas as pd

from . import config
from .ingest import load_canopy_cover, load_service_requests
from .transform import build_summary_tables, clean_service_requests, join_canopy_cover

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("csv", "parquet")


@dataclass
class ReportResult:
    records_loaded: int
    records_cleaned: int
    records_without_canopy: int
    tables: Dict[str, pd.DataFrame]
    output_paths: List[Path] = field(default_factory=list)


def write_summary_tables(
    tables: Dict[str, pd.DataFrame],
    output_dir: Path | str,
    *,
    output_format: str = "csv",
) -> List[Path]:
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f"Unsupported output format: {output_format}")

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths: List[Path] = []
    for name, table in tables.items():
        path = output_dir / f"{name}.{output_format}"
        if output_format == "parquet":
            table.to_parquet(path, index=False)
        else:
            table.to_csv(path, index=False)
        logger.info("Wrote %s to %s (%s rows)", name, path, len(table))
        paths.append(path)
    return paths


def run_report(
    service_requests_path: Path | str = config.DEFAULT_SERVICE_REQUESTS_PATH,
    canopy_path: Path | str = config.DEFAULT_CANOPY_COVER_PATH,
    *,
    output_dir: Path | str | None = None,
    output_format: str = "csv",
) -> ReportResult:
    """Build every summary table from the two exports.

    Tables are written to ``output_dir`` when one is given. Parse and data
    quality errors abort the run before anything is written.
    """
    requests_df = load_service_requests(service_requests_path)
    canopy_df = load_canopy_cover(canopy_path)

    cleaned = clean_service_requests(requests_df)
    joined = join_canopy_cover(cleaned, canopy_df)
    tables = build_summary_tables(joined)

    result = ReportResult(
        records_loaded=len(requests_df),
        records_cleaned=len(cleaned),
        records_without_canopy=int(joined["canopy_cover"].isna().sum()),
        tables=tables,
    )
    if output_dir is not None:
        result.output_paths = write_summary_tables(tables, output_dir, output_format=output_format)
    return result


__all__ = ["ReportResult", "run_report", "write_summary_tables", "OUTPUT_FORMATS"]
