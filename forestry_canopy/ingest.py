"""Utilities to load the forestry service request and canopy cover exports."""
from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
import requests

from . import config

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """Raised when an input file cannot be read into the expected table."""


@dataclass
class DownloadStats:
    """Capture summary statistics for a download run."""

    files_written: List[Path] = field(default_factory=list)
    bytes_written: int = 0
    start_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def as_dict(self) -> Dict[str, object]:
        return {
            "files_written": [str(path) for path in self.files_written],
            "bytes_written": self.bytes_written,
            "duration_seconds": int((datetime.now(timezone.utc) - self.start_time).total_seconds()),
        }


def _check_field_counts(path: Path | str) -> None:
    # pandas pads short rows with nulls instead of failing on them
    with open(path, newline="", encoding="utf-8") as handle:
        reader = csv.reader(handle)
        header = next(reader, None)
        if header is None:
            raise ParseError(f"Could not parse {path}: file is empty")
        for record in reader:
            if record and len(record) != len(header):
                raise ParseError(
                    f"Could not parse {path}: expected {len(header)} fields in line {reader.line_num}, saw {len(record)}"
                )


def _read_csv(path: Path | str, columns: List[str], text_columns: List[str]) -> pd.DataFrame:
    _check_field_counts(path)
    try:
        return pd.read_csv(
            path,
            usecols=columns,
            dtype={column: str for column in text_columns},
        )
    except ValueError as exc:
        # pandas reports missing columns, ragged rows and empty files as ValueError subclasses
        raise ParseError(f"Could not parse {path}: {exc}") from exc


def load_service_requests(path: Path | str = config.DEFAULT_SERVICE_REQUESTS_PATH) -> pd.DataFrame:
    """Load the forestry service request export.

    Only the consumed columns are kept and renamed to their canonical names.
    Community board and ZIP codes stay text. Empty date cells stay null (open
    cases); a non-empty date that does not match ``config.DATE_FORMAT`` raises
    :class:`ParseError`.
    """
    df = _read_csv(path, list(config.SERVICE_REQUEST_COLUMNS), list(config.TEXT_COLUMNS))

    for column in config.DATE_COLUMNS:
        try:
            df[column] = pd.to_datetime(df[column], format=config.DATE_FORMAT, errors="raise")
        except (ValueError, TypeError) as exc:
            raise ParseError(f"Invalid date in column {column!r} of {path}: {exc}") from exc

    df = df.rename(columns=config.SERVICE_REQUEST_COLUMNS)
    logger.info("Loaded %s service requests from %s", len(df), path)
    return df


def load_canopy_cover(path: Path | str = config.DEFAULT_CANOPY_COVER_PATH) -> pd.DataFrame:
    """Load canopy cover per community board, keyed by ``community_board_name``."""
    key_column, value_column = list(config.CANOPY_COLUMNS)
    df = _read_csv(path, [key_column, value_column], [key_column])

    try:
        df[value_column] = pd.to_numeric(df[value_column], errors="raise").astype(float)
    except (ValueError, TypeError) as exc:
        raise ParseError(f"Invalid canopy value in {path}: {exc}") from exc

    if df[key_column].isna().any():
        raise ParseError(f"Missing community board in {path}")

    out_of_range = df[value_column].notna() & ~df[value_column].between(0, 1)
    if out_of_range.any():
        boards = df.loc[out_of_range, key_column].tolist()
        raise ParseError(f"Canopy cover outside [0, 1] in {path} for boards {boards}")

    df = df.rename(columns=config.CANOPY_COLUMNS)
    logger.info("Loaded canopy cover for %s community boards from %s", len(df), path)
    return df


def download_export(
    url: str,
    destination: Path | str,
    *,
    session: Optional[requests.Session] = None,
) -> int:
    """Stream a CSV export to ``destination`` and return the number of bytes written."""
    session = session or requests.Session()
    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    partial = destination.with_name(destination.name + ".part")

    written = 0
    with session.get(url, stream=True, timeout=config.HTTP_TIMEOUT) as response:
        response.raise_for_status()
        try:
            with open(partial, "wb") as handle:
                for chunk in response.iter_content(chunk_size=config.DOWNLOAD_CHUNK_SIZE):
                    if not chunk:
                        continue
                    handle.write(chunk)
                    written += len(chunk)
        except BaseException:
            partial.unlink(missing_ok=True)
            raise

    # only complete exports reach the final path
    partial.replace(destination)
    logger.debug("Wrote %s bytes to %s", written, destination)
    return written


def run_download(
    *,
    raw_dir: Path | str | None = None,
    session: Optional[requests.Session] = None,
) -> DownloadStats:
    raw_dir = Path(raw_dir) if raw_dir else config.RAW_DATA_DIR
    session = session or requests.Session()
    stats = DownloadStats()

    targets = (
        (config.SERVICE_REQUESTS_URL, raw_dir / config.DEFAULT_SERVICE_REQUESTS_PATH.name),
        (config.CANOPY_COVER_URL, raw_dir / config.DEFAULT_CANOPY_COVER_PATH.name),
    )
    for url, destination in targets:
        logger.info("Downloading %s", url)
        stats.bytes_written += download_export(url, destination, session=session)
        stats.files_written.append(destination)

    logger.info("Download completed: %s", stats.as_dict())
    return stats


__all__ = [
    "ParseError",
    "DownloadStats",
    "load_service_requests",
    "load_canopy_cover",
    "download_export",
    "run_download",
]
