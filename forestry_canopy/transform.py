"""Cleaning, joining and aggregation of forestry service requests."""
from __future__ import annotations

import logging
from typing import Callable, Dict, List

import pandas as pd

from . import config

logger = logging.getLogger(__name__)


class DataQualityError(ValueError):
    """Raised when cleaned data violates an assumption the analysis depends on."""


BOROUGH_NAMES: Dict[str, str] = {digit: name for digit, (name, _) in config.BOROUGHS.items()}
BOROUGH_INITIALS: Dict[str, str] = {digit: initials for digit, (_, initials) in config.BOROUGHS.items()}


def _log_drop(step: str, before: int, after: int) -> None:
    if before != after:
        logger.debug("%s: dropped %s of %s rows", step, before - after, before)


def clean_service_requests(df: pd.DataFrame) -> pd.DataFrame:
    """Filter invalid service requests and derive the borough/board columns.

    Rows are kept only when the community board code has exactly three
    characters, the code and both dates are present (a missing end date is a
    case that is still open) and the category is not excluded. The result is
    projected to ``config.CLEANED_COLUMNS`` and sorted by ``start_month``.
    """
    total = len(df)

    before = len(df)
    df = df[df["community_board_code"].str.len() == 3]
    _log_drop("board code length", before, len(df))

    before = len(df)
    df = df.dropna(subset=["community_board_code", "start_date", "end_date"])
    _log_drop("missing code or dates", before, len(df))

    before = len(df)
    df = df[~df["category"].isin(config.EXCLUDED_CATEGORIES)]
    _log_drop("excluded categories", before, len(df))

    df = df.copy()
    df["borough_digit"] = df["community_board_code"].str[0]
    df["district"] = df["community_board_code"].str[1:]

    unknown = ~df["borough_digit"].isin(config.BOROUGHS)
    if unknown.any():
        codes = sorted(df.loc[unknown, "community_board_code"].unique())
        raise DataQualityError(f"Unknown borough digit in community board codes: {codes}")

    df["start_month"] = df["start_date"].astype(str).str[:7]
    df["end_month"] = df["end_date"].astype(str).str[:7]
    df["borough_initials"] = df["borough_digit"].map(BOROUGH_INITIALS)
    df["borough_name"] = df["borough_digit"].map(BOROUGH_NAMES)
    df["community_board_name"] = df["borough_initials"] + df["district"]

    cleaned = (
        df.loc[:, list(config.CLEANED_COLUMNS)]
        .sort_values("start_month", kind="stable")
        .reset_index(drop=True)
    )
    logger.info("Cleaned service requests: kept %s of %s rows", len(cleaned), total)
    return cleaned


def join_canopy_cover(cleaned: pd.DataFrame, canopy: pd.DataFrame) -> pd.DataFrame:
    """Left join canopy cover onto cleaned requests by community board name.

    Boards without a canopy record get a null ``canopy_cover``. Canopy keys
    must be unique, otherwise requests would be duplicated.
    """
    try:
        joined = cleaned.merge(
            canopy.loc[:, ["community_board_name", "canopy_cover"]],
            how="left",
            on="community_board_name",
            validate="many_to_one",
        )
    except pd.errors.MergeError as exc:
        raise DataQualityError(f"Canopy cover has duplicate community board keys: {exc}") from exc

    missing = int(joined["canopy_cover"].isna().sum())
    if missing:
        logger.info("%s of %s requests have no canopy cover match", missing, len(joined))
    return joined


def _with_year(df: pd.DataFrame) -> pd.DataFrame:
    return df.assign(year=df["start_month"].str[:4])


def _count_calls(df: pd.DataFrame, keys: List[str]) -> pd.DataFrame:
    counts = df.groupby(keys, dropna=False).size().reset_index(name="total_calls")
    return counts.sort_values("total_calls", ascending=False, kind="stable").reset_index(drop=True)


def canopy_by_borough(joined: pd.DataFrame) -> pd.DataFrame:
    """Mean canopy cover per borough, ranked from most to least covered."""
    grouped = joined.groupby("borough_name")["canopy_cover"].mean().reset_index()
    return grouped.sort_values("canopy_cover", ascending=False, kind="stable").reset_index(drop=True)


def calls_by_year_borough(joined: pd.DataFrame) -> pd.DataFrame:
    return _count_calls(_with_year(joined), ["year", "borough_name"])


def calls_by_year_borough_category(joined: pd.DataFrame) -> pd.DataFrame:
    return _count_calls(_with_year(joined), ["year", "borough_name", "category"])


def calls_by_community_board(joined: pd.DataFrame) -> pd.DataFrame:
    """Calls and mean canopy cover per community board.

    Joint interest areas (``config.NON_COMMUNITY_BOARDS``) are left out.
    """
    boards = joined[~joined["community_board_name"].isin(config.NON_COMMUNITY_BOARDS)]
    grouped = (
        boards.groupby(["community_board_name", "borough_name"], dropna=False)
        .agg(
            total_calls=("community_board_name", "size"),
            canopy_cover=("canopy_cover", "mean"),
        )
        .reset_index()
    )
    return grouped.sort_values("total_calls", ascending=False, kind="stable").reset_index(drop=True)


def calls_by_year_community_board_category(joined: pd.DataFrame) -> pd.DataFrame:
    return _count_calls(
        _with_year(joined),
        ["year", "community_board_name", "borough_name", "category"],
    )


SUMMARY_TABLES: Dict[str, Callable[[pd.DataFrame], pd.DataFrame]] = {
    "canopy_by_borough": canopy_by_borough,
    "calls_by_year_borough": calls_by_year_borough,
    "calls_by_year_borough_category": calls_by_year_borough_category,
    "calls_by_community_board": calls_by_community_board,
    "calls_by_year_community_board_category": calls_by_year_community_board_category,
}


def build_summary_tables(joined: pd.DataFrame) -> Dict[str, pd.DataFrame]:
    return {name: build(joined) for name, build in SUMMARY_TABLES.items()}


__all__ = [
    "DataQualityError",
    "clean_service_requests",
    "join_canopy_cover",
    "canopy_by_borough",
    "calls_by_year_borough",
    "calls_by_year_borough_category",
    "calls_by_community_board",
    "calls_by_year_community_board_category",
    "build_summary_tables",
    "SUMMARY_TABLES",
]
