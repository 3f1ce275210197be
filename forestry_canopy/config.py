"""Configuration constants for the forestry canopy analysis pipeline."""
from __future__ import annotations

from pathlib import Path

# NYC Open Data CSV exports
SERVICE_REQUESTS_URL: str = "https://data.cityofnewyork.us/api/views/mu46-p9is/rows.csv?accessType=DOWNLOAD"
CANOPY_COVER_URL: str = "https://data.cityofnewyork.us/api/views/by9n-x5bq/rows.csv?accessType=DOWNLOAD"

# Directory for downloaded exports
RAW_DATA_DIR: Path = Path("data/raw")

# Directory for derived summary tables
DERIVED_DATA_DIR: Path = Path("data/derived")

DEFAULT_SERVICE_REQUESTS_PATH: Path = RAW_DATA_DIR / "forestry_service_requests.csv"
DEFAULT_CANOPY_COVER_PATH: Path = RAW_DATA_DIR / "canopy_cover_by_community_board.csv"

# Timeout (seconds) for HTTP requests to NYC Open Data
HTTP_TIMEOUT: int = 120

# Chunk size (bytes) used when streaming an export to disk
DOWNLOAD_CHUNK_SIZE: int = 1 << 20

# Both date columns of the service request export use this layout
DATE_FORMAT: str = "%m/%d/%Y %H:%M:%S"

# Source column -> canonical column for the service request export.
# Only these columns are consumed out of the full export.
SERVICE_REQUEST_COLUMNS: dict[str, str] = {
    "SRStatus": "status",
    "SRCategory": "category",
    "SRPriority": "priority",
    "CommunityBoard": "community_board_code",
    "ZIPCode": "zip_code",
    "InitiatedDate": "start_date",
    "ClosedDate": "end_date",
}

# Codes that must keep their leading zeros and exact digit counts
TEXT_COLUMNS: tuple[str, ...] = ("CommunityBoard", "ZIPCode")

DATE_COLUMNS: tuple[str, ...] = ("InitiatedDate", "ClosedDate")

# Source column -> canonical column for the canopy export
CANOPY_COLUMNS: dict[str, str] = {
    "CB": "community_board_name",
    "Canopy": "canopy_cover",
}

# Borough digit of a community board code -> (borough name, initials)
BOROUGHS: dict[str, tuple[str, str]] = {
    "1": ("Manhattan", "MN"),
    "2": ("Bronx", "BX"),
    "3": ("Brooklyn", "BK"),
    "4": ("Queens", "QN"),
    "5": ("Staten Island", "SI"),
}

# Categories only recorded for two years of the export
EXCLUDED_CATEGORIES: frozenset[str] = frozenset({"Claims", "Pests/Disease"})

# Joint interest areas: parks, cemeteries, airports and other districts that
# have a board code but no community board jurisdiction.
NON_COMMUNITY_BOARDS: frozenset[str] = frozenset(
    {
        "MN64",
        "BX26",
        "BX27",
        "BX28",
        "BK55",
        "BK56",
        "QN80",
        "QN81",
        "QN82",
        "QN83",
        "QN84",
        "SI95",
    }
)

# Columns kept on a cleaned service request, in order
CLEANED_COLUMNS: tuple[str, ...] = (
    "borough_name",
    "community_board_name",
    "start_month",
    "end_month",
    "status",
    "priority",
    "category",
)
