from __future__ import annotations

import pandas as pd
import pytest

REQUESTS_HEADER = "OBJECTID,SRStatus,SRCategory,SRPriority,CommunityBoard,ZIPCode,InitiatedDate,ClosedDate"

REQUESTS_ROWS = [
    "1,Closed,Hazard,A,101,10004,03/02/2019 09:15:00,03/20/2019 16:00:00",
    "2,Closed,Prune,C,226,10462,01/11/2018 12:00:00,02/01/2018 08:30:00",
    "3,Closed,Hazard,B,X1,10001,05/05/2019 10:00:00,05/06/2019 10:00:00",
    "4,In Progress,Remove Tree,B,305,11201,06/07/2020 11:00:00,",
    "5,Closed,Claims,C,401,11101,07/07/2020 11:00:00,07/09/2020 11:00:00",
    "6,Closed,Plant Tree,D,595,00083,08/01/2017 08:00:00,09/01/2017 08:00:00",
]

CANOPY_CSV = "CB,Canopy,Notes\nMN01,0.12,x\nBX26,0.55,y\nSI01,0.31,z\n"


def make_requests(rows: list[dict]) -> pd.DataFrame:
    """Build a loaded service request table from partial row dicts."""
    defaults = {
        "status": "Closed",
        "category": "Hazard",
        "priority": "B",
        "community_board_code": "101",
        "zip_code": "10004",
        "start_date": "2019-01-01 10:00:00",
        "end_date": "2019-01-05 10:00:00",
    }
    df = pd.DataFrame([{**defaults, **row} for row in rows])
    for column in ("start_date", "end_date"):
        df[column] = pd.to_datetime(df[column])
    return df


@pytest.fixture
def requests_csv(tmp_path):
    path = tmp_path / "requests.csv"
    path.write_text("\n".join([REQUESTS_HEADER, *REQUESTS_ROWS]) + "\n")
    return path


@pytest.fixture
def canopy_csv(tmp_path):
    path = tmp_path / "canopy.csv"
    path.write_text(CANOPY_CSV)
    return path


@pytest.fixture
def canopy_df():
    return pd.DataFrame(
        {
            "community_board_name": ["MN01", "BX26", "BK05"],
            "canopy_cover": [0.12, 0.55, 0.2],
        }
    )
