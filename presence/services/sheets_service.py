"""
Google Sheets mirroring of attendance records.

Each saved record is appended as one row:
    timestamp (id-ID long format, local zone) | full name | email | type | late (YA/TIDAK) | lat | lng
"""
import logging
from datetime import datetime
from typing import List, Optional, Sequence, Union

from google.oauth2 import service_account
from googleapiclient.discovery import build

from presence.core.config import settings
from presence.utils.datetime_utils import ZoneLike, to_local

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

_ID_MONTHS = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]

Cell = Union[str, int, float, bool]


class SheetsNotConfigured(RuntimeError):
    pass


def format_timestamp(dt: datetime, tz: ZoneLike = None) -> str:
    """Long Indonesian date/time, e.g. "1 Maret 2024 pukul 07.39.59 WIB"."""
    local = to_local(dt, tz)
    return (
        f"{local.day} {_ID_MONTHS[local.month - 1]} {local.year} "
        f"pukul {local:%H.%M.%S} {local.tzname()}"
    )


def build_row(record, user, tz: ZoneLike = None) -> List[Cell]:
    return [
        format_timestamp(record.timestamp, tz),
        user.full_name or "",
        user.email or "",
        record.type.value if hasattr(record.type, "value") else str(record.type),
        "YA" if record.is_late else "TIDAK",
        record.latitude,
        record.longitude,
    ]


def _sheets_client():
    credentials = service_account.Credentials.from_service_account_file(
        settings.GOOGLE_SHEETS_CREDENTIALS_FILE, scopes=SCOPES
    )
    return build("sheets", "v4", credentials=credentials, cache_discovery=False)


def append_attendance_row(values: Sequence[Cell], spreadsheet_id: Optional[str] = None) -> dict:
    """
    Append one row after the last row of GOOGLE_SHEETS_RANGE.

    Raises:
        SheetsNotConfigured: no spreadsheet id is configured
        googleapiclient.errors.HttpError: the Sheets API rejected the request
    """
    spreadsheet_id = spreadsheet_id or settings.GOOGLE_SHEETS_SPREADSHEET_ID
    if not spreadsheet_id:
        raise SheetsNotConfigured("GOOGLE_SHEETS_SPREADSHEET_ID is not set")

    logger.debug("Appending row to spreadsheet %s: %s", spreadsheet_id, list(values))
    response = (
        _sheets_client()
        .spreadsheets()
        .values()
        .append(
            spreadsheetId=spreadsheet_id,
            range=settings.GOOGLE_SHEETS_RANGE,
            valueInputOption="USER_ENTERED",
            body={"values": [list(values)]},
        )
        .execute()
    )
    logger.info("Appended attendance row to Google Sheet (%s)", response.get("updates", {}).get("updatedRange"))
    return response
