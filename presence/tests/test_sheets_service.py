"""
Tests for Google Sheets row formatting and configuration checks
"""
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from presence.services import sheets_service
from presence.services.sheets_service import SheetsNotConfigured, build_row, format_timestamp


def test_format_timestamp_indonesian_long_form():
    dt = datetime(2024, 3, 1, 0, 39, 59, tzinfo=timezone.utc)
    assert format_timestamp(dt) == "1 Maret 2024 pukul 07.39.59 WIB"


def test_format_timestamp_naive_is_utc():
    assert format_timestamp(datetime(2024, 12, 31, 17, 5, 0)) == "1 Januari 2025 pukul 00.05.00 WIB"


def test_build_row():
    record = SimpleNamespace(
        timestamp=datetime(2024, 3, 1, 0, 45, tzinfo=timezone.utc),
        type="check-in",
        is_late=True,
        latitude=-5.1597,
        longitude=119.4099,
    )
    user = SimpleNamespace(full_name="Budi Santoso", email="budi@company.com")

    assert build_row(record, user) == [
        "1 Maret 2024 pukul 07.45.00 WIB",
        "Budi Santoso",
        "budi@company.com",
        "check-in",
        "YA",
        -5.1597,
        119.4099,
    ]


def test_build_row_check_out_not_late():
    record = SimpleNamespace(
        timestamp=datetime(2024, 3, 1, 9, 5, tzinfo=timezone.utc),
        type="check-out",
        is_late=False,
        latitude=0.0,
        longitude=0.0,
    )
    user = SimpleNamespace(full_name=None, email="x@company.com")

    row = build_row(record, user)
    assert row[1] == ""
    assert row[3] == "check-out"
    assert row[4] == "TIDAK"


def test_append_requires_spreadsheet_id(monkeypatch):
    monkeypatch.setattr(sheets_service.settings, "GOOGLE_SHEETS_SPREADSHEET_ID", None)
    with pytest.raises(SheetsNotConfigured):
        sheets_service.append_attendance_row(["a"])


def test_append_uses_values_append(monkeypatch):
    calls = {}

    class FakeRequest:
        def execute(self):
            return {"updates": {"updatedRange": "Sheet1!A2:G2"}}

    class FakeValues:
        def append(self, **kwargs):
            calls.update(kwargs)
            return FakeRequest()

    class FakeSpreadsheets:
        def values(self):
            return FakeValues()

    class FakeService:
        def spreadsheets(self):
            return FakeSpreadsheets()

    monkeypatch.setattr(sheets_service, "_sheets_client", lambda: FakeService())

    response = sheets_service.append_attendance_row(["1 Maret 2024", "Budi"], spreadsheet_id="sheet-123")

    assert response["updates"]["updatedRange"] == "Sheet1!A2:G2"
    assert calls == {
        "spreadsheetId": "sheet-123",
        "range": "Sheet1!A1",
        "valueInputOption": "USER_ENTERED",
        "body": {"values": [["1 Maret 2024", "Budi"]]},
    }
