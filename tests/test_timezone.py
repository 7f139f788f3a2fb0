from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from refdata.core.timezone import format_datetime, now

UTC_PLUS_8 = timezone(timedelta(hours=8))


@pytest.fixture(autouse=True)
def fixed_zone(monkeypatch):
    monkeypatch.setattr(
        "refdata.core.timezone.get_settings", lambda: SimpleNamespace(timezone_info=UTC_PLUS_8)
    )


def test_now_is_aware_in_configured_zone():
    assert now().utcoffset() == timedelta(hours=8)


def test_format_datetime_converts_aware_values():
    value = datetime(2025, 9, 30, 8, 5, 26, tzinfo=timezone.utc)

    assert format_datetime(value) == "2025-09-30 16:05:26"
    assert format_datetime(value, "%Y/%m/%d") == "2025/09/30"


def test_format_datetime_keeps_naive_values_as_local_time():
    assert format_datetime(datetime(2025, 9, 30, 16, 5, 26)) == "2025-09-30 16:05:26"
    assert format_datetime(None) is None
