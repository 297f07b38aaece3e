from datetime import datetime, timedelta, timezone

from datetime_utils import ensure_utc, parse_iso_datetime, to_iso_utc


def test_parse_zulu_and_offsets():
    expected = datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)
    assert parse_iso_datetime("2025-01-06T09:00:00Z") == expected
    assert parse_iso_datetime("2025-01-06T09:00:00.000Z") == expected
    assert parse_iso_datetime("2025-01-06T18:00:00+09:00") == expected


def test_parse_rejects_garbage():
    assert parse_iso_datetime(None) is None
    assert parse_iso_datetime("   ") is None
    assert parse_iso_datetime("next tuesday") is None


def test_naive_values_are_utc():
    naive = datetime(2025, 1, 6, 9, 0)
    assert ensure_utc(naive).tzinfo == timezone.utc
    assert parse_iso_datetime(naive) == naive.replace(tzinfo=timezone.utc)


def test_to_iso_utc():
    tokyo = timezone(timedelta(hours=9))
    assert to_iso_utc(datetime(2025, 1, 6, 18, 0, tzinfo=tokyo)) == "2025-01-06T09:00:00.000Z"
    assert to_iso_utc(None) is None
