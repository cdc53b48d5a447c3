from datetime import date, datetime, timedelta, timezone

from backend.core.timeutils import (
    format_slot,
    local_day_bounds,
    local_hour_slots,
    start_of_hour,
    to_naive_utc,
)


def test_start_of_hour_drops_minutes_and_seconds() -> None:
    assert start_of_hour(datetime(2024, 3, 1, 10, 59, 59, 999)) == datetime(2024, 3, 1, 10, 0)


def test_to_naive_utc_converts_offsets() -> None:
    value = datetime(2024, 3, 1, 10, 30, tzinfo=timezone(timedelta(hours=-3)))

    assert to_naive_utc(value) == datetime(2024, 3, 1, 13, 30)


def test_to_naive_utc_keeps_naive_values() -> None:
    assert to_naive_utc(datetime(2024, 3, 1, 10, 30)) == datetime(2024, 3, 1, 10, 30)


def test_format_slot_uses_portuguese_month_names() -> None:
    assert format_slot(datetime(2024, 3, 1, 9, 0), 'UTC') == 'dia 01 de março, às 9:00h'


def test_format_slot_converts_to_requested_timezone() -> None:
    assert format_slot(datetime(2024, 12, 10, 13, 0), 'America/Sao_Paulo') == 'dia 10 de dezembro, às 10:00h'


def test_local_hour_slots_are_stored_in_utc() -> None:
    slots = local_hour_slots(date(2024, 3, 1), [8, 19], 'America/Sao_Paulo')

    assert slots == [datetime(2024, 3, 1, 11, 0), datetime(2024, 3, 1, 22, 0)]


def test_local_day_bounds_cover_the_local_day() -> None:
    assert local_day_bounds(date(2024, 3, 1), 'America/Sao_Paulo') == (
        datetime(2024, 3, 1, 3, 0),
        datetime(2024, 3, 2, 3, 0),
    )
