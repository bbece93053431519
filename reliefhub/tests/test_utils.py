from datetime import UTC, datetime

import pytest

from reliefhub.app.core.utils import parse_int, to_iso_utc, utc_now_naive


@pytest.mark.parametrize(
    "value, expected",
    [
        (13, 13),
        ("13", 13),
        (" 13 ", 13),
        ("13abc", 13),
        ("-4", -4),
        ("+7", 7),
        (13.9, 13),
        (-0.5, 0),
        ("", None),
        ("abc", None),
        ("1 3", 1),
        (None, None),
        (True, None),
        (False, None),
        (float("nan"), None),
        ([13], None),
        ("\u0661\u0663", None),
        ("\uff11\uff13", None),
        ("\u00a013", 13),
    ],
)
def test_parse_int(value, expected):
    assert parse_int(value) == expected


def test_to_iso_utc_naive():
    assert to_iso_utc(datetime(2026, 1, 2, 3, 4, 5, 678900)) == "2026-01-02T03:04:05.678Z"


def test_to_iso_utc_aware_is_converted():
    aware = datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)
    assert to_iso_utc(aware) == "2026-01-02T03:04:05.000Z"


def test_utc_now_naive_has_no_tzinfo():
    assert utc_now_naive().tzinfo is None
