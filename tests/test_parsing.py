from datetime import date
from decimal import Decimal

from feedsync.domain.parsing import get_first, to_bool, to_date, to_decimal, to_float, to_int, to_str, to_str_list


def test_to_float_is_lenient():
    assert to_float("12.5") == 12.5
    assert to_float(3) == 3.0
    assert to_float(None) is None
    assert to_float("") is None
    assert to_float("N/A") is None
    assert to_float(True) is None
    assert to_float("nan") is None
    assert to_float("inf") is None


def test_to_int_and_decimal():
    assert to_int("3") == 3
    assert to_int(2.0) == 2
    assert to_int("abc") is None
    assert to_decimal("0.1") == Decimal("0.1")
    assert to_decimal(250000) == Decimal("250000.0")
    assert to_decimal("x") is None


def test_to_str_renders_scalars():
    assert to_str("  Houston ") == "Houston"
    assert to_str("   ") is None
    assert to_str(2.0) == "2"
    assert to_str(2.5) == "2.5"
    assert to_str(True) == "true"
    assert to_str(["a"]) is None
    assert to_str({"a": 1}) is None


def test_to_bool_words_and_numbers():
    for v in ("true", "Y", "yes", "1", True, 1):
        assert to_bool(v) is True
    for v in ("false", "N", "no", "0", False, 0):
        assert to_bool(v) is False
    assert to_bool("maybe") is None
    assert to_bool(None) is None


def test_to_str_list_wraps_scalars_and_drops_blanks():
    assert to_str_list(["Tile", " ", None, "Wood"]) == ["Tile", "Wood"]
    assert to_str_list("Tile") == ["Tile"]
    assert to_str_list(None) == []
    assert to_str_list("") == []


def test_to_date_accepts_date_and_datetime_strings():
    assert to_date("2024-03-01") == date(2024, 3, 1)
    assert to_date("2024-03-01T10:15:00Z") == date(2024, 3, 1)
    assert to_date("2024-03-01T10:15:00.000+00:00") == date(2024, 3, 1)
    assert to_date("soon") is None
    assert to_date(None) is None


def test_get_first_skips_blank_values():
    payload = {"ListingId": "  ", "ListingKey": "K1"}
    assert get_first(payload, "ListingId", "ListingKey") == "K1"
    assert get_first({}, "ListingId") is None


def test_ints_too_large_for_float_become_none():
    huge = 10**400
    assert to_float(huge) is None
    assert to_int(huge) is None
    assert to_decimal(huge) is None


def test_to_decimal_keeps_upstream_digits():
    assert to_decimal(425000) == Decimal(425000)
    assert str(to_decimal(" 199.99 ")) == "199.99"
    assert to_decimal(0.1) == Decimal("0.1")
