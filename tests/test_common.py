from datetime import date
from decimal import Decimal

import pytest

from dayflow.common.datetime_utils import inclusive_days, months_back, parse_date_arg
from dayflow.common.pagination import page_request
from dayflow.common.validators import require_amount, require_email
from dayflow.core.exceptions import ValidationError


def test_page_request_defaults_and_offset():
    page = page_request("3", None, default_limit=10)

    assert page.offset == 20
    assert page.describe(25) == {"total": 25, "page": 3, "limit": 10, "totalPages": 3}


@pytest.mark.parametrize("page, limit", [("0", "10"), ("1", "0"), ("x", "10"), ("1", "201")])
def test_page_request_rejects_bad_values(page, limit):
    with pytest.raises(ValidationError):
        page_request(page, limit, default_limit=10)


def test_parse_date_accepts_iso_timestamp():
    assert parse_date_arg("2026-02-01T00:00:00.000Z", "startDate") == date(2026, 2, 1)
    assert parse_date_arg("", "startDate") is None


def test_parse_date_rejects_garbage():
    with pytest.raises(ValidationError, match="startDate must be a date"):
        parse_date_arg("yesterday", "startDate")


def test_inclusive_days():
    assert inclusive_days(date(2026, 2, 1), date(2026, 2, 2)) == 2


def test_months_back_clamps_day():
    assert months_back(date(2026, 8, 31), 6) == date(2026, 2, 28)
    assert months_back(date(2026, 3, 15), 6) == date(2025, 9, 15)


def test_amounts_are_decimal_cents():
    assert require_amount("1234.5", "Salary") == Decimal("1234.50")
    with pytest.raises(ValidationError):
        require_amount(True, "Salary")
    with pytest.raises(ValidationError, match="cannot be negative"):
        require_amount(-1, "Salary")


def test_email_is_lowercased():
    assert require_email(" Someone@Example.COM ") == "someone@example.com"
    with pytest.raises(ValidationError, match="Invalid email address"):
        require_email("not-an-email")
