import httpx
import pytest

from taxwise.wizard.fields import (
    build_share_url,
    form_defaults_from_query,
    parse_bool,
    parse_number,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("100000", 100000.0),
        ("85k", 85000.0),
        ("1.2m", 1200000.0),
        ("PKR 100,000", 100000.0),
        ("Rs. 50,000", 50000.0),
        (" 12_500 ", 12500.0),
    ],
)
def test_parse_number_accepts_common_formats(text, expected):
    assert parse_number(text) == pytest.approx(expected)


@pytest.mark.parametrize("text", ["", "   ", "abc", "k", "nan", "inf"])
def test_parse_number_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_number(text)


def test_parse_bool():
    assert parse_bool("Yes") is True
    assert parse_bool("n") is False
    with pytest.raises(ValueError, match="yes or no"):
        parse_bool("perhaps")


def test_form_defaults_from_full_query():
    defaults = form_defaults_from_query(
        {"salary": "100000", "bonus": "2500", "includeBonusInTaxableIncome": "no"}
    )
    assert defaults == {"salary": 100000.0, "bonus": 2500.0, "include_bonus_in_taxable_income": "no"}


def test_form_defaults_drop_bad_values():
    defaults = form_defaults_from_query({"salary": "lots", "includeBonusInTaxableIncome": "NO"})
    assert defaults == {"salary": None, "bonus": None, "include_bonus_in_taxable_income": "yes"}


def test_share_url_without_bonus():
    url = build_share_url("http://localhost:8000/ui/", 100000.0, None, True)
    assert url == "http://localhost:8000/ui/?salary=100000&includeBonusInTaxableIncome=yes"


def test_share_url_replaces_stale_values_and_keeps_other_params():
    url = build_share_url(
        "https://example.test/ui/?ref=abc&salary=1&bonus=9&includeBonusInTaxableIncome=yes",
        150000.5,
        None,
        False,
    )
    params = httpx.URL(url).params
    assert params["ref"] == "abc"
    assert params["salary"] == "150000.5"
    assert "bonus" not in params
    assert params["includeBonusInTaxableIncome"] == "no"


def test_share_url_sets_bonus():
    params = httpx.URL(build_share_url("http://localhost/ui/", 90000, 5000, True)).params
    assert params["bonus"] == "5000"
    assert params["includeBonusInTaxableIncome"] == "yes"
