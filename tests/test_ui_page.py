import pytest
from fastapi.testclient import TestClient

from taxwise.api.http import app


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def test_empty_form_renders_without_results(client):
    response = client.get("/ui/")
    assert response.status_code == 200
    assert "Calculate Your Tax" in response.text
    assert "Tax Calculation Summary" not in response.text


def test_query_string_computes_results(client):
    response = client.get("/ui/?salary=100000&includeBonusInTaxableIncome=yes")
    assert response.status_code == 200
    text = response.text
    assert "PKR 4,908" in text
    assert "PKR 94,591" in text
    assert "Exempt Medical Allowance (9.1%): PKR 9,100" in text
    assert "Applicable Tax Slab: PKR 600,001 – PKR 1,200,000 (1%)" in text
    assert "salary=100000&amp;includeBonusInTaxableIncome=yes" in text


def test_excluded_bonus_shows_note(client):
    response = client.get("/ui/?salary=100000&bonus=20000&includeBonusInTaxableIncome=no")
    assert response.status_code == 200
    assert "PKR 1,375,092" in response.text
    assert "PKR 20,000 per month is excluded from taxable income" in response.text
    assert "bonus=20000" in response.text


def test_form_accepts_shorthand_amounts(client):
    response = client.get("/ui/", params={"salary": "100k"})
    assert response.status_code == 200
    assert "PKR 4,908" in response.text


@pytest.mark.parametrize(
    "params, message",
    [
        ({"salary": "abc"}, "Salary:"),
        ({"salary": "-5"}, "Salary must be a positive number."),
        ({"salary": "1000", "bonus": "-1"}, "Bonus cannot be negative."),
    ],
)
def test_invalid_submission_rerenders_with_error(client, params, message):
    response = client.get("/ui/", params=params)
    assert response.status_code == 400
    assert message in response.text
    assert "Tax Calculation Summary" not in response.text


def test_share_link_uses_parsed_amounts(client):
    response = client.get("/ui/", params={"salary": "100k", "bonus": "20k", "includeBonusInTaxableIncome": "no"})
    assert response.status_code == 200
    assert "salary=100000&amp;bonus=20000&amp;includeBonusInTaxableIncome=no" in response.text


def test_unknown_flag_falls_back_to_taxable_bonus(client):
    response = client.get("/ui/", params={"salary": "100000", "includeBonusInTaxableIncome": "maybe"})
    assert response.status_code == 200
    assert "includeBonusInTaxableIncome=yes" in response.text


@pytest.mark.parametrize("params", [{"salary": "1e30"}, {"salary": "1000", "bonus": "abc"}])
def test_out_of_range_or_garbled_amounts_are_reported(client, params):
    response = client.get("/ui/", params=params)
    assert response.status_code == 400
    assert "Tax Calculation Summary" not in response.text
