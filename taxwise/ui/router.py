from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from taxwise.core.models import TaxCalculationOutput, TaxComputationInput
from taxwise.tax.calculator import compute_from_input, salary_deductions
from taxwise.tax.formatting import format_money
from taxwise.tax.slabs import FISCAL_YEAR_LABEL
from taxwise.wizard import (
    BONUS_PARAM,
    SALARY_PARAM,
    FormDefaults,
    build_share_url,
    form_defaults_from_query,
    parse_number,
)

router = APIRouter(prefix="/ui", tags=["ui"])

UI_ROOT = Path(__file__).resolve().parent
TEMPLATES = Jinja2Templates(directory=str(UI_ROOT / "templates"))
TEMPLATES.env.filters["money"] = format_money


class FormError(ValueError):
    pass


def _amount_error(label: str, raw: str) -> FormError:
    try:
        parse_number(raw)
    except ValueError as exc:
        return FormError(f"{label}: {exc}")
    return FormError(f"{label}: Could not understand number '{raw}'.")


def _parse_submission(params: dict[str, str], defaults: FormDefaults) -> TaxComputationInput:
    salary = defaults["salary"]
    if salary is None:
        raise _amount_error("Salary", params.get(SALARY_PARAM, ""))
    if salary <= 0:
        raise FormError("Salary must be a positive number.")

    bonus = defaults["bonus"]
    if bonus is None:
        bonus_text = params.get(BONUS_PARAM, "")
        if bonus_text.strip():
            raise _amount_error("Bonus", bonus_text)
        bonus = 0.0
    if bonus < 0:
        raise FormError("Bonus cannot be negative.")

    try:
        return TaxComputationInput(
            monthly_salary=salary,
            monthly_bonus=bonus,
            include_bonus_in_taxable_income=defaults["include_bonus_in_taxable_income"],
        )
    except ValidationError as exc:
        messages = "; ".join(str(error.get("msg")) for error in exc.errors())
        raise FormError(messages) from exc


def _bonus_note(payload: TaxComputationInput) -> str | None:
    if payload.include_bonus_in_taxable_income or payload.monthly_bonus <= 0:
        return None
    return (
        f"Your bonus of {format_money(payload.monthly_bonus)} per month is excluded from "
        "taxable income and added to take-home pay untaxed."
    )


@router.get("/", response_class=HTMLResponse)
def calculator_page(request: Request) -> HTMLResponse:
    params = dict(request.query_params)
    defaults = form_defaults_from_query(params)
    context: dict[str, Any] = {
        "fiscal_year": FISCAL_YEAR_LABEL,
        "salary_value": params.get(SALARY_PARAM, ""),
        "bonus_value": params.get(BONUS_PARAM, ""),
        "include_bonus": defaults["include_bonus_in_taxable_income"],
        "deductions": None,
        "result": None,
        "bonus_note": None,
        "share_url": None,
        "error": None,
    }
    if SALARY_PARAM not in params:
        return TEMPLATES.TemplateResponse(request, "index.html", context)

    try:
        payload = _parse_submission(params, defaults)
    except FormError as exc:
        context["error"] = str(exc)
        return TEMPLATES.TemplateResponse(request, "index.html", context, status_code=400)

    medical_allowance, provident_fund = salary_deductions(payload.monthly_salary)
    result: TaxCalculationOutput = compute_from_input(payload).rounded()
    context.update(
        {
            "deductions": {
                "medical_allowance": medical_allowance,
                "provident_fund": provident_fund,
            },
            "result": result,
            "bonus_note": _bonus_note(payload),
            "share_url": build_share_url(
                str(request.url),
                payload.monthly_salary,
                defaults["bonus"],
                payload.include_bonus_in_taxable_income,
            ),
        }
    )
    return TEMPLATES.TemplateResponse(request, "index.html", context)
