from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from taxwise.core.models import UNMATCHED_SLAB_MESSAGE, TaxCalculationOutput, TaxComputationInput
from taxwise.tax.formatting import slab_list, slab_summary
from taxwise.tax.slabs import TaxSlab, find_slab, round_whole_units, slab_tax, to_decimal

logger = logging.getLogger("taxwise.calculator")

MEDICAL_ALLOWANCE_RATE = Decimal("0.091")
PROVIDENT_FUND_RATE = Decimal("0.05")
MONTHS = 12


@dataclass(frozen=True)
class SlabTax:
    income: Decimal
    slab: TaxSlab | None
    tax: Decimal


def salary_deductions(monthly_salary: float | Decimal) -> tuple[Decimal, Decimal]:
    """Return ``(medical_allowance, provident_fund)`` for a monthly salary."""
    salary = to_decimal(monthly_salary)
    medical_allowance = round_whole_units(salary * MEDICAL_ALLOWANCE_RATE)
    provident_fund = round_whole_units(salary * PROVIDENT_FUND_RATE)
    return medical_allowance, provident_fund


def annual_taxable_income(
    monthly_salary: float | Decimal,
    monthly_bonus: float | Decimal = 0,
    include_bonus: bool = True,
) -> Decimal:
    salary = to_decimal(monthly_salary)
    medical_allowance, _ = salary_deductions(salary)
    taxable_salary = salary - medical_allowance
    if include_bonus:
        return round_whole_units((taxable_salary + to_decimal(monthly_bonus)) * MONTHS)
    return round_whole_units(taxable_salary * MONTHS)


def tax_for_annual_income(income: float | Decimal) -> SlabTax:
    income_dec = to_decimal(income)
    slab = find_slab(income_dec)
    if slab is None:
        return SlabTax(income=income_dec, slab=None, tax=Decimal("0"))
    return SlabTax(income=income_dec, slab=slab, tax=slab_tax(slab, income_dec))


def _unmatched_result(income: Decimal) -> TaxCalculationOutput:
    logger.warning("No tax slab covers annual taxable income %s", income)
    return TaxCalculationOutput(
        total_annual_income=float(income),
        tax_payable_annually=0.0,
        tax_payable_monthly=0.0,
        take_home_salary_annually=float(income),
        take_home_salary_monthly=float(income / MONTHS),
        tax_slab_summary=UNMATCHED_SLAB_MESSAGE,
        tax_slab_list="",
    )


def compute_tax(
    monthly_salary: float | Decimal,
    monthly_bonus: float | Decimal | None = None,
    include_bonus_in_taxable_income: bool = True,
) -> TaxCalculationOutput:
    salary = to_decimal(monthly_salary)
    bonus = to_decimal(monthly_bonus or 0)
    _, provident_fund = salary_deductions(salary)

    taxable_income = annual_taxable_income(salary, bonus, include_bonus_in_taxable_income)
    slab_tax_result = tax_for_annual_income(taxable_income)
    if slab_tax_result.slab is None:
        return _unmatched_result(taxable_income)

    tax_annual = slab_tax_result.tax
    if include_bonus_in_taxable_income:
        take_home_annual = (salary + bonus) * MONTHS - tax_annual - provident_fund * MONTHS
    else:
        # bonus is paid on top, untaxed
        take_home_annual = salary * MONTHS - tax_annual - provident_fund * MONTHS + bonus * MONTHS

    logger.debug(
        "Computed tax: taxable_income=%s slab_lower=%s tax_annual=%s",
        taxable_income,
        slab_tax_result.slab.lower,
        tax_annual,
    )
    return TaxCalculationOutput(
        total_annual_income=float((salary + bonus) * MONTHS),
        tax_payable_annually=float(tax_annual),
        tax_payable_monthly=float(tax_annual / MONTHS),
        take_home_salary_annually=float(take_home_annual),
        take_home_salary_monthly=float(take_home_annual / MONTHS),
        tax_slab_summary=slab_summary(slab_tax_result.slab),
        tax_slab_list=slab_list(),
    )


def compute_from_input(payload: TaxComputationInput) -> TaxCalculationOutput:
    return compute_tax(
        payload.monthly_salary,
        payload.monthly_bonus,
        payload.include_bonus_in_taxable_income,
    )


__all__ = [
    "MEDICAL_ALLOWANCE_RATE",
    "PROVIDENT_FUND_RATE",
    "SlabTax",
    "annual_taxable_income",
    "compute_from_input",
    "compute_tax",
    "salary_deductions",
    "tax_for_annual_income",
]
