from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from taxwise.tax.slabs import round_whole_units
from taxwise.wizard.fields import parse_bool

UNMATCHED_SLAB_MESSAGE = "❌ Error: Could not determine tax slab."

# Upper bound for monthly salary or bonus; keeps every derived total a finite float.
MAX_MONTHLY_AMOUNT = 1e15

_AMOUNT_FIELDS = (
    "total_annual_income",
    "tax_payable_annually",
    "tax_payable_monthly",
    "take_home_salary_annually",
    "take_home_salary_monthly",
)


class TaxComputationInput(BaseModel):
    monthly_salary: float = Field(
        ...,
        gt=0,
        le=MAX_MONTHLY_AMOUNT,
        allow_inf_nan=False,
        description="Gross monthly salary",
        validation_alias=AliasChoices("monthly_salary", "monthlySalary", "salary"),
    )
    monthly_bonus: float = Field(
        0.0,
        ge=0,
        le=MAX_MONTHLY_AMOUNT,
        allow_inf_nan=False,
        description="Monthly bonus, optional",
        validation_alias=AliasChoices("monthly_bonus", "monthlyBonus", "bonus"),
    )
    include_bonus_in_taxable_income: bool = Field(
        True,
        description="Whether the bonus is added to taxable income",
        validation_alias=AliasChoices(
            "include_bonus_in_taxable_income", "includeBonusInTaxableIncome"
        ),
    )

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @field_validator("monthly_bonus", mode="before")
    @classmethod
    def _blank_bonus(cls, value):
        if value is None:
            return 0.0
        if isinstance(value, str) and not value.strip():
            return 0.0
        return value

    @field_validator("include_bonus_in_taxable_income", mode="before")
    @classmethod
    def _yes_no(cls, value):
        if isinstance(value, str):
            try:
                return parse_bool(value)
            except ValueError:
                # left for pydantic to report
                return value
        return value


class TaxCalculationOutput(BaseModel):
    total_annual_income: float
    tax_payable_annually: float
    tax_payable_monthly: float
    take_home_salary_annually: float
    take_home_salary_monthly: float
    tax_slab_summary: str
    tax_slab_list: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    @property
    def is_unmatched(self) -> bool:
        return self.tax_slab_summary == UNMATCHED_SLAB_MESSAGE

    def rounded(self) -> "TaxCalculationOutput":
        """Copy with every amount rounded half-up to whole currency units."""
        update = {name: float(round_whole_units(getattr(self, name))) for name in _AMOUNT_FIELDS}
        return self.model_copy(update=update)


__all__ = [
    "MAX_MONTHLY_AMOUNT",
    "TaxCalculationOutput",
    "TaxComputationInput",
    "UNMATCHED_SLAB_MESSAGE",
]
