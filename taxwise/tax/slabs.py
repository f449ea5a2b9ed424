from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Context, Decimal, getcontext
from typing import Iterable

D = Decimal

_WHOLE = D("1")
FISCAL_YEAR_LABEL = "FY 2025–26"


@dataclass(frozen=True)
class TaxSlab:
    lower: D
    upper: D | None
    rate: D
    base: D

    def contains(self, income: D) -> bool:
        if income < self.lower:
            return False
        return self.upper is None or income <= self.upper


# Salaried individuals, FY 2025-26. ``base`` is the tax owed on every lower
# slab taken in full.
TAX_SLABS: tuple[TaxSlab, ...] = (
    TaxSlab(D("0"), D("600000"), D("0"), D("0")),
    TaxSlab(D("600001"), D("1200000"), D("0.01"), D("0")),
    TaxSlab(D("1200001"), D("2200000"), D("0.11"), D("6000")),
    TaxSlab(D("2200001"), D("3200000"), D("0.23"), D("116000")),
    TaxSlab(D("3200001"), D("4100000"), D("0.30"), D("346000")),
    TaxSlab(D("4100001"), None, D("0.35"), D("616000")),
)


def to_decimal(value: float | int | Decimal) -> Decimal:
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    if not amount.is_finite():
        raise ValueError(f"Amount must be a finite number, got {value!r}.")
    return amount


def round_whole_units(value: float | int | Decimal) -> Decimal:
    amount = to_decimal(value)
    # quantize needs room for every integer digit of the amount
    precision = max(getcontext().prec, amount.adjusted() + 2)
    return amount.quantize(_WHOLE, rounding=ROUND_HALF_UP, context=Context(prec=precision))


def find_slab(income: Decimal, slabs: Iterable[TaxSlab] = TAX_SLABS) -> TaxSlab | None:
    for slab in slabs:
        if slab.contains(income):
            return slab
    return None


def slab_tax(slab: TaxSlab, income: Decimal) -> Decimal:
    """Annual tax for ``income`` falling inside ``slab``.

    Slab bounds are contiguous whole units (``...1,200,000`` then
    ``1,200,001...``), so the portion taxed at the slab rate is measured from
    ``lower - 1``. The boundary unit itself is taxed and the result at
    ``upper`` lines up with the next slab's ``base``.
    """
    offset = D("0") if slab.lower == 0 else slab.lower - 1
    return slab.base + (income - offset) * slab.rate


__all__ = [
    "FISCAL_YEAR_LABEL",
    "TAX_SLABS",
    "TaxSlab",
    "find_slab",
    "round_whole_units",
    "slab_tax",
    "to_decimal",
]
