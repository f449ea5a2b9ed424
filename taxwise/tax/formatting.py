from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from taxwise.tax.slabs import FISCAL_YEAR_LABEL, TAX_SLABS, TaxSlab, round_whole_units

CURRENCY = "PKR"
UNBOUNDED = "∞"


def format_amount(value: float | int | Decimal) -> str:
    return f"{int(round_whole_units(value)):,}"


def format_money(value: float | int | Decimal) -> str:
    return f"{CURRENCY} {format_amount(value)}"


def format_rate(rate: Decimal) -> str:
    return f"{rate * 100:.0f}%"


def _bounds(slab: TaxSlab) -> str:
    upper = UNBOUNDED if slab.upper is None else format_money(slab.upper)
    return f"{format_money(slab.lower)} – {upper}"


def _rate_with_base(slab: TaxSlab) -> str:
    base = f" + {format_money(slab.base)}" if slab.base > 0 else ""
    return f"{format_rate(slab.rate)}{base}"


def slab_summary(slab: TaxSlab) -> str:
    return f"Applicable Tax Slab: {_bounds(slab)} ({_rate_with_base(slab)})"


def slab_list(slabs: Iterable[TaxSlab] = TAX_SLABS) -> str:
    lines = [f"Current Tax Slabs ({FISCAL_YEAR_LABEL}):"]
    for index, slab in enumerate(slabs, start=1):
        lines.append(f"{index}. {_bounds(slab)}: {_rate_with_base(slab)}")
    return "\n".join(lines)


__all__ = [
    "CURRENCY",
    "format_amount",
    "format_money",
    "format_rate",
    "slab_list",
    "slab_summary",
]
