from decimal import Decimal as D

from taxwise.tax.formatting import format_amount, format_money, format_rate, slab_list, slab_summary
from taxwise.tax.slabs import TAX_SLABS


def test_amounts_use_grouping_and_no_decimals():
    assert format_amount(D("1090800")) == "1,090,800"
    assert format_amount(4908.4) == "4,908"
    assert format_amount(4908.5) == "4,909"
    assert format_money(0) == "PKR 0"


def test_rates_render_as_whole_percentages():
    assert format_rate(D("0")) == "0%"
    assert format_rate(D("0.01")) == "1%"
    assert format_rate(D("0.30")) == "30%"


def test_summary_omits_zero_base():
    assert slab_summary(TAX_SLABS[1]) == "Applicable Tax Slab: PKR 600,001 – PKR 1,200,000 (1%)"


def test_summary_for_unbounded_slab_uses_infinity():
    assert slab_summary(TAX_SLABS[-1]) == "Applicable Tax Slab: PKR 4,100,001 – ∞ (35% + PKR 616,000)"


def test_slab_list_enumerates_every_slab():
    expected = "\n".join(
        [
            "Current Tax Slabs (FY 2025–26):",
            "1. PKR 0 – PKR 600,000: 0%",
            "2. PKR 600,001 – PKR 1,200,000: 1%",
            "3. PKR 1,200,001 – PKR 2,200,000: 11% + PKR 6,000",
            "4. PKR 2,200,001 – PKR 3,200,000: 23% + PKR 116,000",
            "5. PKR 3,200,001 – PKR 4,100,000: 30% + PKR 346,000",
            "6. PKR 4,100,001 – ∞: 35% + PKR 616,000",
        ]
    )
    assert slab_list() == expected
