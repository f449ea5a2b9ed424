import argparse
import sys
from pathlib import Path

if __package__ in (None, ""):
    sys.path.append(str(Path(__file__).resolve().parent.parent))

import uvicorn
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from taxwise.config import get_settings
from taxwise.core.models import TaxCalculationOutput, TaxComputationInput
from taxwise.tax.calculator import compute_from_input, salary_deductions
from taxwise.tax.formatting import format_money, format_rate, slab_list
from taxwise.tax.slabs import FISCAL_YEAR_LABEL, TAX_SLABS
from taxwise.wizard import build_share_url, parse_number


def _get_console(no_color: bool) -> Console:
    return Console(no_color=no_color, highlight=False)


def _amount(text: str) -> float:
    try:
        return parse_number(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _build_payload(args: argparse.Namespace, console: Console) -> TaxComputationInput:
    try:
        return TaxComputationInput(
            monthly_salary=args.salary,
            monthly_bonus=args.bonus,
            include_bonus_in_taxable_income=not args.exclude_bonus,
        )
    except ValidationError as exc:
        console.print("There was a problem with the values provided:", markup=False)
        for error in exc.errors():
            location = " -> ".join(str(part) for part in error.get("loc", ("value",)))
            console.print(f"  - {location}: {error.get('msg')}", markup=False)
        sys.exit(1)


def _print_result(
    payload: TaxComputationInput,
    result: TaxCalculationOutput,
    share_url: str,
    console: Console,
) -> None:
    medical_allowance, provident_fund = salary_deductions(payload.monthly_salary)
    table = Table(title="Tax Calculation Summary", expand=False)
    table.add_column("Metric")
    table.add_column("Annually", justify="right")
    table.add_column("Monthly", justify="right")
    table.add_row(
        "Total income",
        format_money(result.total_annual_income),
        format_money(result.total_annual_income / 12),
    )
    table.add_row(
        "Tax payable",
        format_money(result.tax_payable_annually),
        format_money(result.tax_payable_monthly),
    )
    table.add_row(
        "Take-home salary",
        format_money(result.take_home_salary_annually),
        format_money(result.take_home_salary_monthly),
    )
    table.add_section()
    table.add_row("Medical allowance (9.1%)", "", format_money(medical_allowance))
    table.add_row("Provident fund (5%)", "", format_money(provident_fund))
    console.print(table)
    console.print(result.tax_slab_summary, markup=False)
    if not payload.include_bonus_in_taxable_income and payload.monthly_bonus > 0:
        console.print("Bonus excluded from taxable income; added to take-home untaxed.", markup=False)
    console.print(f"Share: {share_url}", markup=False, soft_wrap=True)


def _cmd_compute(args: argparse.Namespace, console: Console) -> None:
    payload = _build_payload(args, console)
    result = compute_from_input(payload)
    if not args.exact:
        result = result.rounded()
    if args.json:
        console.print_json(data=result.model_dump(by_alias=True))
        return
    if result.is_unmatched:
        console.print(result.tax_slab_summary, markup=False)
        sys.exit(1)
    share_url = build_share_url(
        get_settings().public_url,
        payload.monthly_salary,
        args.bonus,
        payload.include_bonus_in_taxable_income,
    )
    _print_result(payload, result, share_url, console)


def _cmd_slabs(args: argparse.Namespace, console: Console) -> None:
    if args.plain:
        console.print(slab_list(), markup=False)
        return
    table = Table(title=f"Current Tax Slabs ({FISCAL_YEAR_LABEL})", expand=False)
    for column in ("#", "From", "To", "Rate", "Base tax"):
        table.add_column(column)
    for index, slab in enumerate(TAX_SLABS, start=1):
        table.add_row(
            str(index),
            format_money(slab.lower),
            "∞" if slab.upper is None else format_money(slab.upper),
            format_rate(slab.rate),
            format_money(slab.base),
        )
    console.print(table)


def _cmd_share(args: argparse.Namespace, console: Console) -> None:
    payload = _build_payload(args, console)
    base_url = args.base_url or get_settings().public_url
    url = build_share_url(
        base_url, payload.monthly_salary, args.bonus, payload.include_bonus_in_taxable_income
    )
    console.print(url, markup=False, soft_wrap=True)


def _cmd_serve(args: argparse.Namespace, console: Console) -> None:
    console.print(f"Serving TaxWise on http://{args.host}:{args.port}/ui/", markup=False)
    uvicorn.run("taxwise.api.http:app", host=args.host, port=args.port, reload=args.reload)


def _add_income_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("salary", type=_amount, help="Monthly salary, e.g. 100000 or 100k.")
    parser.add_argument("--bonus", type=_amount, default=None, help="Monthly bonus (optional).")
    parser.add_argument(
        "--exclude-bonus",
        action="store_true",
        help="Keep the bonus out of taxable income (added to take-home untaxed).",
    )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="taxwise",
        description=f"Salary tax estimator ({FISCAL_YEAR_LABEL}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colored output.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    compute = subparsers.add_parser("compute", help="Estimate tax and take-home pay.")
    _add_income_arguments(compute)
    compute.add_argument("--exact", action="store_true", help="Do not round amounts.")
    compute.add_argument("--json", action="store_true", help="Print the result as JSON.")
    compute.set_defaults(handler=_cmd_compute)

    slabs = subparsers.add_parser("slabs", help="Show the tax slab table.")
    slabs.add_argument("--plain", action="store_true", help="Print the plain-text listing.")
    slabs.set_defaults(handler=_cmd_slabs)

    share = subparsers.add_parser("share", help="Print a shareable link to the web form.")
    _add_income_arguments(share)
    share.add_argument("--base-url", help="Override TAXWISE_PUBLIC_URL.")
    share.set_defaults(handler=_cmd_share)

    serve = subparsers.add_parser("serve", help="Run the web app with uvicorn.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(handler=_cmd_serve)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    console = _get_console(args.no_color)
    args.handler(args, console)


if __name__ == "__main__":
    main()
