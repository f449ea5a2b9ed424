from __future__ import annotations

import math
from typing import Literal, Mapping, TypedDict

import httpx

NUM_SUFFIXES = {
    "k": 1_000.0,
    "m": 1_000_000.0,
    "b": 1_000_000_000.0,
}

_CURRENCY_PREFIXES = ("pkr", "rs.", "rs", "₨")

BonusChoice = Literal["yes", "no"]

SALARY_PARAM = "salary"
BONUS_PARAM = "bonus"
INCLUDE_BONUS_PARAM = "includeBonusInTaxableIncome"


class FormDefaults(TypedDict):
    salary: float | None
    bonus: float | None
    include_bonus_in_taxable_income: BonusChoice


def parse_number(text: str) -> float:
    cleaned = text.strip().lower()
    for prefix in _CURRENCY_PREFIXES:
        if cleaned.startswith(prefix):
            cleaned = cleaned[len(prefix):].strip()
            break
    if not cleaned:
        raise ValueError("Please enter a number.")
    multiplier = 1.0
    suffix = cleaned[-1]
    if suffix in NUM_SUFFIXES:
        multiplier = NUM_SUFFIXES[suffix]
        cleaned = cleaned[:-1]
    cleaned = cleaned.replace(",", "").replace(" ", "").replace("_", "")
    cleaned = cleaned.replace("−", "-").replace("–", "-")
    if cleaned in {"", "-", "."}:
        raise ValueError("Please enter a number.")
    try:
        value = float(cleaned) * multiplier
    except ValueError as exc:
        raise ValueError(f"Could not understand number '{text}'.") from exc
    if not math.isfinite(value):
        raise ValueError(f"Could not understand number '{text}'.")
    return value


def parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered in {"y", "yes", "true", "1", "ok", "sure"}:
        return True
    if lowered in {"n", "no", "false", "0"}:
        return False
    raise ValueError("Enter yes or no.")


def bonus_choice(include_bonus: bool) -> BonusChoice:
    return "yes" if include_bonus else "no"


def _optional_number(raw: str | None) -> float | None:
    if raw is None or not raw.strip():
        return None
    try:
        return parse_number(raw)
    except ValueError:
        return None


def form_defaults_from_query(params: Mapping[str, str]) -> FormDefaults:
    """Pre-fill values for the form from a share link's query string.

    Unparseable amounts are dropped rather than reported; the flag falls
    back to ``"yes"`` unless it is exactly ``"yes"`` or ``"no"``.
    """
    raw_flag = params.get(INCLUDE_BONUS_PARAM)
    flag: BonusChoice = raw_flag if raw_flag in ("yes", "no") else "yes"  # type: ignore[assignment]
    return {
        "salary": _optional_number(params.get(SALARY_PARAM)),
        "bonus": _optional_number(params.get(BONUS_PARAM)),
        "include_bonus_in_taxable_income": flag,
    }


def _param_number(value: float) -> str:
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def build_share_url(
    base_url: str,
    salary: float,
    bonus: float | None,
    include_bonus: bool,
) -> str:
    url = httpx.URL(base_url).copy_set_param(SALARY_PARAM, _param_number(salary))
    if bonus is not None:
        url = url.copy_set_param(BONUS_PARAM, _param_number(bonus))
    else:
        url = url.copy_remove_param(BONUS_PARAM)
    url = url.copy_set_param(INCLUDE_BONUS_PARAM, bonus_choice(include_bonus))
    return str(url)


__all__ = [
    "BONUS_PARAM",
    "FormDefaults",
    "INCLUDE_BONUS_PARAM",
    "SALARY_PARAM",
    "bonus_choice",
    "build_share_url",
    "form_defaults_from_query",
    "parse_bool",
    "parse_number",
]
