from .fields import (
    BONUS_PARAM,
    INCLUDE_BONUS_PARAM,
    SALARY_PARAM,
    FormDefaults,
    bonus_choice,
    build_share_url,
    form_defaults_from_query,
    parse_bool,
    parse_number,
)

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
