import logging
from typing import Any, Literal, Optional

from fastapi import FastAPI, HTTPException, Query, Request

from taxwise import __version__
from taxwise.config import get_settings
from taxwise.lifespan import build_application_lifespan

from ..core.models import MAX_MONTHLY_AMOUNT, TaxCalculationOutput, TaxComputationInput
from ..records import RecordRequest, build_record, log_record
from ..tax.calculator import compute_from_input, compute_tax
from ..tax.formatting import format_rate, slab_list
from ..tax.slabs import FISCAL_YEAR_LABEL, TAX_SLABS
from ..ui import router as ui_router

logger = logging.getLogger("taxwise")


async def _announce_fiscal_year(_: FastAPI) -> None:
    settings = get_settings()
    logger.info(
        "TaxWise startup complete; fiscal_year=%s slabs=%s records_enabled=%s",
        FISCAL_YEAR_LABEL,
        len(TAX_SLABS),
        settings.feature_calculation_records,
    )


app = FastAPI(
    title="TaxWise",
    description=f"Salary tax estimator for {FISCAL_YEAR_LABEL}. Amounts are whole PKR unless exact=true.",
    version=__version__,
    lifespan=build_application_lifespan("api", startup_hook=_announce_fiscal_year),
)
app.include_router(ui_router.router)


def _present(result: TaxCalculationOutput, exact: bool) -> dict[str, Any]:
    shown = result if exact else result.rounded()
    return shown.model_dump(by_alias=True)


@app.get("/health")
def health():
    settings = getattr(app.state, "settings", get_settings())
    return {
        "status": "ok",
        "fiscal_year": FISCAL_YEAR_LABEL,
        "feature_calculation_records": settings.feature_calculation_records,
        "build": {
            "version": settings.build_version,
            "sha": settings.build_sha,
        },
    }


@app.post("/tax/compute")
def compute(payload: TaxComputationInput, exact: bool = False):
    return _present(compute_from_input(payload), exact)


@app.get("/tax/compute")
def compute_from_query(
    salary: float = Query(..., gt=0, le=MAX_MONTHLY_AMOUNT, allow_inf_nan=False),
    bonus: Optional[float] = Query(None, ge=0, le=MAX_MONTHLY_AMOUNT, allow_inf_nan=False),
    include_bonus: Literal["yes", "no"] = Query("yes", alias="includeBonusInTaxableIncome"),
    exact: bool = False,
):
    result = compute_tax(salary, bonus, include_bonus == "yes")
    return _present(result, exact)


@app.get("/tax/slabs")
def slabs():
    return {
        "fiscal_year": FISCAL_YEAR_LABEL,
        "slabs": [
            {
                "min": int(slab.lower),
                "max": None if slab.upper is None else int(slab.upper),
                "rate": float(slab.rate),
                "rate_label": format_rate(slab.rate),
                "base": int(slab.base),
            }
            for slab in TAX_SLABS
        ],
        "listing": slab_list(),
    }


@app.post("/api/record")
def record_calculation(payload: RecordRequest, request: Request):
    settings = getattr(request.app.state, "settings", get_settings())
    if not settings.feature_calculation_records:
        raise HTTPException(status_code=503, detail="Calculation records disabled")
    record = build_record(payload, request.headers.get("x-forwarded-for"))
    log_record(record)
    return {"success": True}
