from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

logger = logging.getLogger("taxwise.records")

UNKNOWN_IP = "unknown"


class RecordRequest(BaseModel):
    salary: float = Field(..., gt=0, allow_inf_nan=False)
    bonus: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    include_bonus_in_taxable_income: Literal["yes", "no"] = Field(
        "yes",
        validation_alias=AliasChoices(
            "includeBonusInTaxableIncome", "include_bonus_in_taxable_income"
        ),
    )

    model_config = ConfigDict(populate_by_name=True)


@dataclass(frozen=True)
class CalculationRecord:
    hashed_ip: str
    timestamp: datetime
    salary: float
    bonus: Optional[float]
    include_bonus_in_taxable_income: str

    def as_log_context(self) -> dict[str, Any]:
        return {
            "hashed_ip": self.hashed_ip,
            "timestamp": self.timestamp.isoformat(),
            "salary": self.salary,
            "bonus": self.bonus,
            "include_bonus_in_taxable_income": self.include_bonus_in_taxable_income,
        }


def client_ip(forwarded_for: str | None) -> str:
    if not forwarded_for:
        return UNKNOWN_IP
    first = forwarded_for.split(",")[0].strip()
    return first or UNKNOWN_IP


def hash_ip(ip: str) -> str:
    return hashlib.sha256(ip.encode("utf-8")).hexdigest()


def _ensure_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def build_record(
    payload: RecordRequest,
    forwarded_for: str | None,
    now: datetime | None = None,
) -> CalculationRecord:
    timestamp = _ensure_utc(now) if now else datetime.now(timezone.utc)
    return CalculationRecord(
        hashed_ip=hash_ip(client_ip(forwarded_for)),
        timestamp=timestamp,
        salary=payload.salary,
        bonus=payload.bonus,
        include_bonus_in_taxable_income=payload.include_bonus_in_taxable_income,
    )


def log_record(record: CalculationRecord) -> None:
    # The raw address never reaches the log, only its digest.
    logger.info(
        "Calculation record: hashed_ip=%s salary=%s bonus=%s include_bonus=%s",
        record.hashed_ip,
        record.salary,
        record.bonus,
        record.include_bonus_in_taxable_income,
        extra={"record": record.as_log_context()},
    )


__all__ = [
    "CalculationRecord",
    "RecordRequest",
    "build_record",
    "client_ip",
    "hash_ip",
    "log_record",
]
