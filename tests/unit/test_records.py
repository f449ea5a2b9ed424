import hashlib
import logging
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from taxwise.records import RecordRequest, build_record, client_ip, hash_ip, log_record


@pytest.mark.parametrize(
    "header, expected",
    [
        (None, "unknown"),
        ("", "unknown"),
        ("203.0.113.7", "203.0.113.7"),
        ("203.0.113.7, 10.0.0.1", "203.0.113.7"),
        (" , 10.0.0.1", "unknown"),
    ],
)
def test_client_ip_uses_first_forwarded_entry(header, expected):
    assert client_ip(header) == expected


def test_hash_ip_is_sha256_hex():
    assert hash_ip("203.0.113.7") == hashlib.sha256(b"203.0.113.7").hexdigest()


def test_build_record_normalises_timestamp():
    payload = RecordRequest.model_validate(
        {"salary": 100000, "bonus": 5000, "includeBonusInTaxableIncome": "no"}
    )
    record = build_record(payload, "198.51.100.2", now=datetime(2025, 7, 1, 12, 30))

    assert record.hashed_ip == hash_ip("198.51.100.2")
    assert record.timestamp == datetime(2025, 7, 1, 12, 30, tzinfo=timezone.utc)
    context = record.as_log_context()
    assert context["timestamp"] == "2025-07-01T12:30:00+00:00"
    assert context["include_bonus_in_taxable_income"] == "no"
    assert context["bonus"] == 5000


def test_record_request_rejects_unknown_flag():
    with pytest.raises(ValidationError):
        RecordRequest.model_validate({"salary": 1000, "includeBonusInTaxableIncome": "true"})


def test_log_record_never_writes_raw_ip(caplog):
    caplog.set_level(logging.INFO, logger="taxwise.records")
    payload = RecordRequest(salary=100000)
    record = build_record(payload, "192.0.2.44")

    log_record(record)

    assert "192.0.2.44" not in caplog.text
    assert record.hashed_ip in caplog.text
    assert caplog.records[-1].record["salary"] == 100000
