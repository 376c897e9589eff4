import pytest
from pydantic import ValidationError

from irdcheck.records import (
    IRD_MESSAGE,
    KIWISAVER,
    PersonRecord,
    SuperannuationRecord,
    ird_violations,
    parse_record,
    requires_ird_check,
)


def test_non_kiwisaver_super_is_skipped():
    rec = SuperannuationRecord(type="Defined benefit", ird_number="not a number")
    assert not requires_ird_check(rec)
    assert ird_violations(rec) == []


def test_kiwisaver_super_is_checked():
    rec = SuperannuationRecord(type=KIWISAVER, ird_number="49-091-850")
    assert requires_ird_check(rec)
    with pytest.raises(ValidationError) as exc:
        SuperannuationRecord(type=KIWISAVER, ird_number="49091851")
    assert IRD_MESSAGE in exc.value.errors()[0]["msg"]


def test_person_gate_on_country():
    assert PersonRecord(country="NZ", ird_number="35901981").ird_number == "35901981"
    assert ird_violations(PersonRecord(country="AU", ird_number="abc")) == []
    # exact match only
    assert not requires_ird_check(PersonRecord(country="nz", ird_number="abc"))
    with pytest.raises(ValidationError):
        PersonRecord(country="NZ", ird_number="12345678")
    with pytest.raises(ValidationError):
        PersonRecord(country="NZ")


def test_violations_without_validation():
    rec = PersonRecord.model_construct(country="NZ", ird_number="12345678")
    assert ird_violations(rec) == [IRD_MESSAGE]


def test_parse_record_picks_variant():
    rec = parse_record({"kind": "superannuation", "type": KIWISAVER, "ird_number": "049091850"})
    assert isinstance(rec, SuperannuationRecord)
    rec = parse_record({"country": "NZ", "ird_number": " 049091850 "})
    assert isinstance(rec, PersonRecord)
    assert rec.ird_number == "049091850"
    with pytest.raises(ValidationError):
        parse_record({"kind": "vehicle", "ird_number": "049091850"})


def test_very_long_ird_gives_record_message():
    with pytest.raises(ValidationError) as exc:
        PersonRecord(country="NZ", ird_number="1" * 5000)
    assert IRD_MESSAGE in exc.value.errors()[0]["msg"]
