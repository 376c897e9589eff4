# irdcheck/records.py
from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator, model_validator

from irdcheck.validators import ird_is_valid

KIWISAVER = "KiwiSaver"
NZ = "NZ"
IRD_MESSAGE = "Invalid IRD number."


class _IrdRecord(BaseModel):
    ird_number: str | None = None

    @field_validator("ird_number")
    @classmethod
    def strip_ird(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else None

    @model_validator(mode="after")
    def check_ird(self):
        if ird_violations(self):
            raise ValueError(IRD_MESSAGE)
        return self


class SuperannuationRecord(_IrdRecord):
    """Legacy retirement-savings record; only KiwiSaver schemes carry an IRD check."""

    kind: Literal["superannuation"] = "superannuation"
    type: str | None = None


class PersonRecord(_IrdRecord):
    kind: Literal["person"] = "person"
    country: str | None = None


Record = Annotated[Union[SuperannuationRecord, PersonRecord], Field(discriminator="kind")]
_RECORD_ADAPTER = TypeAdapter(Record)


def requires_ird_check(record: SuperannuationRecord | PersonRecord) -> bool:
    if isinstance(record, SuperannuationRecord):
        return record.type == KIWISAVER
    return record.country == NZ


def ird_violations(record: SuperannuationRecord | PersonRecord) -> list[str]:
    """Returns [] when the record passes or is not subject to the check."""
    if requires_ird_check(record) and not ird_is_valid(record.ird_number):
        return [IRD_MESSAGE]
    return []


def parse_record(data: dict[str, Any]) -> SuperannuationRecord | PersonRecord:
    """Builds the record variant named by data['kind'] (default: person)."""
    data = {"kind": "person", **data}
    return _RECORD_ADAPTER.validate_python(data)
