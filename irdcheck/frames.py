# irdcheck/frames.py
from __future__ import annotations

import logging

import pandas as pd

from irdcheck.records import PersonRecord, SuperannuationRecord, requires_ird_check
from irdcheck.validators import ird_is_valid, normalize_ird

logger = logging.getLogger(__name__)

RESULT_COLUMNS = ["ird_normalized", "ird_checked", "ird_valid"]


def _norm(s) -> str:
    if s is None or (isinstance(s, float) and pd.isna(s)):
        return ""
    return str(s).strip()


def _row_record(row: pd.Series) -> SuperannuationRecord | PersonRecord | None:
    """
    Same kind discriminator as parse_record; a blank kind cell counts as missing.
    Returns None for an unknown kind.
    """
    # model_construct: the gate is evaluated here, not on construction
    ird = _norm(row.get("ird_number"))
    kind = _norm(row.get("kind")) or "person"
    if kind == "superannuation":
        return SuperannuationRecord.model_construct(ird_number=ird, type=_norm(row.get("type")))
    if kind == "person":
        return PersonRecord.model_construct(ird_number=ird, country=_norm(row.get("country")))
    logger.warning("unknown record kind %r, row marked invalid", kind)
    return None


def validate_frame(df: pd.DataFrame) -> tuple[pd.DataFrame, dict[str, int]]:
    """
    Returns (validated_df, summary).
    Adds ird_normalized / ird_checked / ird_valid; rows skipped by the gate count as valid,
    rows of an unknown kind count as checked and invalid.
    summary has keys total, checked, invalid, skipped.
    """
    if "ird_number" not in df.columns:
        raise KeyError("missing column: ird_number")

    res = df.copy()
    records = [_row_record(r) for _, r in res.iterrows()]
    checked = [r is None or requires_ird_check(r) for r in records]
    valid = [r is not None and (not c or ird_is_valid(r.ird_number)) for r, c in zip(records, checked)]

    res["ird_normalized"] = [normalize_ird(_norm(v)) for v in res["ird_number"]]
    res["ird_checked"] = pd.Series(checked, index=res.index, dtype=bool)
    res["ird_valid"] = pd.Series(valid, index=res.index, dtype=bool)

    summary = {
        "total": len(res),
        "checked": int(res["ird_checked"].sum()),
        "invalid": int((~res["ird_valid"]).sum()),
        "skipped": int((~res["ird_checked"]).sum()),
    }
    logger.info("validated %(total)d rows: %(invalid)d invalid, %(skipped)d skipped", summary)
    return res, summary


def apply_filters(
    df: pd.DataFrame,
    ird_contains: str | None = None,
    country: str | None = None,
    only_invalid: bool = False,
) -> tuple[pd.DataFrame, dict]:
    """
    Returns (filtered_df, warnings_dict).
    warnings_dict has key 'invalid' when only_invalid is asked of an unvalidated frame.
    """
    res = df.copy()
    warns: dict[str, str] = {}

    if ird_contains:
        q = normalize_ird(ird_contains)
        col = res["ird_normalized"] if "ird_normalized" in res.columns else res["ird_number"].astype(str)
        res = res[col.str.contains(q, regex=False, na=False)]
    if country and "country" in res.columns:
        q = _norm(country)
        res = res[res["country"].astype(str).str.strip().str.upper() == q.upper()]

    if only_invalid:
        if "ird_valid" in res.columns:
            res = res[~res["ird_valid"]]
        else:
            warns["invalid"] = "Validate the table first"

    return res, warns
