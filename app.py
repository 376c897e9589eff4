from __future__ import annotations

import csv
import io
import logging
from pathlib import Path

import pandas as pd
import streamlit as st
from pydantic import ValidationError

from irdcheck.config import DEFAULT_CFG, load_cfg, save_cfg
from irdcheck.frames import apply_filters, validate_frame
from irdcheck.records import KIWISAVER, NZ, parse_record
from irdcheck.validators import ird_is_valid, normalize_ird

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

# ---------- Paths / constants ----------
DATA_DIR = Path("data")
DATA_DIR.mkdir(parents=True, exist_ok=True)
CFG_PATH = DATA_DIR / "config.json"
INPUT_COLUMNS = ["kind", "type", "country", "ird_number"]


# ---------- Helpers ----------
def dataframe_to_csv_bytes(df: pd.DataFrame, normalized: bool) -> bytes:
    out = df.copy()
    if normalized and "ird_normalized" in out.columns:
        out["ird_number"] = out["ird_normalized"]
    buf = io.StringIO()
    buf.write("sep=,\n")  # <-- Excel hint to use comma
    out.to_csv(buf, index=False, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    return buf.getvalue().encode("utf-8-sig")  # BOM for Excel


# ---------- Session init ----------
if "data" not in st.session_state:
    st.session_state.data = pd.DataFrame(columns=INPUT_COLUMNS)
    st.session_state.summary = None

st.set_page_config(page_title="IRD Check", layout="wide")
st.title("IRD Check")

# ---------- Settings ----------
if "cfg" not in st.session_state:
    st.session_state.cfg = load_cfg(CFG_PATH, DEFAULT_CFG)

with st.sidebar.expander("Settings", expanded=False):
    export_norm = st.checkbox(
        "Export normalized IRD numbers",
        value=st.session_state.cfg["export_normalized"],
    )
    only_bad = st.checkbox(
        "Show only invalid rows",
        value=st.session_state.cfg["show_only_invalid"],
    )
    if (
        export_norm != st.session_state.cfg["export_normalized"]
        or only_bad != st.session_state.cfg["show_only_invalid"]
    ):
        st.session_state.cfg["export_normalized"] = export_norm
        st.session_state.cfg["show_only_invalid"] = only_bad
        save_cfg(CFG_PATH, st.session_state.cfg)

# ---------- Filters ----------
with st.sidebar.expander("Filters", expanded=False):
    if "filters" not in st.session_state:
        st.session_state.filters = {"ird": "", "country": ""}

    st.session_state.filters["ird"] = st.text_input("IRD contains", st.session_state.filters["ird"])
    st.session_state.filters["country"] = st.text_input("Country", st.session_state.filters["country"])

    if st.button("Clear filters"):
        st.session_state.filters = {"ird": "", "country": ""}
        st.rerun()

# ---------- Quick check ----------
st.subheader("Check an IRD number")
raw = st.text_input("IRD number", placeholder="049-091-850")
if raw:
    if ird_is_valid(raw):
        st.success(f"{normalize_ird(raw)} is a well-formed IRD number.")
    else:
        st.error(f"{raw!r} is not a valid IRD number.")

# ---------- Single record ----------
st.subheader("Validate a record")
c1, c2, c3 = st.columns(3)
with c1:
    kind = st.selectbox("Record", ["person", "superannuation"])
with c2:
    if kind == "superannuation":
        attr = st.text_input("Scheme type", KIWISAVER)
    else:
        attr = st.text_input("Country", NZ)
with c3:
    rec_ird = st.text_input("IRD number", key="record-ird")

if st.button("Validate record"):
    data = {"kind": kind, "ird_number": rec_ird}
    data["type" if kind == "superannuation" else "country"] = attr.strip()
    try:
        record = parse_record(data)
        st.success(f"Record OK: {record.model_dump()}")
    except ValidationError as ve:
        st.error("; ".join([e["msg"] for e in ve.errors()]))

# ---------- Sidebar upload ----------
st.sidebar.header("Upload CSV")
file = st.sidebar.file_uploader("CSV with ird_number[,kind,type,country]", type=["csv"])
if file is not None:
    try:
        up = pd.read_csv(file, dtype=str)
        if "ird_number" not in up.columns:
            st.sidebar.error("Missing column: ird_number")
        else:
            st.session_state.data, st.session_state.summary = validate_frame(up)
            s = st.session_state.summary
            st.sidebar.success(f"Validated {s['total']} rows (checked: {s['checked']}).")
            if s["invalid"]:
                st.sidebar.warning(f"Invalid IRD numbers: {s['invalid']}")
    except (ValueError, KeyError, pd.errors.ParserError) as e:
        st.sidebar.error(f"Upload failed: {e}")

# ---------- Table ----------
df_view, filter_warns = apply_filters(
    st.session_state.data,
    ird_contains=st.session_state.filters["ird"],
    country=st.session_state.filters["country"],
    only_invalid=st.session_state.cfg["show_only_invalid"] and st.session_state.summary is not None,
)
if filter_warns.get("invalid"):
    st.sidebar.warning(filter_warns["invalid"])

st.subheader(f"Records ({len(df_view)})")
st.dataframe(df_view, use_container_width=True)

csv_bytes = dataframe_to_csv_bytes(df_view, st.session_state.cfg["export_normalized"])
st.download_button("Download CSV", data=csv_bytes, file_name="records.csv", mime="text/csv")
