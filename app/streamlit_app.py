"""
Median Allocation — Review Dashboard
====================================

Load a verified-ballot file, set the allocation parameters, run the
scale/cut rounds and review who is funded before publishing results.

Rounds that cut new projects are acknowledged automatically here; every
round is listed so the cut history can still be reviewed step by step.

Run: streamlit run app/streamlit_app.py
"""

from __future__ import annotations

import hashlib
import sys
from pathlib import Path
from typing import List

import pandas as pd
import plotly.express as px
import streamlit as st

# ---------------------------------------------------------------------------
# Make project root importable
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.config import AllocationConfig
from core.errors import AllocationError

from data_prep.loader import ballots_from_frame, load_ballot_table
from data_prep.validators import validate_ballot_table

from engine.cutoff import CutNotice
from engine.runner import run_allocation

from report.projection import project_results
from report.summary import summarize_allocation

# ---------------------------------------------------------------------------
# Data directories
# ---------------------------------------------------------------------------
DATA_DIR = PROJECT_ROOT / "output"
UPLOAD_DIR = DATA_DIR / "uploads"
UPLOAD_DIR.mkdir(parents=True, exist_ok=True)

DEFAULTS = AllocationConfig()


# ---------------------------------------------------------------------------
# Cached loaders
# ---------------------------------------------------------------------------
@st.cache_data(show_spinner="Loading ballots...")
def _load_ballots(path: str, digest: str) -> pd.DataFrame:
    """digest is part of the cache key so a re-upload under the same name reloads."""
    return load_ballot_table(path)


def _fmt_amount(val):
    """Format amount with commas."""
    return f"{val:,.2f}"


def _rounds_table(rounds) -> pd.DataFrame:
    return pd.DataFrame([
        {
            "Iteration": r.round_number,
            "Scaled": len(r.survivors),
            "Scale Factor": r.scale_factor,
            "Cut So Far": len(r.cut_ids),
            "Newly Cut": ", ".join(r.newly_cut_ids) or "—",
        }
        for r in rounds
    ])


def _plot_awards(results: pd.DataFrame, *, min_amount: float, height=420):
    funded = results[results["Scaled Amount"] > 0].sort_values("Scaled Amount", ascending=False)
    if len(funded) == 0:
        st.info("No project is funded.")
        return
    fig = px.bar(
        funded, x="Project ID", y="Scaled Amount",
        hover_data=["Votes Count", "Median Amount"],
        title="Awards by Project", height=height,
    )
    fig.add_hline(y=min_amount, line_dash="dash", annotation_text="Payout floor")
    fig.update_layout(xaxis={"showticklabels": len(funded) <= 40})
    st.plotly_chart(fig, use_container_width=True)


def _plot_median_vs_votes(results: pd.DataFrame, *, quorum: int, height=360):
    if len(results) == 0:
        return
    d = results.copy()
    d["Status"] = "Funded"
    d.loc[~d["Is Eligible"], "Status"] = "Below quorum"
    d.loc[d["Is Cut"], "Status"] = "Cut"
    fig = px.scatter(
        d, x="Votes Count", y="Median Amount", color="Status",
        hover_name="Project ID", title="Median Pledge vs Vote Count", height=height,
    )
    fig.add_vline(x=quorum, line_dash="dot", annotation_text="Quorum")
    st.plotly_chart(fig, use_container_width=True)


# ═══════════════════════════════════════════════════════════════════════════
# PAGE CONFIG
# ═══════════════════════════════════════════════════════════════════════════
st.set_page_config(page_title="Median Allocation", layout="wide")
st.title("Median Allocation")
st.caption("Median-weighted pool allocation with quorum, payout floor and iterative cuts")

# ═══════════════════════════════════════════════════════════════════════════
# SIDEBAR — Ballots + Parameters
# ═══════════════════════════════════════════════════════════════════════════
with st.sidebar:
    st.header("Ballots")
    uploaded = st.file_uploader("Verified ballots", type=["csv", "xlsx"])
    st.header("Parameters")
    quorum = st.number_input("Quorum (pledges)", min_value=0, value=DEFAULTS.quorum, step=1)
    min_amount = st.number_input("Payout floor", min_value=0.0, value=DEFAULTS.min_amount, step=100.0)
    total_amount = st.number_input("Total pool", min_value=1.0, value=DEFAULTS.total_amount, step=100_000.0)
    max_iterations = st.number_input("Max iterations", min_value=1, value=DEFAULTS.max_iterations, step=1)

if uploaded is None:
    st.info("Upload a verified-ballot file to begin.")
    st.stop()

ballot_path = UPLOAD_DIR / uploaded.name
content = uploaded.getvalue()
ballot_path.write_bytes(content)
table = _load_ballots(str(ballot_path), hashlib.sha256(content).hexdigest())

vr = validate_ballot_table(table)
if not vr.is_valid:
    st.error("Ballot validation failed:\n" + vr.summary())
    st.stop()
for warning in vr.warnings:
    st.warning(warning)

cfg = AllocationConfig(
    quorum=int(quorum),
    min_amount=float(min_amount),
    total_amount=float(total_amount),
    max_iterations=int(max_iterations),
)

notices: List[CutNotice] = []
try:
    result = run_allocation(ballots_from_frame(table), cfg, acknowledge=notices.append)
except AllocationError as e:
    st.error(f"Allocation failed: {e}")
    st.stop()

summary = summarize_allocation(result, cfg)
results = project_results(result.projects)

# --- 1. KPI row ---
k1, k2, k3, k4, k5 = st.columns(5)
k1.metric("Projects", summary.n_projects)
k2.metric("Eligible", summary.n_eligible)
k3.metric("Funded", summary.n_funded)
k4.metric("Cut", summary.n_cut)
k5.metric("Allocated", _fmt_amount(summary.total_allocated))

# --- 2. Flags ---
for flag in summary.flags:
    st.warning(flag)

# --- 3. Rounds ---
st.markdown("**Iterations**")
if result.rounds:
    st.dataframe(_rounds_table(result.rounds), use_container_width=True, hide_index=True)
for notice in notices:
    with st.expander(f"Iteration {notice.round_number}: {len(notice.newly_cut_ids)} newly cut"):
        st.write(", ".join(notice.newly_cut_ids))

# --- 4. Charts ---
_plot_awards(results, min_amount=cfg.min_amount)
_plot_median_vs_votes(results, quorum=cfg.quorum)

# --- 5. Summary + results ---
left, right = st.columns([1, 2])
with left:
    st.markdown("**Summary**")
    st.dataframe(summary.to_dataframe(), use_container_width=True, hide_index=True)
with right:
    st.markdown("**Results**")
    st.dataframe(results, use_container_width=True, hide_index=True)

st.download_button(
    "Download results CSV",
    data=results.to_csv(index=False).encode("utf-8"),
    file_name="outputResultsFinal.csv",
    mime="text/csv",
)
