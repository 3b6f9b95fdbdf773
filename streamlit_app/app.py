from __future__ import annotations

import altair as alt
import pandas as pd
import streamlit as st

from points_tracker.aggregate.series import (
    filter_records,
    monthly_series,
    records_frame,
    team_distribution,
    weekly_series,
)
from points_tracker.aggregate.stats import entity_metrics, format_currency, general_stats, team_progress
from points_tracker.cache import AggregateCache
from points_tracker.config import get_settings
from points_tracker.cycle.calculator import (
    WEEKS_PER_CYCLE,
    current_cycle_start,
    current_week,
    week_date_range,
)
from points_tracker.errors import PipelineFailure
from points_tracker.logging_config import configure_logging
from points_tracker.pipeline import build_cache

# =====================================================
# Page config
# =====================================================
st.set_page_config(page_title="Points Tracker", layout="wide")
st.title("📊 Points Tracker")

settings = get_settings()


@st.cache_resource
def get_cache() -> AggregateCache:
    """One aggregate cache per server process, shared by every session."""
    configure_logging(None)
    return build_cache(settings)


cache = get_cache()

if st.sidebar.button("Reload spreadsheets"):
    cache.invalidate()

try:
    folder = cache.get()
except PipelineFailure as exc:  # pragma: no cover - runtime failure handling
    st.error(f"Unable to read the point spreadsheets: {exc}")
    st.stop()

# =====================================================
# Helpers
# =====================================================
def series_chart(df: pd.DataFrame, title: str) -> alt.Chart:
    """Long-format bar chart of a series table (`name` + one column per employee)."""
    long = df.melt(id_vars=["name"], var_name="employee", value_name="points")
    return (
        alt.Chart(long)
        .mark_bar()
        .encode(
            x=alt.X("name:N", sort=list(df["name"]), title=title),
            xOffset="employee:N",
            y=alt.Y("points:Q", title="Points"),
            color=alt.Color("employee:N", title="Employee"),
            tooltip=["name:N", "employee:N", "points:Q"],
        )
        .properties(height=320)
    )

# =====================================================
# SECTION 0 — OVERVIEW
# =====================================================
st.header("📌 Overview")

stats = general_stats(folder, settings.team_monthly_goal, settings.excluded_entity)
totals = folder.statistics

c1, c2, c3, c4 = st.columns(4)
c1.metric("Best performer", stats.best_performer or "N/A", f"{stats.best_points:,.0f} pts")
c2.metric("Team average", f"{stats.team_average:,.0f}")
c3.metric("Team goal", f"{stats.total_goal}K", f"{stats.progress_percentage}%")
c4.metric("Value", format_currency(totals.total_derived_value))

st.caption(
    f"{totals.total_files} files • {totals.total_records} records • "
    f"last processed {folder.last_processed:%d/%m/%Y %H:%M}"
)

st.divider()

# =====================================================
# SECTION 1 — GOALS
# =====================================================
st.header("🎯 Weekly goals")

week = st.radio(
    "Cycle week",
    list(range(1, WEEKS_PER_CYCLE + 1)),
    index=current_week() - 1,
    horizontal=True,
)
start, end = week_date_range(week)
st.caption(f"Cycle started {current_cycle_start():%d/%m/%Y} • week {start:%d/%m} – {end:%d/%m}")

metrics = entity_metrics(folder, week, settings.goals)
cols = st.columns(max(1, len(metrics)))
for col, m in zip(cols, metrics):
    with col:
        st.subheader(m.name)
        st.metric("Week", f"{m.weekly_points:,.0f} / {m.weekly_goal}", m.status)
        st.progress(min(m.weekly_progress / 100, 1.0))
        st.metric("Cycle", f"{m.monthly_points:,.0f} / {m.monthly_goal}")
        st.progress(min(m.monthly_progress / 100, 1.0))

if metrics:
    st.caption(f"Team progress: {team_progress(metrics)}%")

st.divider()

# =====================================================
# SECTION 2 — CHARTS
# =====================================================
st.header("📈 Points")

left, right = st.columns(2)
with left:
    st.altair_chart(series_chart(weekly_series(folder), "Week"), width="stretch")
with right:
    st.altair_chart(series_chart(monthly_series(folder), "Month"), width="stretch")

df_team = team_distribution(folder)
if not df_team.empty:
    pie = (
        alt.Chart(df_team)
        .mark_arc()
        .encode(
            theta=alt.Theta("value:Q"),
            color=alt.Color(
                "name:N",
                scale=alt.Scale(domain=list(df_team["name"]), range=list(df_team["color"])),
                title="Employee",
            ),
            tooltip=["name:N", "value:Q"],
        )
        .properties(height=320)
    )
    st.altair_chart(pie, width="stretch")

st.divider()

# =====================================================
# SECTION 3 — RECORDS
# =====================================================
st.header("📘 Records")

f1, f2, f3 = st.columns(3)
employee = f1.selectbox("Employee", ["All", *folder.entities])
week_choice = f2.selectbox("Week", ["All", *range(1, WEEKS_PER_CYCLE + 1)])
search = f3.text_input("Search site / observations")

records = filter_records(
    folder,
    entity=None if employee == "All" else employee,
    week=None if week_choice == "All" else int(week_choice),
    search=search or None,
)
df_records = records_frame(records)
if df_records.empty:
    st.info("No records match the filters.")
else:
    df_records["date"] = pd.to_datetime(df_records["date"]).dt.strftime("%d/%m/%Y")
    st.dataframe(df_records, width="stretch")
