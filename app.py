from __future__ import annotations

from datetime import datetime, timezone, date
from typing import Any

import pandas as pd
import requests
import streamlit as st

from weather_analytics.analytics import compute_analytics
from weather_analytics.charts import (
    change_chart,
    city_averages_chart,
    comfort_scatter_chart,
    histogram_chart,
    rolling_trend_chart,
    top_cities_chart,
)
from weather_analytics.config import ALL_CITIES, API_URL, DEFAULT_END, DEFAULT_START
from weather_analytics.curate import result_to_frames
from weather_analytics.errors import AnalyticsError
from weather_analytics.generate import generate_measurements
from weather_analytics.ingest import fetch_payload, parse_measurements
from weather_analytics.models import AnalyticsFilter


# ----------------------------
# Data loading (cached)
# ----------------------------
@st.cache_data(ttl=3600)
def load_payload(source: str, url: str, seed: int) -> list[dict[str, Any]]:
    """
    Returns a serializable list of measurement dicts (Streamlit cache friendly).
    """
    if source == "Synthetic":
        return [m.to_dict() for m in generate_measurements(seed=seed)]

    return fetch_payload(url)


def format_temp(celsius: float | None) -> str:
    if celsius is None or pd.isna(celsius):
        return "—"
    return f"{float(celsius):.1f} °C"


# ----------------------------
# Page
# ----------------------------
st.set_page_config(page_title="Weather Analytics", layout="wide")

# Sidebar
st.sidebar.markdown("### Data source")
source = st.sidebar.radio("Load measurements from", options=["API", "Synthetic"], index=0)
api_url = st.sidebar.text_input("Weather API URL", value=API_URL, disabled=source != "API")
seed = int(st.sidebar.number_input("Synthetic seed", value=42, step=1, disabled=source != "Synthetic"))

st.title("Weather Analytics Dashboard")
st.caption("Measurements → filter → aggregates, trends, rankings and distributions")

try:
    with st.spinner("Loading weather measurements..."):
        records = parse_measurements(load_payload(source, api_url, seed))
except (requests.RequestException, ValueError) as e:
    st.error(f"Could not load measurements: {e}")
    st.stop()

cities = [ALL_CITIES] + sorted({r.city for r in records})

st.sidebar.markdown("### Filters")
start_day: date = st.sidebar.date_input("Start date", value=DEFAULT_START)
end_day: date = st.sidebar.date_input("End date", value=DEFAULT_END)
selected_city = st.sidebar.selectbox("City", options=cities, index=0)

try:
    flt = AnalyticsFilter(start=start_day, end=end_day, city=selected_city)
    result = compute_analytics(records, flt)
except AnalyticsError as e:
    st.warning(str(e))
    st.stop()

frames = result_to_frames(result)

# ----------------------------
# Summary cards
# ----------------------------
col1, col2, col3, col4 = st.columns(4)
col1.metric("Records", result.record_count)
col2.metric("Cities", len(result.city_aggregates or []))
if result.top_cities:
    leader = result.top_cities[0]
    col3.metric("Hottest", leader.city, format_temp(leader.value), delta_color="off")
else:
    col3.metric("Hottest", "—")
if result.daily_trend:
    col4.metric("Latest rolling avg", format_temp(result.daily_trend[-1].rolling_avg_temp))
else:
    col4.metric("Latest rolling avg", "—")

st.caption(f"Computed {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC')}")

st.divider()

tab1, tab2, tab3 = st.tabs(["Trends", "Rankings", "Distribution"])

with tab1:
    st.markdown("### Temperature trend (7-day rolling average)")
    st.altair_chart(rolling_trend_chart(frames["daily_trend"]), use_container_width=True)

    st.markdown("### Averages by city")
    st.altair_chart(city_averages_chart(frames["city_aggregates"]), use_container_width=True)

    with st.expander("Show aggregates table"):
        st.dataframe(frames["city_aggregates"], use_container_width=True)

with tab2:
    c1, c2 = st.columns(2)
    with c1:
        st.markdown("### Top cities by max temperature")
        st.altair_chart(top_cities_chart(frames["top_cities"]), use_container_width=True)
    with c2:
        st.markdown("### Temperature change (first → last day)")
        st.altair_chart(change_chart(frames["changes"]), use_container_width=True)

with tab3:
    c1, c2 = st.columns(2)
    with c1:
        st.markdown("### Temperature ranges")
        st.altair_chart(histogram_chart(frames["histogram"]), use_container_width=True)
    with c2:
        st.markdown("### Comfort index vs temperature")
        st.altair_chart(comfort_scatter_chart(frames["derived"]), use_container_width=True)

    with st.expander("Show derived metrics (latest 200 rows)"):
        st.dataframe(
            frames["derived"].sort_values("date", ascending=False).head(200),
            use_container_width=True,
        )
