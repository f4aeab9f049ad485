"""Muuttoliike — Streamlit interactive dashboard.

Run with:  streamlit run dashboard/app.py
"""

from __future__ import annotations

import asyncio
import io
import logging

import pandas as pd
import plotly.express as px
import streamlit as st
import streamlit.components.v1 as components

from migrationmap.pipeline import acquire
from migrationmap.processing.decoder import table_to_frame
from migrationmap.rendering import region_names, render
from migrationmap.storage.session_cache import SessionCache

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

st.set_page_config(
    page_title="Muuttoliike — Net migration by municipality",
    page_icon="🗺️",
    layout="wide",
)

# st.session_state lives exactly as long as this browser tab's session
cache = SessionCache(st.session_state)


def download_button_csv(df: pd.DataFrame, filename: str, label: str = "Download CSV"):
    """Render a CSV download button."""
    buf = io.BytesIO()
    df.to_csv(buf, index=False)
    st.download_button(label, buf.getvalue(), file_name=filename, mime="text/csv")


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------

st.sidebar.title("🗺️ Muuttoliike")
st.sidebar.markdown("**Net migration**  \nInbound vs outbound moves per municipality")
if st.sidebar.button("Reload data"):
    cache.clear()
st.sidebar.markdown("---")
st.sidebar.caption(
    "Source: [Statistics Finland](https://stat.fi)  \n"
    "Red = net outbound, green = net inbound."
)


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

def page_map():
    st.title("🗺️ Net migration by municipality")

    acquisition = asyncio.run(acquire(cache))
    if acquisition is None:
        st.error("Migration data could not be loaded. See the logs for details.")
        return

    table = acquisition.migration_table
    df = table_to_frame(table, region_names(acquisition.geo_features))

    c1, c2, c3 = st.columns(3)
    c1.metric("Municipalities", f"{len(df):,}")
    c2.metric("Net inbound", int((df["net_migration"] > 0).sum()))
    c3.metric("Net outbound", int((df["net_migration"] < 0).sum()))
    if acquisition.from_cache:
        st.caption("Served from this session's cache.")

    components.html(render(acquisition).get_root().render(), height=650)

    # Strongest movements in either direction
    ranked = df.dropna(subset=["name"]).sort_values("net_migration")
    extremes = pd.concat([ranked.head(10), ranked.tail(10)]).drop_duplicates(subset=["code"])
    if not extremes.empty:
        fig = px.bar(
            extremes,
            x="net_migration",
            y="name",
            orientation="h",
            title="Strongest net outbound and inbound municipalities",
            labels={"net_migration": "Net migration", "name": ""},
            color="hue",
            color_continuous_scale=["#e60000", "#e6e600", "#00e600"],
            range_color=[0, 120],
        )
        fig.update_layout(template="plotly_white", height=600)
        st.plotly_chart(fig, use_container_width=True)

    st.subheader("Data")
    st.dataframe(df, use_container_width=True, hide_index=True)
    download_button_csv(df, "net_migration.csv")


page_map()
