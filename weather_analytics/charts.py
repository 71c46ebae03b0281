from __future__ import annotations

import altair as alt
import pandas as pd


def city_averages_chart(df: pd.DataFrame) -> alt.Chart:
    """Grouped bars: mean temperature and humidity per city."""
    long = df.melt(
        id_vars=["city", "records"],
        value_vars=["avgTemperature", "avgHumidity"],
        var_name="measure",
        value_name="value",
    )
    return (
        alt.Chart(long)
        .mark_bar()
        .encode(
            x=alt.X("city:N", title="City"),
            xOffset="measure:N",
            y=alt.Y("value:Q", title="Average"),
            color=alt.Color("measure:N", title=""),
            tooltip=["city:N", "measure:N", alt.Tooltip("value:Q", format=".1f"), "records:Q"],
        )
    )


def rolling_trend_chart(df: pd.DataFrame) -> alt.LayerChart:
    """Daily mean temperature as an area with the rolling mean drawn on top."""
    base = alt.Chart(df).encode(x=alt.X("date:T", title="Date"))

    daily = base.mark_area(opacity=0.2).encode(
        y=alt.Y("avgTemp:Q", title="Temperature (°C)"),
        tooltip=["date:T", alt.Tooltip("avgTemp:Q", title="Daily avg", format=".1f")],
    )
    rolling = base.mark_line().encode(
        y=alt.Y("rollingAvgTemp:Q"),
        tooltip=["date:T", alt.Tooltip("rollingAvgTemp:Q", title="Rolling avg")],
    )
    return (daily + rolling).interactive()


def comfort_scatter_chart(df: pd.DataFrame) -> alt.Chart:
    return (
        alt.Chart(df)
        .mark_circle(opacity=0.6)
        .encode(
            x=alt.X("temperature:Q", title="Temperature (°C)"),
            y=alt.Y("comfortIndex:Q", title="Comfort index"),
            color=alt.Color("city:N", title="City"),
            tooltip=["date:T", "city:N", "tempHumidityRatio:Q", "comfortIndex:Q", "pressureVariation:Q"],
        )
        .interactive()
    )


def top_cities_chart(df: pd.DataFrame) -> alt.Chart:
    return (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("value:Q", title="Max value"),
            y=alt.Y("city:N", sort="-x", title="City"),
            tooltip=["city:N", "value:Q", "date:T"],
        )
    )


def change_chart(df: pd.DataFrame) -> alt.Chart:
    return (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("city:N", title="City"),
            y=alt.Y("change:Q", title="Change (%)"),
            color=alt.condition(alt.datum.change >= 0, alt.value("#ff7300"), alt.value("#8884d8")),
            tooltip=["city:N", "change:Q", "firstTemp:Q", "lastTemp:Q", "firstDate:N", "lastDate:N"],
        )
    )


def histogram_chart(df: pd.DataFrame) -> alt.Chart:
    return (
        alt.Chart(df)
        .mark_arc()
        .encode(
            theta=alt.Theta("count:Q"),
            color=alt.Color("label:N", title="Range", sort=df["label"].tolist()),
            tooltip=["label:N", "count:Q", alt.Tooltip("percentage:Q", title="%")],
        )
    )
