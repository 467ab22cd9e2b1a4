from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from insights.results import AreaChart, BarChart, ChartSpec, LineChart, PieChart, ScatterChart


def chart_figure(chart: ChartSpec) -> go.Figure | None:
    if not chart.data:
        return None
    frame = pd.DataFrame(chart.data)

    if isinstance(chart, PieChart):
        if chart.name_key not in frame.columns or chart.value_key not in frame.columns:
            return None
        return px.pie(frame, names=chart.name_key, values=chart.value_key, title=chart.title)

    if isinstance(chart, ScatterChart):
        if chart.x_key not in frame.columns or chart.y_key not in frame.columns:
            return None
        hover = chart.label_key if chart.label_key in frame.columns else None
        return px.scatter(frame, x=chart.x_key, y=chart.y_key, hover_name=hover, title=chart.title)

    if chart.x_key not in frame.columns or chart.y_key not in frame.columns:
        return None
    if isinstance(chart, LineChart):
        return px.line(frame, x=chart.x_key, y=chart.y_key, title=chart.title, markers=True)
    if isinstance(chart, AreaChart):
        return px.area(frame, x=chart.x_key, y=chart.y_key, title=chart.title)
    if isinstance(chart, BarChart):
        return px.bar(frame, x=chart.x_key, y=chart.y_key, title=chart.title)
    return None
