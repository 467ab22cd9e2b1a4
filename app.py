from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any

import pandas as pd
import plotly.express as px
import streamlit as st

from insights import config
from insights.assembler import get_default_suggestions
from insights.charts import chart_figure
from insights.engine import analyze_query
from insights.export import (
    REPORT_TYPES,
    collection_filename,
    export_collection,
    export_full_report,
    export_result,
    report_filename,
    result_to_frame,
)
from insights.ingestion import IngestionError, ingest_bytes, list_sheets
from insights.models import Customer
from insights.overview import activity_kpis, customer_kpis, search_customers
from insights.results import AnalysisResult
from insights.sample_data import sample_context

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

st.set_page_config(page_title="B2C Insights Dashboard", layout="wide")
st.markdown(
    """
    <style>
      :root {
        --bg: #f8fafc;
        --card: #ffffff;
        --ink: #0f172a;
        --muted: #64748b;
        --accent: #0ea5e9;
        --border: #e2e8f0;
      }
      .block-container { padding-top: 1.2rem; padding-bottom: 2.5rem; }
      .stApp { background: var(--bg); color: var(--ink); }
      .app-title { font-size: 2.0rem; font-weight: 700; letter-spacing: -0.02em; margin-bottom: 0.2rem; }
      .app-subtitle { color: var(--muted); margin-bottom: 1.2rem; }
      .section-card {
        background: var(--card);
        border: 1px solid var(--border);
        border-radius: 16px;
        padding: 1rem 1.2rem;
        box-shadow: 0 8px 24px rgba(15, 23, 42, 0.06);
        margin-bottom: 1rem;
      }
      .section-header { font-weight: 600; font-size: 1.1rem; margin-bottom: 0.6rem; }
    </style>
    """,
    unsafe_allow_html=True,
)


def _context():
    return sample_context(uploaded_data=st.session_state.get("uploaded_data"))


def _section(title: str) -> None:
    st.markdown('<div class="section-card">', unsafe_allow_html=True)
    st.markdown(f'<div class="section-header">{title}</div>', unsafe_allow_html=True)


def _end_section() -> None:
    st.markdown("</div>", unsafe_allow_html=True)


def _use_question(question: str) -> None:
    st.session_state.query = question


def _render_kpis(kpis: list[dict[str, Any]]) -> None:
    columns = st.columns(len(kpis))
    for column, kpi in zip(columns, kpis):
        column.metric(label=kpi["label"], value=kpi["value"])


def _render_result(result: AnalysisResult, key: str) -> None:
    if result.is_error:
        st.warning(result.summary)
    else:
        st.write(result.summary)

    if result.table_data is not None:
        st.dataframe(result_to_frame(result), use_container_width=True, hide_index=True)
        st.download_button(
            "Download table (.xlsx)",
            data=export_result(result),
            file_name=report_filename("ask_ai_result"),
            key=f"download_{key}",
        )

    if result.chart_data is not None:
        figure = chart_figure(result.chart_data)
        if figure is None:
            st.info(f"Skipping '{result.chart_data.title}': no values to plot.")
        else:
            st.plotly_chart(figure, use_container_width=True)

    st.caption("Try asking next:")
    for index, suggestion in enumerate(result.suggestions):
        st.button(suggestion, key=f"suggestion_{key}_{index}", on_click=_use_question, args=(suggestion,))


def _overview_page() -> None:
    ctx = _context()
    revenue = sum(t.revenue for t in ctx.market_trends)
    orders = sum(c.orders_count for c in ctx.customers)
    latest_day = ctx.web_activity[-1] if ctx.web_activity else None
    _render_kpis(
        [
            {"label": "Revenue (12 months)", "value": f"${revenue:,.0f}"},
            {"label": "Customers", "value": len(ctx.customers)},
            {"label": "Orders", "value": f"{orders:,}"},
            {"label": "Bounce rate (latest)", "value": f"{latest_day.bounce_rate:.0f}%" if latest_day else "n/a"},
        ]
    )

    _section("Revenue trend")
    trends = pd.DataFrame([t.model_dump() for t in ctx.market_trends])
    if not trends.empty:
        st.plotly_chart(px.area(trends, x="month", y="revenue", title="Monthly revenue"), use_container_width=True)
    _end_section()

    _section("Sales mix")
    sales = pd.DataFrame([{**s.model_dump(), "revenue": s.revenue} for s in ctx.sales])
    if not sales.empty:
        left, right = st.columns(2)
        by_category = sales.groupby("category", sort=False)["revenue"].sum().reset_index()
        left.plotly_chart(px.pie(by_category, names="category", values="revenue", title="Revenue by category"))
        by_channel = sales.groupby("channel", sort=False)["revenue"].sum().reset_index()
        right.plotly_chart(px.bar(by_channel, x="channel", y="revenue", title="Revenue by channel"))
    _end_section()

    _section("Customers")
    _render_kpis(customer_kpis(ctx.customers))
    term = st.text_input("Search customers", placeholder="Name, email, location or segment")
    matches = search_customers(ctx.customers, term)
    st.dataframe(
        pd.DataFrame([c.model_dump() for c in matches], columns=list(Customer.model_fields)),
        use_container_width=True,
        hide_index=True,
    )
    st.caption(f"{len(matches)} of {len(ctx.customers)} customers")
    _end_section()

    _section("Web activity")
    _render_kpis(activity_kpis(ctx.web_activity))
    activity = pd.DataFrame([w.model_dump() for w in ctx.web_activity])
    if not activity.empty:
        st.plotly_chart(
            px.line(activity, x="date", y=["page_views", "sessions"], title="Daily traffic", markers=True),
            use_container_width=True,
        )
    _end_section()


def _ask_page() -> None:
    _section("Ask AI about your data")
    query = st.text_input("Ask a question about the dataset", key="query")
    if st.button("Ask", disabled=not (query or "").strip()):
        with st.spinner("Analyzing your data..."):
            result = asyncio.run(analyze_query(query, _context()))
        st.session_state.last_result = result
        if not result.is_error:
            history = st.session_state.get("history", [])
            entry = {"query": query, "result": result, "timestamp": datetime.now()}
            st.session_state.history = [entry, *history][: config.HISTORY_LIMIT]

    result = st.session_state.get("last_result")
    if result is not None:
        _render_result(result, key="current")
    else:
        st.caption("Example questions:")
        for index, suggestion in enumerate(get_default_suggestions()):
            st.button(suggestion, key=f"example_{index}", on_click=_use_question, args=(suggestion,))
    _end_section()

    history = st.session_state.get("history", [])
    if history:
        _section("Recent questions")
        for index, item in enumerate(history):
            label = f"{item['timestamp']:%H:%M:%S} - {item['query']}"
            if st.button(label, key=f"history_{index}"):
                st.session_state.last_result = item["result"]
                st.rerun()
        if st.button("Clear history"):
            st.session_state.history = []
            st.rerun()
        _end_section()


def _upload_page() -> None:
    _section("Upload dataset (CSV or XLSX)")
    uploaded_file = st.file_uploader("Drag and drop or browse files", type=["csv", "xlsx"], accept_multiple_files=False)

    selected_sheet: str | None = None
    if uploaded_file is not None and uploaded_file.name.lower().endswith(".xlsx"):
        try:
            sheets = list_sheets(uploaded_file.getvalue())
            if sheets:
                selected_sheet = st.selectbox("Excel sheet", sheets, index=0)
        except IngestionError as exc:
            st.warning(f"Could not read workbook sheet names: {exc}")

    if st.button("Import file", disabled=uploaded_file is None):
        try:
            uploaded = ingest_bytes(uploaded_file.getvalue(), uploaded_file.name, sheet_name=selected_sheet)  # type: ignore[union-attr]
            st.session_state.uploaded_data = uploaded
            st.success(f"{len(uploaded.rows):,} rows imported from {uploaded.file_name}")
        except IngestionError as exc:
            st.error(f"Upload failed: {exc}")
    _end_section()

    uploaded = st.session_state.get("uploaded_data")
    if uploaded is not None:
        _section(f"Preview: {uploaded.file_name}")
        _render_kpis(
            [
                {"label": "Rows", "value": f"{len(uploaded.rows):,}"},
                {"label": "Columns", "value": len(uploaded.headers)},
                {"label": "Uploaded", "value": f"{uploaded.uploaded_at:%Y-%m-%d %H:%M}"},
            ]
        )
        st.dataframe(pd.DataFrame(list(uploaded.rows), columns=list(uploaded.headers)), use_container_width=True)
        if st.button("Remove uploaded data"):
            st.session_state.pop("uploaded_data", None)
            st.rerun()
        _end_section()


def _reports_page() -> None:
    _section("Export reports")
    st.write("Reports are exported in .xlsx format with the export date in the filename.")
    ctx = _context()
    columns = st.columns(len(REPORT_TYPES))
    for column, (key, report) in zip(columns, REPORT_TYPES.items()):
        column.download_button(
            report.title,
            data=export_collection(ctx, key),
            file_name=collection_filename(key),
            key=f"report_{key}",
        )
    st.download_button(
        "Download full analytics report",
        data=export_full_report(ctx),
        file_name=report_filename("full_analytics_report"),
    )
    result = st.session_state.get("last_result")
    if result is not None and result.table_data is not None:
        st.download_button(
            "Download last Ask AI result",
            data=export_result(result),
            file_name=report_filename("ask_ai_result"),
        )
    _end_section()


PAGES = {
    "Overview": _overview_page,
    "Ask AI": _ask_page,
    "Upload": _upload_page,
    "Reports": _reports_page,
}

st.markdown('<div class="app-title">B2C Insights Dashboard</div>', unsafe_allow_html=True)
st.markdown('<div class="app-subtitle">Customers, sales, web activity and market trends</div>', unsafe_allow_html=True)

with st.sidebar:
    page = st.radio("Navigate", list(PAGES), index=0)
    if st.session_state.get("uploaded_data") is not None:
        st.caption(f"Uploaded: {st.session_state.uploaded_data.file_name}")

PAGES[page]()
