"""
One pure aggregation per intent.

Every handler reads plain sequences of records, never mutates them, and
returns an AnalysisResult. Group-bys keep first-appearance order and sort
stably, so ties always resolve to the order the data provider supplied.
Empty inputs produce an "insufficient data" result instead of dividing by
zero.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Sequence

import numpy as np
import pandas as pd

from insights import config
from insights.assembler import assemble, insufficient_data, table
from insights.classifier import Intent
from insights.formatting import (
    format_currency,
    format_currency_fixed,
    format_number,
    format_percent,
    percent_of,
    plain_number,
    round_half_up,
    truncate_label,
)
from insights.models import Customer, MarketTrend, Sale, WebActivity
from insights.results import AnalysisResult, AreaChart, BarChart, LineChart, PieChart, ScatterChart

AGE_BUCKETS: tuple[tuple[str, int | None], ...] = (
    ("18-24", 25),
    ("25-34", 35),
    ("35-44", 45),
    ("45-54", 55),
    ("55+", None),
)
AGE_LABELS = [label for label, _ in AGE_BUCKETS]

CUSTOMER_COLUMNS = ["id", "name", "age", "gender", "location", "segment", "total_spent", "orders_count"]
SALE_COLUMNS = ["id", "customer_id", "product", "category", "amount", "quantity", "date", "channel"]


# ─────────────────────────────────────────────────────────────────
# Shared helpers
# ─────────────────────────────────────────────────────────────────

def age_bucket(age: int) -> str:
    for label, upper in AGE_BUCKETS:
        if upper is None or age < upper:
            return label
    return AGE_LABELS[-1]


def _customers_frame(customers: Sequence[Customer]) -> pd.DataFrame:
    return pd.DataFrame([c.model_dump(include=set(CUSTOMER_COLUMNS)) for c in customers], columns=CUSTOMER_COLUMNS)


def _sales_frame(sales: Sequence[Sale]) -> pd.DataFrame:
    df = pd.DataFrame([s.model_dump(include=set(SALE_COLUMNS)) for s in sales], columns=SALE_COLUMNS)
    df["revenue"] = df["amount"] * df["quantity"]
    return df


def _group(df: pd.DataFrame, key: str, sort_by: str | None = None, **aggregations: Any) -> list[dict[str, Any]]:
    grouped = df.groupby(key, sort=False).agg(**aggregations).reset_index()
    if sort_by:
        grouped = grouped.sort_values(sort_by, ascending=False, kind="stable")
    return grouped.to_dict(orient="records")


def _age_buckets(customers: Sequence[Customer]) -> list[dict[str, Any]]:
    df = _customers_frame(customers)
    df["bucket"] = df["age"].map(age_bucket)
    grouped = (
        df.groupby("bucket")
        .agg(customers=("id", "count"), total=("total_spent", "sum"), orders=("orders_count", "sum"))
        .reindex(AGE_LABELS, fill_value=0)
    )
    buckets = []
    for label, row in grouped.iterrows():
        count = int(row["customers"])
        buckets.append(
            {
                "range": label,
                "customers": count,
                "total": plain_number(row["total"]),
                "orders": plain_number(row["orders"]),
                "avg_spent": round_half_up(row["total"] / count) if count else 0,
                "avg_orders": float(row["orders"]) / count if count else 0.0,
            }
        )
    return buckets


def _first_max(items: Sequence[Any], key: Any) -> Any:
    best = items[0]
    for item in items[1:]:
        if key(item) > key(best):
            best = item
    return best


def _share(part: float, whole: float) -> str:
    return format_percent(percent_of(part, whole))


# ─────────────────────────────────────────────────────────────────
# Customers
# ─────────────────────────────────────────────────────────────────

def top_customers(customers: Sequence[Customer], count: int = config.DEFAULT_TOP_N) -> AnalysisResult:
    ranked = sorted(customers, key=lambda c: c.total_spent, reverse=True)[: max(count, 0)]
    if not ranked:
        return insufficient_data(Intent.TOP_CUSTOMERS, "customer")

    total = sum(c.total_spent for c in ranked)
    average = total / len(ranked)
    leader = ranked[0]
    size = len(ranked)

    summary = (
        f"The top {size} customers by total purchase amount have spent a combined {format_currency(total)}. "
        f"The average spending among these top customers is {format_currency(average)}. "
        f"{leader.name} leads with {format_currency(leader.total_spent)} in total purchases."
    )
    rows = [
        {
            "Rank": rank,
            "Customer": c.name,
            "Location": c.location,
            "Segment": c.segment,
            "Total Spent": format_currency(c.total_spent),
            "Orders": c.orders_count,
        }
        for rank, c in enumerate(ranked, start=1)
    ]
    chart = BarChart(
        data=[{"name": c.name.split(" ")[0], "value": plain_number(c.total_spent)} for c in ranked],
        title=f"Top {size} Customers by Spending",
    )
    return assemble(
        Intent.TOP_CUSTOMERS,
        summary,
        table(["Rank", "Customer", "Location", "Segment", "Total Spent", "Orders"], rows),
        chart,
    )


def age_group_spending(customers: Sequence[Customer]) -> AnalysisResult:
    if not customers:
        return insufficient_data(Intent.AGE_GROUP, "customer")

    buckets = _age_buckets(customers)
    top = _first_max(buckets, key=lambda b: b["avg_spent"])

    summary = (
        f"The {top['range']} age group has the highest average spending at "
        f"{format_currency(top['avg_spent'])} per customer. This group contains {top['customers']} customers "
        f"with a total spend of {format_currency(top['total'])}. Consider targeting marketing campaigns "
        "towards this demographic for maximum ROI."
    )
    rows = [
        {
            "Age Range": b["range"],
            "Customers": b["customers"],
            "Total Spent": format_currency(b["total"]),
            "Average Spent": format_currency(b["avg_spent"]),
        }
        for b in buckets
    ]
    chart = BarChart(
        data=[{"name": b["range"], "value": b["avg_spent"]} for b in buckets],
        title="Average Spending by Age Group",
    )
    return assemble(
        Intent.AGE_GROUP,
        summary,
        table(["Age Range", "Customers", "Total Spent", "Average Spent"], rows),
        chart,
    )


def pearson(xs: Sequence[float], ys: Sequence[float]) -> float | None:
    """Pearson r from raw sums; None when either variable has no spread."""
    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    n = len(x)
    if n < 2 or n != len(y):
        return None
    denominator = (n * np.sum(x * x) - np.sum(x) ** 2) * (n * np.sum(y * y) - np.sum(y) ** 2)
    if denominator <= 0:
        return None
    return float((n * np.sum(x * y) - np.sum(x) * np.sum(y)) / np.sqrt(denominator))


def correlation_strength(r: float) -> str:
    magnitude = abs(r)
    if magnitude < 0.3:
        return "weak"
    if magnitude < 0.7:
        return "moderate"
    return "strong"


def age_order_correlation(customers: Sequence[Customer]) -> AnalysisResult:
    if len(customers) < 2:
        return insufficient_data(Intent.CORRELATION, "customer")

    r = pearson([c.age for c in customers], [c.orders_count for c in customers])
    if r is None or r == 0:
        summary = (
            "No linear correlation between customer age and purchase frequency could be measured "
            f"across {len(customers)} customers (r = {'undefined' if r is None else '0.000'}). "
            "Age or order count does not vary enough to show a relationship."
        )
    else:
        direction = "positive" if r > 0 else "negative"
        tendency = "older" if r > 0 else "younger"
        summary = (
            f"Analysis shows a {correlation_strength(r)} {direction} correlation (r = {r:.3f}) between customer "
            f"age and purchase frequency. This suggests that {tendency} customers tend to make more purchases. "
            "However, other factors like customer segment and location also significantly influence "
            "purchasing behavior."
        )

    rows = [
        {
            "Age Group": b["range"],
            "Avg Orders": f"{b['avg_orders']:.1f}",
            "Avg Spending": format_currency(b["avg_spent"]),
            "Sample Size": b["customers"],
        }
        for b in _age_buckets(customers)
    ]
    chart = ScatterChart(
        data=[{"name": f"Age {c.age}", "x": c.age, "y": c.orders_count} for c in customers],
        title="Age vs Purchase Frequency Correlation",
    )
    return assemble(
        Intent.CORRELATION,
        summary,
        table(["Age Group", "Avg Orders", "Avg Spending", "Sample Size"], rows),
        chart,
    )


def customer_segments(customers: Sequence[Customer]) -> AnalysisResult:
    if not customers:
        return insufficient_data(Intent.CUSTOMER_SEGMENT, "customer")

    df = _customers_frame(customers)
    grouped = df.groupby("segment", sort=False).agg(customers=("id", "count"), total=("total_spent", "sum"))
    grouped["avg_spent"] = (grouped["total"] / grouped["customers"]).map(round_half_up)
    data = grouped.reset_index().sort_values("avg_spent", ascending=False, kind="stable").to_dict(orient="records")
    leader = data[0]

    summary = (
        f"Customer segmentation analysis shows {leader['segment']} customers have the highest average spending "
        f"at {format_currency(leader['avg_spent'])} per customer. This segment represents {leader['customers']} "
        f"customers ({_share(leader['customers'], len(customers))} of total). Focus on converting Regular "
        "customers to Premium status for revenue growth."
    )
    rows = [
        {
            "Segment": d["segment"],
            "Customers": int(d["customers"]),
            "Total Spent": format_currency(d["total"]),
            "Avg Spent": format_currency(d["avg_spent"]),
        }
        for d in data
    ]
    chart = PieChart(
        data=[{"name": d["segment"], "value": int(d["customers"])} for d in data],
        title="Customer Segments Distribution",
    )
    return assemble(
        Intent.CUSTOMER_SEGMENT,
        summary,
        table(["Segment", "Customers", "Total Spent", "Avg Spent"], rows),
        chart,
    )


def location_analysis(customers: Sequence[Customer]) -> AnalysisResult:
    if not customers:
        return insufficient_data(Intent.LOCATION_ANALYSIS, "customer")

    data = _group(
        _customers_frame(customers),
        "location",
        sort_by="total",
        customers=("id", "count"),
        total=("total_spent", "sum"),
    )
    leader, trailing = data[0], data[-1]

    summary = (
        f"Geographic analysis shows {leader['location']} as the top market with {leader['customers']} customers "
        f"and {format_currency(leader['total'])} in total spending."
    )
    if len(data) > 1:
        summary += f" Markets like {trailing['location']} have growth potential."
    summary += " Consider regional marketing campaigns targeting high-value areas."

    rows = [
        {
            "Location": d["location"],
            "Customers": int(d["customers"]),
            "Total Spent": format_currency(d["total"]),
            "Avg Spent": format_currency(round_half_up(d["total"] / d["customers"])),
        }
        for d in data
    ]
    chart = BarChart(
        data=[{"name": d["location"], "value": plain_number(d["total"])} for d in data[:8]],
        title="Revenue by Location",
    )
    return assemble(
        Intent.LOCATION_ANALYSIS,
        summary,
        table(["Location", "Customers", "Total Spent", "Avg Spent"], rows),
        chart,
    )


def customer_count(customers: Sequence[Customer]) -> AnalysisResult:
    if not customers:
        return insufficient_data(Intent.CUSTOMER_COUNT, "customer")

    counts = Counter(c.segment for c in customers)
    total = len(customers)
    summary = (
        f"There are {total} total customers in the database. {counts.get('Regular', 0)} are Regular customers, "
        f"{counts.get('Premium', 0)} are Premium, and {counts.get('New', 0)} are New customers."
    )
    rows = [
        {"Segment": segment, "Count": count, "Percentage": _share(count, total)}
        for segment, count in counts.items()
    ]
    chart = PieChart(
        data=[{"name": segment, "value": count} for segment, count in counts.items()],
        title="Customer Distribution by Segment",
    )
    return assemble(Intent.CUSTOMER_COUNT, summary, table(["Segment", "Count", "Percentage"], rows), chart)


def gender_distribution(customers: Sequence[Customer]) -> AnalysisResult:
    if not customers:
        return insufficient_data(Intent.GENDER_ANALYSIS, "customer")

    data = _group(_customers_frame(customers), "gender", customers=("id", "count"), total=("total_spent", "sum"))
    for d in data:
        d["avg_spent"] = round_half_up(d["total"] / d["customers"])
    top = _first_max(data, key=lambda d: d["avg_spent"])
    breakdown = ", ".join(
        f"{percent_of(d['customers'], len(customers)):.0f}% {d['gender']}" for d in data
    )

    summary = (
        f"Gender analysis shows {top['gender']} customers have the highest average spending at "
        f"{format_currency(top['avg_spent'])}. The customer base is {breakdown}. Consider gender-specific "
        "marketing strategies to increase engagement."
    )
    rows = [
        {
            "Gender": d["gender"],
            "Customers": int(d["customers"]),
            "Total Spent": format_currency(d["total"]),
            "Avg Spent": format_currency(d["avg_spent"]),
        }
        for d in data
    ]
    chart = PieChart(
        data=[{"name": d["gender"], "value": int(d["customers"])} for d in data],
        title="Customer Gender Distribution",
    )
    return assemble(
        Intent.GENDER_ANALYSIS,
        summary,
        table(["Gender", "Customers", "Total Spent", "Avg Spent"], rows),
        chart,
    )


# ─────────────────────────────────────────────────────────────────
# Sales
# ─────────────────────────────────────────────────────────────────

def category_revenue(sales: Sequence[Sale]) -> AnalysisResult:
    if not sales:
        return insufficient_data(Intent.CATEGORY_REVENUE, "sales")

    data = _group(
        _sales_frame(sales),
        "category",
        sort_by="revenue",
        revenue=("revenue", "sum"),
        items=("quantity", "sum"),
    )
    total = sum(d["revenue"] for d in data)
    leader = data[0]

    summary = (
        f"Revenue breakdown by category shows {leader['category']} leading with "
        f"{format_currency(leader['revenue'])} ({_share(leader['revenue'], total)} of total). Total revenue "
        f"across all categories is {format_currency(total)}. Consider expanding inventory in top-performing "
        "categories."
    )
    rows = [
        {
            "Category": d["category"],
            "Revenue": format_currency(d["revenue"]),
            "Items Sold": int(d["items"]),
            "% of Total": _share(d["revenue"], total),
        }
        for d in data
    ]
    chart = PieChart(
        data=[{"name": d["category"], "value": plain_number(d["revenue"])} for d in data],
        title="Revenue by Product Category",
    )
    return assemble(
        Intent.CATEGORY_REVENUE,
        summary,
        table(["Category", "Revenue", "Items Sold", "% of Total"], rows),
        chart,
    )


def top_products(sales: Sequence[Sale], count: int = config.DEFAULT_TOP_N) -> AnalysisResult:
    if not sales or count <= 0:
        return insufficient_data(Intent.TOP_PRODUCTS, "sales")

    ranked = _group(
        _sales_frame(sales),
        "product",
        sort_by="revenue",
        revenue=("revenue", "sum"),
        quantity=("quantity", "sum"),
        category=("category", "first"),
    )
    total = sum(d["revenue"] for d in ranked)
    top = ranked[:count]
    leader = top[0]
    size = len(top)

    summary = (
        f"The top {size} products by revenue are led by \"{leader['product']}\" in the {leader['category']} "
        f"category, generating {format_currency(leader['revenue'])}. These top products account for "
        f"{_share(sum(d['revenue'] for d in top), total)} of total sales. Consider featuring these items "
        "prominently in marketing campaigns."
    )
    rows = [
        {
            "Rank": rank,
            "Product": d["product"],
            "Category": d["category"],
            "Revenue": format_currency(d["revenue"]),
            "Qty Sold": int(d["quantity"]),
        }
        for rank, d in enumerate(top, start=1)
    ]
    chart = BarChart(
        data=[{"name": truncate_label(d["product"], 15), "value": plain_number(d["revenue"])} for d in top],
        title=f"Top {size} Products by Revenue",
    )
    return assemble(
        Intent.TOP_PRODUCTS,
        summary,
        table(["Rank", "Product", "Category", "Revenue", "Qty Sold"], rows),
        chart,
    )


def channel_performance(sales: Sequence[Sale]) -> AnalysisResult:
    if not sales:
        return insufficient_data(Intent.CHANNEL_PERFORMANCE, "sales")

    data = _group(_sales_frame(sales), "channel", sort_by="revenue", revenue=("revenue", "sum"), orders=("id", "count"))
    total = sum(d["revenue"] for d in data)
    leader, trailing = data[0], data[-1]

    summary = (
        f"{leader['channel']} is the top-performing channel with {format_currency(leader['revenue'])} in revenue "
        f"({_share(leader['revenue'], total)} of total)."
    )
    if len(data) > 1:
        summary += (
            f" The {trailing['channel']} channel has the lowest performance. Consider investing more in "
            f"{leader['channel']} marketing and improving {trailing['channel']} conversion strategies."
        )
    else:
        summary += " It is the only channel with recorded sales."

    rows = [
        {
            "Channel": d["channel"],
            "Revenue": format_currency(d["revenue"]),
            "Orders": int(d["orders"]),
            "% of Total": _share(d["revenue"], total),
        }
        for d in data
    ]
    chart = PieChart(
        data=[{"name": d["channel"], "value": plain_number(d["revenue"])} for d in data],
        title="Revenue by Sales Channel",
    )
    return assemble(
        Intent.CHANNEL_PERFORMANCE,
        summary,
        table(["Channel", "Revenue", "Orders", "% of Total"], rows),
        chart,
    )


def average_order(sales: Sequence[Sale]) -> AnalysisResult:
    if not sales:
        return insufficient_data(Intent.AVERAGE_ORDER, "sales")

    df = _sales_frame(sales)
    average = float(df["revenue"].sum()) / len(df)
    grouped = df.groupby("channel", sort=False).agg(total=("revenue", "sum"), orders=("id", "count"))
    grouped["avg_order"] = (grouped["total"] / grouped["orders"]).map(round_half_up)
    data = grouped.reset_index().sort_values("avg_order", ascending=False, kind="stable").to_dict(orient="records")

    summary = (
        f"The average order value across all transactions is {format_currency_fixed(average)}. "
        f"{data[0]['channel']} has the highest average order value. Implementing upselling strategies could "
        "help increase this metric."
    )
    rows = [
        {
            "Channel": d["channel"],
            "Avg Order Value": format_currency(d["avg_order"]),
            "Total Orders": int(d["orders"]),
        }
        for d in data
    ]
    chart = BarChart(
        data=[{"name": d["channel"], "value": int(d["avg_order"])} for d in data],
        title="Average Order Value by Channel",
    )
    return assemble(
        Intent.AVERAGE_ORDER,
        summary,
        table(["Channel", "Avg Order Value", "Total Orders"], rows),
        chart,
    )


def recent_purchases(
    sales: Sequence[Sale],
    customers: Sequence[Customer],
    limit: int = config.RECENT_PURCHASES_LIMIT,
) -> AnalysisResult:
    if not sales:
        return insufficient_data(Intent.RECENT_PURCHASES, "sales")

    recent = sorted(sales, key=lambda s: s.date, reverse=True)[:limit]
    names = {c.id: c.name for c in customers}
    latest = recent[0]

    leading = [category for category, _ in Counter(s.category for s in recent).most_common(2)]
    if len(leading) > 1:
        categories = f"{leading[0]} and {leading[1]} categories dominate"
    else:
        categories = f"The {leading[0]} category dominates"

    summary = (
        "The most recent transactions show active customer engagement. The latest purchase was on "
        f"{latest.date.isoformat()} for {latest.product}. {categories} recent purchases, indicating strong "
        "demand in these segments."
    )
    rows = [
        {
            "Date": s.date.isoformat(),
            "Customer": names.get(s.customer_id, s.customer_id),
            "Product": s.product,
            "Amount": format_currency(s.revenue),
            "Channel": s.channel,
        }
        for s in recent
    ]
    chart = BarChart(
        data=[{"name": truncate_label(s.product, 12), "value": plain_number(s.revenue)} for s in recent[:5]],
        title="Recent Purchase Amounts",
    )
    return assemble(
        Intent.RECENT_PURCHASES,
        summary,
        table(["Date", "Customer", "Product", "Amount", "Channel"], rows),
        chart,
    )


# ─────────────────────────────────────────────────────────────────
# Market trends and web activity
# ─────────────────────────────────────────────────────────────────

def sales_trend(market_trends: Sequence[MarketTrend], months: int = config.DEFAULT_TREND_MONTHS) -> AnalysisResult:
    window = list(market_trends[-months:]) if months > 0 else []
    if not window:
        return insufficient_data(Intent.SALES_TREND, "market trend")

    total = sum(t.revenue for t in window)
    average = total / len(window)
    first, last = window[0], window[-1]
    peak = _first_max(window, key=lambda t: t.revenue)
    growth = percent_of(last.revenue - first.revenue, first.revenue)

    if growth is None:
        change = f"Growth from {first.month} to {last.month} cannot be computed because {first.month} had no revenue."
    else:
        rounded = round(growth, 1)
        verb = "grew" if rounded >= 0 else "declined"
        change = f"Revenue {verb} by {format_number(abs(rounded))}% from {first.month} to {last.month}."

    summary = (
        f"Over the last {len(window)} months, total revenue reached {format_currency(total)} with an average "
        f"monthly revenue of {format_currency(average)}. {change} Peak performance was in {peak.month}."
    )
    rows = [
        {
            "Month": t.month,
            "Revenue": format_currency(t.revenue),
            "Customers": format_number(t.customers),
            "Avg Order Value": format_currency(t.avg_order_value),
            "Return Rate": f"{format_number(t.return_rate)}%",
        }
        for t in window
    ]
    chart = AreaChart(
        data=[{"name": t.month, "value": plain_number(t.revenue)} for t in window],
        title=f"Revenue Trend (Last {len(window)} Months)",
    )
    return assemble(
        Intent.SALES_TREND,
        summary,
        table(["Month", "Revenue", "Customers", "Avg Order Value", "Return Rate"], rows),
        chart,
    )


def total_revenue(sales: Sequence[Sale], market_trends: Sequence[MarketTrend]) -> AnalysisResult:
    if not market_trends:
        return insufficient_data(Intent.TOTAL_REVENUE, "market trend")

    period_revenue = sum(t.revenue for t in market_trends)
    sample_revenue = sum(s.revenue for s in sales)
    peak = _first_max(market_trends, key=lambda t: t.revenue)

    summary = (
        f"Total revenue across {len(market_trends)} months of market trends data is "
        f"{format_currency(period_revenue)}. Current sample data shows {format_currency(sample_revenue)} in "
        f"transactions. {peak.month} was the peak month at {format_currency(peak.revenue)}."
    )
    window = list(market_trends[-6:])
    rows = []
    for index, t in enumerate(window):
        if index == 0:
            growth = "-"
        else:
            previous = window[index - 1].revenue
            growth = format_percent(percent_of(t.revenue - previous, previous))
        rows.append({"Period": t.month, "Revenue": format_currency(t.revenue), "Growth": growth})

    chart = AreaChart(
        data=[{"name": t.month[:3], "value": plain_number(t.revenue)} for t in market_trends],
        title="Monthly Revenue Trend",
    )
    return assemble(Intent.TOTAL_REVENUE, summary, table(["Period", "Revenue", "Growth"], rows), chart)


def web_activity_summary(web_activity: Sequence[WebActivity]) -> AnalysisResult:
    if not web_activity:
        return insufficient_data(Intent.WEB_ACTIVITY, "web activity")

    page_views = sum(w.page_views for w in web_activity)
    sessions = sum(w.sessions for w in web_activity)
    conversions = sum(w.conversions for w in web_activity)
    bounce_rate = sum(w.bounce_rate for w in web_activity) / len(web_activity)
    peak = _first_max(web_activity, key=lambda w: w.page_views)

    summary = (
        f"Website performance over the analyzed period shows {format_number(page_views)} page views across "
        f"{format_number(sessions)} sessions. The average bounce rate is {bounce_rate:.1f}% with a conversion "
        f"rate of {format_percent(percent_of(conversions, sessions), digits=2)}. Peak traffic occurred on "
        f"{peak.date.isoformat()}."
    )
    rows = [
        {
            "Date": w.date.isoformat(),
            "Page Views": format_number(w.page_views),
            "Sessions": format_number(w.sessions),
            "Bounce Rate": f"{format_number(w.bounce_rate)}%",
            "Conversions": w.conversions,
        }
        for w in web_activity[-7:]
    ]
    chart = LineChart(
        data=[{"name": w.date.strftime("%m-%d"), "value": w.page_views} for w in web_activity],
        title="Daily Page Views Trend",
    )
    return assemble(
        Intent.WEB_ACTIVITY,
        summary,
        table(["Date", "Page Views", "Sessions", "Bounce Rate", "Conversions"], rows),
        chart,
    )
