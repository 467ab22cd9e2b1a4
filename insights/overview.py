from __future__ import annotations

from typing import Any, Sequence

from insights.formatting import format_number, round_half_up
from insights.models import Customer, WebActivity

CUSTOMER_SEARCH_FIELDS = ("name", "email", "location", "segment")


def search_customers(customers: Sequence[Customer], term: str | None) -> list[Customer]:
    """Case-insensitive substring match over name, email, location and segment."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(customers)
    return [
        c
        for c in customers
        if any(needle in str(getattr(c, field) or "").lower() for field in CUSTOMER_SEARCH_FIELDS)
    ]


def customer_kpis(customers: Sequence[Customer]) -> list[dict[str, Any]]:
    premium = sum(1 for c in customers if c.segment == "Premium")
    new = sum(1 for c in customers if c.segment == "New")
    lifetime = round_half_up(sum(c.total_spent for c in customers) / len(customers)) if customers else 0
    return [
        {"label": "Total Customers", "value": format_number(len(customers))},
        {"label": "Premium Members", "value": format_number(premium)},
        {"label": "New Customers", "value": format_number(new)},
        {"label": "Avg. Lifetime Value", "value": f"${format_number(lifetime)}"},
    ]


def activity_kpis(web_activity: Sequence[WebActivity]) -> list[dict[str, Any]]:
    if not web_activity:
        return [
            {"label": label, "value": "n/a"}
            for label in ("Total Page Views", "Total Sessions", "Bounce Rate", "Avg. Session")
        ]
    days = len(web_activity)
    page_views = sum(w.page_views for w in web_activity)
    sessions = sum(w.sessions for w in web_activity)
    bounce_rate = round_half_up(sum(w.bounce_rate for w in web_activity) / days)
    duration = round_half_up(sum(w.avg_session_duration for w in web_activity) / days)
    return [
        {"label": "Total Page Views", "value": f"{page_views / 1000:.1f}K"},
        {"label": "Total Sessions", "value": f"{sessions / 1000:.1f}K"},
        {"label": "Bounce Rate", "value": f"{bounce_rate}%"},
        {"label": "Avg. Session", "value": f"{duration // 60}m {duration % 60}s"},
    ]
