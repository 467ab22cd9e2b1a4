from __future__ import annotations

import datetime as dt
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


Gender = Literal["Male", "Female", "Other"]
Segment = Literal["Premium", "Regular", "New"]
Channel = Literal["Website", "Mobile App", "In-Store"]


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class Customer(_Record):
    id: str
    name: str
    email: str | None = None
    age: int
    gender: Gender
    location: str
    segment: Segment
    total_spent: float = Field(ge=0)
    orders_count: int = Field(ge=0)
    last_purchase: dt.date | None = None
    join_date: dt.date | None = None


class Sale(_Record):
    id: str
    customer_id: str
    product: str
    category: str
    amount: float = Field(ge=0)
    quantity: int = Field(ge=1)
    date: dt.date
    channel: Channel

    @property
    def revenue(self) -> float:
        return self.amount * self.quantity


class WebActivity(_Record):
    date: dt.date
    page_views: int = Field(ge=0)
    sessions: int = Field(ge=0)
    unique_visitors: int = Field(ge=0)
    bounce_rate: float = Field(ge=0, le=100)
    avg_session_duration: float = Field(ge=0)
    conversions: int = Field(ge=0)


class MarketTrend(_Record):
    month: str
    revenue: float
    customers: int
    avg_order_value: float
    return_rate: float


class UploadedData(_Record):
    headers: tuple[str, ...]
    rows: tuple[dict[str, Any], ...]
    file_name: str
    uploaded_at: dt.datetime = Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))


class AnalysisContext(_Record):
    """Read-only snapshot of everything a query may look at."""

    customers: tuple[Customer, ...] = ()
    sales: tuple[Sale, ...] = ()
    web_activity: tuple[WebActivity, ...] = ()
    market_trends: tuple[MarketTrend, ...] = ()
    uploaded_data: UploadedData | None = None
