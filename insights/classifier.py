"""
Ordered regex dispatch table that maps a free-text question to an intent.

Patterns are tried top to bottom and the first one that matches anywhere in
the normalized query wins, even when a later pattern would be a closer fit.
Reordering the table changes which analysis a question gets.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Any, Callable, NamedTuple

from insights import config

logger = logging.getLogger(__name__)


class Intent(str, Enum):
    TOP_CUSTOMERS = "topCustomers"
    SALES_TREND = "salesTrend"
    AGE_GROUP = "ageGroup"
    CATEGORY_REVENUE = "categoryRevenue"
    CORRELATION = "correlation"
    TOP_PRODUCTS = "topProducts"
    CHANNEL_PERFORMANCE = "channelPerformance"
    CUSTOMER_SEGMENT = "customerSegment"
    LOCATION_ANALYSIS = "locationAnalysis"
    WEB_ACTIVITY = "webActivity"
    AVERAGE_ORDER = "averageOrder"
    TOTAL_REVENUE = "totalRevenue"
    CUSTOMER_COUNT = "customerCount"
    RECENT_PURCHASES = "recentPurchases"
    GENDER_ANALYSIS = "genderAnalysis"
    UNMATCHED = "unmatched"


class Classification(NamedTuple):
    intent: Intent
    params: dict[str, Any]


class IntentPattern(NamedTuple):
    intent: Intent
    pattern: re.Pattern[str]
    extract: Callable[[str], dict[str, Any]] | None = None


TOP_N_PATTERN = re.compile(r"top\s*(\d+)?")
FIRST_INTEGER_PATTERN = re.compile(r"(\d+)")


def _extract_top_n(query: str) -> dict[str, Any]:
    match = TOP_N_PATTERN.search(query)
    count = int(match.group(1)) if match and match.group(1) else config.DEFAULT_TOP_N
    return {"count": count}


def _extract_months(query: str) -> dict[str, Any]:
    match = FIRST_INTEGER_PATTERN.search(query)
    months = int(match.group(1)) if match else config.DEFAULT_TREND_MONTHS
    return {"months": months}


def _compile(expression: str) -> re.Pattern[str]:
    return re.compile(expression, re.IGNORECASE)


INTENT_PATTERNS: tuple[IntentPattern, ...] = (
    IntentPattern(
        Intent.TOP_CUSTOMERS,
        _compile(r"top\s*(\d+)?\s*customers?\s*(by)?\s*(total|purchase|spent|amount)?"),
        _extract_top_n,
    ),
    IntentPattern(
        Intent.SALES_TREND,
        _compile(r"(sales?|revenue)\s*(trend|over|last|past)\s*(\d+)?\s*(months?|days?|weeks?)?"),
        _extract_months,
    ),
    IntentPattern(Intent.AGE_GROUP, _compile(r"(age\s*group|which\s*age|age\s*range)\s*(spend|purchase|buy)?")),
    IntentPattern(
        Intent.CATEGORY_REVENUE,
        _compile(r"(total|revenue|sales)\s*(for|by|per)?\s*(each|all)?\s*(product)?\s*categor"),
    ),
    IntentPattern(Intent.CORRELATION, _compile(r"correlation|relationship|relate|between.*and")),
    IntentPattern(Intent.TOP_PRODUCTS, _compile(r"top\s*(\d+)?\s*(products?|items?|selling)"), _extract_top_n),
    IntentPattern(Intent.CHANNEL_PERFORMANCE, _compile(r"(channel|platform)\s*(performance|comparison|sales)")),
    IntentPattern(Intent.CUSTOMER_SEGMENT, _compile(r"(customer)?\s*segment|premium|regular|new\s*customers?")),
    IntentPattern(Intent.LOCATION_ANALYSIS, _compile(r"location|city|cities|region|where")),
    IntentPattern(Intent.WEB_ACTIVITY, _compile(r"(website?|web|traffic|visit|page\s*view|session|bounce)")),
    IntentPattern(
        Intent.AVERAGE_ORDER,
        _compile(r"(average|avg|mean)\s*(order|purchase|transaction)\s*(value|amount)?"),
    ),
    IntentPattern(Intent.TOTAL_REVENUE, _compile(r"total\s*(revenue|sales|income)")),
    IntentPattern(Intent.CUSTOMER_COUNT, _compile(r"(how\s*many|total|count)\s*customers?")),
    IntentPattern(Intent.RECENT_PURCHASES, _compile(r"(recent|latest|last)\s*(purchases?|orders?|transactions?)")),
    IntentPattern(Intent.GENDER_ANALYSIS, _compile(r"gender|male|female|men|women")),
)


def normalize_query(query: str | None) -> str:
    return (query or "").strip().lower()


def classify(query: str) -> Classification:
    normalized = normalize_query(query)
    for entry in INTENT_PATTERNS:
        if entry.pattern.search(normalized):
            params = entry.extract(normalized) if entry.extract else {}
            logger.debug("Classified %r as %s with %s", normalized, entry.intent.value, params)
            return Classification(entry.intent, params)
    logger.debug("No intent matched %r", normalized)
    return Classification(Intent.UNMATCHED, {})
