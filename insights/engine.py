"""
Ask-AI entry points.

`run_analysis` is the synchronous core: normalize, classify, dispatch to one
handler, validate. `analyze_query` wraps it behind a simulated "thinking"
pause so front ends keep an asynchronous contract.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Callable

from insights import config
from insights import handlers
from insights.assembler import EMPTY_QUERY, QUERY_NOT_UNDERSTOOD, error_result
from insights.classifier import Intent, classify, normalize_query
from insights.models import AnalysisContext
from insights.results import AnalysisResult
from insights.validation import validate_result

logger = logging.getLogger(__name__)

Handler = Callable[[AnalysisContext, dict[str, Any]], AnalysisResult]

HANDLERS: dict[Intent, Handler] = {
    Intent.TOP_CUSTOMERS: lambda ctx, params: handlers.top_customers(ctx.customers, params["count"]),
    Intent.SALES_TREND: lambda ctx, params: handlers.sales_trend(ctx.market_trends, params["months"]),
    Intent.AGE_GROUP: lambda ctx, params: handlers.age_group_spending(ctx.customers),
    Intent.CATEGORY_REVENUE: lambda ctx, params: handlers.category_revenue(ctx.sales),
    Intent.CORRELATION: lambda ctx, params: handlers.age_order_correlation(ctx.customers),
    Intent.TOP_PRODUCTS: lambda ctx, params: handlers.top_products(ctx.sales, params["count"]),
    Intent.CHANNEL_PERFORMANCE: lambda ctx, params: handlers.channel_performance(ctx.sales),
    Intent.CUSTOMER_SEGMENT: lambda ctx, params: handlers.customer_segments(ctx.customers),
    Intent.LOCATION_ANALYSIS: lambda ctx, params: handlers.location_analysis(ctx.customers),
    Intent.WEB_ACTIVITY: lambda ctx, params: handlers.web_activity_summary(ctx.web_activity),
    Intent.AVERAGE_ORDER: lambda ctx, params: handlers.average_order(ctx.sales),
    Intent.TOTAL_REVENUE: lambda ctx, params: handlers.total_revenue(ctx.sales, ctx.market_trends),
    Intent.CUSTOMER_COUNT: lambda ctx, params: handlers.customer_count(ctx.customers),
    Intent.RECENT_PURCHASES: lambda ctx, params: handlers.recent_purchases(ctx.sales, ctx.customers),
    Intent.GENDER_ANALYSIS: lambda ctx, params: handlers.gender_distribution(ctx.customers),
}


def run_analysis(query: str, context: AnalysisContext) -> AnalysisResult:
    normalized = normalize_query(query)
    if not normalized:
        result = error_result(EMPTY_QUERY)
    else:
        intent, params = classify(normalized)
        handler = HANDLERS.get(intent)
        if handler is None:
            logger.info("Query not understood: %r", normalized)
            result = error_result(QUERY_NOT_UNDERSTOOD)
        else:
            logger.info("Answering %r with %s %s", normalized, intent.value, params)
            result = handler(context, params)

    if config.VALIDATE_RESULTS:
        validate_result(result)
    return result


def thinking_delay_seconds() -> float:
    base = max(config.THINKING_DELAY_MS, 0.0)
    jitter = random.uniform(0.0, max(config.THINKING_JITTER_MS, 0.0))
    return (base + jitter) / 1000.0


async def analyze_query(
    query: str,
    context: AnalysisContext,
    delay_seconds: float | None = None,
) -> AnalysisResult:
    await asyncio.sleep(thinking_delay_seconds() if delay_seconds is None else max(delay_seconds, 0.0))
    return run_analysis(query, context)
