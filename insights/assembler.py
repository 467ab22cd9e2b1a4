from __future__ import annotations

from typing import Any

from insights.classifier import Intent
from insights.results import AnalysisResult, TableData

EMPTY_QUERY = "Empty query"
QUERY_NOT_UNDERSTOOD = "Query not understood"

DEFAULT_SUGGESTIONS: tuple[str, ...] = (
    "What are the top 5 customers by total purchase amount?",
    "Show sales trends for the last 6 months",
    "Which age group spends the most?",
    "Give me the total revenue for each product category",
    "Is there a correlation between customer age and purchase frequency?",
)

SUGGESTIONS: dict[Intent, tuple[str, ...]] = {
    Intent.TOP_CUSTOMERS: (
        "Show me customer segments breakdown",
        "Which age group spends the most?",
        "What are the recent purchases?",
    ),
    Intent.SALES_TREND: (
        "What is the total revenue?",
        "Show channel performance comparison",
        "Analyze customer growth",
    ),
    Intent.AGE_GROUP: (
        "Show gender distribution analysis",
        "Which customers are premium?",
        "What are the top products?",
    ),
    Intent.CATEGORY_REVENUE: (
        "What are the top 5 products?",
        "Show sales trends for the last 6 months",
        "Which channel performs best?",
    ),
    Intent.CORRELATION: (
        "Which age group spends the most?",
        "Show customer segments breakdown",
        "What is the average order value?",
    ),
    Intent.TOP_PRODUCTS: (
        "Show revenue by category",
        "Which channel has the most sales?",
        "What are the recent purchases?",
    ),
    Intent.CHANNEL_PERFORMANCE: (
        "Show sales trends",
        "What are the top products?",
        "Analyze customer locations",
    ),
    Intent.CUSTOMER_SEGMENT: (
        "Who are the top customers?",
        "Show age group spending",
        "Analyze customer locations",
    ),
    Intent.LOCATION_ANALYSIS: (
        "Show customer segments",
        "Which age group spends the most?",
        "What is the total revenue?",
    ),
    Intent.WEB_ACTIVITY: (
        "Show sales trends",
        "What is the conversion rate?",
        "Analyze channel performance",
    ),
    Intent.AVERAGE_ORDER: (
        "What is the total revenue?",
        "Show top products",
        "Analyze customer segments",
    ),
    Intent.TOTAL_REVENUE: (
        "Show sales trends for the last 6 months",
        "What is the average order value?",
        "Analyze revenue by category",
    ),
    Intent.CUSTOMER_COUNT: (
        "Who are the top customers?",
        "Show customer locations",
        "Analyze age group spending",
    ),
    Intent.RECENT_PURCHASES: (
        "What are the top products?",
        "Show channel performance",
        "Analyze customer segments",
    ),
    Intent.GENDER_ANALYSIS: (
        "Which age group spends the most?",
        "Show customer segments",
        "Analyze customer locations",
    ),
}

_ERROR_SUMMARIES = {
    EMPTY_QUERY: "Please enter a question about your data.",
    QUERY_NOT_UNDERSTOOD: (
        "I couldn't understand your question. Could you please rephrase it "
        "or try one of the suggested questions below?"
    ),
}


def get_default_suggestions() -> list[str]:
    return list(DEFAULT_SUGGESTIONS)


def suggestions_for(intent: Intent) -> list[str]:
    return list(SUGGESTIONS.get(intent, DEFAULT_SUGGESTIONS))


def table(headers: list[str], rows: list[dict[str, Any]]) -> TableData:
    return TableData(headers=headers, rows=rows)


def assemble(intent: Intent, summary: str, table_data: TableData | None = None, chart: Any = None) -> AnalysisResult:
    return AnalysisResult(
        summary=summary,
        table_data=table_data,
        chart_data=chart,
        suggestions=suggestions_for(intent),
    )


def insufficient_data(intent: Intent, subject: str) -> AnalysisResult:
    return AnalysisResult(
        summary=f"There is not enough {subject} data to answer this question yet.",
        suggestions=suggestions_for(intent),
    )


def error_result(tag: str) -> AnalysisResult:
    return AnalysisResult(
        summary=_ERROR_SUMMARIES[tag],
        error=tag,
        suggestions=get_default_suggestions(),
    )
