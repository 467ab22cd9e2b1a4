import math

from insights import handlers
from insights.models import Customer, MarketTrend, Sale, WebActivity


def _customer(key: str, total_spent: float = 100, age: int = 30, orders_count: int = 1, **overrides) -> Customer:
    fields = {
        "id": key,
        "name": f"Customer {key}",
        "age": age,
        "gender": "Female",
        "location": "Boston",
        "segment": "Regular",
        "total_spent": total_spent,
        "orders_count": orders_count,
    }
    fields.update(overrides)
    return Customer(**fields)


def _sale(key: str, amount: float, quantity: int = 1, category: str = "A", **overrides) -> Sale:
    fields = {
        "id": key,
        "customer_id": "C001",
        "product": f"Product {key}",
        "category": category,
        "amount": amount,
        "quantity": quantity,
        "date": "2024-01-15",
        "channel": "Website",
    }
    fields.update(overrides)
    return Sale(**fields)


def _trend(month: str, revenue: float) -> MarketTrend:
    return MarketTrend(month=month, revenue=revenue, customers=100, avg_order_value=50, return_rate=5.5)


def test_category_revenue_sums_amount_times_quantity() -> None:
    sales = [_sale("S1", 10, 2, "A"), _sale("S2", 5, 1, "A"), _sale("S3", 20, 1, "B")]
    result = handlers.category_revenue(sales)

    rows = result.table_data.rows
    assert [row["Category"] for row in rows] == ["A", "B"]
    assert rows[0]["Revenue"] == "$25"
    assert rows[1]["Revenue"] == "$20"
    assert rows[0]["% of Total"] == "55.6%"
    assert rows[0]["Items Sold"] == 3
    assert result.chart_data.type == "pie"
    assert [point["value"] for point in result.chart_data.data] == [25, 20]
    assert "$45" in result.summary


def test_top_customers_keeps_input_order_on_ties() -> None:
    customers = [
        _customer("C0", 100),
        _customer("C1", 300),
        _customer("C2", 300),
        _customer("C3", 50),
    ]
    result = handlers.top_customers(customers, 2)

    assert [row["Customer"] for row in result.table_data.rows] == ["Customer C1", "Customer C2"]
    assert [row["Rank"] for row in result.table_data.rows] == [1, 2]
    assert "combined $600" in result.summary
    assert "is $300" in result.summary
    assert "Customer C1 leads" in result.summary
    assert result.table_data.headers == ["Rank", "Customer", "Location", "Segment", "Total Spent", "Orders"]


def test_top_customers_uses_actual_list_size() -> None:
    result = handlers.top_customers([_customer("C0", 10), _customer("C1", 20)], 5)
    assert len(result.table_data.rows) == 2
    assert result.chart_data.title == "Top 2 Customers by Spending"


def test_top_customers_with_zero_count_is_insufficient() -> None:
    result = handlers.top_customers([_customer("C0")], 0)
    assert result.table_data is None
    assert result.error is None
    assert "not enough" in result.summary


def test_age_bucket_boundaries() -> None:
    assert handlers.age_bucket(18) == "18-24"
    assert handlers.age_bucket(24) == "18-24"
    assert handlers.age_bucket(25) == "25-34"
    assert handlers.age_bucket(44) == "35-44"
    assert handlers.age_bucket(45) == "45-54"
    assert handlers.age_bucket(55) == "55+"
    assert handlers.age_bucket(80) == "55+"


def test_age_group_spending_lists_all_buckets() -> None:
    customers = [_customer("C0", 100, age=25), _customer("C1", 300, age=30), _customer("C2", 50, age=60)]
    result = handlers.age_group_spending(customers)

    rows = {row["Age Range"]: row for row in result.table_data.rows}
    assert list(rows) == handlers.AGE_LABELS
    assert rows["25-34"]["Customers"] == 2
    assert rows["25-34"]["Average Spent"] == "$200"
    assert rows["18-24"]["Customers"] == 0
    assert rows["18-24"]["Average Spent"] == "$0"
    assert result.summary.startswith("The 25-34 age group")


def test_pearson_perfect_line() -> None:
    assert math.isclose(handlers.pearson([20, 30, 40], [20, 30, 40]), 1.0)
    assert math.isclose(handlers.pearson([20, 30, 40], [40, 30, 20]), -1.0)


def test_pearson_without_spread_is_undefined() -> None:
    assert handlers.pearson([20, 30, 40], [5, 5, 5]) is None
    assert handlers.pearson([20], [5]) is None


def test_correlation_strength_thresholds() -> None:
    assert handlers.correlation_strength(0.29) == "weak"
    assert handlers.correlation_strength(-0.3) == "moderate"
    assert handlers.correlation_strength(0.69) == "moderate"
    assert handlers.correlation_strength(0.7) == "strong"


def test_correlation_strong_positive() -> None:
    customers = [_customer(f"C{age}", age=age, orders_count=age) for age in (20, 30, 40)]
    result = handlers.age_order_correlation(customers)

    assert "strong positive correlation (r = 1.000)" in result.summary
    assert result.chart_data.type == "scatter"
    assert result.chart_data.data[0] == {"name": "Age 20", "x": 20, "y": 20}


def test_correlation_constant_orders_is_handled() -> None:
    customers = [_customer(f"C{age}", age=age, orders_count=4) for age in (20, 30, 40)]
    result = handlers.age_order_correlation(customers)

    assert "r = undefined" in result.summary
    assert result.error is None
    sizes = {row["Age Group"]: row["Sample Size"] for row in result.table_data.rows}
    assert sizes["18-24"] == 1
    assert sizes["55+"] == 0


def test_customer_segments_sorted_by_average_spend() -> None:
    customers = [
        _customer("C0", 100, segment="Regular"),
        _customer("C1", 900, segment="Premium"),
        _customer("C2", 50, segment="New"),
        _customer("C3", 200, segment="Regular"),
    ]
    result = handlers.customer_segments(customers)

    assert [row["Segment"] for row in result.table_data.rows] == ["Premium", "Regular", "New"]
    assert result.table_data.rows[1]["Avg Spent"] == "$150"
    assert "(25.0% of total)" in result.summary


def test_location_analysis_limits_chart_to_eight_markets() -> None:
    customers = [_customer(f"C{i}", 100 + i, location=f"City {i}") for i in range(10)]
    result = handlers.location_analysis(customers)

    assert len(result.table_data.rows) == 10
    assert len(result.chart_data.data) == 8
    assert result.table_data.rows[0]["Location"] == "City 9"
    assert "City 0 have growth potential" in result.summary


def test_customer_count_breaks_down_segments() -> None:
    customers = [_customer("C0", segment="Premium"), _customer("C1"), _customer("C2", segment="New"), _customer("C3")]
    result = handlers.customer_count(customers)

    assert result.summary.startswith("There are 4 total customers")
    assert "2 are Regular customers, 1 are Premium, and 1 are New" in result.summary
    percentages = {row["Segment"]: row["Percentage"] for row in result.table_data.rows}
    assert percentages == {"Premium": "25.0%", "Regular": "50.0%", "New": "25.0%"}


def test_gender_distribution() -> None:
    customers = [_customer("C0", 100), _customer("C1", 500, gender="Male"), _customer("C2", 300)]
    result = handlers.gender_distribution(customers)

    assert "Male customers have the highest average spending at $500" in result.summary
    assert "67% Female, 33% Male" in result.summary


def test_top_products_truncates_chart_labels() -> None:
    sales = [
        _sale("S1", 300, product="Premium Headphones"),
        _sale("S2", 100, product="Cable"),
        _sale("S3", 100, product="Premium Headphones"),
    ]
    result = handlers.top_products(sales, 5)

    assert [row["Product"] for row in result.table_data.rows] == ["Premium Headphones", "Cable"]
    assert result.table_data.rows[0]["Qty Sold"] == 2
    assert result.chart_data.data[0]["name"] == "Premium Headpho..."
    assert "account for 100.0% of total sales" in result.summary


def test_channel_performance_names_leader_and_laggard() -> None:
    sales = [
        _sale("S1", 100, channel="Website"),
        _sale("S2", 300, channel="Mobile App"),
        _sale("S3", 50, channel="In-Store"),
    ]
    result = handlers.channel_performance(sales)

    assert result.summary.startswith("Mobile App is the top-performing channel with $300")
    assert "The In-Store channel has the lowest performance" in result.summary


def test_average_order_value() -> None:
    sales = [
        _sale("S1", 10, 2, channel="Website"),
        _sale("S2", 30, channel="Website"),
        _sale("S3", 60, channel="In-Store"),
    ]
    result = handlers.average_order(sales)

    assert "across all transactions is $36.67" in result.summary
    assert [row["Channel"] for row in result.table_data.rows] == ["In-Store", "Website"]
    assert result.table_data.rows[1]["Avg Order Value"] == "$25"


def test_recent_purchases_resolves_names_with_fallback() -> None:
    customers = [_customer("C001", name="Emma Wilson")]
    sales = [
        _sale("S1", 10, date="2024-01-10"),
        _sale("S2", 20, date="2024-01-20", customer_id="C999"),
        _sale("S3", 30, date="2024-01-15", category="B"),
    ]
    result = handlers.recent_purchases(sales, customers)

    rows = result.table_data.rows
    assert [row["Date"] for row in rows] == ["2024-01-20", "2024-01-15", "2024-01-10"]
    assert rows[0]["Customer"] == "C999"
    assert rows[1]["Customer"] == "Emma Wilson"
    assert "latest purchase was on 2024-01-20 for Product S2" in result.summary


def test_recent_purchases_caps_at_limit() -> None:
    sales = [_sale(f"S{i}", 10, date=f"2024-01-{i + 1:02d}") for i in range(15)]
    result = handlers.recent_purchases(sales, [])
    assert len(result.table_data.rows) == 10
    assert len(result.chart_data.data) == 5


def test_sales_trend_window_and_growth() -> None:
    trends = [_trend("Jan", 100), _trend("Feb", 200), _trend("Mar", 150)]
    result = handlers.sales_trend(trends, 2)

    assert [row["Month"] for row in result.table_data.rows] == ["Feb", "Mar"]
    assert "Revenue declined by 25% from Feb to Mar." in result.summary
    assert "Peak performance was in Feb." in result.summary
    assert "total revenue reached $350" in result.summary
    assert result.chart_data.type == "area"


def test_sales_trend_longer_window_than_data() -> None:
    trends = [_trend("Jan", 100), _trend("Feb", 150)]
    result = handlers.sales_trend(trends, 12)
    assert "Over the last 2 months" in result.summary
    assert "Revenue grew by 50% from Jan to Feb." in result.summary


def test_sales_trend_first_month_without_revenue() -> None:
    result = handlers.sales_trend([_trend("Jan", 0), _trend("Feb", 150)], 6)
    assert "cannot be computed" in result.summary


def test_total_revenue_growth_table() -> None:
    trends = [_trend("Jan 2024", 100), _trend("Feb 2024", 150), _trend("Mar 2024", 120)]
    result = handlers.total_revenue([_sale("S1", 10, 3)], trends)

    assert "is $370" in result.summary
    assert "shows $30 in transactions" in result.summary
    assert "Feb 2024 was the peak month at $150" in result.summary
    growth = [row["Growth"] for row in result.table_data.rows]
    assert growth == ["-", "50.0%", "-20.0%"]


def test_web_activity_summary() -> None:
    activity = [
        WebActivity(
            date="2024-01-01",
            page_views=1000,
            sessions=400,
            unique_visitors=300,
            bounce_rate=40,
            avg_session_duration=200,
            conversions=10,
        ),
        WebActivity(
            date="2024-01-02",
            page_views=3000,
            sessions=600,
            unique_visitors=500,
            bounce_rate=30,
            avg_session_duration=220,
            conversions=15,
        ),
    ]
    result = handlers.web_activity_summary(activity)

    assert "4,000 page views across 1,000 sessions" in result.summary
    assert "bounce rate is 35.0%" in result.summary
    assert "conversion rate of 2.50%" in result.summary
    assert "Peak traffic occurred on 2024-01-02" in result.summary
    assert result.chart_data.type == "line"


def test_empty_collections_return_insufficient_data() -> None:
    results = [
        handlers.top_customers([], 5),
        handlers.age_group_spending([]),
        handlers.age_order_correlation([]),
        handlers.customer_segments([]),
        handlers.location_analysis([]),
        handlers.customer_count([]),
        handlers.gender_distribution([]),
        handlers.category_revenue([]),
        handlers.top_products([], 5),
        handlers.top_products([_sale("S1", 10)], 0),
        handlers.channel_performance([]),
        handlers.average_order([]),
        handlers.recent_purchases([], []),
        handlers.sales_trend([], 6),
        handlers.sales_trend([_trend("Jan", 1)], 0),
        handlers.total_revenue([], []),
        handlers.web_activity_summary([]),
    ]
    for result in results:
        assert "not enough" in result.summary
        assert result.error is None
        assert result.table_data is None
        assert result.chart_data is None
        assert 1 <= len(result.suggestions) <= 5


def test_handlers_do_not_mutate_inputs() -> None:
    customers = [_customer("C0", 300), _customer("C1", 100)]
    snapshot = list(customers)
    handlers.top_customers(customers, 1)
    handlers.location_analysis(customers)
    assert customers == snapshot
