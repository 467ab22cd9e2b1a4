from __future__ import annotations

from insights.models import AnalysisContext, Customer, MarketTrend, Sale, UploadedData, WebActivity


def _customer(key, name, email, age, gender, location, segment, total_spent, orders, last_purchase, join_date):
    return Customer(
        id=key,
        name=name,
        email=email,
        age=age,
        gender=gender,
        location=location,
        segment=segment,
        total_spent=total_spent,
        orders_count=orders,
        last_purchase=last_purchase,
        join_date=join_date,
    )


def _sale(key, customer_id, product, category, amount, quantity, date, channel):
    return Sale(
        id=key,
        customer_id=customer_id,
        product=product,
        category=category,
        amount=amount,
        quantity=quantity,
        date=date,
        channel=channel,
    )


def _activity(date, page_views, sessions, unique_visitors, bounce_rate, duration, conversions):
    return WebActivity(
        date=date,
        page_views=page_views,
        sessions=sessions,
        unique_visitors=unique_visitors,
        bounce_rate=bounce_rate,
        avg_session_duration=duration,
        conversions=conversions,
    )


def _trend(month, revenue, customers, avg_order_value, return_rate):
    return MarketTrend(
        month=month,
        revenue=revenue,
        customers=customers,
        avg_order_value=avg_order_value,
        return_rate=return_rate,
    )


SAMPLE_CUSTOMERS: tuple[Customer, ...] = (
    _customer("C001", "Emma Wilson", "emma.w@email.com", 28, "Female", "New York", "Premium", 4520, 23, "2024-01-15", "2022-03-10"),
    _customer("C002", "James Chen", "j.chen@email.com", 35, "Male", "San Francisco", "Premium", 3890, 18, "2024-01-18", "2021-11-22"),
    _customer("C003", "Sofia Rodriguez", "s.rodriguez@email.com", 42, "Female", "Miami", "Regular", 1250, 8, "2024-01-10", "2023-02-14"),
    _customer("C004", "Michael Brown", "m.brown@email.com", 31, "Male", "Chicago", "Regular", 980, 6, "2024-01-12", "2023-05-08"),
    _customer("C005", "Olivia Davis", "o.davis@email.com", 26, "Female", "Los Angeles", "New", 320, 2, "2024-01-19", "2024-01-05"),
    _customer("C006", "William Lee", "w.lee@email.com", 45, "Male", "Seattle", "Premium", 5200, 28, "2024-01-17", "2021-06-30"),
    _customer("C007", "Ava Martinez", "a.martinez@email.com", 33, "Female", "Denver", "Regular", 1650, 11, "2024-01-14", "2022-09-18"),
    _customer("C008", "Alexander Kim", "a.kim@email.com", 29, "Male", "Boston", "New", 450, 3, "2024-01-16", "2023-12-01"),
    _customer("C009", "Isabella Johnson", "i.johnson@email.com", 38, "Female", "Austin", "Premium", 3100, 15, "2024-01-20", "2022-01-25"),
    _customer("C010", "Daniel Garcia", "d.garcia@email.com", 52, "Male", "Phoenix", "Regular", 890, 5, "2024-01-08", "2023-07-12"),
    _customer("C011", "Mia Thompson", "m.thompson@email.com", 24, "Female", "Portland", "New", 280, 2, "2024-01-18", "2024-01-10"),
    _customer("C012", "Ethan White", "e.white@email.com", 41, "Male", "Atlanta", "Regular", 1420, 9, "2024-01-11", "2022-11-05"),
    _customer("C013", "Charlotte Harris", "c.harris@email.com", 36, "Female", "Dallas", "Premium", 2850, 14, "2024-01-19", "2021-08-20"),
    _customer("C014", "Benjamin Clark", "b.clark@email.com", 48, "Male", "Houston", "Regular", 1100, 7, "2024-01-13", "2023-03-28"),
    _customer("C015", "Amelia Lewis", "a.lewis@email.com", 27, "Female", "Nashville", "New", 520, 4, "2024-01-17", "2023-11-15"),
)

SAMPLE_SALES: tuple[Sale, ...] = (
    _sale("S001", "C001", "Premium Headphones", "Electronics", 299, 1, "2024-01-15", "Website"),
    _sale("S002", "C002", "Smart Watch", "Electronics", 449, 1, "2024-01-18", "Mobile App"),
    _sale("S003", "C003", "Running Shoes", "Sports", 129, 1, "2024-01-10", "In-Store"),
    _sale("S004", "C001", "Wireless Charger", "Electronics", 59, 2, "2024-01-12", "Website"),
    _sale("S005", "C005", "Yoga Mat", "Sports", 45, 1, "2024-01-19", "Mobile App"),
    _sale("S006", "C006", "Laptop Stand", "Office", 89, 1, "2024-01-17", "Website"),
    _sale("S007", "C007", "Coffee Maker", "Home", 199, 1, "2024-01-14", "In-Store"),
    _sale("S008", "C002", "Bluetooth Speaker", "Electronics", 149, 1, "2024-01-16", "Website"),
    _sale("S009", "C009", "Desk Lamp", "Office", 79, 2, "2024-01-20", "Mobile App"),
    _sale("S010", "C004", "Water Bottle", "Sports", 35, 3, "2024-01-11", "In-Store"),
    _sale("S011", "C010", "Plant Pot Set", "Home", 65, 1, "2024-01-08", "Website"),
    _sale("S012", "C011", "Notebook Set", "Office", 28, 2, "2024-01-18", "Mobile App"),
    _sale("S013", "C013", "Smart Speaker", "Electronics", 179, 1, "2024-01-19", "Website"),
    _sale("S014", "C014", "Kitchen Scale", "Home", 49, 1, "2024-01-13", "In-Store"),
    _sale("S015", "C015", "Fitness Tracker", "Electronics", 129, 1, "2024-01-17", "Mobile App"),
)

# Last 14 days
SAMPLE_WEB_ACTIVITY: tuple[WebActivity, ...] = (
    _activity("2024-01-07", 12500, 4200, 3100, 42, 185, 156),
    _activity("2024-01-08", 14200, 4800, 3500, 38, 210, 189),
    _activity("2024-01-09", 13800, 4600, 3400, 40, 195, 172),
    _activity("2024-01-10", 15600, 5200, 3900, 35, 225, 215),
    _activity("2024-01-11", 14900, 5000, 3700, 37, 218, 198),
    _activity("2024-01-12", 16200, 5400, 4100, 34, 235, 245),
    _activity("2024-01-13", 18500, 6200, 4800, 32, 250, 298),
    _activity("2024-01-14", 17800, 5900, 4500, 33, 242, 278),
    _activity("2024-01-15", 15200, 5100, 3800, 36, 220, 205),
    _activity("2024-01-16", 14600, 4900, 3600, 39, 205, 185),
    _activity("2024-01-17", 16800, 5600, 4200, 35, 228, 235),
    _activity("2024-01-18", 19200, 6400, 5000, 31, 265, 320),
    _activity("2024-01-19", 21500, 7200, 5600, 29, 280, 385),
    _activity("2024-01-20", 20100, 6700, 5200, 30, 270, 352),
)

# Last 12 months
SAMPLE_MARKET_TRENDS: tuple[MarketTrend, ...] = (
    _trend("Feb 2023", 125000, 1200, 104, 8.2),
    _trend("Mar 2023", 138000, 1350, 102, 7.8),
    _trend("Apr 2023", 142000, 1400, 101, 7.5),
    _trend("May 2023", 155000, 1520, 102, 7.2),
    _trend("Jun 2023", 168000, 1650, 102, 6.9),
    _trend("Jul 2023", 175000, 1700, 103, 6.5),
    _trend("Aug 2023", 182000, 1750, 104, 6.8),
    _trend("Sep 2023", 195000, 1850, 105, 6.2),
    _trend("Oct 2023", 210000, 1980, 106, 5.9),
    _trend("Nov 2023", 245000, 2250, 109, 5.5),
    _trend("Dec 2023", 285000, 2580, 110, 5.8),
    _trend("Jan 2024", 198000, 1820, 109, 6.1),
)


def sample_context(uploaded_data: UploadedData | None = None) -> AnalysisContext:
    return AnalysisContext(
        customers=SAMPLE_CUSTOMERS,
        sales=SAMPLE_SALES,
        web_activity=SAMPLE_WEB_ACTIVITY,
        market_trends=SAMPLE_MARKET_TRENDS,
        uploaded_data=uploaded_data,
    )
