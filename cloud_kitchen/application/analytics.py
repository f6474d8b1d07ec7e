"""On-demand rollups for the admin dashboard.

Nothing here is materialized: every call re-reads the orders table, so the
numbers are always as fresh as the last committed order.
"""
import calendar
import logging
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Callable

import pytz

from cloud_kitchen.core.clock import as_utc, utcnow
from cloud_kitchen.domain.schemas import (
    CustomerAnalytics,
    CustomerInsight,
    DashboardStats,
    MonthlyRevenue,
    OrderAnalytics,
)
from cloud_kitchen.interfaces.IOrderRepository import IOrderRepository

logger = logging.getLogger(__name__)

WINDOW_DAYS = 30
INACTIVE_AFTER_DAYS = 30
REVENUE_MONTHS = 6


def growth_percent(current: float, previous: float) -> float:
    """Period-over-period change; 0 when the previous period had nothing."""
    if previous <= 0:
        return 0.0
    return round((current - previous) / previous * 100, 2)


def months_before(moment: datetime, months: int) -> datetime:
    """Same wall-clock moment ``months`` calendar months earlier (day clamped)."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class AnalyticsService:
    def __init__(
        self,
        order_repo: IOrderRepository,
        clock: Callable[[], datetime] = utcnow,
        business_timezone: str = "Asia/Kolkata",
    ):
        self.order_repo = order_repo
        self.clock = clock
        self.timezone = pytz.timezone(business_timezone)

    def dashboard_stats(self) -> DashboardStats:
        now = self.clock()
        window_start = now - timedelta(days=WINDOW_DAYS)
        previous_start = now - timedelta(days=2 * WINDOW_DAYS)

        current = self.order_repo.window_totals(window_start)
        previous = self.order_repo.window_totals(previous_start, window_start)

        return DashboardStats(
            total_revenue=round(current["revenue"], 2),
            total_orders=current["orders"],
            pending_orders=current["pending"],
            completed_orders=current["completed"],
            revenue_growth=growth_percent(current["revenue"], previous["revenue"]),
            orders_growth=growth_percent(current["orders"], previous["orders"]),
        )

    def orders_analytics(self) -> OrderAnalytics:
        total_revenue, total_orders = self.order_repo.all_time_totals()
        average = total_revenue / total_orders if total_orders else 0.0

        return OrderAnalytics(
            total_revenue=round(total_revenue, 2),
            total_orders=total_orders,
            average_order_value=round(average, 2),
            orders_by_status=self.order_repo.status_counts(),
            revenue_by_month=self._revenue_by_month(),
        )

    def _revenue_by_month(self):
        # Months with no orders are left out rather than zero-filled.
        since = months_before(self.clock(), REVENUE_MONTHS)
        buckets = OrderedDict()
        for created_at, amount in self.order_repo.revenue_rows_since(since):
            month = as_utc(created_at).astimezone(self.timezone).strftime("%Y-%m")
            buckets[month] = buckets.get(month, 0.0) + amount
        return [
            MonthlyRevenue(month=month, revenue=round(revenue, 2))
            for month, revenue in sorted(buckets.items())
        ]

    def customer_analytics(self) -> CustomerAnalytics:
        now = self.clock()
        customers = []
        for row in self.order_repo.customer_rollups():
            last_order = as_utc(row["last_order_date"])
            days_since = max((now - last_order).days, 0)
            total_orders = row["total_orders"]
            total_spent = row["total_spent"]
            customers.append(
                CustomerInsight(
                    customer_phone=row["customer_phone"],
                    customer_name=row["customer_name"],
                    customer_email=row["customer_email"],
                    total_orders=total_orders,
                    total_spent=round(total_spent, 2),
                    last_order_date=last_order,
                    days_since_last_order=days_since,
                    average_order_value=round(total_spent / total_orders, 2) if total_orders else 0.0,
                    is_inactive=days_since >= INACTIVE_AFTER_DAYS,
                )
            )

        inactive = sum(1 for c in customers if c.is_inactive)
        logger.debug("Customer analytics: %d customers, %d inactive", len(customers), inactive)
        return CustomerAnalytics(
            total_customers=len(customers),
            active_customers=len(customers) - inactive,
            inactive_customers=inactive,
            customers=customers,
        )
