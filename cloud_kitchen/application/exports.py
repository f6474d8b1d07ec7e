import csv
import io
import json
from datetime import date
from typing import List, Sequence

from cloud_kitchen.domain.schemas import CustomerInsight, OrderResponse

ORDER_HEADERS = [
    "Order ID", "Customer Name", "Phone", "Email", "Address",
    "Total Amount", "Status", "Payment Status", "Created At", "Items",
]
CUSTOMER_HEADERS = [
    "Phone", "Name", "Email", "Total Orders", "Total Spent",
    "Avg Order Value", "Last Order", "Days Since Last Order", "Status",
]

CONTENT_TYPES = {"csv": "text/csv", "json": "application/json"}


def _to_json(models: Sequence) -> str:
    return json.dumps([m.model_dump(mode="json", by_alias=True) for m in models], indent=2)


def _to_csv(headers: List[str], rows: List[list]) -> str:
    # QUOTE_MINIMAL quotes any field holding a comma, quote or newline and
    # doubles embedded quotes, so the file parses back to the same strings.
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    return buffer.getvalue()


def item_summary(order: OrderResponse) -> str:
    return ", ".join(f"{item.quantity}x {item.product_name}" for item in order.items)


def export_orders(orders: List[OrderResponse], fmt: str) -> str:
    if fmt == "json":
        return _to_json(orders)
    rows = [
        [
            order.id,
            order.customer_name,
            order.customer_phone,
            order.customer_email or "",
            order.customer_address,
            order.total_amount,
            order.status.value,
            order.payment_status.value,
            order.created_at.isoformat(),
            item_summary(order),
        ]
        for order in orders
    ]
    return _to_csv(ORDER_HEADERS, rows)


def export_customers(customers: List[CustomerInsight], fmt: str) -> str:
    if fmt == "json":
        return _to_json(customers)
    rows = [
        [
            c.customer_phone,
            c.customer_name,
            c.customer_email or "",
            c.total_orders,
            f"{c.total_spent:.2f}",
            f"{c.average_order_value:.2f}",
            c.last_order_date.isoformat(),
            c.days_since_last_order,
            "Inactive" if c.is_inactive else "Active",
        ]
        for c in customers
    ]
    return _to_csv(CUSTOMER_HEADERS, rows)


def attachment_headers(kind: str, fmt: str, today: date) -> dict:
    return {
        "Content-Disposition": f"attachment; filename={kind}-{today.isoformat()}.{fmt}",
    }
