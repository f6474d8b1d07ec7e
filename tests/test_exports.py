import csv
import io
import json
from datetime import date, datetime, timezone

from cloud_kitchen.application.exports import (
    CUSTOMER_HEADERS,
    ORDER_HEADERS,
    attachment_headers,
    export_customers,
    export_orders,
    item_summary,
)
from cloud_kitchen.domain.schemas import CustomerInsight, OrderFilters


def _rows(text):
    return list(csv.reader(io.StringIO(text)))


def test_order_csv_survives_commas_and_quotes(make_product, place_order, order_service):
    rice = make_product("Mandi Rice", "120")
    place_order(
        [(rice, 2)],
        name='Asha "Chef" Rao',
        address="Flat 4, 12 MG Road\nBengaluru",
    )

    text = export_orders(order_service.list_orders(OrderFilters()), "csv")
    rows = _rows(text)

    assert rows[0] == ORDER_HEADERS
    assert len(rows) == 2
    record = dict(zip(ORDER_HEADERS, rows[1]))
    assert record["Customer Name"] == 'Asha "Chef" Rao'
    assert record["Address"] == "Flat 4, 12 MG Road\nBengaluru"
    assert record["Total Amount"] == "240"
    assert record["Status"] == "pending"
    assert record["Payment Status"] == "unpaid"
    assert record["Items"] == "2x Mandi Rice"


def test_order_json_uses_wire_names(make_product, place_order, order_service):
    rice = make_product("Mandi Rice", "120")
    order = place_order([(rice, 1)], customer_email="asha@example.com")

    data = json.loads(export_orders(order_service.list_orders(OrderFilters()), "json"))

    assert data[0]["id"] == order.id
    assert data[0]["customerEmail"] == "asha@example.com"
    assert data[0]["totalAmount"] == "120"
    assert data[0]["items"][0]["priceAtTime"] == "120"


def test_item_summary_lists_every_line(make_product, place_order):
    rice = make_product("Mandi Rice", "120")
    cola = make_product("Craft Cola", "60")
    order = place_order([(rice, 1), (cola, 3)])
    assert item_summary(order) == "1x Mandi Rice, 3x Craft Cola"


def test_customer_csv():
    customer = CustomerInsight(
        customer_phone="+919876543210",
        customer_name="Rao, Asha",
        customer_email=None,
        total_orders=3,
        total_spent=450,
        last_order_date=datetime(2026, 10, 1, tzinfo=timezone.utc),
        days_since_last_order=17,
        average_order_value=150,
        is_inactive=False,
    )

    rows = _rows(export_customers([customer], "csv"))

    assert rows[0] == CUSTOMER_HEADERS
    record = dict(zip(CUSTOMER_HEADERS, rows[1]))
    assert record["Name"] == "Rao, Asha"
    assert record["Email"] == ""
    assert record["Total Spent"] == "450.00"
    assert record["Avg Order Value"] == "150.00"
    assert record["Status"] == "Active"


def test_empty_exports_still_have_headers():
    assert _rows(export_orders([], "csv")) == [ORDER_HEADERS]
    assert json.loads(export_customers([], "json")) == []


def test_attachment_filename():
    headers = attachment_headers("orders", "csv", date(2026, 10, 18))
    assert headers["Content-Disposition"] == "attachment; filename=orders-2026-10-18.csv"
