import json
import logging
from typing import Dict, Iterable, List, Optional

import pytz

from cloud_kitchen.core.clock import as_utc
from cloud_kitchen.core.errors import InvalidTransitionError, NotFoundError, ValidationError
from cloud_kitchen.domain.models import Order, Product
from cloud_kitchen.domain.order_status import ESTIMATED_MINUTES, OrderStatus, PaymentStatus, assert_transition
from cloud_kitchen.domain.phone import normalize_phone
from cloud_kitchen.domain.pricing import format_amount, order_total, unit_price
from cloud_kitchen.domain.schemas import (
    OrderCreateRequest,
    OrderFilters,
    OrderItemResponse,
    OrderResponse,
    ProductResponse,
    TrackingResponse,
)
from cloud_kitchen.interfaces.IOrderRepository import IOrderRepository
from cloud_kitchen.interfaces.IProductRepository import IProductRepository

logger = logging.getLogger(__name__)
privacy_logger = logging.getLogger("cloud_kitchen.privacy")


def to_order_response(order: Order, products: Dict[int, Product]) -> OrderResponse:
    """Attach catalog products to each line.

    Lines whose product was deleted are kept and flagged ``stale``; their
    snapshot name and priceAtTime remain the record of what was sold.
    """
    items = []
    for item in order.items:
        product = products.get(item.product_id)
        items.append(
            OrderItemResponse(
                id=item.id,
                order_id=item.order_id,
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                price_at_time=item.price_at_time,
                selected_size=item.selected_size,
                product=ProductResponse.model_validate(product) if product else None,
                stale=product is None,
            )
        )
    return OrderResponse(
        id=order.id,
        customer_name=order.customer_name,
        customer_phone=order.customer_phone,
        customer_email=order.customer_email,
        customer_address=order.customer_address,
        total_amount=order.total_amount,
        status=order.status,
        payment_status=order.payment_status,
        payment_reference=order.payment_reference,
        cookie_consent=order.cookie_consent,
        created_at=order.created_at,
        updated_at=order.updated_at,
        items=items,
    )


def _product_ids(orders: Iterable[Order]) -> set:
    return {item.product_id for order in orders for item in order.items}


class OrderService:
    def __init__(
        self,
        product_repo: IProductRepository,
        order_repo: IOrderRepository,
        notifier=None,
        default_country_code: str = "91",
        business_timezone: str = "Asia/Kolkata",
        pos_system_id: Optional[str] = None,
    ):
        self.product_repo = product_repo
        self.order_repo = order_repo
        self.notifier = notifier
        self.default_country_code = default_country_code
        self.timezone = pytz.timezone(business_timezone)
        self.pos_system_id = pos_system_id

    # ---------------------------------------------------------
    # CREATE
    # ---------------------------------------------------------

    def create_order(self, request: OrderCreateRequest) -> OrderResponse:
        """Price the order from the catalog and persist it atomically.

        Every referenced product is resolved before anything is written, so an
        unknown id aborts the whole order and no row is created. Client-side
        prices are never read.
        """
        phone_key = normalize_phone(request.customer_phone, self.default_country_code)

        products = self.product_repo.get_products(item.product_id for item in request.items)
        for item in request.items:
            if item.product_id not in products:
                raise NotFoundError(f"Product {item.product_id} not found", field="items")

        lines, priced = [], []
        for item in request.items:
            product = products[item.product_id]
            if not product.available:
                raise ValidationError(f"{product.name} is currently unavailable", field="items")
            price = unit_price(product, item.selected_size)
            lines.append({
                "product_id": product.id,
                "product_name": product.name,
                "quantity": item.quantity,
                "price_at_time": format_amount(price),
                "selected_size": item.selected_size,
            })
            priced.append((price, item.quantity))

        total = order_total(priced)
        consent = request.cookie_consent.model_dump() if request.cookie_consent else None

        order = self.order_repo.create_order(
            {
                "customer_name": request.customer_name,
                "customer_phone": request.customer_phone,
                "customer_phone_normalized": phone_key,
                "customer_email": request.customer_email,
                "customer_address": request.customer_address,
                "total_amount": format_amount(total),
                "status": OrderStatus.PENDING.value,
                "payment_status": PaymentStatus.UNPAID.value,
                "cookie_consent": consent,
            },
            lines,
        )
        logger.info("Order %s created for %s: %d item(s), total %s",
                    order.id, phone_key, len(lines), order.total_amount)
        if consent:
            privacy_logger.info("Order %s consent for %s: %s", order.id, phone_key, json.dumps(consent))

        if self.notifier is not None:
            self.notifier.notify_admin_new_order(order)

        return to_order_response(order, products)

    # ---------------------------------------------------------
    # READ
    # ---------------------------------------------------------

    def get_order(self, order_id: int) -> OrderResponse:
        order = self._load(order_id)
        products = self.product_repo.get_products(_product_ids([order]))
        return to_order_response(order, products)

    def list_orders(self, filters: OrderFilters) -> List[OrderResponse]:
        orders = self.order_repo.list_orders(filters)
        # One product lookup for the whole page
        products = self.product_repo.get_products(_product_ids(orders))
        return [to_order_response(order, products) for order in orders]

    def tracking(self, order_id: int) -> TrackingResponse:
        order = self._load(order_id)
        status = OrderStatus(order.status)
        local_time = as_utc(order.updated_at).astimezone(self.timezone).strftime("%H:%M:%S")
        return TrackingResponse(
            id=order.id,
            status=status,
            estimated_time=ESTIMATED_MINUTES[status],
            current_step=f"{status.value} - {local_time}",
            pos_system_id=self.pos_system_id,
            updated_at=order.updated_at,
        )

    # ---------------------------------------------------------
    # UPDATE
    # ---------------------------------------------------------

    def update_status(self, order_id: int, status: OrderStatus) -> OrderResponse:
        order = self._load(order_id)
        target = assert_transition(order.status, OrderStatus(status).value)

        updated = self.order_repo.update_status(order_id, order.status, target.value)
        if updated is None:
            # Someone else moved the order between our read and write
            current = self._load(order_id)
            raise InvalidTransitionError(current.status, target.value)

        logger.info("Order %s status %s -> %s", order_id, order.status, target.value)
        products = self.product_repo.get_products(_product_ids([updated]))
        return to_order_response(updated, products)

    def update_payment(self, order_id: int, payment_status: PaymentStatus,
                       reference: Optional[str] = None) -> OrderResponse:
        updated = self.order_repo.update_payment(order_id, PaymentStatus(payment_status).value, reference)
        if updated is None:
            raise NotFoundError("Order not found")
        logger.info("Order %s payment status set to %s", order_id, updated.payment_status)
        products = self.product_repo.get_products(_product_ids([updated]))
        return to_order_response(updated, products)

    def _load(self, order_id: int) -> Order:
        order = self.order_repo.get_order(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order
