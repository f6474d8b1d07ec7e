import logging
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query, Response

from cloud_kitchen.application.exports import (
    CONTENT_TYPES,
    attachment_headers,
    export_customers,
    export_orders,
)
from cloud_kitchen.core.errors import NotFoundError
from cloud_kitchen.domain.schemas import (
    CustomerAnalytics,
    DashboardStats,
    ExportFormat,
    MessageResponse,
    OrderAnalytics,
    OrderFilters,
    OrderResponse,
    OrderStatusUpdate,
    PaymentUpdate,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)
from cloud_kitchen.interfaces.deps import (
    get_analytics_service,
    get_order_service,
    get_product_repo,
    order_filters,
    require_admin,
)

# Every route below requires an admin session.
router = APIRouter(dependencies=[Depends(require_admin)])
logger = logging.getLogger(__name__)

# Columns that may legitimately be cleared with an explicit null
NULLABLE_PRODUCT_FIELDS = {"sizes"}


# ---------------------------------------------------------
# MENU
# ---------------------------------------------------------

@router.post("/products", response_model=ProductResponse, status_code=201)
def create_product(payload: ProductCreate, repo=Depends(get_product_repo)):
    product = repo.create_product(payload.model_dump())
    logger.info("Admin created product: %s", product.name)
    return product


@router.put("/products/{product_id}", response_model=ProductResponse)
def update_product(product_id: int, payload: ProductUpdate, repo=Depends(get_product_repo)):
    changes = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or key in NULLABLE_PRODUCT_FIELDS
    }
    product = repo.update_product(product_id, changes)
    if product is None:
        raise NotFoundError("Product not found")
    logger.info("Admin updated product: %s", product.name)
    return product


@router.delete("/products/{product_id}", response_model=MessageResponse)
def delete_product(product_id: int, repo=Depends(get_product_repo)):
    if not repo.delete_product(product_id):
        raise NotFoundError("Product not found")
    logger.info("Admin deleted product ID: %s", product_id)
    return {"message": "Product deleted successfully"}


# ---------------------------------------------------------
# ORDERS
# ---------------------------------------------------------

@router.get("/orders", response_model=List[OrderResponse])
def list_orders(filters: OrderFilters = Depends(order_filters), service=Depends(get_order_service)):
    return service.list_orders(filters)


@router.get("/orders/export")
def export_order_list(
    fmt: ExportFormat = Query(..., alias="format"),
    filters: OrderFilters = Depends(order_filters),
    service=Depends(get_order_service),
):
    data = export_orders(service.list_orders(filters), fmt)
    return Response(
        content=data,
        media_type=CONTENT_TYPES[fmt],
        headers=attachment_headers("orders", fmt, date.today()),
    )


@router.put("/orders/{order_id}/status", response_model=OrderResponse)
def update_order_status(order_id: int, payload: OrderStatusUpdate, service=Depends(get_order_service)):
    return service.update_status(order_id, payload.status)


@router.put("/orders/{order_id}/payment", response_model=OrderResponse)
def update_order_payment(order_id: int, payload: PaymentUpdate, service=Depends(get_order_service)):
    return service.update_payment(order_id, payload.payment_status, payload.payment_reference)


# ---------------------------------------------------------
# ANALYTICS
# ---------------------------------------------------------

@router.get("/analytics/dashboard", response_model=DashboardStats)
def dashboard(analytics=Depends(get_analytics_service)):
    return analytics.dashboard_stats()


@router.get("/analytics/orders", response_model=OrderAnalytics)
def orders_analytics(analytics=Depends(get_analytics_service)):
    return analytics.orders_analytics()


@router.get("/analytics/customers", response_model=CustomerAnalytics)
def customer_analytics(analytics=Depends(get_analytics_service)):
    return analytics.customer_analytics()


@router.get("/customers/export")
def export_customer_list(
    fmt: ExportFormat = Query(..., alias="format"),
    analytics=Depends(get_analytics_service),
):
    data = export_customers(analytics.customer_analytics().customers, fmt)
    return Response(
        content=data,
        media_type=CONTENT_TYPES[fmt],
        headers=attachment_headers("customers", fmt, date.today()),
    )
