from datetime import datetime
from typing import Optional

from fastapi import Depends, Query, Request

from cloud_kitchen.application.analytics import AnalyticsService
from cloud_kitchen.application.auth_service import AuthService
from cloud_kitchen.application.order_service import OrderService
from cloud_kitchen.core.config import settings
from cloud_kitchen.core.errors import AuthenticationError, AuthorizationError
from cloud_kitchen.domain.order_status import OrderStatus, PaymentStatus
from cloud_kitchen.domain.schemas import OrderFilters, Principal
from cloud_kitchen.interfaces.IProductRepository import IProductRepository

# Services are wired once in the composition root (main.create_app) and
# handed to endpoints from app.state.


def get_product_repo(request: Request) -> IProductRepository:
    return request.app.state.product_repo


def get_order_service(request: Request) -> OrderService:
    return request.app.state.order_service


def get_analytics_service(request: Request) -> AnalyticsService:
    return request.app.state.analytics_service


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_principal(request: Request, auth: AuthService = Depends(get_auth_service)) -> Optional[Principal]:
    """Resolve the session cookie into the caller for this request only."""
    principal = auth.resolve_principal(request.cookies.get(settings.SESSION_COOKIE_NAME))
    request.state.principal = principal
    return principal


def require_user(principal: Optional[Principal] = Depends(get_principal)) -> Principal:
    if principal is None:
        raise AuthenticationError()
    return principal


def require_admin(principal: Principal = Depends(require_user)) -> Principal:
    if not principal.is_admin:
        raise AuthorizationError()
    return principal


def order_filters(
    status: Optional[OrderStatus] = None,
    payment_status: Optional[PaymentStatus] = Query(None, alias="paymentStatus"),
    customer_name: Optional[str] = Query(None, alias="customerName"),
    date_from: Optional[datetime] = Query(None, alias="dateFrom"),
    date_to: Optional[datetime] = Query(None, alias="dateTo"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> OrderFilters:
    return OrderFilters(
        status=status,
        payment_status=payment_status,
        customer_name=customer_name or None,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
        offset=offset,
    )
