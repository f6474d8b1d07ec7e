from datetime import datetime
from typing import Annotated, Dict, List, Literal, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from cloud_kitchen.core.clock import as_utc
from cloud_kitchen.core.errors import ValidationError
from cloud_kitchen.domain.order_status import OrderStatus, PaymentStatus
from cloud_kitchen.domain.pricing import format_amount, to_decimal

UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]
ExportFormat = Literal["csv", "json"]


def _money(value) -> str:
    try:
        return format_amount(to_decimal(value))
    except ValidationError as e:
        raise ValueError(e.message)


Money = Annotated[str, BeforeValidator(_money)]


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# --- Products ---

class SizeVariant(CamelModel):
    label: str = Field(..., min_length=1)
    price: Money


class ProductCreate(CamelModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    price: Money
    category: str = Field(..., min_length=1)
    image_url: str = ""
    available: bool = True
    sizes: Optional[List[SizeVariant]] = None
    badges: List[str] = Field(default_factory=list)


class ProductUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[Money] = None
    category: Optional[str] = Field(None, min_length=1)
    image_url: Optional[str] = None
    available: Optional[bool] = None
    sizes: Optional[List[SizeVariant]] = None
    badges: Optional[List[str]] = None


class ProductResponse(CamelModel):
    id: int
    name: str
    description: str
    price: str
    category: str
    image_url: str
    available: bool
    sizes: Optional[List[SizeVariant]] = None
    badges: List[str] = Field(default_factory=list)


# --- Orders ---

class CookieConsent(CamelModel):
    marketing: bool = False
    analytics: bool = False
    timestamp: Optional[int] = None  # epoch millis from the browser


class OrderItemRequest(CamelModel):
    product_id: int
    quantity: int = Field(..., ge=1)
    selected_size: Optional[str] = None


class OrderCreateRequest(CamelModel):
    customer_name: str = Field(..., min_length=1)
    customer_phone: str = Field(..., min_length=1)
    customer_email: Optional[EmailStr] = None
    customer_address: str = Field(..., min_length=1)
    items: List[OrderItemRequest] = Field(..., min_length=1)
    cookie_consent: Optional[CookieConsent] = None

    @field_validator("customer_email", mode="before")
    @classmethod
    def _blank_email(cls, value):
        return value or None

    @field_validator("customer_name", "customer_phone", "customer_address")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class OrderItemResponse(CamelModel):
    id: int
    order_id: int
    product_id: int
    product_name: str
    quantity: int
    price_at_time: str
    selected_size: Optional[str] = None
    product: Optional[ProductResponse] = None
    # True when the referenced product has since been deleted
    stale: bool = False


class OrderSummary(CamelModel):
    id: int
    customer_name: str
    customer_phone: str
    customer_email: Optional[str] = None
    customer_address: str
    total_amount: str
    status: OrderStatus
    payment_status: PaymentStatus
    payment_reference: Optional[str] = None
    cookie_consent: Optional[CookieConsent] = None
    created_at: UTCDateTime
    updated_at: UTCDateTime


class OrderResponse(OrderSummary):
    items: List[OrderItemResponse] = Field(default_factory=list)


class OrderStatusUpdate(CamelModel):
    status: OrderStatus


class PaymentUpdate(CamelModel):
    payment_status: PaymentStatus
    payment_reference: Optional[str] = None


class OrderFilters(CamelModel):
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    customer_name: Optional[str] = None
    date_from: Optional[UTCDateTime] = None
    date_to: Optional[UTCDateTime] = None
    limit: int = Field(50, ge=1, le=500)
    offset: int = Field(0, ge=0)


class TrackingResponse(CamelModel):
    id: int
    status: OrderStatus
    estimated_time: int
    current_step: str
    pos_system_id: Optional[str] = None
    updated_at: UTCDateTime


# --- Analytics ---

class DashboardStats(CamelModel):
    total_revenue: float
    total_orders: int
    pending_orders: int
    completed_orders: int
    revenue_growth: float
    orders_growth: float


class MonthlyRevenue(CamelModel):
    month: str  # YYYY-MM
    revenue: float


class OrderAnalytics(CamelModel):
    total_revenue: float
    total_orders: int
    average_order_value: float
    orders_by_status: Dict[str, int]
    revenue_by_month: List[MonthlyRevenue]


class CustomerInsight(CamelModel):
    customer_phone: str
    customer_name: str
    customer_email: Optional[str] = None
    total_orders: int
    total_spent: float
    last_order_date: UTCDateTime
    days_since_last_order: int
    average_order_value: float
    is_inactive: bool


class CustomerAnalytics(CamelModel):
    total_customers: int
    active_customers: int
    inactive_customers: int
    customers: List[CustomerInsight]


# --- Auth ---

class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: Optional[str] = None


class LoginRequest(CamelModel):
    # Looked up case-insensitively; format is only checked at registration
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class PublicUser(CamelModel):
    id: int
    email: str
    name: Optional[str] = None
    role: str
    created_at: UTCDateTime


class Principal(CamelModel):
    """The authenticated caller, resolved once per request."""

    user_id: int
    email: str
    role: str
    token_id: str
    expires_at: UTCDateTime

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


# --- Misc ---

class MessageResponse(CamelModel):
    message: str


class PromoRequest(CamelModel):
    code: str = Field(..., min_length=1)


class PromoResponse(CamelModel):
    code: str
    discount: int
    is_percentage: bool
