import json
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends

from cloud_kitchen.domain.promotions import validate_promo
from cloud_kitchen.domain.schemas import (
    OrderCreateRequest,
    OrderResponse,
    PromoRequest,
    PromoResponse,
    TrackingResponse,
)
from cloud_kitchen.interfaces.deps import get_order_service

router = APIRouter()
privacy_logger = logging.getLogger("cloud_kitchen.privacy")


@router.post("/orders", response_model=OrderResponse, status_code=201)
def create_order(payload: OrderCreateRequest, service=Depends(get_order_service)):
    return service.create_order(payload)


@router.get("/orders/{order_id}", response_model=OrderResponse)
def get_order(order_id: int, service=Depends(get_order_service)):
    return service.get_order(order_id)


@router.get("/orders/{order_id}/tracking", response_model=TrackingResponse)
def track_order(order_id: int, service=Depends(get_order_service)):
    """Polling-friendly status snapshot for the order-success page."""
    return service.tracking(order_id)


@router.post("/promos/validate", response_model=PromoResponse)
def check_promo(payload: PromoRequest):
    return validate_promo(payload.code)


@router.post("/consent")
def record_consent(payload: Optional[dict] = Body(None)):
    # Audit trail only; consent given at checkout is stored on the order.
    privacy_logger.info("Consent received: %s", json.dumps(payload or {}))
    return {"ok": True}
