import json
import logging
from typing import Optional

from fastapi import APIRouter, Body

router = APIRouter()
logger = logging.getLogger(__name__)

# Placeholders for the Petpooja POS hand-off; nothing is forwarded yet.


@router.post("/petpooja/init")
def petpooja_init(payload: Optional[dict] = Body(None)):
    payload = payload or {}
    logger.info("Petpooja init requested: %s", json.dumps(payload))
    return {"message": "Petpooja integration placeholder received", "received": payload}


@router.get("/petpooja/status")
def petpooja_status():
    return {"status": "stub", "message": "Petpooja integration not configured"}
