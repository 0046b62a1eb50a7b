import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Request

from copisteria.models.options import OrderOptions
from copisteria.services.pricing import calculate_price, estimate_price

logger = logging.getLogger(__name__)
router = APIRouter()

FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def _read_options_body(request: Request) -> Dict[str, Any]:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_TYPES):
        form = await request.form()
        return dict(form)

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        payload = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Richiesta non valida: JSON malformato")
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Richiesta non valida: atteso un oggetto JSON")
    return payload


@router.post("/quote")
async def quote(request: Request):
    """Live price for a set of print options. Unknown or bad values use defaults."""
    body = await _read_options_body(request)
    options = OrderOptions.from_raw(body)
    total = calculate_price(options)
    logger.debug("Quote for %s => %s", options.as_dict(), total)
    return {"total": total}


@router.post("/quote/breakdown")
async def quote_breakdown(request: Request):
    body = await _read_options_body(request)
    return estimate_price(OrderOptions.from_raw(body))
