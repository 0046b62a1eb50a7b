import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, UploadFile

from copisteria.db.store import OrderStore, get_order_store
from copisteria.models.options import OrderOptions
from copisteria.models.order import CustomerInfo
from copisteria.services.intake import notification_payload, submit_order
from copisteria.services.notifier import OrderNotifier, get_notifier
from copisteria.services.uploads import UploadRejected, discard_upload, save_upload

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/order")
async def create_order(
    background_tasks: BackgroundTasks,
    pages: Optional[str] = Form(None),
    copies: Optional[str] = Form(None),
    color: Optional[str] = Form(None),
    sides: Optional[str] = Form(None),
    binding: Optional[str] = Form(None),
    paper: Optional[str] = Form(None),
    cover: Optional[str] = Form(None),
    delivery: Optional[str] = Form(None),
    speed: Optional[str] = Form(None),
    name: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    address: str = Form(""),
    notes: str = Form(""),
    file: Optional[UploadFile] = File(None),
    store: OrderStore = Depends(get_order_store),
    notifier: OrderNotifier = Depends(get_notifier),
):
    """Accept an order form with an optional PDF/DOC/DOCX and persist it with its total."""
    options = OrderOptions.from_raw({
        "pages": pages,
        "copies": copies,
        "color": color,
        "sides": sides,
        "binding": binding,
        "paper": paper,
        "cover": cover,
        "delivery": delivery,
        "speed": speed,
    })
    customer = CustomerInfo(name=name, email=email, phone=phone, address=address, notes=notes)

    stored_file = None
    # browsers send an empty part when no file was chosen
    if file is not None and file.filename:
        try:
            stored_file = await save_upload(file)
        except UploadRejected as e:
            raise HTTPException(status_code=400, detail=str(e))
        except OSError as e:
            logger.exception("Failed to store upload %s: %s", file.filename, e)
            raise HTTPException(status_code=400, detail="Errore invio ordine")
        finally:
            await file.close()

    try:
        order = submit_order(store, options, customer, stored_file)
    except Exception as e:
        logger.exception("Failed to persist order: %s", e)
        if stored_file is not None:
            discard_upload(stored_file.filename)
        raise HTTPException(status_code=400, detail="Errore invio ordine")

    if notifier.enabled:
        background_tasks.add_task(notifier.notify, notification_payload(order))

    return {"ok": True, "id": order.id, "total": order.total}


@router.get("/orders")
def list_orders(store: OrderStore = Depends(get_order_store)):
    try:
        return store.list_orders()
    except Exception as e:
        logger.exception("Failed to read orders: %s", e)
        raise HTTPException(status_code=500, detail="Impossibile leggere gli ordini")
