import secrets
import string
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlmodel import Field, SQLModel

from copisteria.models.options import OrderOptions

_BASE36 = string.digits + string.ascii_lowercase


def new_order_id() -> str:
    """``ORD-<epoch millis>-<6 base36 chars>``."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"ORD-{int(time.time() * 1000)}-{suffix}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CustomerInfo(SQLModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    notes: str = ""


class StoredFile(SQLModel):
    filename: str
    originalname: str
    size: int
    mimetype: str


class Order(SQLModel, table=True):
    __tablename__ = "orders"

    id: str = Field(default_factory=new_order_id, primary_key=True)
    created_at: datetime = Field(default_factory=_utcnow, index=True)

    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    customer_address: str = ""
    notes: str = ""

    pages: int = 1
    copies: int = 1
    color: str = "bw"
    sides: str = "single"
    binding: str = "none"
    paper: str = "80"
    cover: str = "none"
    delivery: str = "ritiro"
    speed: str = "standard"

    total: float = 0.0

    file_name: Optional[str] = None
    file_original_name: Optional[str] = None
    file_size: Optional[int] = None
    file_mimetype: Optional[str] = None

    status: str = "received"

    @classmethod
    def build(
        cls,
        options: OrderOptions,
        customer: CustomerInfo,
        total: float,
        file: Optional[StoredFile] = None,
    ) -> "Order":
        order = cls(
            customer_name=customer.name,
            customer_email=customer.email,
            customer_phone=customer.phone,
            customer_address=customer.address,
            notes=customer.notes,
            total=total,
            **options.as_dict(),
        )
        if file is not None:
            order.file_name = file.filename
            order.file_original_name = file.originalname
            order.file_size = file.size
            order.file_mimetype = file.mimetype
        return order

    def to_public(self) -> Dict[str, Any]:
        """Nested JSON shape returned by the API and written by the JSON store."""
        created = self.created_at
        if created.tzinfo is None:
            # sqlite drops the offset; timestamps are always stored in UTC
            created = created.replace(tzinfo=timezone.utc)
        file_info = None
        if self.file_name:
            file_info = {
                "filename": self.file_name,
                "originalname": self.file_original_name,
                "size": self.file_size,
                "mimetype": self.file_mimetype,
            }
        return {
            "id": self.id,
            "createdAt": created.isoformat().replace("+00:00", "Z"),
            "customer": {
                "name": self.customer_name,
                "email": self.customer_email,
                "phone": self.customer_phone,
                "address": self.customer_address,
                "notes": self.notes,
            },
            "options": {
                "pages": self.pages,
                "copies": self.copies,
                "color": self.color,
                "sides": self.sides,
                "binding": self.binding,
                "paper": self.paper,
                "cover": self.cover,
                "delivery": self.delivery,
                "speed": self.speed,
            },
            "total": self.total,
            "file": file_info,
            "status": self.status,
        }
