import re
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")

# keeps every total finite; no real order comes close
MAX_COUNT = 1_000_000


class ColorMode(str, Enum):
    bw = "bw"
    color = "color"


class Sides(str, Enum):
    single = "single"
    double = "double"


class Binding(str, Enum):
    none = "none"
    spiral = "spiral"
    termica = "termica"


class Paper(str, Enum):
    g80 = "80"
    g100 = "100"


class Cover(str, Enum):
    none = "none"
    trasparente = "trasparente"
    rigida = "rigida"


class Delivery(str, Enum):
    ritiro = "ritiro"
    spedizione = "spedizione"


class Speed(str, Enum):
    standard = "standard"
    express = "express"


def parse_int(value: Any, default: int = 1) -> int:
    """Parse the leading integer of ``value``; return ``default`` when there is none."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return default
        return int(value)
    if isinstance(value, str):
        m = LEADING_INT_RE.match(value)
        if m:
            try:
                return int(m.group(1))
            except ValueError:
                # more digits than int() accepts
                return default
    return default


class OrderOptions(BaseModel):
    """Print-job options, normalized once at the HTTP boundary.

    Every field accepts untrusted input: counts are parsed and clamped to
    ``1..MAX_COUNT``, and values outside an option's set fall back to its default.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    pages: int = 1
    copies: int = 1
    color: ColorMode = ColorMode.bw
    sides: Sides = Sides.single
    binding: Binding = Binding.none
    paper: Paper = Paper.g80
    cover: Cover = Cover.none
    delivery: Delivery = Delivery.ritiro
    speed: Speed = Speed.standard

    @field_validator("pages", "copies", mode="before")
    @classmethod
    def _coerce_count(cls, v: Any) -> int:
        # 0 and "" count as missing, as the order form sends them for blank inputs
        return min(MAX_COUNT, max(1, parse_int(v or 1)))

    @field_validator("color", "sides", "binding", "paper", "cover", "delivery", "speed", mode="before")
    @classmethod
    def _coerce_choice(cls, v: Any, info: ValidationInfo) -> Enum:
        field = cls.model_fields[info.field_name]
        choices = field.annotation
        if isinstance(v, choices):
            return v
        if v is None or isinstance(v, (bool, dict, list)):
            return field.default
        try:
            return choices(str(v))
        except ValueError:
            return field.default

    @classmethod
    def from_raw(cls, data: Optional[Mapping[str, Any]]) -> "OrderOptions":
        if not data:
            return cls()
        return cls.model_validate({k: data[k] for k in cls.model_fields if k in data})

    def as_dict(self) -> dict:
        return self.model_dump(mode="json")
