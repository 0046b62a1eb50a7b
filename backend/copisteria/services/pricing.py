import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Mapping, Union

from copisteria.models.options import (
    Binding,
    ColorMode,
    Cover,
    Delivery,
    OrderOptions,
    Paper,
    Sides,
    Speed,
)

CENT = Decimal("0.01")


def round_money(value: float) -> float:
    """Round half-up to the cent, working from the float's shortest repr."""
    return float(Decimal(repr(value)).quantize(CENT, rounding=ROUND_HALF_UP))


class PriceEngine:
    """Rule-based pricing for copy-shop orders (EUR)."""

    PAGE_RATE = {
        ColorMode.bw: 0.05,  # per sheet
        ColorMode.color: 0.20,
    }

    PAPER_SURCHARGE = {
        Paper.g80: 0.0,
        Paper.g100: 0.01,
    }

    BINDING_COST = {
        Binding.none: 0.0,  # per copy
        Binding.spiral: 2.0,
        Binding.termica: 4.0,
    }

    COVER_COST = {
        Cover.none: 0.0,  # per copy
        Cover.trasparente: 1.5,
        Cover.rigida: 6.0,
    }

    SHIPPING_COST = {
        Delivery.ritiro: 0.0,
        Delivery.spedizione: 6.9,
    }

    EXPRESS_MULTIPLIER = 1.2
    MINIMUM_ORDER = 3.0

    def _sheets(self, opts: OrderOptions) -> int:
        if opts.sides == Sides.double:
            return math.ceil(opts.pages / 2)
        return opts.pages

    def estimate(self, options: Union[OrderOptions, Mapping[str, Any], None]) -> Dict[str, Any]:
        opts = options if isinstance(options, OrderOptions) else OrderOptions.from_raw(options)

        sheets = self._sheets(opts)
        sheet_rate = self.PAGE_RATE[opts.color] + self.PAPER_SURCHARGE[opts.paper]
        printing = sheet_rate * sheets * opts.copies
        binding = self.BINDING_COST[opts.binding] * opts.copies
        cover = self.COVER_COST[opts.cover] * opts.copies

        base = printing + binding + cover
        subtotal = base
        if opts.speed == Speed.express:
            subtotal *= self.EXPRESS_MULTIPLIER

        shipping = self.SHIPPING_COST[opts.delivery]
        # the minimum applies before shipping is added
        total = max(self.MINIMUM_ORDER, subtotal) + shipping

        return {
            "options": opts.as_dict(),
            "sheets": sheets,
            "sheet_rate": round_money(sheet_rate),
            "printing_cost": round_money(printing),
            "binding_cost": round_money(binding),
            "cover_cost": round_money(cover),
            "express_surcharge": round_money(subtotal - base),
            "subtotal": round_money(subtotal),
            "minimum_adjustment": round_money(max(0.0, self.MINIMUM_ORDER - subtotal)),
            "shipping": shipping,
            "total": round_money(total),
        }


_engine = PriceEngine()


def calculate_price(options: Union[OrderOptions, Mapping[str, Any], None]) -> float:
    """Total price for ``options``; never raises for a mapping or ``None``."""
    return _engine.estimate(options)["total"]


def estimate_price(options: Union[OrderOptions, Mapping[str, Any], None]) -> Dict[str, Any]:
    """Itemized quote for ``options``."""
    return _engine.estimate(options)
