"""
Quote calculator: pricing rules, ordering of surcharges, minimum order, rounding.
"""

import itertools
import math

import pytest

from copisteria.models.options import (
    MAX_COUNT,
    Binding,
    ColorMode,
    Cover,
    Delivery,
    OrderOptions,
    Paper,
    Sides,
    Speed,
)
from copisteria.services.pricing import PriceEngine, calculate_price, round_money


def test_empty_options_hit_minimum_order():
    assert calculate_price({}) == 3.00
    assert calculate_price(None) == 3.00


def test_double_sided_colour_below_minimum():
    opts = {"pages": 10, "copies": 2, "color": "color", "sides": "double"}
    assert calculate_price(opts) == 3.00
    assert PriceEngine().estimate(opts)["sheets"] == 5


def test_full_order_with_express_and_shipping():
    opts = {
        "pages": 100,
        "copies": 5,
        "color": "color",
        "sides": "single",
        "binding": "termica",
        "cover": "rigida",
        "speed": "express",
        "delivery": "spedizione",
    }
    assert calculate_price(opts) == 186.90

    breakdown = PriceEngine().estimate(opts)
    assert breakdown["printing_cost"] == 100.0
    assert breakdown["binding_cost"] == 20.0
    assert breakdown["cover_cost"] == 30.0
    assert breakdown["express_surcharge"] == 30.0
    assert breakdown["subtotal"] == 180.0
    assert breakdown["shipping"] == 6.9
    assert breakdown["minimum_adjustment"] == 0.0


def test_invalid_choice_behaves_like_default():
    assert calculate_price({"color": "purple"}) == calculate_price({})
    assert calculate_price({"color": "purple", "pages": 100}) == 5.00


@pytest.mark.parametrize("pages", ["abc", -5, 0, None, ""])
def test_bad_page_counts_price_as_one_page(pages):
    assert PriceEngine().estimate({"pages": pages})["sheets"] == 1


def test_shipping_added_after_minimum_floor():
    # 20 bw pages = 1.00 subtotal, floored to 3.00, then shipping
    opts = {"pages": 20, "delivery": "spedizione"}
    breakdown = PriceEngine().estimate(opts)
    assert breakdown["subtotal"] == 1.0
    assert breakdown["minimum_adjustment"] == 2.0
    assert calculate_price(opts) == 9.90


def test_express_applies_to_binding_and_cover_too():
    opts = {"pages": 10, "color": "color", "binding": "spiral", "speed": "express"}
    # (2.00 printing + 2.00 binding) * 1.2
    assert calculate_price(opts) == 4.80


def test_express_surcharge_is_floored_after_multiplying():
    # 2.60 * 1.2 = 3.12 clears the minimum only because of the surcharge
    assert calculate_price({"pages": 13, "color": "color", "speed": "express"}) == 3.12
    assert calculate_price({"pages": 13, "color": "color"}) == 3.00


def test_heavier_paper_adds_per_sheet():
    assert calculate_price({"pages": 100}) == 5.00
    assert calculate_price({"pages": 100, "paper": "100"}) == 6.00
    # numeric weight from JSON is treated like the string
    assert calculate_price({"pages": 100, "paper": 100}) == 6.00


def test_double_sided_rounds_sheets_up():
    opts = {"pages": 5, "copies": 10, "color": "color", "sides": "double"}
    assert PriceEngine().estimate(opts)["sheets"] == 3
    assert calculate_price(opts) == 6.00


@pytest.mark.parametrize("binding, cover, expected", [
    ("spiral", "none", 7.50),
    ("termica", "none", 13.50),
    ("none", "trasparente", 6.00),
    ("none", "rigida", 19.50),
    ("spiral", "trasparente", 12.00),
])
def test_binding_and_cover_are_per_copy(binding, cover, expected):
    opts = {"pages": 10, "copies": 3, "binding": binding, "cover": cover}
    assert calculate_price(opts) == expected


def test_pickup_has_no_shipping():
    assert PriceEngine().estimate({"delivery": "ritiro"})["shipping"] == 0.0
    assert calculate_price({"delivery": "corriere"}) == 3.00


def test_accepts_normalized_options_instance():
    opts = OrderOptions(pages=40, color=ColorMode.color)
    assert calculate_price(opts) == 8.00


@pytest.mark.parametrize("value, expected", [
    (2.675, 2.68),
    (1.005, 1.01),
    (6.000000000000001, 6.0),
    (0.125, 0.13),
    (3.0, 3.0),
])
def test_round_money_is_half_up_on_the_cent(value, expected):
    assert round_money(value) == expected


def test_every_combination_is_deterministic_and_floored():
    engine = PriceEngine()
    for color, sides, binding, paper, cover, delivery, speed in itertools.product(
        ColorMode, Sides, Binding, Paper, Cover, Delivery, Speed
    ):
        opts = {
            "pages": 7,
            "copies": 2,
            "color": color.value,
            "sides": sides.value,
            "binding": binding.value,
            "paper": paper.value,
            "cover": cover.value,
            "delivery": delivery.value,
            "speed": speed.value,
        }
        first = calculate_price(opts)
        assert first == calculate_price(dict(opts))
        shipping = engine.SHIPPING_COST[delivery]
        assert first >= 3.0 + shipping - 1e-9
        assert round(first, 2) == first


@pytest.mark.parametrize("count", [10**200, 1e308, "9" * 5000, float("inf")])
def test_huge_counts_still_price(count):
    breakdown = PriceEngine().estimate({"pages": count, "copies": count})
    assert breakdown["sheets"] == MAX_COUNT or breakdown["sheets"] == 1
    assert math.isfinite(calculate_price({"pages": count, "copies": count}))


def test_counts_capped_before_pricing():
    total = calculate_price({"pages": 10**200, "copies": 10**200})
    # MAX_COUNT sheets of bw paper, MAX_COUNT times over
    assert total == round_money(0.05 * MAX_COUNT * MAX_COUNT)


def test_breakdown_rates_are_rounded():
    breakdown = PriceEngine().estimate({"color": "color", "paper": "100"})
    assert breakdown["sheet_rate"] == 0.21
