from __future__ import annotations

import pytest

from core.domain.models import PriceTier, PricingProfile, PricingResult, UserPricingContext
from core.services.pricing import (
    Anonymous,
    BasePrice,
    CustomDiscount,
    NamedTier,
    PerUserOverride,
    apply_personalized_pricing,
    has_special_pricing,
    resolve_price,
    select_source,
)

PRODUCT = {
    "id": "prod-1",
    "name": "Saint Laurent",
    "price": 1000,
    "priceStandard": 1000,
    "pricePremium": 850,
    "priceVIP": 700,
    "customPrices": {"special-user-123": 600},
}


@pytest.fixture
def profile() -> PricingProfile:
    return PricingProfile.from_document(PRODUCT)


def user(tier: PriceTier, *, user_id: str = "user-1", discount: float | None = None) -> UserPricingContext:
    return UserPricingContext(user_id=user_id, tier=tier, discount_percent=discount)


def test_anonymous_gets_base_price(profile):
    result = resolve_price(profile, None)

    assert result.price == 1000
    assert result.original_price is None
    assert result.discount_amount is None
    assert result.tier_label is None


def test_standard_tier(profile):
    result = resolve_price(profile, user(PriceTier.STANDARD))

    assert result.price == 1000
    assert result.discount_amount == 0
    assert result.tier_label == "Standard"


def test_premium_tier(profile):
    result = resolve_price(profile, user(PriceTier.PREMIUM))

    assert result.price == 850
    assert result.original_price == 1000
    assert result.discount_amount == 150
    assert result.tier_label == "Premium"


def test_vip_tier(profile):
    result = resolve_price(profile, user(PriceTier.VIP))

    assert result.price == 700
    assert result.discount_amount == 300
    assert result.tier_label == "VIP"


def test_custom_discount_percentage(profile):
    result = resolve_price(profile, user(PriceTier.CUSTOM, discount=20))

    assert result.price == pytest.approx(800)
    assert result.original_price == 1000
    assert result.discount_amount == pytest.approx(200)
    assert result.tier_label == "Custom 20% Off"


@pytest.mark.parametrize(
    ("percent", "expected"),
    [(15, 850), (50, 500), (12.5, 875)],
)
def test_custom_discount_amounts(profile, percent, expected):
    result = resolve_price(profile, user(PriceTier.CUSTOM, discount=percent))

    assert result.price == pytest.approx(expected)
    assert result.discount_amount == pytest.approx(1000 - expected)


def test_zero_percent_discount_is_still_a_custom_price(profile):
    result = resolve_price(profile, user(PriceTier.CUSTOM, discount=0))

    assert result.price == 1000
    assert result.discount_amount == 0
    assert result.tier_label == "Custom 0% Off"


def test_custom_tier_without_percentage_falls_back_to_base(profile):
    result = resolve_price(profile, user(PriceTier.CUSTOM))

    assert result == PricingResult(price=1000)


def test_per_user_override_beats_tier(profile):
    result = resolve_price(profile, user(PriceTier.STANDARD, user_id="special-user-123"))

    assert result.price == 600
    assert result.original_price == 1000
    assert result.discount_amount == 400
    assert result.tier_label == "Custom Price"


def test_missing_tier_price_falls_back_to_base():
    profile = PricingProfile.from_document({"price": 1000})

    assert resolve_price(profile, user(PriceTier.PREMIUM)) == PricingResult(price=1000)


def test_missing_base_price_resolves_to_zero():
    profile = PricingProfile.from_document({"name": "Sin precio"})

    assert resolve_price(profile, None).price == 0
    assert resolve_price(profile, user(PriceTier.CUSTOM, discount=10)).price == 0


def test_tier_price_without_base_price_has_no_discount_info():
    profile = PricingProfile.from_document({"pricePremium": 850})
    result = resolve_price(profile, user(PriceTier.PREMIUM))

    assert result.price == 850
    assert result.original_price is None
    assert result.discount_amount is None
    assert result.tier_label == "Premium"


def test_prices_are_not_clamped_to_base():
    profile = PricingProfile.from_document({"price": 100, "customPrices": {"u": 150}})
    result = resolve_price(profile, user(PriceTier.NONE, user_id="u"))

    assert result.price == 150
    assert result.discount_amount == -50


def test_non_numeric_values_are_ignored():
    profile = PricingProfile.from_document(
        {"price": "1000", "pricePremium": None, "priceVIP": True, "customPrices": {"u": "x"}}
    )

    assert profile.base_price is None
    assert profile.tier_prices == {}
    assert profile.user_overrides == {}


def test_select_source_variants(profile):
    assert select_source(profile, None) == Anonymous()
    assert select_source(profile, user(PriceTier.NONE)) == BasePrice()
    assert select_source(profile, user(PriceTier.NONE, user_id="special-user-123")) == PerUserOverride(600)
    assert select_source(profile, user(PriceTier.VIP)) == NamedTier(PriceTier.VIP, 700)
    assert select_source(profile, user(PriceTier.CUSTOM, discount=5)) == CustomDiscount(5, 1000)


def test_apply_personalized_pricing_does_not_mutate_input():
    products = [PRODUCT, {**PRODUCT, "id": "prod-2", "price": 1500, "pricePremium": 1200, "customPrices": {}}]

    priced = apply_personalized_pricing(products, user(PriceTier.PREMIUM))

    assert [p["price"] for p in priced] == [850, 1200]
    assert [p["price"] for p in products] == [1000, 1500]


def test_apply_personalized_pricing_for_anonymous_keeps_base():
    priced = apply_personalized_pricing([PRODUCT], None)

    assert priced[0]["price"] == 1000


def test_has_special_pricing():
    assert has_special_pricing(None) is False
    assert has_special_pricing(user(PriceTier.NONE)) is False
    assert has_special_pricing(user(PriceTier.PREMIUM)) is True
    assert has_special_pricing(user(PriceTier.NONE, discount=10)) is True


def test_discount_percentage(profile):
    assert resolve_price(profile, user(PriceTier.PREMIUM)).discount_percentage == 15
    assert resolve_price(profile, None).discount_percentage == 0


def test_discount_percent_is_validated():
    with pytest.raises(ValueError):
        UserPricingContext(user_id="u", tier=PriceTier.CUSTOM, discount_percent=120)


def test_custom_discount_without_base_price_resolves_to_zero():
    no_base = PricingProfile.from_document({"pricePremium": 850})
    context = user(PriceTier.CUSTOM, discount=10)

    assert select_source(no_base, context) == BasePrice()
    assert resolve_price(no_base, context) == PricingResult(price=0.0)
