"""Personalized price resolution.

The pricing source is selected first, as a tagged variant, and then turned
into a `PricingResult`. Precedence (highest wins):

1. per-user override stored on the product
2. named tier price (standard / premium / vip)
3. custom percentage discount
4. base price (also for anonymous visitors)

Prices are not clamped: an override or a tier price above the base price
yields a negative `discount_amount`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Union

from core.domain.models import (
    PriceTier,
    PricingProfile,
    PricingResult,
    UserPricingContext,
)

CUSTOM_PRICE_LABEL = "Custom Price"


@dataclass(frozen=True)
class Anonymous:
    """No signed-in visitor."""


@dataclass(frozen=True)
class PerUserOverride:
    price: float


@dataclass(frozen=True)
class NamedTier:
    tier: PriceTier
    price: float


@dataclass(frozen=True)
class CustomDiscount:
    percent: float
    base_price: float


@dataclass(frozen=True)
class BasePrice:
    """Signed-in visitor with nothing applicable."""


PricingSource = Union[Anonymous, PerUserOverride, NamedTier, CustomDiscount, BasePrice]


def select_source(profile: PricingProfile, context: UserPricingContext | None) -> PricingSource:
    if context is None:
        return Anonymous()

    override = profile.user_overrides.get(context.user_id)
    if override is not None:
        return PerUserOverride(price=override)

    if context.tier.is_named:
        tier_price = profile.tier_prices.get(context.tier)
        if tier_price is not None:
            return NamedTier(tier=context.tier, price=tier_price)

    if (
        context.tier is PriceTier.CUSTOM
        and context.discount_percent is not None
        and profile.base_price is not None
    ):
        return CustomDiscount(percent=context.discount_percent, base_price=profile.base_price)

    return BasePrice()


def custom_discount_label(percent: float) -> str:
    return f"Custom {percent:g}% Off"


def _with_base(base: float | None, price: float, label: str) -> PricingResult:
    if base is None:
        return PricingResult(price=price, tier_label=label)
    return PricingResult(
        price=price,
        original_price=base,
        discount_amount=base - price,
        tier_label=label,
    )


def resolve_price(profile: PricingProfile, context: UserPricingContext | None) -> PricingResult:
    """Effective price for `profile` as seen by `context` (None = anonymous)."""

    source = select_source(profile, context)
    base = profile.base_price

    if isinstance(source, PerUserOverride):
        return _with_base(base, source.price, CUSTOM_PRICE_LABEL)
    if isinstance(source, NamedTier):
        return _with_base(base, source.price, source.tier.label())
    if isinstance(source, CustomDiscount):
        price = source.base_price * (1 - source.percent / 100)
        return _with_base(source.base_price, price, custom_discount_label(source.percent))
    if isinstance(source, (Anonymous, BasePrice)):
        return PricingResult(price=base or 0.0)
    raise TypeError(f"Unhandled pricing source: {source!r}")


def apply_personalized_pricing(
    products: Iterable[dict[str, Any]],
    context: UserPricingContext | None,
) -> list[dict[str, Any]]:
    """Return copies of `products` with `price` replaced by the resolved price."""

    priced: list[dict[str, Any]] = []
    for product in products:
        result = resolve_price(PricingProfile.from_document(product), context)
        priced.append({**product, "price": result.price})
    return priced


def has_special_pricing(context: UserPricingContext | None) -> bool:
    if context is None:
        return False
    return context.tier is not PriceTier.NONE or bool(context.discount_percent)
