"""Channel price formula used before listing a frame on a marketplace."""

from src.common.dtos.stock_dtos import PricingBreakdownDTO

# Values offered by the pricing screen; the calculator itself does not enforce them
MARKUP_OPTIONS = (1.0, 1.5, 2.0, 2.5, 3.0, 3.5)
FEE_PERCENT_RANGE = (1, 25)


def price_breakdown(
    cost_price: float, markup_multiplier: float, fee_percent: float, shipping_flat: float
) -> PricingBreakdownDTO:
    """(cost * markup) + (cost * markup) * fee% + shipping, with the intermediate values."""
    base = cost_price * markup_multiplier
    fee = base * fee_percent / 100
    return PricingBreakdownDTO(base=base, fee=fee, shipping=shipping_flat, price=base + fee + shipping_flat)


def compute_channel_price(
    cost_price: float, markup_multiplier: float, fee_percent: float, shipping_flat: float
) -> float:
    return price_breakdown(cost_price, markup_multiplier, fee_percent, shipping_flat).price
