"""Discount cap for month-1 and prepay discounts.

The cap is the largest discount on the monthly total (fee + COGS) that still
leaves at least one cent of month-1 profit once the platform takes its cut
and the telehealth consult is paid:

    min_fee_required = telehealth / (1 - platform_fee_percent) + 0.01
    max_discount_pct = floor((fee - min_fee_required) / monthly_total * 10000) / 100

Any requested discount, typed or loaded from storage, is clamped to the cap
before use.
"""

import logging
from decimal import ROUND_FLOOR, Decimal

from program_pricing.models import FeeConfig, MultiMonthPlan, PricingInput, ProductCost
from program_pricing.money import CENT, ZERO, finite_or_zero

logger = logging.getLogger(__name__)


def calculate_min_fee_required(
    product: ProductCost,
    fees: FeeConfig,
) -> Decimal | None:
    """Smallest non-medical fee that still yields a cent of month-1 profit.

    Args:
        product: Product with telehealth cost.
        fees: Fee configuration with platform fee percent.

    Returns:
        Minimum fee, or None when the platform keeps the entire fee and a
        telehealth cost can never be covered.
    """
    if product.telehealth_cost <= 0:
        return CENT

    retained = Decimal("1") - fees.platform_fee_percent
    if retained <= 0:
        logger.warning(
            f"Platform fee {fees.platform_fee_percent} leaves no share of the fee; "
            "telehealth cost cannot be covered"
        )
        return None

    return finite_or_zero(product.telehealth_cost / retained) + CENT


def calculate_max_discount_percent(
    product: ProductCost,
    fees: FeeConfig,
    non_medical_fee: Decimal,
) -> Decimal:
    """Largest discount percent that keeps month-1 profit positive.

    Rounded down to two decimal places.

    Args:
        product: Product cost breakdown.
        fees: Fee configuration.
        non_medical_fee: Brand's non-medical fee.

    Returns:
        Discount cap in percent (47.05 = 47.05%), never negative.
    """
    monthly_total = non_medical_fee + product.total_cogs
    min_fee = calculate_min_fee_required(product, fees)

    if min_fee is None or monthly_total <= 0 or non_medical_fee <= min_fee:
        logger.debug(
            f"No discount headroom: fee=${non_medical_fee}, "
            f"min_fee_required={min_fee}, monthly_total=${monthly_total}"
        )
        return ZERO

    headroom = (non_medical_fee - min_fee) / monthly_total * 10000
    cap = finite_or_zero(headroom).to_integral_value(rounding=ROUND_FLOOR) / 100

    logger.debug(
        f"Discount cap: (${non_medical_fee} - ${min_fee:.4f}) / ${monthly_total} "
        f"= {cap}%"
    )

    return max(ZERO, cap)


def clamp_discount(requested: Decimal, max_discount_percent: Decimal) -> Decimal:
    """Clamp a requested discount to [0, max_discount_percent]."""
    return max(ZERO, min(finite_or_zero(requested), max_discount_percent))


def clamp_pricing_input(
    product: ProductCost,
    fees: FeeConfig,
    pricing: PricingInput,
) -> PricingInput:
    """Return a copy of the input with every discount clamped to the cap.

    Must be re-run whenever the fee, telehealth cost or platform fee changes,
    since the cap depends on all three.

    Args:
        product: Product cost breakdown.
        fees: Fee configuration.
        pricing: Input as typed or loaded.

    Returns:
        New PricingInput with clamped discounts. The original is untouched.
    """
    fee = max(ZERO, pricing.non_medical_fee)
    cap = calculate_max_discount_percent(product, fees, fee)

    monthly = clamp_discount(pricing.monthly_discount_percent, cap)
    if monthly != pricing.monthly_discount_percent:
        logger.info(
            f"Clamped month-1 discount {pricing.monthly_discount_percent}% to {monthly}%"
        )

    plans = [
        MultiMonthPlan(
            months=plan.months,
            discount_percent=clamp_discount(plan.discount_percent, cap),
        )
        for plan in pricing.multi_month_plans
    ]

    return PricingInput(
        non_medical_fee=fee,
        monthly_discount_percent=monthly,
        multi_month_plans=plans,
    )
