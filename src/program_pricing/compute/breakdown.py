"""Pricing and profitability engine for program products.

This module implements the core pricing formulas:
- Standard monthly: Customer pays Fee + COGS; profit = Fee - Platform - Merchant - Card
- Month-1 discount: discount applies to the first cycle only, telehealth deducted
- Multi-month prepay: discount applies to every month, card fee charged once upfront

All three share compute_deductions(). Card fee is 2.9% + $0.30 per charge.
Every function is pure: no I/O beyond debug logging, inputs are never mutated.
"""

import logging
from decimal import Decimal

from program_pricing.compute.discounts import (
    calculate_max_discount_percent,
    clamp_discount,
    clamp_pricing_input,
)
from program_pricing.models import (
    CardFeeMode,
    Deductions,
    FeeConfig,
    MultiMonthPlan,
    PlanVariant,
    PricingBreakdown,
    PricingInput,
    ProductCost,
    ProgramPricing,
)
from program_pricing.money import ZERO, finite_or_zero, floor_at_zero, round2

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


def compute_deductions(
    customer_total: Decimal,
    fee: Decimal,
    product: ProductCost,
    fees: FeeConfig,
    months: int = 1,
    card_fee_mode: CardFeeMode = CardFeeMode.PER_PERIOD,
    include_telehealth: bool = False,
) -> Deductions:
    """Itemize the deductions taken from one month's charge.

    PER_PERIOD charges the card once per month and rounds card and merchant
    fees to cents. AMORTIZED charges the card once on ``customer_total *
    months`` and spreads it across the plan; card and merchant fees are left
    unrounded. The platform fee is always rounded to cents.

    Args:
        customer_total: What the customer pays for one month.
        fee: Non-medical fee portion of that month.
        product: Product cost breakdown.
        fees: Fee configuration.
        months: Months covered by one card charge (AMORTIZED only). Values
            below 1 are charged as a single month.
        card_fee_mode: How the card fee is charged.
        include_telehealth: Whether to list the month-1 telehealth cost.

    Returns:
        Deductions for one month.
    """
    if card_fee_mode == CardFeeMode.AMORTIZED:
        if months <= 0:
            logger.warning(f"Amortizing over {months} months; charging as one month")
            months = 1
        upfront = customer_total * months
        card_fee = finite_or_zero(
            (upfront * fees.card_fee_percent + fees.card_fee_fixed) / months
        )
        merchant_fee = finite_or_zero(customer_total * fees.merchant_service_fee_percent)
    else:
        card_fee = round2(customer_total * fees.card_fee_percent + fees.card_fee_fixed)
        merchant_fee = round2(customer_total * fees.merchant_service_fee_percent)

    platform_fee = round2(fee * fees.platform_fee_percent)

    return Deductions(
        cogs=product.total_cogs,
        telehealth_month1=product.telehealth_cost if include_telehealth else ZERO,
        card_fee=card_fee,
        merchant_fee=merchant_fee,
        platform_fee=platform_fee,
    )


def calculate_standard_breakdown(
    product: ProductCost,
    fees: FeeConfig,
    non_medical_fee: Decimal,
) -> PricingBreakdown:
    """Calculate the ongoing (undiscounted) monthly breakdown.

    Formula:
        Customer Pays = Fee + COGS
        Profit = Fee - Platform Fee - Merchant Fee - Card Fee
        Month 1 Profit = Profit - Telehealth

    Args:
        product: Product cost breakdown.
        fees: Fee configuration.
        non_medical_fee: Brand's non-medical fee.

    Returns:
        PricingBreakdown with STANDARD variant and month1_profit set.
    """
    fee = floor_at_zero(non_medical_fee)
    customer_total = fee + product.total_cogs

    deductions = compute_deductions(
        customer_total, fee, product, fees, include_telehealth=True
    )

    profit = floor_at_zero(
        fee - deductions.platform_fee - deductions.merchant_fee - deductions.card_fee
    )
    month1_profit = floor_at_zero(profit - product.telehealth_cost)

    logger.debug(
        f"Standard pricing for {product.product_id}: "
        f"${fee} fee + ${product.total_cogs} COGS = ${customer_total}; "
        f"platform ${deductions.platform_fee}, merchant ${deductions.merchant_fee}, "
        f"card ${deductions.card_fee} -> profit ${profit}, month 1 ${month1_profit}"
    )

    return PricingBreakdown(
        variant=PlanVariant.STANDARD,
        customer_pays_total=customer_total,
        deductions=deductions,
        profit=profit,
        months=1,
        discount_percent=ZERO,
        month1_profit=month1_profit,
        profit_total=profit,
    )


def calculate_month1_breakdown(
    product: ProductCost,
    fees: FeeConfig,
    non_medical_fee: Decimal,
    discount_percent: Decimal,
) -> PricingBreakdown:
    """Calculate the first month's breakdown under a month-1 discount.

    The discount is clamped to the cap first. Only month 1 is discounted;
    month 2 onward uses calculate_standard_breakdown().

    Formula:
        Discounted Total = (Fee + COGS) × (1 - Discount%)
        Discounted Fee = Discounted Total - COGS
        Profit = Discounted Fee - Platform - Merchant - Telehealth - Card

    The merchant fee is deducted here as in the standard month, so a 0%
    discount gives the same profit as the standard month 1.

    Args:
        product: Product cost breakdown.
        fees: Fee configuration.
        non_medical_fee: Brand's non-medical fee.
        discount_percent: Requested month-1 discount in percent.

    Returns:
        PricingBreakdown with MONTH_1 variant.
    """
    fee = floor_at_zero(non_medical_fee)
    cap = calculate_max_discount_percent(product, fees, fee)
    discount = clamp_discount(discount_percent, cap)

    monthly_total = fee + product.total_cogs
    discounted_total = finite_or_zero(monthly_total * (1 - discount / HUNDRED))
    discounted_fee = floor_at_zero(discounted_total - product.total_cogs)

    deductions = compute_deductions(
        discounted_total, discounted_fee, product, fees, include_telehealth=True
    )

    profit = floor_at_zero(
        discounted_fee
        - deductions.platform_fee
        - deductions.merchant_fee
        - product.telehealth_cost
        - deductions.card_fee
    )

    logger.debug(
        f"Month 1 pricing for {product.product_id} at {discount}% off: "
        f"${discounted_total} charged, ${discounted_fee} fee -> profit ${profit}"
    )

    return PricingBreakdown(
        variant=PlanVariant.MONTH_1,
        customer_pays_total=discounted_total,
        deductions=deductions,
        profit=profit,
        months=1,
        discount_percent=discount,
        profit_total=profit,
    )


def calculate_multi_month_breakdown(
    product: ProductCost,
    fees: FeeConfig,
    non_medical_fee: Decimal,
    plan: MultiMonthPlan,
) -> PricingBreakdown:
    """Calculate a prepaid multi-month plan.

    The plan discount is clamped to the cap and applies to every month.
    The customer is charged once upfront, so the card fee is paid once and
    amortized across the plan.

    Formula:
        Discounted Total = (Fee + COGS) × (1 - Discount%)
        Upfront = Discounted Total × Months
        Card Fee / mo = (Upfront × 2.9% + $0.30) / Months
        Profit / mo = Fee/mo × (1 - Platform%) - Merchant/mo - Card/mo

    Args:
        product: Product cost breakdown.
        fees: Fee configuration.
        non_medical_fee: Brand's non-medical fee.
        plan: Plan length and requested discount.

    Returns:
        PricingBreakdown with MULTI_MONTH variant; deductions and profit are
        per month, customer_pays_total is the upfront charge.
    """
    fee = floor_at_zero(non_medical_fee)
    cap = calculate_max_discount_percent(product, fees, fee)
    discount = clamp_discount(plan.discount_percent, cap)

    if plan.months <= 0:
        logger.warning(f"Ignoring plan with non-positive length: {plan.months} months")
        return PricingBreakdown(
            variant=PlanVariant.MULTI_MONTH,
            customer_pays_total=ZERO,
            deductions=Deductions(ZERO, ZERO, ZERO, ZERO, ZERO),
            profit=ZERO,
            months=plan.months,
            discount_percent=discount,
            profit_total=ZERO,
        )

    monthly_total = fee + product.total_cogs
    discounted_total = finite_or_zero(monthly_total * (1 - discount / HUNDRED))
    upfront = discounted_total * plan.months
    fee_per_month = floor_at_zero(discounted_total - product.total_cogs)

    deductions = compute_deductions(
        discounted_total,
        fee_per_month,
        product,
        fees,
        months=plan.months,
        card_fee_mode=CardFeeMode.AMORTIZED,
    )

    profit_per_month = floor_at_zero(
        fee_per_month * (1 - fees.platform_fee_percent)
        - deductions.merchant_fee
        - deductions.card_fee
    )
    profit_total = profit_per_month * plan.months

    logger.debug(
        f"{plan.months}-month plan for {product.product_id} at {discount}% off: "
        f"${upfront} upfront, card ${deductions.card_fee:.4f}/mo "
        f"-> profit ${profit_per_month:.2f}/mo, ${profit_total:.2f} total"
    )

    return PricingBreakdown(
        variant=PlanVariant.MULTI_MONTH,
        customer_pays_total=upfront,
        deductions=deductions,
        profit=profit_per_month,
        months=plan.months,
        discount_percent=discount,
        profit_total=profit_total,
    )


def analyze_product_pricing(
    product: ProductCost,
    fees: FeeConfig,
    pricing: PricingInput,
) -> ProgramPricing:
    """Perform complete pricing analysis for a product.

    Clamps every discount, then computes the standard monthly breakdown,
    the month-1 breakdown when a month-1 discount survives clamping, and one
    breakdown per multi-month plan (plans with non-positive length skipped).

    Args:
        product: Product cost breakdown.
        fees: Fee configuration.
        pricing: Editable pricing state.

    Returns:
        ProgramPricing with all breakdowns.
    """
    clamped = clamp_pricing_input(product, fees, pricing)
    fee = clamped.non_medical_fee
    cap = calculate_max_discount_percent(product, fees, fee)

    standard = calculate_standard_breakdown(product, fees, fee)

    month1 = None
    if clamped.monthly_discount_percent > 0:
        month1 = calculate_month1_breakdown(
            product, fees, fee, clamped.monthly_discount_percent
        )

    plans = tuple(
        calculate_multi_month_breakdown(product, fees, fee, plan)
        for plan in clamped.multi_month_plans
        if plan.months > 0
    )

    analysis = ProgramPricing(
        product=product,
        fees=fees,
        max_discount_percent=cap,
        effective_monthly_discount=clamped.monthly_discount_percent,
        standard=standard,
        month1=month1,
        plans=plans,
    )

    logger.info(
        f"Priced {product.name or product.product_id}: {analysis.price_label()}, "
        f"profit ${standard.profit:.2f}/mo, month 1 ${analysis.month1_profit:.2f}, "
        f"cap {cap}%"
    )

    return analysis


def calculate_fee_sensitivity(
    product: ProductCost,
    fees: FeeConfig,
    fee_levels: list[Decimal] | None = None,
    monthly_discount_percent: Decimal = ZERO,
) -> list[dict[str, Decimal]]:
    """Calculate profit across a sweep of non-medical fees.

    Args:
        product: Product cost breakdown.
        fees: Fee configuration.
        fee_levels: Fees to test. Defaults to $25 to $200 in $25 steps.
        monthly_discount_percent: Requested month-1 discount at every level.

    Returns:
        One row per fee level with customer price, cap and profits.
    """
    if fee_levels is None:
        fee_levels = [Decimal(amount) for amount in range(25, 201, 25)]

    results = []
    for fee in fee_levels:
        analysis = analyze_product_pricing(
            product,
            fees,
            PricingInput(
                non_medical_fee=fee,
                monthly_discount_percent=monthly_discount_percent,
            ),
        )
        results.append({
            "non_medical_fee": fee,
            "customer_pays": analysis.standard.customer_pays_total,
            "max_discount_percent": analysis.max_discount_percent,
            "profit": analysis.standard.profit,
            "month1_profit": analysis.month1_profit,
        })

    return results
