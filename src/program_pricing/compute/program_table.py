"""Catalog-wide pricing table for a program."""

import logging
from collections.abc import Mapping, Sequence

import polars as pl

from program_pricing.compute.breakdown import analyze_product_pricing
from program_pricing.models import FeeConfig, PricingInput, ProductCost, ProgramPricing

logger = logging.getLogger(__name__)

PRICING_TABLE_SCHEMA = {
    "product_id": pl.String,
    "name": pl.String,
    "total_cogs": pl.Float64,
    "telehealth_cost": pl.Float64,
    "non_medical_fee": pl.Float64,
    "customer_pays_monthly": pl.Float64,
    "customer_pays_month1": pl.Float64,
    "max_discount_percent": pl.Float64,
    "monthly_discount_percent": pl.Float64,
    "profit_monthly": pl.Float64,
    "profit_month1": pl.Float64,
    "best_plan_months": pl.Int64,
    "best_plan_profit_total": pl.Float64,
    "price_label": pl.String,
}


def analyze_catalog(
    products: Sequence[ProductCost],
    fees: FeeConfig,
    pricing: PricingInput | Mapping[str, PricingInput],
) -> list[ProgramPricing]:
    """Analyze every product of a program.

    Args:
        products: Products in the program.
        fees: Fee configuration for the tenant.
        pricing: One input shared by all products (unified program), or a
            mapping of product_id to input (per-product program). Products
            missing from the mapping are skipped.

    Returns:
        One ProgramPricing per priced product, in catalog order.
    """
    results = []
    for product in products:
        if isinstance(pricing, PricingInput):
            product_pricing = pricing
        else:
            product_pricing = pricing.get(product.product_id or "")
            if product_pricing is None:
                logger.debug(f"No pricing input for {product.product_id}, skipping")
                continue
        results.append(analyze_product_pricing(product, fees, product_pricing))

    logger.info(f"Analyzed {len(results)} of {len(products)} products")
    return results


def build_pricing_table(analyses: Sequence[ProgramPricing]) -> pl.DataFrame:
    """Flatten analyses into a DataFrame, one row per product.

    The best plan is the multi-month plan with the highest total profit.

    Args:
        analyses: Results of analyze_catalog().

    Returns:
        Polars DataFrame with PRICING_TABLE_SCHEMA columns.
    """
    rows = []
    for analysis in analyses:
        best = max(analysis.plans, key=lambda plan: plan.profit_total, default=None)
        rows.append({
            "product_id": analysis.product.product_id,
            "name": analysis.product.name,
            "total_cogs": float(analysis.product.total_cogs),
            "telehealth_cost": float(analysis.product.telehealth_cost),
            "non_medical_fee": float(
                analysis.standard.customer_pays_total - analysis.product.total_cogs
            ),
            "customer_pays_monthly": float(analysis.standard.customer_pays_total),
            "customer_pays_month1": (
                float(analysis.month1.customer_pays_total) if analysis.month1 else None
            ),
            "max_discount_percent": float(analysis.max_discount_percent),
            "monthly_discount_percent": float(analysis.effective_monthly_discount),
            "profit_monthly": float(analysis.standard.profit),
            "profit_month1": float(analysis.month1_profit),
            "best_plan_months": best.months if best else None,
            "best_plan_profit_total": float(best.profit_total) if best else None,
            "price_label": analysis.price_label(),
        })

    return pl.DataFrame(rows, schema=PRICING_TABLE_SCHEMA)
