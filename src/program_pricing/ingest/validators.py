"""Schema and input validation for catalog, tier fee and pricing sources."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal

import polars as pl

from program_pricing.compute.discounts import calculate_max_discount_percent
from program_pricing.fees.resolution import TIER_FEE_REQUIRED_COLUMNS
from program_pricing.models import ALLOWED_PLAN_MONTHS, FeeConfig, PricingInput, ProductCost

logger = logging.getLogger(__name__)

# Columns of a normalized product catalog
CATALOG_REQUIRED_COLUMNS = {"Product ID", "Product Cost"}
CATALOG_OPTIONAL_COLUMNS = {"Name", "Shipping Cost", "Telehealth Cost"}


@dataclass
class ValidationResult:
    """Result of a validation check.

    Attributes:
        is_valid: Whether the validation passed.
        message: Human-readable description of the result.
        missing_columns: List of required columns that are missing.
        row_count: Number of rows in the validated DataFrame.
        warnings: List of non-fatal issues detected.
    """

    is_valid: bool
    message: str
    missing_columns: list[str] = field(default_factory=list)
    row_count: int = 0
    warnings: list[str] = field(default_factory=list)


def validate_catalog_schema(df: pl.DataFrame) -> ValidationResult:
    """Validate a normalized product catalog.

    Args:
        df: Catalog after normalize_catalog().

    Returns:
        ValidationResult with status and details.
    """
    columns = set(df.columns)
    missing = CATALOG_REQUIRED_COLUMNS - columns

    if missing:
        return ValidationResult(
            is_valid=False,
            message=f"Catalog missing required columns: {sorted(missing)}",
            missing_columns=sorted(missing),
            row_count=df.height,
        )

    warnings = []
    missing_optional = CATALOG_OPTIONAL_COLUMNS - columns
    if missing_optional:
        warnings.append(f"Catalog missing recommended columns: {sorted(missing_optional)}")

    null_costs = df["Product Cost"].null_count()
    if null_costs:
        warnings.append(f"{null_costs} products have no cost and will be priced at $0")

    return ValidationResult(
        is_valid=True,
        message=f"Catalog schema valid with {df.height} rows",
        row_count=df.height,
        warnings=warnings,
    )


def validate_tier_fee_schema(df: pl.DataFrame) -> ValidationResult:
    """Validate a tier fee configuration table."""
    missing = TIER_FEE_REQUIRED_COLUMNS - set(df.columns)

    if missing:
        return ValidationResult(
            is_valid=False,
            message=f"Tier fee table missing required columns: {sorted(missing)}",
            missing_columns=sorted(missing),
            row_count=df.height,
        )

    return ValidationResult(
        is_valid=True,
        message=f"Tier fee table valid with {df.height} tiers",
        row_count=df.height,
    )


def validate_pricing_input(
    product: ProductCost,
    fees: FeeConfig,
    pricing: PricingInput,
) -> ValidationResult:
    """Check a pricing input for values the engine will adjust.

    The engine never rejects an input, so this always returns is_valid=True
    and reports adjustments as warnings: negative amounts treated as zero,
    discounts above the cap, plans dropped for non-positive length and plan
    lengths outside the offered set.

    Args:
        product: Product cost breakdown.
        fees: Fee configuration.
        pricing: Pricing input to check.

    Returns:
        ValidationResult with one warning per adjustment.
    """
    warnings = []

    if pricing.non_medical_fee < 0:
        warnings.append(f"Negative non-medical fee ${pricing.non_medical_fee} treated as $0")

    fee = max(pricing.non_medical_fee, Decimal("0"))
    cap = calculate_max_discount_percent(product, fees, fee)

    if pricing.monthly_discount_percent < 0:
        warnings.append(
            f"Negative month-1 discount {pricing.monthly_discount_percent}% treated as 0%"
        )
    elif pricing.monthly_discount_percent > cap:
        warnings.append(
            f"Month-1 discount {pricing.monthly_discount_percent}% exceeds "
            f"maximum {cap}%"
        )

    for plan in pricing.multi_month_plans:
        if plan.months <= 0:
            warnings.append(f"Plan with {plan.months} months will be dropped")
            continue
        if plan.months not in ALLOWED_PLAN_MONTHS:
            warnings.append(f"Plan length {plan.months} months is not a standard option")
        if plan.discount_percent < 0:
            warnings.append(
                f"{plan.months}-month plan discount {plan.discount_percent}% treated as 0%"
            )
        elif plan.discount_percent > cap:
            warnings.append(
                f"{plan.months}-month plan discount {plan.discount_percent}% "
                f"exceeds maximum {cap}%"
            )

    for warning in warnings:
        logger.debug(f"Pricing input for {product.product_id}: {warning}")

    return ValidationResult(
        is_valid=True,
        message=(
            f"Pricing input has {len(warnings)} adjustments"
            if warnings
            else "Pricing input OK"
        ),
        warnings=warnings,
    )
