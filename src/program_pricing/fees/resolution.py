"""Fee configuration resolution for a tenant.

Fee percentages are stored as whole percents (5 means 5%) and converted to
fractions for the engine.

Resolution order:
- Platform fee: tier override -> global fee -> 15% default
- Merchant fee: brand custom override -> tier override -> 2% default
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

import polars as pl

from program_pricing.models import FeeConfig

logger = logging.getLogger(__name__)

DEFAULT_PLATFORM_FEE_PERCENT = Decimal("15")
DEFAULT_MERCHANT_FEE_PERCENT = Decimal("2")

TIER_FEE_REQUIRED_COLUMNS = {"planType", "fuseFeePercent", "merchantServiceFeePercent"}


@dataclass
class TierFees:
    """Fee overrides configured for a subscription tier.

    Attributes:
        plan_type: Subscription plan type (e.g. "entry", "standard").
        platform_fee_percent: Tier platform fee in whole percent, or None.
        merchant_service_fee_percent: Tier merchant fee in whole percent, or None.
    """

    plan_type: str
    platform_fee_percent: Decimal | None = None
    merchant_service_fee_percent: Decimal | None = None


def parse_percent(value: object) -> Decimal | None:
    """Parse a stored whole-percent value.

    Values outside [0, 100] are clamped into range.

    Args:
        value: Stored value (number, numeric string, or None).

    Returns:
        Percent as Decimal, or None if missing or unparseable.
    """
    if value is None or value == "":
        return None
    try:
        percent = Decimal(str(value).strip().rstrip("%"))
    except InvalidOperation:
        logger.warning(f"Ignoring unparseable fee percent: {value!r}")
        return None
    if not percent.is_finite():
        logger.warning(f"Ignoring non-finite fee percent: {value!r}")
        return None
    if percent < 0 or percent > 100:
        clamped = min(Decimal("100"), max(Decimal("0"), percent))
        logger.warning(f"Fee percent {percent} out of range, clamped to {clamped}")
        return clamped
    return percent


def percent_to_fraction(percent: Decimal) -> Decimal:
    """Convert a whole percent to a fraction (5 -> 0.05)."""
    return percent / Decimal("100")


def resolve_platform_fee_percent(
    tier_percent: object = None,
    global_percent: object = None,
    default: Decimal = DEFAULT_PLATFORM_FEE_PERCENT,
) -> Decimal:
    """Pick the platform fee in whole percent."""
    for source, value in (("tier", tier_percent), ("global", global_percent)):
        percent = parse_percent(value)
        if percent is not None:
            logger.debug(f"Platform fee {percent}% from {source} configuration")
            return percent
    logger.debug(f"Platform fee falling back to default {default}%")
    return default


def resolve_merchant_fee_percent(
    custom_percent: object = None,
    tier_percent: object = None,
    default: Decimal = DEFAULT_MERCHANT_FEE_PERCENT,
) -> Decimal:
    """Pick the merchant service fee in whole percent."""
    for source, value in (("brand override", custom_percent), ("tier", tier_percent)):
        percent = parse_percent(value)
        if percent is not None:
            logger.debug(f"Merchant fee {percent}% from {source}")
            return percent
    logger.debug(f"Merchant fee falling back to default {default}%")
    return default


def resolve_fee_config(
    tier: TierFees | None = None,
    global_platform_percent: object = None,
    custom_merchant_percent: object = None,
    default_platform_percent: Decimal = DEFAULT_PLATFORM_FEE_PERCENT,
    default_merchant_percent: Decimal = DEFAULT_MERCHANT_FEE_PERCENT,
) -> FeeConfig:
    """Resolve the fee configuration for an editing session.

    Args:
        tier: Tier overrides for the brand's subscription, if any.
        global_platform_percent: Global platform fee in whole percent.
        custom_merchant_percent: Brand-negotiated merchant fee override.
        default_platform_percent: Fallback platform fee.
        default_merchant_percent: Fallback merchant fee.

    Returns:
        FeeConfig with fractional percentages.
    """
    platform = resolve_platform_fee_percent(
        tier.platform_fee_percent if tier else None,
        global_platform_percent,
        default_platform_percent,
    )
    merchant = resolve_merchant_fee_percent(
        custom_merchant_percent,
        tier.merchant_service_fee_percent if tier else None,
        default_merchant_percent,
    )

    config = FeeConfig(
        platform_fee_percent=percent_to_fraction(platform),
        merchant_service_fee_percent=percent_to_fraction(merchant),
    )

    logger.info(
        f"Resolved fees for tier {tier.plan_type if tier else 'none'}: "
        f"platform {platform}%, merchant {merchant}%"
    )

    return config


def fee_config_from_payload(
    payload: dict[str, object],
    tier: TierFees | None = None,
    custom_merchant_percent: object = None,
) -> FeeConfig:
    """Resolve fees from a fees-config payload.

    The payload carries the global ``platformFeePercent``; the card
    processor fee (``stripeFeePercent``) and ``doctorFlatFeeUsd`` are order
    settlement figures and do not enter program pricing.

    Args:
        payload: Fees-config response body.
        tier: Tier overrides, if any.
        custom_merchant_percent: Brand merchant fee override.

    Returns:
        Resolved FeeConfig.
    """
    return resolve_fee_config(
        tier=tier,
        global_platform_percent=payload.get("platformFeePercent"),
        custom_merchant_percent=custom_merchant_percent,
    )


def load_tier_fees(df: pl.DataFrame) -> dict[str, TierFees]:
    """Load tier fee overrides from a tier configuration table.

    Args:
        df: DataFrame with planType, fuseFeePercent and
            merchantServiceFeePercent columns. Null fees mean "no override".

    Returns:
        Mapping of plan type to TierFees. Empty if required columns are missing.
    """
    missing = TIER_FEE_REQUIRED_COLUMNS - set(df.columns)
    if missing:
        logger.warning(f"Tier fee table missing columns: {sorted(missing)}")
        return {}

    tiers: dict[str, TierFees] = {}
    for row in df.iter_rows(named=True):
        plan_type = str(row.get("planType") or "").strip()
        if not plan_type:
            continue
        tiers[plan_type] = TierFees(
            plan_type=plan_type,
            platform_fee_percent=parse_percent(row.get("fuseFeePercent")),
            merchant_service_fee_percent=parse_percent(
                row.get("merchantServiceFeePercent")
            ),
        )

    logger.info(f"Loaded fee overrides for {len(tiers)} tiers")
    return tiers
